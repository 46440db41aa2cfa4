"""
================================================================================
Selector Catalog
================================================================================

Pure data layer mapping logical element names to ordered locator candidates.

    - LogicalElement: one named element with one or more candidate selectors
    - SelectorCatalog: an ordered registry of logical elements

Candidate order encodes preference: the first candidate that resolves wins.
Selectors are plain Playwright selector strings (CSS, XPath, text=, :has-text())
and are resolved lazily at use time, so nothing here is bound to a page.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple, Union


SelectorInput = Union[str, Sequence[str]]


@dataclass(frozen=True, init=False)
class LogicalElement:
    """
    A named element with candidate selectors ordered by preference.

    Attributes:
        name: Human-readable element name used in logs and reports
        candidates: Non-empty tuple of selectors, most stable first
    """
    name: str
    candidates: Tuple[str, ...]

    def __init__(self, name: str, candidates: SelectorInput):
        if isinstance(candidates, str):
            candidates = (candidates,)
        normalized = tuple(c for c in candidates if c)
        if not normalized:
            raise ValueError(f"Logical element '{name}' needs at least one selector")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "candidates", normalized)

    @property
    def primary(self) -> str:
        return self.candidates[0]

    def with_fallbacks(self, *selectors: str) -> "LogicalElement":
        """Return a copy with extra candidates appended after the existing ones."""
        return LogicalElement(self.name, self.candidates + tuple(selectors))

    def __len__(self) -> int:
        return len(self.candidates)


class SelectorCatalog:
    """
    Ordered registry of logical elements for one page or component.

    Usage:
        >>> HEADER = SelectorCatalog("header", {
        ...     "login_button": ["[data-testid='login']", "text=Login"],
        ... })
        >>> HEADER.get("login_button").primary
        "[data-testid='login']"
    """

    def __init__(
        self,
        name: str,
        elements: Union[Dict[str, SelectorInput], Sequence[LogicalElement], None] = None,
    ):
        self.name = name
        self._elements: Dict[str, LogicalElement] = {}
        if isinstance(elements, dict):
            for element_name, candidates in elements.items():
                self.register(element_name, candidates)
        else:
            for element in elements or []:
                self.add(element)

    def add(self, element: LogicalElement) -> LogicalElement:
        self._elements[element.name] = element
        return element

    def register(self, element_name: str, candidates: SelectorInput) -> LogicalElement:
        """Register (or replace) an element at runtime."""
        return self.add(LogicalElement(element_name, candidates))

    def get(self, element_name: str) -> LogicalElement:
        try:
            return self._elements[element_name]
        except KeyError:
            raise KeyError(
                f"No locators defined for element '{element_name}' in catalog '{self.name}'"
            ) from None

    def names(self) -> List[str]:
        return list(self._elements)

    def merged(self, other: "SelectorCatalog") -> "SelectorCatalog":
        """Return a new catalog where `other` overrides entries of this one."""
        merged = SelectorCatalog(f"{self.name}+{other.name}", list(self))
        for element in other:
            merged.add(element)
        return merged

    def __contains__(self, element_name: object) -> bool:
        return element_name in self._elements

    def __iter__(self) -> Iterator[LogicalElement]:
        return iter(self._elements.values())

    def __len__(self) -> int:
        return len(self._elements)

    def __repr__(self) -> str:
        return f"SelectorCatalog({self.name!r}, {len(self)} elements)"


__all__ = [
    "LogicalElement",
    "SelectorCatalog",
    "SelectorInput",
]
