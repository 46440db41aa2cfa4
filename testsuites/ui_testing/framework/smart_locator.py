"""
================================================================================
Smart Locator with Cascading Fallback Resolution
================================================================================

Resolves a logical element to the first candidate selector that currently
matches a visible element.

    - Candidates are evaluated strictly in declared order; first match wins
    - Each candidate gets a short visibility probe (default 2s)
    - Sweeps repeat at Playwright's polling cadence until the caller's deadline
    - Fallback usage is recorded for maintenance (locator health report)

Locators are created fresh on every call and never cached, so resolution is
always against the current DOM.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from loguru import logger
from playwright.async_api import Locator, Page

from .errors import ElementNotFoundError
from .selectors import LogicalElement, SelectorCatalog
from .waits import ActionabilityWaiter, Deadline, POLL_INTERVALS_MS, WaitCondition


Target = Union[LogicalElement, str, Sequence[str]]

# Anything exposing `.locator(selector)`: Page, Frame, Locator
Scope = Any

DEFAULT_PROBE_TIMEOUT_MS = 2000
DEFAULT_RESOLVE_TIMEOUT_MS = 5000


@dataclass
class Resolution:
    """Outcome of a successful resolution."""
    element: LogicalElement
    selector: str
    index: int
    locator: Locator

    @property
    def used_fallback(self) -> bool:
        return self.index > 0


@dataclass
class LocatorHealth:
    """
    Tracks locator health and usage statistics.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        used_fallback: Whether a fallback was used
        fallback_index: Position of the fallback used (if any)
        fallback_selector: The fallback selector used (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_index: Optional[int] = None
    fallback_selector: Optional[str] = None


def describe_scope(scope: Scope) -> str:
    if scope is None or isinstance(scope, Page):
        return "page"
    return repr(scope)


class SmartLocator:
    """
    Fallback resolver over ordered candidate selectors.

    Usage:
        >>> smart = SmartLocator(page, catalog=HEADER)
        >>> resolution = await smart.find("login_button")
        >>> await resolution.locator.click()

        >>> # Existence check, never raises
        >>> await smart.resolve(["#cookie-banner", "[class*='consent']"]) is None
        True
    """

    def __init__(
        self,
        page: Page,
        catalog: Optional[SelectorCatalog] = None,
        waiter: Optional[ActionabilityWaiter] = None,
        probe_timeout_ms: int = DEFAULT_PROBE_TIMEOUT_MS,
    ):
        """
        Args:
            page: Playwright Page object (default scope)
            catalog: Catalog used to look up elements passed by name
            waiter: Waiter used for the per-candidate visibility probe
            probe_timeout_ms: Upper bound of a single candidate probe
        """
        self.page = page
        self.catalog = catalog or SelectorCatalog("default")
        self.waiter = waiter or ActionabilityWaiter()
        self.probe_timeout_ms = probe_timeout_ms
        self._health_records: List[LocatorHealth] = []
        self._fallback_used: Dict[str, LocatorHealth] = {}

    def element(self, target: Target) -> LogicalElement:
        """Normalize a target into a LogicalElement."""
        if isinstance(target, LogicalElement):
            return target
        if isinstance(target, str):
            if target in self.catalog:
                return self.catalog.get(target)
            return LogicalElement(target, target)
        candidates = tuple(target)
        return LogicalElement(" | ".join(candidates) or "custom_element", candidates)

    async def resolve(
        self,
        target: Target,
        scope: Optional[Scope] = None,
        timeout_ms: int = DEFAULT_RESOLVE_TIMEOUT_MS,
        start: int = 0,
        deadline: Optional[Deadline] = None,
    ) -> Optional[Resolution]:
        """
        Find the first candidate with a visible match.

        Args:
            target: LogicalElement, catalog name, selector or selector list
            scope: Page or previously resolved root locator (default: page)
            timeout_ms: Overall budget across all sweeps
            start: Index of the first candidate to consider
            deadline: Shared deadline; overrides `timeout_ms`

        Returns:
            Resolution, or None when nothing matched before the deadline
        """
        resolution, _ = await self._sweep(
            self.element(target), scope, deadline or Deadline.after(timeout_ms), start
        )
        return resolution

    async def find(
        self,
        target: Target,
        scope: Optional[Scope] = None,
        timeout_ms: int = DEFAULT_RESOLVE_TIMEOUT_MS,
        start: int = 0,
        deadline: Optional[Deadline] = None,
    ) -> Resolution:
        """
        Like `resolve`, but required: raises when no candidate matched.

        Raises:
            ElementNotFoundError: When all strategies fail
        """
        element = self.element(target)
        deadline = deadline or Deadline.after(timeout_ms)
        resolution, failures = await self._sweep(element, scope, deadline, start)
        if resolution is not None:
            return resolution

        error = ElementNotFoundError(
            element.name,
            selectors=element.candidates[start:],
            scope=describe_scope(scope),
            failures=failures,
            timeout_ms=deadline.timeout_ms,
        )
        logger.error(f"❌ {error}")
        raise error

    async def _sweep(
        self,
        element: LogicalElement,
        scope: Optional[Scope],
        deadline: Deadline,
        start: int,
    ):
        root = scope if scope is not None else self.page
        candidates = list(enumerate(element.candidates))[start:]
        failures: Dict[str, str] = {}
        sweep = 0

        while True:
            for index, selector in candidates:
                locator = root.locator(selector).first
                try:
                    if await locator.count() == 0:
                        failures[selector] = "no match"
                        continue
                    await self.waiter.wait_for(
                        locator,
                        WaitCondition.VISIBLE,
                        deadline=Deadline.after(deadline.budget_ms(self.probe_timeout_ms)),
                        description=selector,
                    )
                except Exception as e:
                    failures[selector] = str(e).splitlines()[0][:80] if str(e) else type(e).__name__
                    continue

                resolution = Resolution(element, selector, index, locator)
                self._record(resolution)
                return resolution, []

            if deadline.expired:
                return None, [f"{selector}: {reason}" for selector, reason in failures.items()]

            interval = POLL_INTERVALS_MS[min(sweep, len(POLL_INTERVALS_MS) - 1)]
            sweep += 1
            await asyncio.sleep(min(interval, deadline.budget_ms()) / 1000)

    def _record(self, resolution: Resolution) -> None:
        element = resolution.element
        health = LocatorHealth(
            element_name=element.name,
            primary_selector=element.primary,
            used_fallback=resolution.used_fallback,
            fallback_index=resolution.index if resolution.used_fallback else None,
            fallback_selector=resolution.selector if resolution.used_fallback else None,
        )
        self._health_records.append(health)

        if resolution.used_fallback:
            logger.warning(
                f"⚠️ Element '{element.name}' used fallback: "
                f"#{resolution.index} -> {resolution.selector}"
            )
            self._fallback_used[element.name] = health
        else:
            logger.debug(f"✅ Element '{element.name}' found: {resolution.selector}")

    @property
    def health_records(self) -> List[LocatorHealth]:
        return list(self._health_records)

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists elements that needed a fallback (maintenance candidates).
        """
        if not self._fallback_used:
            return "✅ All elements used primary locators. No maintenance needed."

        report_lines = [
            "⚠️ Locator Health Report - Fallbacks Used:",
            "",
            "The following elements used fallback locators.",
            "Consider updating the primary selectors:",
            "",
        ]

        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: #{health.fallback_index} -> {health.fallback_selector}",
                "",
            ])

        return "\n".join(report_lines)


__all__ = [
    "SmartLocator",
    "Resolution",
    "LocatorHealth",
    "describe_scope",
    "DEFAULT_PROBE_TIMEOUT_MS",
]
