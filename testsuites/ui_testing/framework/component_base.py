"""
================================================================================
Base Component
================================================================================

Reusable UI fragment (header, sidebar, bet slip) scoped to a root element.

The root is a LogicalElement resolved on every call, so a component survives
re-renders and navigations; element lookups run inside the resolved root.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

from loguru import logger
from playwright.async_api import Locator, Page

from .element_actions import DEFAULT_ACTION_TIMEOUT_MS, DEFAULT_CHECK_TIMEOUT_MS, ElementActions
from .retry import RetryPolicy
from .selectors import LogicalElement, SelectorCatalog, SelectorInput
from .smart_locator import SmartLocator, Target
from .waits import ActionabilityWaiter, Deadline, DEFAULT_TIMEOUTS_MS, WaitCondition


class BaseComponent:
    """
    Base class for page components.

    Usage:
        class HeaderComponent(BaseComponent):
            ROOT = ("header", "[data-testid='header']", "nav")
            SELECTORS = HEADER

            async def click_live_link(self):
                await self.click("live_link")
    """

    ROOT: SelectorInput = "body"
    SELECTORS: SelectorCatalog = SelectorCatalog("component")

    def __init__(
        self,
        page: Page,
        root: Optional[SelectorInput] = None,
        catalog: Optional[SelectorCatalog] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.page = page
        self.root = LogicalElement(f"{type(self).__name__}.root", root or self.ROOT)
        self.waiter = ActionabilityWaiter()
        self.smart = SmartLocator(page, catalog=catalog or self.SELECTORS, waiter=self.waiter)
        self._actions = ElementActions(
            page, locator=self.smart, waiter=self.waiter, retry_policy=retry_policy
        )

    async def root_locator(
        self,
        timeout_ms: int = DEFAULT_ACTION_TIMEOUT_MS,
        deadline: Optional[Deadline] = None,
    ) -> Locator:
        """Resolve the component root (raises ElementNotFoundError)."""
        resolution = await self.smart.find(self.root, timeout_ms=timeout_ms, deadline=deadline)
        return resolution.locator

    async def actions(
        self,
        timeout_ms: int = DEFAULT_ACTION_TIMEOUT_MS,
        deadline: Optional[Deadline] = None,
    ) -> ElementActions:
        """ElementActions scoped to the resolved root."""
        return self._actions.scoped(await self.root_locator(timeout_ms, deadline))

    async def _scoped(self, timeout_ms: int) -> Tuple[ElementActions, int]:
        """Scoped actions plus what is left of `timeout_ms` after resolving the root."""
        deadline = Deadline.after(timeout_ms)
        actions = await self.actions(deadline=deadline)
        return actions, deadline.remaining_ms()

    async def wait_for_visible(self, timeout: int = DEFAULT_TIMEOUTS_MS[WaitCondition.VISIBLE]) -> None:
        await self.root_locator(timeout)

    async def is_visible(self, timeout: int = DEFAULT_CHECK_TIMEOUT_MS) -> bool:
        """True when the component root is visible; never raises."""
        return await self._actions.is_visible(self.root, timeout)

    async def is_selector_visible(
        self,
        target: Target,
        timeout: int = DEFAULT_CHECK_TIMEOUT_MS,
    ) -> bool:
        """True when `target` is visible inside the component; never raises."""
        try:
            actions, remaining = await self._scoped(timeout)
        except Exception as e:
            logger.debug(f"{type(self).__name__} root not found: {e}")
            return False
        return await actions.is_visible(target, remaining)

    async def click(self, target: Target, timeout: int = DEFAULT_ACTION_TIMEOUT_MS, **kwargs: Any) -> None:
        actions, remaining = await self._scoped(timeout)
        await actions.click(target, remaining, **kwargs)

    async def fill(self, target: Target, value: str, timeout: int = DEFAULT_ACTION_TIMEOUT_MS) -> None:
        actions, remaining = await self._scoped(timeout)
        await actions.fill(target, value, remaining)

    async def get_text(self, target: Target, timeout: int = DEFAULT_ACTION_TIMEOUT_MS) -> str:
        actions, remaining = await self._scoped(timeout)
        return await actions.get_text(target, remaining)


__all__ = [
    "BaseComponent",
]
