# ================================================================================
# Element Actions Module
# ================================================================================
#
# High-level element interactions composed from the SmartLocator (fallback
# resolution), the ActionabilityWaiter and the retry engine.
#
# Key Features:
#   - Logical element targets with ordered fallback selectors
#   - Resolve -> wait for actionability -> act, under one deadline
#   - Retry policy around mutating actions
#   - Boolean visibility checks that never raise
#   - Allure step integration
#
# Usage:
#   actions = ElementActions(page, catalog=HEADER)
#   await actions.click("login_button")
#   await actions.fill("search_input", "Fotbal")
#   visible = await actions.is_visible("user_profile_icon")
#
# ================================================================================

from typing import Any, List, Optional

import allure
from loguru import logger
from playwright.async_api import Page

from .errors import ElementNotFoundError
from .retry import RetryPolicy, retry
from .selectors import SelectorCatalog
from .smart_locator import Resolution, Scope, SmartLocator, Target, describe_scope
from .waits import ActionabilityWaiter, Deadline, DEFAULT_TIMEOUTS_MS, WaitCondition


DEFAULT_ACTION_TIMEOUT_MS = DEFAULT_TIMEOUTS_MS[WaitCondition.VISIBLE]
DEFAULT_CHECK_TIMEOUT_MS = DEFAULT_TIMEOUTS_MS[WaitCondition.ATTACHED]

_SENSITIVE_NAMES = ("password", "secret", "token")


class ElementActions:
    """
    Stateless composer of element interactions for one page or scope.

    Every action resolves its target afresh, so nothing goes stale across
    navigations.

    Example:
        actions = ElementActions(page, catalog=HEADER)
        await actions.click("sport_link")
        text = await actions.get_text("balance")
    """

    def __init__(
        self,
        page: Page,
        scope: Optional[Scope] = None,
        catalog: Optional[SelectorCatalog] = None,
        locator: Optional[SmartLocator] = None,
        waiter: Optional[ActionabilityWaiter] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        """
        Args:
            page: Playwright Page object
            scope: Root for resolution (page when None, or a component root locator)
            catalog: Selector catalog for name lookups
            locator: Shared SmartLocator (created when None)
            waiter: Shared waiter (created when None)
            retry_policy: Policy around click/fill (single attempt when None)
        """
        self.page = page
        self.scope = scope
        self.waiter = waiter or ActionabilityWaiter()
        self.smart = locator or SmartLocator(page, catalog=catalog, waiter=self.waiter)
        self.retry_policy = retry_policy or RetryPolicy.single()

    def scoped(self, scope: Scope) -> "ElementActions":
        """Same collaborators, different root."""
        return ElementActions(
            self.page,
            scope=scope,
            locator=self.smart,
            waiter=self.waiter,
            retry_policy=self.retry_policy,
        )

    async def _run(self, operation, description: str):
        return await retry(
            operation,
            self.retry_policy,
            description=description,
            wrap_exhausted=self.retry_policy.max_attempts > 1,
        )

    async def locate(
        self,
        target: Target,
        timeout_ms: int = DEFAULT_CHECK_TIMEOUT_MS,
    ) -> Resolution:
        """Resolve `target` in this scope or raise ElementNotFoundError."""
        return await self.smart.find(target, scope=self.scope, timeout_ms=timeout_ms)

    async def click(
        self,
        target: Target,
        timeout_ms: int = DEFAULT_ACTION_TIMEOUT_MS,
        **kwargs: Any,
    ) -> None:
        """
        Click an element once it is visible and enabled.

        Args:
            target: Logical element, catalog name or selector(s)
            timeout_ms: Budget shared by resolution, waiting and the click
            **kwargs: Additional arguments passed to Locator.click()

        Raises:
            ElementNotFoundError, WaitTimeoutError, RetryExhaustedError
        """
        element = self.smart.element(target)

        async def attempt() -> None:
            deadline = Deadline.after(timeout_ms)
            resolution = await self.smart.find(element, scope=self.scope, deadline=deadline)
            await self.waiter.wait_for_clickable(
                resolution.locator, deadline=deadline, description=resolution.selector
            )
            await resolution.locator.click(timeout=deadline.budget_ms(), **kwargs)
            logger.debug(f"Successfully clicked: {element.name} ({resolution.selector})")

        with allure.step(f"Click: {element.name}"):
            logger.info(f"Clicking element: {element.name}")
            await self._run(attempt, f"click {element.name}")

    async def fill(
        self,
        target: Target,
        value: str,
        timeout_ms: int = DEFAULT_ACTION_TIMEOUT_MS,
        **kwargs: Any,
    ) -> None:
        """
        Fill an input once it is visible.

        Args:
            target: Logical element, catalog name or selector(s)
            value: Text to enter
            timeout_ms: Budget shared by resolution, waiting and the fill
            **kwargs: Additional arguments passed to Locator.fill()
        """
        element = self.smart.element(target)
        shown = "*" * len(value) if _is_sensitive(element.name) else value[:50]

        async def attempt() -> None:
            deadline = Deadline.after(timeout_ms)
            resolution = await self.smart.find(element, scope=self.scope, deadline=deadline)
            await self.waiter.wait_for(
                resolution.locator,
                WaitCondition.VISIBLE,
                deadline=deadline,
                description=resolution.selector,
            )
            await resolution.locator.fill(value, timeout=deadline.budget_ms(), **kwargs)

        with allure.step(f"Fill {element.name}: {shown}"):
            logger.info(f"Filling input: {element.name} with '{shown}'")
            await self._run(attempt, f"fill {element.name}")

    async def get_text(
        self,
        target: Target,
        timeout_ms: int = DEFAULT_ACTION_TIMEOUT_MS,
    ) -> str:
        """
        Get text content of a visible element.

        Returns:
            Text content, empty string when the element has none
        """
        element = self.smart.element(target)
        deadline = Deadline.after(timeout_ms)
        resolution = await self.smart.find(element, scope=self.scope, deadline=deadline)
        await self.waiter.wait_for(
            resolution.locator,
            WaitCondition.VISIBLE,
            deadline=deadline,
            description=resolution.selector,
        )
        text = await resolution.locator.text_content() or ""
        logger.debug(f"Got text from {element.name}: '{text[:80]}'")
        return text

    async def is_visible(
        self,
        target: Target,
        timeout_ms: int = DEFAULT_CHECK_TIMEOUT_MS,
    ) -> bool:
        """
        Check if an element is visible.

        Any failure (no match, timeout, invalid selector) yields False.
        """
        try:
            resolution = await self.smart.resolve(target, scope=self.scope, timeout_ms=timeout_ms)
        except Exception as e:
            logger.debug(f"Visibility check failed for {target!r}: {e}")
            return False
        return resolution is not None

    async def wait_for(
        self,
        target: Target,
        condition: WaitCondition = WaitCondition.VISIBLE,
        timeout_ms: Optional[int] = None,
    ) -> None:
        """
        Wait for the first candidate of `target` that exists to reach `condition`.

        Candidates are tried in order on their attached state; the first one
        present in the DOM is the one waited on. Invalid selectors are skipped.

        Raises:
            WaitTimeoutError: The condition was not reached in time
            ElementNotFoundError: No candidate is a usable selector
        """
        condition = WaitCondition(condition)
        element = self.smart.element(target)
        deadline = Deadline.after(
            timeout_ms if timeout_ms is not None else DEFAULT_TIMEOUTS_MS[condition]
        )
        root = self.scope if self.scope is not None else self.page

        with allure.step(f"Wait for {element.name} to be {condition.value}"):
            failures: List[str] = []
            fallback = None
            chosen = None
            for selector in element.candidates:
                locator = root.locator(selector).first
                try:
                    present = await locator.count() > 0
                except Exception as e:
                    reason = str(e).splitlines()[0][:80] if str(e) else type(e).__name__
                    failures.append(f"{selector}: {reason}")
                    continue
                if present:
                    chosen = (selector, locator)
                    break
                if fallback is None:
                    fallback = (selector, locator)

            # Nothing present yet: wait on the first candidate that is a valid selector
            chosen = chosen or fallback
            if chosen is None:
                raise ElementNotFoundError(
                    element.name,
                    selectors=element.candidates,
                    scope=describe_scope(self.scope),
                    failures=failures,
                    timeout_ms=deadline.timeout_ms,
                )
            selector, locator = chosen
            await self.waiter.wait_for(locator, condition, deadline=deadline, description=selector)

    async def press_key(self, key: str, target: Optional[Target] = None) -> None:
        """
        Press a keyboard key.

        Args:
            key: Key to press (e.g., "Enter", "Tab", "Escape")
            target: Optional element to focus before pressing
        """
        with allure.step(f"Press key: {key}"):
            if target is not None:
                resolution = await self.locate(target)
                await resolution.locator.press(key)
            else:
                await self.page.keyboard.press(key)
        logger.debug(f"Pressed key: {key}")

    async def take_screenshot(self, name: str, full_page: bool = False) -> bytes:
        """
        Take a screenshot of the page and attach it to Allure.

        Returns:
            Screenshot as bytes
        """
        screenshot = await self.page.screenshot(full_page=full_page)
        allure.attach(
            screenshot,
            name=name,
            attachment_type=allure.attachment_type.PNG
        )
        return screenshot


def _is_sensitive(name: str) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in _SENSITIVE_NAMES)


__all__ = [
    "ElementActions",
    "DEFAULT_ACTION_TIMEOUT_MS",
    "DEFAULT_CHECK_TIMEOUT_MS",
]
