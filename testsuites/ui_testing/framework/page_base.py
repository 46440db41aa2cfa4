"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation that waits for DOM readiness (never network idle: the
      target pages keep polling in the background)
    - Consent overlay dismissal once per navigation
    - Resilient element interaction via ElementActions
    - Screenshot and failure diagnostics as Allure attachments

Page objects only declare a SelectorCatalog and call these primitives.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Pattern, Union

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .config_loader import ConfigLoader
from .consent import ConsentConfig, OverlayDismissalController
from .diagnostics import ConsoleLogSink, PageDiagnostics, ResponseCapture
from .element_actions import DEFAULT_ACTION_TIMEOUT_MS, DEFAULT_CHECK_TIMEOUT_MS, ElementActions
from .errors import NavigationError
from .retry import Backoff, RetryPolicy
from .selectors import SelectorCatalog
from .smart_locator import SmartLocator, Target
from .waits import ActionabilityWaiter, Deadline, WaitCondition


# Default output directory for screenshots
SCREENSHOT_DIR = Path(__file__).parent.parent.parent.parent / "reports" / "screenshots"


def action_retry_policy(config: ConfigLoader) -> RetryPolicy:
    """Retry policy for mutating page actions from `ui.action_retry.*`."""
    return RetryPolicy(
        max_attempts=config.get("ui.action_retry.max_attempts", 2),
        base_delay=config.get("ui.action_retry.base_delay", 0.5),
        backoff=Backoff(config.get("ui.action_retry.backoff", "exponential")),
    )


class BasePage:
    """
    Base class for all page objects.

    Usage:
        class SportPage(BasePage):
            URL_PATH = "/pariuri-sportive"
            SELECTORS = SPORT_PAGE
            READY_INDICATOR = "left_sidebar"

            async def open_calendar(self):
                await self.click("calendar_button")
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""
    SELECTORS: SelectorCatalog = SelectorCatalog("base")
    READY_INDICATOR: Optional[str] = None

    def __init__(
        self,
        page: Page,
        base_url: str = "",
        config: Optional[ConfigLoader] = None,
        console: Optional[ConsoleLogSink] = None,
        retry_policy: Optional[RetryPolicy] = None,
        responses: Optional[ResponseCapture] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            base_url: Base URL for the application (default: ui.base_url)
            config: Configuration source
            console: Console sink of the current test, used in failure reports
            retry_policy: Policy for click/fill (default: ui.action_retry.*)
            responses: API response capture of the current test (attached here when None)
        """
        self.page = page
        self.config = config or ConfigLoader()
        if not base_url:
            base_url = self.config.get("ui.base_url", "https://superbet.ro")
        self.base_url = base_url.rstrip("/")

        self.waiter = ActionabilityWaiter()
        self.smart = SmartLocator(page, catalog=self.SELECTORS, waiter=self.waiter)
        self.actions = ElementActions(
            page,
            locator=self.smart,
            waiter=self.waiter,
            retry_policy=retry_policy or action_retry_policy(self.config),
        )
        self.consent = OverlayDismissalController(
            page, config=ConsentConfig.from_config(self.config), waiter=self.waiter
        )
        self.console = console
        self.responses = responses if responses is not None else ResponseCapture().attach(page)

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.base_url}{self.URL_PATH}"

    @property
    def current_url(self) -> str:
        return self.page.url

    async def title(self) -> str:
        return await self.page.title()

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate(
        self,
        path: Optional[str] = None,
        wait_until: str = "domcontentloaded",
    ) -> None:
        """
        Navigate to this page (or `path` relative to the base URL).

        Args:
            path: URL path; defaults to URL_PATH
            wait_until: Playwright wait mode ('domcontentloaded' or 'load')
        """
        target = f"{self.base_url}{path if path is not None else self.URL_PATH}"
        with allure.step(f"Navigate to {target}"):
            try:
                await self.page.goto(target, wait_until=wait_until)
            except PlaywrightError as e:
                raise NavigationError(target, str(e).splitlines()[0]) from e
            logger.debug(f"Navigated to: {target}")

    async def open(self, path: Optional[str] = None, dismiss_consent: bool = True) -> "BasePage":
        """Navigate, wait for DOM readiness, clear the consent overlay, wait for the page indicator."""
        await self.navigate(path)
        await self.wait_for_page_load()
        if dismiss_consent:
            await self.dismiss_overlays()
        if self.READY_INDICATOR:
            await self.wait_for_indicator(self.READY_INDICATOR)
        return self

    async def dismiss_overlays(self, max_retries: Optional[int] = None) -> bool:
        """Run the consent controller for the current navigation. Never raises."""
        return await self.consent.dismiss(max_retries)

    async def wait_for_page_load(
        self,
        state: str = "domcontentloaded",
        timeout: int = 30000,
    ) -> None:
        """
        Wait for the page to reach a load state.

        Args:
            state: Playwright load state ('load', 'domcontentloaded')
            timeout: Timeout in milliseconds
        """
        await self.page.wait_for_load_state(state, timeout=timeout)

    async def wait_for_indicator(
        self,
        target: Target,
        timeout: int = 30000,
    ) -> None:
        """Wait until an element that signals page readiness is visible."""
        await self.actions.wait_for(target, WaitCondition.VISIBLE, timeout_ms=timeout)

    async def wait_for_url(
        self,
        url_pattern: Union[str, Pattern[str]],
        timeout: int = 10000,
    ) -> None:
        """
        Wait for URL to match pattern.

        Args:
            url_pattern: Glob pattern or compiled regex
            timeout: Timeout in milliseconds
        """
        with allure.step(f"Wait for URL: {url_pattern}"):
            await self.page.wait_for_url(url_pattern, timeout=timeout, wait_until="domcontentloaded")

    def verify_url(self, expected: Union[str, Pattern[str]]) -> bool:
        """Substring match for strings, search for compiled patterns."""
        if isinstance(expected, str):
            return expected in self.current_url
        return re.search(expected, self.current_url) is not None

    # =========================================================================
    # Smart Element Interactions
    # =========================================================================

    async def click(
        self,
        element_name: Target,
        timeout: int = DEFAULT_ACTION_TIMEOUT_MS,
        **kwargs: Any,
    ) -> None:
        await self.actions.click(element_name, timeout, **kwargs)

    async def fill(
        self,
        element_name: Target,
        value: str,
        timeout: int = DEFAULT_ACTION_TIMEOUT_MS,
        **kwargs: Any,
    ) -> None:
        await self.actions.fill(element_name, value, timeout, **kwargs)

    async def get_text(
        self,
        element_name: Target,
        timeout: int = DEFAULT_ACTION_TIMEOUT_MS,
    ) -> str:
        return await self.actions.get_text(element_name, timeout)

    async def is_visible(
        self,
        element_name: Target,
        timeout: int = DEFAULT_CHECK_TIMEOUT_MS,
    ) -> bool:
        return await self.actions.is_visible(element_name, timeout)

    async def wait_for_clickable(
        self,
        element_name: Target,
        timeout: int = DEFAULT_ACTION_TIMEOUT_MS,
    ) -> None:
        """Resolve the element and wait until it is visible and enabled."""
        deadline = Deadline.after(timeout)
        resolution = await self.smart.find(element_name, deadline=deadline)
        await self.waiter.wait_for_clickable(
            resolution.locator, deadline=deadline, description=resolution.selector
        )

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(
        self,
        name: str,
        full_page: bool = True,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        SCREENSHOT_DIR.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        safe_name = re.sub(r"[^a-zA-Z0-9]", "_", name)
        filepath = SCREENSHOT_DIR / f"{safe_name}_{timestamp}.png"

        await self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            allure.attach.file(
                str(filepath),
                name=name,
                attachment_type=allure.attachment_type.PNG
            )

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def capture_failure(self, test_name: str) -> None:
        """
        Capture debugging information on test failure.

        Saves:
            - Screenshot
            - Current URL
            - Recent API responses
            - Browser console errors
        """
        with allure.step("Capture failure details"):
            await self.screenshot(f"failure_{test_name}", attach_to_allure=True)

            allure.attach(
                self.page.url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT
            )

            captured = self.responses.captured
            if captured:
                allure.attach(
                    json.dumps(captured[-10:], indent=2),
                    name="Recent API Requests",
                    attachment_type=allure.attachment_type.JSON
                )

            if self.console is not None and self.console.has_errors():
                allure.attach(
                    "\n".join(entry.message for entry in self.console.errors()),
                    name="Console Errors",
                    attachment_type=allure.attachment_type.TEXT
                )

    def get_locator_health_report(self) -> str:
        """Get smart locator health report."""
        return self.smart.get_health_report()


async def capture_test_failure(
    page: Page,
    test_name: str,
    diagnostics: Optional[PageDiagnostics] = None,
    config: Optional[ConfigLoader] = None,
) -> None:
    """Attach failure details of `page`, reporting what its test-long sinks recorded."""
    failed_page = BasePage(
        page,
        config=config,
        console=diagnostics.console if diagnostics else None,
        responses=diagnostics.responses if diagnostics else None,
    )
    await failed_page.capture_failure(test_name)


__all__ = [
    "BasePage",
    "SCREENSHOT_DIR",
    "action_retry_policy",
    "capture_test_failure",
]
