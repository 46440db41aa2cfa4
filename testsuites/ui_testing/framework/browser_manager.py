"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - One browser per worker, one isolated context per test
    - Viewport / locale / default timeout from config/config.yaml
    - Optional Playwright tracing, kept only for failed tests
    - Storage state persistence between runs

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from .config_loader import ConfigLoader


# Storage state file (cookies + local storage, consent included)
AUTH_STATE_FILE = Path(__file__).parent.parent / ".auth_state.json"

BROWSER_TYPES = ("chromium", "firefox", "webkit")


class BrowserManager:
    """
    Owns the Playwright driver, one browser, and the contexts created from it.

    Usage:
        async with BrowserManager.from_config() as manager:
            page = await manager.new_page()
            await page.goto("https://superbet.ro", wait_until="domcontentloaded")

        # Keep a trace of a failed test
        context = await manager.new_context()
        ...
        await manager.close_context(context, trace_path="reports/traces/test.zip")
    """

    # Chromium-only flags are ignored by other engines
    DEFAULT_LAUNCH_ARGS: List[str] = [
        "--ignore-certificate-errors",
        "--disable-blink-features=AutomationControlled",
    ]

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
        "locale": "ro-RO",
    }

    def __init__(
        self,
        headless: bool = True,
        restore_auth: bool = False,
        browser_type: str = "chromium",
        default_timeout_ms: Optional[int] = None,
        context_options: Optional[Dict[str, Any]] = None,
        trace: bool = False,
    ):
        """
        Args:
            headless: Run browser in headless mode
            restore_auth: Load storage state saved by `save_auth_state`
            browser_type: 'chromium', 'firefox' or 'webkit'
            default_timeout_ms: Default action timeout of every new context
            context_options: Overrides merged over DEFAULT_CONTEXT_OPTIONS
            trace: Record a Playwright trace for every context
        """
        if browser_type not in BROWSER_TYPES:
            raise ValueError(f"Unsupported browser type: {browser_type}")
        self.headless = headless
        self.restore_auth = restore_auth
        self.browser_type = browser_type
        self.default_timeout_ms = default_timeout_ms
        self.context_options = {**self.DEFAULT_CONTEXT_OPTIONS, **(context_options or {})}
        self.trace = trace

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "BrowserManager":
        """Build a manager from `ui.*` configuration keys."""
        config = config or ConfigLoader()
        overrides: Dict[str, Any] = {}
        viewport = config.get("ui.viewport", None)
        if isinstance(viewport, dict):
            overrides["viewport"] = {"width": int(viewport["width"]), "height": int(viewport["height"])}
        locale = config.get("ui.locale", None)
        if locale:
            overrides["locale"] = locale
        return cls(
            headless=config.get("ui.headless", True),
            browser_type=config.get("ui.browser", "chromium"),
            default_timeout_ms=config.get("ui.timeout_ms", 60000),
            context_options=overrides,
            trace=config.get("ui.trace", False),
        )

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch the configured engine."""
        self._playwright = await async_playwright().start()
        engine = getattr(self._playwright, self.browser_type)
        self._browser = await engine.launch(headless=self.headless, args=self.DEFAULT_LAUNCH_ARGS)
        logger.info(f"🌐 Browser started: {self.browser_type} (headless={self.headless})")

    async def close(self) -> None:
        """Close remaining contexts, the browser and the driver."""
        for context in self._contexts:
            try:
                await context.close()
            except Exception as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def new_context(self, **options: Any) -> BrowserContext:
        """
        Create an isolated context (own cookies, storage, consent state).

        Args:
            **options: Playwright context options, merged over the defaults
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {**self.context_options, **options}
        if self.restore_auth and AUTH_STATE_FILE.exists():
            context_options["storage_state"] = str(AUTH_STATE_FILE)
            logger.debug("Restored storage state from file")

        context = await self._browser.new_context(**context_options)
        if self.default_timeout_ms:
            context.set_default_timeout(self.default_timeout_ms)
        if self.trace:
            await context.tracing.start(screenshots=True, snapshots=True)
        self._contexts.append(context)
        return context

    async def close_context(
        self,
        context: BrowserContext,
        trace_path: Optional[Path] = None,
    ) -> None:
        """
        Close one context.

        Args:
            context: Context created by `new_context`
            trace_path: Where to save the trace; discarded when None
        """
        if context in self._contexts:
            self._contexts.remove(context)
        try:
            if self.trace:
                if trace_path is not None:
                    Path(trace_path).parent.mkdir(parents=True, exist_ok=True)
                    await context.tracing.stop(path=str(trace_path))
                    logger.info(f"Trace saved: {trace_path}")
                else:
                    await context.tracing.stop()
        finally:
            await context.close()

    async def new_page(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> Page:
        """New page in `context`, or in a fresh context when None."""
        if context is None:
            context = await self.new_context(**context_options)
        return await context.new_page()

    async def save_auth_state(self, context: BrowserContext) -> None:
        """Persist cookies and storage of `context` for `restore_auth`."""
        await context.storage_state(path=str(AUTH_STATE_FILE))
        logger.info(f"Storage state saved to: {AUTH_STATE_FILE}")

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser


__all__ = [
    "BrowserManager",
    "BROWSER_TYPES",
    "AUTH_STATE_FILE",
]
