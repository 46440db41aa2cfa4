"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module configures pytest for the browser specs, providing fixtures for
browser management, page objects, and test setup/teardown.

Key Features:
- One browser per worker (session event loop), one context per test
- Page Object fixtures for all pages
- Cookie consent cleared before each spec
- Console and API response capture for the whole test
- Screenshot, URL, console errors and recent API responses attached on failure

Browser specs hit the live site and only run when UI_E2E=1 is set.
Browser and headless mode come from config (UI_BROWSER / UI_HEADLESS).

================================================================================
"""

import os
import re
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from loguru import logger
from playwright.async_api import BrowserContext, Page

from testsuites.ui_testing.framework.browser_manager import BrowserManager
from testsuites.ui_testing.framework.config_loader import ConfigLoader
from testsuites.ui_testing.framework.diagnostics import ConsoleLogSink, PageDiagnostics, ResponseCapture
from testsuites.ui_testing.framework.logging_config import init_logger
from testsuites.ui_testing.framework.page_base import capture_test_failure
from testsuites.ui_testing.pages import HeaderComponent, LivePage, NavigationFacade, SportPage


SPECS_DIR = Path(__file__).parent
TRACE_DIR = SPECS_DIR.parent.parent.parent / "reports" / "traces"


# ================================================================================
# Pytest Configuration
# ================================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end browser test"
    )
    config.addinivalue_line(
        "markers", "smoke_ui: mark test as UI smoke test"
    )
    config.addinivalue_line(
        "markers", "regression_ui: mark test as UI regression test"
    )


def pytest_collection_modifyitems(config, items):
    """Skip browser specs unless UI_E2E=1."""
    if os.environ.get("UI_E2E") == "1":
        return

    skip_e2e = pytest.mark.skip(reason="browser specs disabled (set UI_E2E=1 to run)")
    for item in items:
        if SPECS_DIR in Path(str(item.fspath)).parents:
            item.add_marker(skip_e2e)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase report on the item (rep_setup / rep_call / rep_teardown)."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


def _failed(request) -> bool:
    report = getattr(request.node, "rep_call", None)
    return report is not None and report.failed


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def ui_config() -> ConfigLoader:
    config = ConfigLoader()
    init_logger(config=config)
    return config


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def browser_manager(ui_config: ConfigLoader) -> AsyncGenerator[BrowserManager, None]:
    """
    Session-scoped browser manager fixture.

    Provides a single browser for all tests of the worker, reducing browser
    launch overhead.
    """
    manager = BrowserManager.from_config(ui_config)
    await manager.start()
    yield manager
    await manager.close()


@pytest_asyncio.fixture(loop_scope="session")
async def context(request, browser_manager: BrowserManager) -> AsyncGenerator[BrowserContext, None]:
    """
    Function-scoped browser context fixture.

    Creates a new browser context for each test, providing isolation
    (cookies, storage, consent state). With `ui.trace` enabled, the trace
    of a failed test is kept under reports/traces.
    """
    context = await browser_manager.new_context()
    yield context

    trace_path = None
    if _failed(request):
        safe_name = re.sub(r"[^a-zA-Z0-9]", "_", request.node.name)
        trace_path = TRACE_DIR / f"{safe_name}.zip"
    await browser_manager.close_context(context, trace_path=trace_path)


@pytest_asyncio.fixture(loop_scope="session")
async def page(
    request,
    context: BrowserContext,
    ui_config: ConfigLoader,
) -> AsyncGenerator[Page, None]:
    """
    Function-scoped page fixture.

    Console and API response capture start with the page. On a failed test,
    a screenshot, the current URL, console errors and recent API responses
    are attached to Allure before the page is closed.
    """
    page = await context.new_page()
    request.node.page_diagnostics = PageDiagnostics.attach(page)
    yield page

    if _failed(request):
        try:
            await capture_test_failure(
                page, request.node.name, request.node.page_diagnostics, config=ui_config
            )
        except Exception as e:
            logger.warning(f"Failed to capture failure details: {e}")
    await page.close()


@pytest.fixture
def diagnostics(request, page: Page) -> PageDiagnostics:
    """Console and API response capture of the current test's page."""
    return request.node.page_diagnostics


@pytest.fixture
def console(diagnostics: PageDiagnostics) -> ConsoleLogSink:
    return diagnostics.console


@pytest.fixture
def responses(diagnostics: PageDiagnostics) -> ResponseCapture:
    return diagnostics.responses


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def header(page: Page) -> HeaderComponent:
    return HeaderComponent(page)


@pytest.fixture
def sport_page(page: Page, ui_config: ConfigLoader, diagnostics: PageDiagnostics) -> SportPage:
    return SportPage(
        page, config=ui_config, console=diagnostics.console, responses=diagnostics.responses
    )


@pytest.fixture
def live_page(page: Page, ui_config: ConfigLoader, diagnostics: PageDiagnostics) -> LivePage:
    return LivePage(
        page, config=ui_config, console=diagnostics.console, responses=diagnostics.responses
    )


@pytest.fixture
def navigation(page: Page, ui_config: ConfigLoader, diagnostics: PageDiagnostics) -> NavigationFacade:
    return NavigationFacade(page, config=ui_config, diagnostics=diagnostics)


@pytest_asyncio.fixture(loop_scope="session")
async def home_page(page: Page, sport_page: SportPage) -> Page:
    """Site root loaded with the consent overlay handled."""
    await sport_page.navigate("/")
    await sport_page.dismiss_overlays()
    return page
