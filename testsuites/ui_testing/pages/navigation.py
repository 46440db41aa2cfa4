"""
================================================================================
Navigation Facade
================================================================================

Multi-page navigation flows built from the header and page objects.

================================================================================
"""

from __future__ import annotations

from typing import Dict, Optional

from playwright.async_api import Page

from testsuites.ui_testing.framework.config_loader import ConfigLoader
from testsuites.ui_testing.framework.diagnostics import PageDiagnostics
from testsuites.ui_testing.pages.header_component import HeaderComponent
from testsuites.ui_testing.pages.live_page import LivePage
from testsuites.ui_testing.pages.sport_page import SportPage


class NavigationFacade:
    """Header-driven and direct navigation between the main sections."""

    def __init__(
        self,
        page: Page,
        config: Optional[ConfigLoader] = None,
        diagnostics: Optional[PageDiagnostics] = None,
    ):
        self.page = page
        self.header = HeaderComponent(page)
        sinks = {}
        if diagnostics is not None:
            sinks = {"console": diagnostics.console, "responses": diagnostics.responses}
        self.sport_page = SportPage(page, config=config, **sinks)
        self.live_page = LivePage(page, config=config, **sinks)

    async def navigate_to_sport_via_header(self) -> SportPage:
        await self.header.click_sport_link()
        await self.sport_page.wait_for_page_load()
        await self.sport_page.dismiss_overlays()
        return self.sport_page

    async def navigate_to_live_via_header(self) -> LivePage:
        await self.header.click_live_link()
        await self.live_page.wait_for_page_load()
        await self.live_page.dismiss_overlays()
        return self.live_page

    async def navigate_to_sport_direct(self) -> SportPage:
        await self.sport_page.open()
        return self.sport_page

    async def navigate_to_live_direct(self) -> LivePage:
        await self.live_page.open()
        return self.live_page

    async def verify_header_navigation(self) -> Dict[str, bool]:
        return await self.header.verify_all_links_present()


__all__ = [
    "NavigationFacade",
]
