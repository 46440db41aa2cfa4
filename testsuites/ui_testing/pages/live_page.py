"""
================================================================================
Live Page Object (Async / Playwright)
================================================================================

In-play betting page (/pariuri-sportive/live). Odds and scores update
continuously, so readiness is tied to the sidebar, never to network idle.

================================================================================
"""

from __future__ import annotations

import allure

from testsuites.ui_testing.framework.page_base import BasePage
from testsuites.ui_testing.pages.selectors import LIVE_PAGE


class LivePage(BasePage):
    """Live page object (async)."""

    URL_PATH = "/pariuri-sportive/live"
    PAGE_TITLE = "Live"
    SELECTORS = LIVE_PAGE
    READY_INDICATOR = "left_sidebar"

    async def verify_sidebar_exists(self) -> bool:
        return await self.is_visible("left_sidebar")

    async def verify_toate_link_present(self) -> bool:
        return await self.is_visible("toate_link")

    async def verify_fotbal_link_present(self) -> bool:
        return await self.is_visible("fotbal_link")

    @allure.step("Open 'Toate' (all events)")
    async def click_toate_link(self) -> None:
        await self.click("toate_link")
        await self.wait_for_page_load()

    @allure.step("Open 'Fotbal'")
    async def click_fotbal_link(self) -> None:
        await self.click("fotbal_link")
        await self.wait_for_page_load()


__all__ = [
    "LivePage",
]
