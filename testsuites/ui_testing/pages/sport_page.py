"""
================================================================================
Sport Page Object (Async / Playwright)
================================================================================

Pre-match sports betting page (/pariuri-sportive).

================================================================================
"""

from __future__ import annotations

from typing import Dict, List

import allure

from testsuites.ui_testing.framework.element_actions import DEFAULT_ACTION_TIMEOUT_MS, DEFAULT_CHECK_TIMEOUT_MS
from testsuites.ui_testing.framework.page_base import BasePage
from testsuites.ui_testing.framework.waits import WaitCondition
from testsuites.ui_testing.pages.selectors import SPORT_PAGE


REQUIRED_BUTTONS = ("social_nou_button", "calendar_button", "competitii_button")


class SportPage(BasePage):
    """Sport page object (async)."""

    URL_PATH = "/pariuri-sportive"
    PAGE_TITLE = "Pariuri sportive"
    SELECTORS = SPORT_PAGE
    READY_INDICATOR = "left_sidebar"

    async def verify_sidebar_exists(self) -> bool:
        return await self.is_visible("left_sidebar")

    async def get_sub_page_links(self) -> List[Dict[str, str]]:
        """Text and href of every sidebar link that has both."""
        resolution = await self.smart.resolve("sub_page_links")
        if resolution is None:
            return []

        links = self.page.locator(resolution.selector)
        sub_pages = []
        for i in range(await links.count()):
            link = links.nth(i)
            text = ((await link.text_content()) or "").strip()
            href = await link.get_attribute("href") or ""
            if text and href:
                sub_pages.append({"text": text, "href": href})
        return sub_pages

    @allure.step("Click sub-page link #{index}")
    async def click_sub_page_link(self, index: int) -> None:
        resolution = await self.smart.find("sub_page_links")
        link = self.page.locator(resolution.selector).nth(index)
        await self.waiter.wait_for_clickable(link, description=f"{resolution.selector} #{index}")
        await link.click()
        await self.wait_for_page_load()

    @allure.step("Verify required buttons")
    async def verify_required_buttons(self, timeout: int = DEFAULT_CHECK_TIMEOUT_MS) -> Dict[str, bool]:
        return {name: await self.is_visible(name, timeout) for name in REQUIRED_BUTTONS}

    async def verify_buttons_are_clickable(self, timeout: int = DEFAULT_ACTION_TIMEOUT_MS) -> bool:
        try:
            for name in REQUIRED_BUTTONS:
                await self.wait_for_clickable(name, timeout)
        except Exception:
            return False
        return True

    async def wait_for_sidebar(self, timeout: int = 10000) -> None:
        await self.actions.wait_for("left_sidebar", WaitCondition.VISIBLE, timeout_ms=timeout)


__all__ = [
    "SportPage",
    "REQUIRED_BUTTONS",
]
