"""
================================================================================
Header Component (Async / Playwright)
================================================================================

Site header: main navigation links, search, account buttons.

================================================================================
"""

from __future__ import annotations

from typing import Dict, Pattern, Union

import allure
from loguru import logger

from testsuites.ui_testing.framework.component_base import BaseComponent
from testsuites.ui_testing.framework.element_actions import DEFAULT_CHECK_TIMEOUT_MS
from testsuites.ui_testing.pages.selectors import HEADER


# Result key -> catalog element
HEADER_LINKS: Dict[str, str] = {
    "sport": "sport_link",
    "live": "live_link",
    "supersocial": "supersocial_link",
    "biletele_mele": "biletele_mele_link",
    "casino": "casino_link",
    "casino_live": "casino_live_link",
    "search": "search_icon",
    "user_profile": "user_profile_icon",
    "register": "register_button",
    "login": "login_button",
}


class HeaderComponent(BaseComponent):
    """Header page component."""

    ROOT = ("header", "[data-testid='header']", "nav")
    SELECTORS = HEADER

    async def click_sport_link(self) -> None:
        await self.click("sport_link")

    async def click_live_link(self) -> None:
        await self.click("live_link")

    async def click_supersocial_link(self) -> None:
        await self.click("supersocial_link")

    async def click_biletele_mele_link(self) -> None:
        await self.click("biletele_mele_link")

    async def click_casino_link(self) -> None:
        await self.click("casino_link")

    async def click_casino_live_link(self) -> None:
        await self.click("casino_live_link")

    async def click_search_icon(self) -> None:
        await self.click("search_icon")

    async def click_user_profile_icon(self) -> None:
        await self.click("user_profile_icon")

    async def click_register_button(self) -> None:
        await self.click("register_button")

    async def click_login_button(self) -> None:
        await self.click("login_button")

    @allure.step("Verify all header links are present")
    async def verify_all_links_present(self, timeout: int = DEFAULT_CHECK_TIMEOUT_MS) -> Dict[str, bool]:
        """Visibility of every header link, keyed by short name."""
        results = {}
        for key, element_name in HEADER_LINKS.items():
            results[key] = await self.is_selector_visible(element_name, timeout)
        missing = [key for key, ok in results.items() if not ok]
        if missing:
            logger.warning(f"Header links not visible: {missing}")
        return results

    async def verify_link_navigation(
        self,
        element_name: str,
        expected_url: Union[str, Pattern[str]],
        timeout: int = 10000,
    ) -> bool:
        """Click a header link and report whether the URL matched."""
        with allure.step(f"Verify {element_name} navigates to {expected_url}"):
            try:
                await self.click(element_name, timeout)
                await self.page.wait_for_url(expected_url, timeout=timeout, wait_until="domcontentloaded")
                return True
            except Exception as e:
                logger.warning(f"Navigation via {element_name} failed: {e}")
                return False


__all__ = [
    "HeaderComponent",
    "HEADER_LINKS",
]
