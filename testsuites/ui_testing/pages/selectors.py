"""
================================================================================
Selector Catalogs
================================================================================

Centralized locator definitions for the Superbet.ro pages under test.

Each logical element lists its candidates most stable first
(data-testid / href / aria-label), generic text-based fallbacks last.
All page objects resolve elements by name from these catalogs.

================================================================================
"""

from testsuites.ui_testing.framework.selectors import SelectorCatalog


HEADER = SelectorCatalog("header", {
    # Navigation links
    "sport_link": [
        "a[href*='/pariuri-sportive']:not([href*='/live'])",
        "header a:has-text('Sport')",
    ],
    "live_link": [
        "a[href*='/pariuri-sportive/live']",
        "header a:has-text('Live')",
    ],
    "supersocial_link": [
        "a[href*='/social/noutati']",
        "header a:has-text('Supersocial')",
    ],
    "biletele_mele_link": [
        "a[href*='/pariurile-mele/deschise']",
        "header a:has-text('Biletele mele')",
    ],
    "casino_link": [
        "a[href*='/casino']:not([href*='/casino-live'])",
        "header a:has-text('Casino')",
    ],
    "casino_live_link": [
        "a[href*='/casino/casino-live']",
        "header a:has-text('Casino Live')",
    ],

    # Action buttons
    "search_icon": [
        "[data-testid='search-icon']",
        ".search-icon",
        "button[aria-label*='search' i]",
    ],
    "user_profile_icon": [
        "button[aria-label*='Toggle user dropdown']",
        "[data-testid='user-dropdown']",
    ],
    "register_button": [
        "[data-testid='register-button']",
        "//*[text()='înregistrare']",
        "text=Înregistrare",
    ],
    "login_button": [
        "[data-testid='login-button']",
        "//*[text()='Intră în cont']",
        "text=Intră în cont",
    ],
})


SPORT_PAGE = SelectorCatalog("sport_page", {
    "left_sidebar": [".left-sidebar", "[data-testid='sidebar']", "aside"],
    "sub_page_links": [".sidebar a", "[data-testid='sidebar'] a", "aside a"],
    "social_nou_button": ["[data-testid='social-nou']", "button:has-text('Social Nou')"],
    "calendar_button": ["[data-testid='calendar']", "button:has-text('Calendar')"],
    "competitii_button": ["[data-testid='competitii']", "button:has-text('Competiții')"],
})


LIVE_PAGE = SelectorCatalog("live_page", {
    "left_sidebar": [".left-sidebar", "[data-testid='sidebar']", "aside"],
    "toate_link": ["a[href*='/pariuri-sportive/astazi']", "a:has-text('Toate')"],
    "fotbal_link": ["a[href*='/fotbal']", "a:has-text('Fotbal')"],
})


__all__ = [
    "HEADER",
    "SPORT_PAGE",
    "LIVE_PAGE",
]
