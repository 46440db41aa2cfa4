"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the pages under test.

Each page class only declares:
    - Its URL path and selector catalog
    - Page-specific actions composed from the framework primitives
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .header_component import HeaderComponent
from .live_page import LivePage
from .navigation import NavigationFacade
from .sport_page import SportPage

__all__ = [
    "HeaderComponent",
    "LivePage",
    "NavigationFacade",
    "SportPage",
]
