"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based resilient interaction layer for dynamically rendered pages.

Components:
    - selectors: Logical elements with ordered fallback selectors
    - waits: Condition-based actionability waits under a deadline
    - retry: Bounded retry with fixed or exponential backoff
    - smart_locator: Cascading fallback selector resolution
    - consent: Cookie-consent overlay dismissal state machine
    - element_actions / page_base / component_base: interaction facade
    - browser_manager: Browser lifecycle management
    - diagnostics: Console and API response capture for failure reports

Author: Automation Team
License: MIT
================================================================================
"""

from .errors import (
    ElementNotFoundError,
    NavigationError,
    RetryExhaustedError,
    UIAutomationError,
    WaitTimeoutError,
)
from .selectors import LogicalElement, SelectorCatalog
from .waits import ActionabilityWaiter, Deadline, WaitCondition
from .retry import Backoff, RetryPolicy, retry, with_retry
from .smart_locator import Resolution, SmartLocator
from .consent import ConsentConfig, OverlayDismissalController, OverlayState, dismiss_consent
from .element_actions import ElementActions
from .page_base import BasePage
from .component_base import BaseComponent
from .browser_manager import BrowserManager
from .diagnostics import ConsoleLogSink, PageDiagnostics, ResponseCapture

__all__ = [
    "UIAutomationError",
    "ElementNotFoundError",
    "WaitTimeoutError",
    "RetryExhaustedError",
    "NavigationError",
    "LogicalElement",
    "SelectorCatalog",
    "ActionabilityWaiter",
    "Deadline",
    "WaitCondition",
    "Backoff",
    "RetryPolicy",
    "retry",
    "with_retry",
    "Resolution",
    "SmartLocator",
    "ConsentConfig",
    "OverlayDismissalController",
    "OverlayState",
    "dismiss_consent",
    "ElementActions",
    "BasePage",
    "BaseComponent",
    "BrowserManager",
    "ConsoleLogSink",
    "PageDiagnostics",
    "ResponseCapture",
]
