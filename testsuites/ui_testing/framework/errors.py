"""
================================================================================
UI Automation Errors
================================================================================

Exception taxonomy for the UI interaction layer.

    - ElementNotFoundError: no candidate selector resolved
    - WaitTimeoutError: a wait condition was not reached before its deadline
    - RetryExhaustedError: every retry attempt failed
    - NavigationError: a page navigation failed

Every error carries a `context` dictionary that is rendered into the
message so Allure reports and logs show what was attempted.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence


class UIAutomationError(Exception):
    """Base class for UI automation failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})
        super().__init__(message)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class ElementNotFoundError(UIAutomationError):
    """Raised when all locator strategies fail to find element."""

    def __init__(
        self,
        element: str,
        selectors: Sequence[str] = (),
        scope: str = "page",
        failures: Optional[Sequence[str]] = None,
        timeout_ms: Optional[int] = None,
    ):
        self.element = element
        self.selectors = list(selectors)
        self.scope = scope
        self.failures = list(failures or [])
        self.timeout_ms = timeout_ms
        message = f"Element not found: {element}"
        if self.failures:
            message += "\n" + "\n".join(f"  - {failure}" for failure in self.failures)
        super().__init__(
            message,
            {"selectors": self.selectors, "scope": scope, "timeout_ms": timeout_ms},
        )


class WaitTimeoutError(UIAutomationError):
    """Raised when a wait condition is not reached within its deadline."""

    def __init__(
        self,
        locator: str,
        condition: str,
        timeout_ms: int,
        elapsed_ms: float,
    ):
        self.locator = locator
        self.condition = condition
        self.timeout_ms = timeout_ms
        self.elapsed_ms = elapsed_ms
        super().__init__(
            f"Timed out waiting for {locator} to be {condition}",
            {"timeout_ms": timeout_ms, "elapsed_ms": round(elapsed_ms)},
        )


class RetryExhaustedError(UIAutomationError):
    """Raised when every attempt of a retried operation failed."""

    def __init__(self, description: str, attempts: int, last_error: BaseException):
        self.description = description
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"All {attempts} attempts failed for {description}: {last_error}",
            {"last_error": type(last_error).__name__},
        )


class NavigationError(UIAutomationError):
    """Raised when a page fails to load."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        super().__init__(f"Navigation failed: {url}", {"reason": reason})


__all__ = [
    "UIAutomationError",
    "ElementNotFoundError",
    "WaitTimeoutError",
    "RetryExhaustedError",
    "NavigationError",
]
