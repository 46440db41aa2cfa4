"""
================================================================================
Actionability Waiter
================================================================================

Condition-based waits for a single Playwright locator.

Every wait is tied to an observable DOM condition and bounded by a Deadline.
Target pages keep mutating in the background (live odds, tickers, polling
widgets), so fixed sleeps are never used as a substitute for a condition.

Conditions:
    - visible / hidden / attached: delegated to Playwright's native
      `locator.wait_for(state=...)` with the remaining budget
    - enabled: polled with `is_enabled()` at Playwright's own expect() cadence

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Sequence

from loguru import logger
from playwright.async_api import Locator
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .errors import WaitTimeoutError


class WaitCondition(str, Enum):
    """Target state of a wait."""
    VISIBLE = "visible"
    HIDDEN = "hidden"
    ATTACHED = "attached"
    ENABLED = "enabled"


# Visibility waits get longer budgets than plain existence checks
DEFAULT_TIMEOUTS_MS: Dict[WaitCondition, int] = {
    WaitCondition.VISIBLE: 10000,
    WaitCondition.HIDDEN: 10000,
    WaitCondition.ENABLED: 10000,
    WaitCondition.ATTACHED: 5000,
}

# Same intervals Playwright uses for expect() polling
POLL_INTERVALS_MS: Sequence[int] = (100, 250, 500, 1000)

_NATIVE_STATES = {WaitCondition.VISIBLE, WaitCondition.HIDDEN, WaitCondition.ATTACHED}


@dataclass
class Deadline:
    """
    Absolute point in (monotonic) time derived from a timeout.

    Attributes:
        timeout_ms: Budget the deadline was created with
        started_at: Monotonic start time in seconds
    """
    timeout_ms: int
    started_at: float = field(default_factory=time.monotonic)

    @classmethod
    def after(cls, timeout_ms: int) -> "Deadline":
        return cls(timeout_ms=max(0, int(timeout_ms)))

    @property
    def expires_at(self) -> float:
        return self.started_at + self.timeout_ms / 1000

    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.started_at) * 1000

    def remaining_ms(self) -> int:
        return max(0, int((self.expires_at - time.monotonic()) * 1000))

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def budget_ms(self, cap_ms: Optional[int] = None) -> int:
        """Remaining time, optionally capped, never below 1 ms (0 means 'no timeout' to Playwright)."""
        remaining = self.remaining_ms()
        if cap_ms is not None:
            remaining = min(remaining, cap_ms)
        return max(1, remaining)


def describe_locator(locator: Locator, description: Optional[str] = None) -> str:
    """Human-readable name for a locator in errors and logs."""
    return description or repr(locator)


class ActionabilityWaiter:
    """
    Blocks until a locator reaches a WaitCondition or its deadline passes.

    Usage:
        >>> waiter = ActionabilityWaiter()
        >>> await waiter.wait_for(page.locator("#submit"), WaitCondition.VISIBLE, 5000)
        >>> await waiter.wait_for_clickable(page.locator("#submit"), timeout_ms=5000)
    """

    def __init__(self, poll_intervals_ms: Sequence[int] = POLL_INTERVALS_MS):
        self.poll_intervals_ms = tuple(poll_intervals_ms) or POLL_INTERVALS_MS

    async def wait_for(
        self,
        locator: Locator,
        condition: WaitCondition = WaitCondition.VISIBLE,
        timeout_ms: Optional[int] = None,
        deadline: Optional[Deadline] = None,
        description: Optional[str] = None,
    ) -> None:
        """
        Wait until `condition` holds for `locator`.

        Args:
            locator: Playwright locator (resolved lazily by the engine)
            condition: Target state
            timeout_ms: Budget for this wait; defaults per condition
            deadline: Shared deadline; overrides `timeout_ms` when given
            description: Name used in the timeout error

        Raises:
            WaitTimeoutError: Condition not reached before the deadline
        """
        condition = WaitCondition(condition)
        if deadline is None:
            if timeout_ms is None:
                timeout_ms = DEFAULT_TIMEOUTS_MS[condition]
            deadline = Deadline.after(timeout_ms)

        if condition in _NATIVE_STATES:
            await self._wait_native(locator, condition, deadline, description)
        else:
            await self._poll(locator, condition, deadline, description)

    async def wait_for_clickable(
        self,
        locator: Locator,
        timeout_ms: Optional[int] = None,
        deadline: Optional[Deadline] = None,
        description: Optional[str] = None,
    ) -> None:
        """Visible, then enabled, both under one deadline."""
        if deadline is None:
            deadline = Deadline.after(
                timeout_ms if timeout_ms is not None else DEFAULT_TIMEOUTS_MS[WaitCondition.VISIBLE]
            )
        await self.wait_for(locator, WaitCondition.VISIBLE, deadline=deadline, description=description)
        await self.wait_for(locator, WaitCondition.ENABLED, deadline=deadline, description=description)

    async def is_satisfied(self, locator: Locator, condition: WaitCondition) -> bool:
        """Single non-blocking check of `condition`."""
        condition = WaitCondition(condition)
        if condition is WaitCondition.ATTACHED:
            return await locator.count() > 0
        if condition is WaitCondition.VISIBLE:
            return await locator.is_visible()
        if condition is WaitCondition.HIDDEN:
            return not await locator.is_visible()
        if await locator.count() == 0:
            return False
        return await locator.is_enabled(timeout=POLL_INTERVALS_MS[0])

    async def _wait_native(
        self,
        locator: Locator,
        condition: WaitCondition,
        deadline: Deadline,
        description: Optional[str],
    ) -> None:
        if deadline.expired:
            # Budget already spent by an earlier step; one instant check only
            if await self.is_satisfied(locator, condition):
                return
            self._raise_timeout(locator, condition, deadline, description)

        try:
            await locator.wait_for(state=condition.value, timeout=deadline.budget_ms())
        except PlaywrightTimeoutError:
            self._raise_timeout(locator, condition, deadline, description)

    async def _poll(
        self,
        locator: Locator,
        condition: WaitCondition,
        deadline: Deadline,
        description: Optional[str],
    ) -> None:
        attempt = 0
        while True:
            try:
                if await self.is_satisfied(locator, condition):
                    return
            except PlaywrightTimeoutError:
                pass

            if deadline.expired:
                self._raise_timeout(locator, condition, deadline, description)

            interval = self.poll_intervals_ms[min(attempt, len(self.poll_intervals_ms) - 1)]
            attempt += 1
            await asyncio.sleep(min(interval, deadline.budget_ms()) / 1000)

    @staticmethod
    def _raise_timeout(
        locator: Locator,
        condition: WaitCondition,
        deadline: Deadline,
        description: Optional[str],
    ) -> None:
        name = describe_locator(locator, description)
        elapsed = deadline.elapsed_ms()
        logger.debug(f"⏱️ {name} not {condition.value} after {elapsed:.0f}ms")
        raise WaitTimeoutError(name, condition.value, deadline.timeout_ms, elapsed)


__all__ = [
    "ActionabilityWaiter",
    "Deadline",
    "WaitCondition",
    "DEFAULT_TIMEOUTS_MS",
    "POLL_INTERVALS_MS",
    "describe_locator",
]
