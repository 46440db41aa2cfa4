"""
================================================================================
Consent Overlay Dismissal
================================================================================

State machine that clears a blocking cookie-consent overlay once per
navigation without ever failing the test by itself.

    UNKNOWN --probe--> VISIBLE --click/escape + hidden--> DISMISSED
           \\--probe--> ABSENT

Sequence per attempt:
    1. Probe the prioritized overlay container selectors (short, bounded)
    2. Click the first clickable accept button through the SmartLocator
    3. Verify the container reached the hidden state
    4. No clickable button: press Escape and re-verify with a shorter timeout

If the overlay was seen but never confirmed gone after every attempt, the
consent cookies are injected straight into the browser context so the next
navigation is not blocked. Every exit path returns a boolean.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple
from urllib.parse import urlparse

import allure
from loguru import logger
from playwright.async_api import Page

from .selectors import LogicalElement
from .smart_locator import Resolution, SmartLocator
from .waits import ActionabilityWaiter, WaitCondition


class OverlayState(str, Enum):
    """Lifecycle of the consent overlay within one navigation."""
    UNKNOWN = "unknown"
    VISIBLE = "visible"
    DISMISSED = "dismissed"
    ABSENT = "absent"


TRANSITIONS: Dict[OverlayState, FrozenSet[OverlayState]] = {
    OverlayState.UNKNOWN: frozenset({OverlayState.VISIBLE, OverlayState.ABSENT}),
    OverlayState.VISIBLE: frozenset({OverlayState.DISMISSED}),
    OverlayState.DISMISSED: frozenset(),
    OverlayState.ABSENT: frozenset(),
}


# OneTrust first (the target site's consent SDK), generic patterns after
DEFAULT_CONTAINERS = LogicalElement("consent_overlay", (
    "#onetrust-consent-sdk",
    "#onetrust-banner-sdk",
    ".onetrust-pc-sdk",
    "[id*='onetrust']",
    "[class*='onetrust']",
    "[data-testid*='cookie']",
    "[id*='cookie']",
    "[class*='cookie']",
    "[class*='consent']",
))

DEFAULT_ACCEPT_BUTTONS = LogicalElement("consent_accept", (
    "#onetrust-accept-btn-handler",
    "button:has-text('Acceptați toate cookie-urile')",
    "button:has-text('Acceptă toate')",
    "button:has-text('Accept All')",
    "button:has-text('Accept')",
    "button:has-text('Acceptă')",
    "[id*='onetrust-accept']",
    "[id*='accept']",
))

DEFAULT_CONSENT_COOKIES: Tuple[Tuple[str, str], ...] = (
    ("cookie_consent", "accepted"),
    ("cookieConsent", "true"),
    ("consent", "accepted"),
)


@dataclass
class ConsentConfig:
    """
    Selectors and bounds for consent handling.

    Attributes:
        containers: Overlay container candidates, most specific first
        accept_buttons: Accept button candidates, most specific first
        probe_timeout_ms: Budget for detecting the overlay
        click_timeout_ms: Budget for a single accept click
        verify_timeout_ms: Budget for the overlay to hide after a click
        escape_verify_timeout_ms: Budget for the overlay to hide after Escape
        max_retries: Probe/dismiss/verify runs per `dismiss()` call
        cookie_domain: Domain for injected cookies (default: page host)
        consent_cookies: (name, value) pairs injected as hard fallback
    """
    containers: LogicalElement = DEFAULT_CONTAINERS
    accept_buttons: LogicalElement = DEFAULT_ACCEPT_BUTTONS
    probe_timeout_ms: int = 3000
    click_timeout_ms: int = 2000
    verify_timeout_ms: int = 5000
    escape_verify_timeout_ms: int = 2000
    max_retries: int = 3
    cookie_domain: Optional[str] = None
    consent_cookies: Tuple[Tuple[str, str], ...] = field(default=DEFAULT_CONSENT_COOKIES)

    @classmethod
    def from_config(cls, config: Any) -> "ConsentConfig":
        """Build from a ConfigLoader (`consent.*` keys)."""
        defaults = cls()
        containers = config.get("consent.containers", None)
        accept_buttons = config.get("consent.accept_buttons", None)
        cookies = config.get("consent.cookies", None)
        return cls(
            containers=(
                LogicalElement("consent_overlay", containers) if containers else defaults.containers
            ),
            accept_buttons=(
                LogicalElement("consent_accept", accept_buttons)
                if accept_buttons else defaults.accept_buttons
            ),
            probe_timeout_ms=config.get("consent.probe_timeout_ms", defaults.probe_timeout_ms),
            click_timeout_ms=config.get("consent.click_timeout_ms", defaults.click_timeout_ms),
            verify_timeout_ms=config.get("consent.verify_timeout_ms", defaults.verify_timeout_ms),
            escape_verify_timeout_ms=config.get(
                "consent.escape_verify_timeout_ms", defaults.escape_verify_timeout_ms
            ),
            max_retries=config.get("consent.max_retries", defaults.max_retries),
            cookie_domain=config.get("consent.cookie_domain", None),
            consent_cookies=(
                tuple((name, str(value)) for name, value in cookies.items())
                if isinstance(cookies, dict) else defaults.consent_cookies
            ),
        )


class OverlayDismissalController:
    """
    Detects and dismisses the consent overlay of the current page.

    The controller holds no ownership of the page beyond one `dismiss()`
    call; callers invoke it again after every navigation.

    Usage:
        >>> controller = OverlayDismissalController(page)
        >>> await page.goto(url, wait_until="domcontentloaded")
        >>> dismissed = await controller.dismiss()
    """

    def __init__(
        self,
        page: Page,
        config: Optional[ConsentConfig] = None,
        locator: Optional[SmartLocator] = None,
        waiter: Optional[ActionabilityWaiter] = None,
    ):
        self.page = page
        self.config = config or ConsentConfig()
        self.waiter = waiter or ActionabilityWaiter()
        self.locator = locator or SmartLocator(page, waiter=self.waiter)
        self.state = OverlayState.UNKNOWN
        self.history: List[Tuple[OverlayState, OverlayState]] = []
        self.clicks = 0
        self._container: Optional[Resolution] = None

    # =========================================================================
    # State transitions
    # =========================================================================

    def _transition(self, new_state: OverlayState) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise ValueError(f"Invalid overlay transition: {self.state.value} -> {new_state.value}")
        logger.debug(f"[Consent] {self.state.value} -> {new_state.value}")
        self.history.append((self.state, new_state))
        self.state = new_state

    def reset(self) -> None:
        """Back to UNKNOWN for a fresh probe."""
        self.state = OverlayState.UNKNOWN
        self._container = None

    # =========================================================================
    # Steps
    # =========================================================================

    async def probe(self) -> OverlayState:
        """
        Detect the overlay: UNKNOWN -> VISIBLE | ABSENT. Never raises.
        """
        if self.state is not OverlayState.UNKNOWN:
            self.reset()
        try:
            self._container = await self.locator.resolve(
                self.config.containers, timeout_ms=self.config.probe_timeout_ms
            )
        except Exception as e:
            logger.debug(f"[Consent] Probe failed: {e}")
            self._container = None

        if self._container is None:
            self._transition(OverlayState.ABSENT)
        else:
            logger.info(f"[Consent] Overlay found with selector: {self._container.selector}")
            self._transition(OverlayState.VISIBLE)
        return self.state

    async def click_accept(self) -> bool:
        """Click the first clickable accept button, walking the candidates in order."""
        buttons = self.config.accept_buttons
        start = 0
        while start < len(buttons):
            resolution = await self.locator.resolve(
                buttons, timeout_ms=self.config.click_timeout_ms, start=start
            )
            if resolution is None:
                break
            try:
                await resolution.locator.click(timeout=self.config.click_timeout_ms)
            except Exception as e:
                logger.debug(f"[Consent] Click failed for {resolution.selector}: {str(e)[:80]}")
                start = resolution.index + 1
                continue
            self.clicks += 1
            logger.info(f"[Consent] Clicked accept button: {resolution.selector}")
            return True

        logger.info("[Consent] No clickable accept button found")
        return False

    async def verify_hidden(self, timeout_ms: int) -> bool:
        """True when the detected container reached the hidden state in time."""
        if self._container is None:
            return True
        try:
            await self.waiter.wait_for(
                self._container.locator,
                WaitCondition.HIDDEN,
                timeout_ms=timeout_ms,
                description=self._container.selector,
            )
            return True
        except Exception as e:
            logger.debug(f"[Consent] Overlay still visible: {str(e)[:80]}")
            return False

    async def press_escape(self) -> bool:
        """Secondary mitigation for overlays without an accept affordance."""
        logger.info("[Consent] ⚠️ No accept click, trying Escape key...")
        try:
            await self.page.keyboard.press("Escape")
        except Exception as e:
            logger.debug(f"[Consent] Escape failed: {e}")
            return False
        return await self.verify_hidden(self.config.escape_verify_timeout_ms)

    async def force_accept_cookies(self) -> int:
        """
        Inject consent cookies into the browser context.

        Returns:
            Number of cookies accepted by the context
        """
        domain = self.config.cookie_domain or self._cookie_domain()
        if not domain:
            logger.warning("[Consent] Cannot derive cookie domain, skipping cookie injection")
            return 0

        cookies = [
            {"name": name, "value": value, "domain": domain, "path": "/"}
            for name, value in self.config.consent_cookies
        ]
        cookies.append({
            "name": "OptanonAlertBoxClosed",
            "value": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z"),
            "domain": domain,
            "path": "/",
        })

        injected = 0
        for cookie in cookies:
            try:
                await self.page.context.add_cookies([cookie])
                injected += 1
            except Exception as e:
                # Some domain/path combinations are rejected by the browser
                logger.debug(f"[Consent] Cookie {cookie['name']} rejected: {e}")
        return injected

    def _cookie_domain(self) -> Optional[str]:
        host = urlparse(self.page.url or "").hostname
        if not host:
            return None
        if host.startswith("www."):
            host = host[len("www."):]
        return f".{host}"

    # =========================================================================
    # Entry point
    # =========================================================================

    async def run_once(self) -> OverlayState:
        """One probe -> dismiss -> verify pass starting from UNKNOWN."""
        self.reset()
        if await self.probe() is OverlayState.ABSENT:
            return self.state

        if await self.click_accept():
            hidden = await self.verify_hidden(self.config.verify_timeout_ms)
        else:
            hidden = await self.press_escape()

        if hidden:
            self._transition(OverlayState.DISMISSED)
        return self.state

    async def dismiss(self, max_retries: Optional[int] = None) -> bool:
        """
        Clear the consent overlay of the current page.

        Args:
            max_retries: Number of probe/dismiss/verify runs (default: config)

        Returns:
            True if the overlay was dismissed, False if it was absent or
            dismissal could not be confirmed
        """
        attempts = max(1, max_retries if max_retries is not None else self.config.max_retries)
        seen = False

        with allure.step("Handle cookie consent"):
            try:
                for attempt in range(attempts):
                    state = await self.run_once()
                    if state is OverlayState.DISMISSED:
                        logger.info("[Consent] ✅ Cookie consent handled successfully")
                        return True
                    if state is OverlayState.ABSENT:
                        if not seen:
                            logger.debug("[Consent] Overlay not present, nothing to dismiss")
                            return False
                        # Came back hidden between attempts
                        return True
                    seen = True
                    logger.warning(
                        f"[Consent] Dismissal not confirmed (attempt {attempt + 1}/{attempts})"
                    )

                injected = await self.force_accept_cookies()
                logger.warning(
                    f"[Consent] UI dismissal failed; injected {injected} consent cookie(s) "
                    f"as fallback. Check the accept button selectors."
                )
                return False
            except Exception as e:
                logger.error(f"[Consent] ❌ Cookie consent handling failed: {e}")
                return False


async def dismiss_consent(
    page: Page,
    max_retries: int = 3,
    config: Optional[ConsentConfig] = None,
) -> bool:
    """Convenience wrapper: one controller, one `dismiss()` call."""
    return await OverlayDismissalController(page, config=config).dismiss(max_retries)


__all__ = [
    "OverlayState",
    "TRANSITIONS",
    "ConsentConfig",
    "OverlayDismissalController",
    "dismiss_consent",
    "DEFAULT_CONTAINERS",
    "DEFAULT_ACCEPT_BUTTONS",
]
