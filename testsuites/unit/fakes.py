"""
In-memory stand-ins for the Playwright Page / Locator surface used by the
framework, so unit tests run without a browser.

A FakePage maps selector strings to FakeElement objects. Scoped lookups are
keyed as "<root selector> >> <child selector>". Elements can appear, become
enabled or disappear after a delay to exercise the wait and polling code.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Dict, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


class FakeElement:
    def __init__(
        self,
        visible: bool = True,
        enabled: bool = True,
        text: Optional[str] = "",
        attributes: Optional[Dict[str, str]] = None,
        fail_clicks: int = 0,
    ):
        self.visible = visible
        self.enabled = enabled
        self.text = text
        self.attributes = dict(attributes or {})
        self.fail_clicks = fail_clicks
        self.attached = True
        self.clicks = 0
        self.click_attempts = 0
        self.filled: List[str] = []
        self.pressed: List[str] = []
        self.on_click: List[Callable[[], None]] = []
        self._changes: List[tuple] = []

    # Delayed state changes -------------------------------------------------

    def _schedule(self, attribute: str, value: bool, seconds: float) -> "FakeElement":
        self._changes.append((time.monotonic() + seconds, attribute, value))
        return self

    def show_after(self, seconds: float) -> "FakeElement":
        self.visible = False
        return self._schedule("visible", True, seconds)

    def hide_after(self, seconds: float) -> "FakeElement":
        return self._schedule("visible", False, seconds)

    def enable_after(self, seconds: float) -> "FakeElement":
        self.enabled = False
        return self._schedule("enabled", True, seconds)

    def hide(self) -> None:
        self.visible = False

    def refresh(self) -> None:
        now = time.monotonic()
        pending = []
        for at, attribute, value in self._changes:
            if now >= at:
                setattr(self, attribute, value)
            else:
                pending.append((at, attribute, value))
        self._changes = pending

    @property
    def is_shown(self) -> bool:
        self.refresh()
        return self.attached and self.visible


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str, index: Optional[int] = None):
        self.page = page
        self.selector = selector
        self.index = index

    def __repr__(self) -> str:
        suffix = "" if self.index is None else f" >> nth={self.index}"
        return f"<FakeLocator {self.selector}{suffix}>"

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self.page, self.selector, 0)

    def nth(self, index: int) -> "FakeLocator":
        return FakeLocator(self.page, self.selector, index)

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator(self.page, f"{self.selector} >> {selector}")

    def _elements(self) -> List[FakeElement]:
        if self.selector in self.page.invalid:
            raise PlaywrightError(f"Unexpected token in selector: {self.selector}")
        return [e for e in self.page.elements.get(self.selector, []) if e.attached]

    def _element(self) -> Optional[FakeElement]:
        elements = self._elements()
        index = self.index or 0
        return elements[index] if index < len(elements) else None

    async def count(self) -> int:
        elements = self._elements()
        if self.index is None:
            return len(elements)
        return 1 if self.index < len(elements) else 0

    async def is_visible(self) -> bool:
        element = self._element()
        return element is not None and element.is_shown

    async def is_enabled(self, timeout: Optional[float] = None) -> bool:
        element = self._element()
        if element is None:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")
        element.refresh()
        return element.enabled

    def _state_reached(self, state: str) -> bool:
        element = self._element()
        if state == "attached":
            return element is not None
        if state == "detached":
            return element is None
        shown = element is not None and element.is_shown
        return shown if state == "visible" else not shown

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        self.page.waits.append((self.selector, state, timeout))
        deadline = time.monotonic() + (timeout or 30000) / 1000
        while not self._state_reached(state):
            if time.monotonic() >= deadline:
                raise PlaywrightTimeoutError(
                    f"Timeout {timeout}ms exceeded waiting for {self.selector} to be {state}"
                )
            await asyncio.sleep(0.01)

    async def click(self, timeout: Optional[float] = None, **kwargs: Any) -> None:
        element = self._element()
        if element is None or not element.is_shown:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded clicking {self.selector}")
        element.click_attempts += 1
        if element.fail_clicks:
            element.fail_clicks -= 1
            raise PlaywrightError(f"Element is not stable: {self.selector}")
        element.clicks += 1
        for callback in element.on_click:
            callback()

    async def fill(self, value: str, timeout: Optional[float] = None, **kwargs: Any) -> None:
        element = self._element()
        if element is None:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded filling {self.selector}")
        element.filled.append(value)

    async def press(self, key: str, **kwargs: Any) -> None:
        element = self._element()
        if element is None:
            raise PlaywrightTimeoutError(f"Timeout exceeded pressing {key} on {self.selector}")
        element.pressed.append(key)

    async def text_content(self, timeout: Optional[float] = None) -> Optional[str]:
        element = self._element()
        return None if element is None else element.text

    async def get_attribute(self, name: str, timeout: Optional[float] = None) -> Optional[str]:
        element = self._element()
        return None if element is None else element.attributes.get(name)


class FakeKeyboard:
    def __init__(self):
        self.pressed: List[str] = []
        self.handlers: Dict[str, List[Callable[[], None]]] = {}

    def on_press(self, key: str, callback: Callable[[], None]) -> None:
        self.handlers.setdefault(key, []).append(callback)

    async def press(self, key: str, **kwargs: Any) -> None:
        self.pressed.append(key)
        for callback in self.handlers.get(key, []):
            callback()


class FakeContext:
    def __init__(self, rejected: tuple = ()):
        self.cookies: List[Dict[str, Any]] = []
        self.rejected = set(rejected)

    async def add_cookies(self, cookies: List[Dict[str, Any]]) -> None:
        for cookie in cookies:
            if cookie["name"] in self.rejected:
                raise PlaywrightError(f"Invalid cookie fields: {cookie['name']}")
        self.cookies.extend(cookies)

    def cookie_names(self) -> List[str]:
        return [cookie["name"] for cookie in self.cookies]


class FakePage:
    def __init__(self, url: str = "https://superbet.ro/", invalid: tuple = ()):
        self.url = url
        self.invalid = set(invalid)
        self.elements: Dict[str, List[FakeElement]] = {}
        self.keyboard = FakeKeyboard()
        self.context = FakeContext()
        self.handlers: Dict[str, List[Callable[..., Any]]] = {}
        self.waits: List[tuple] = []
        self.visited: List[str] = []
        self.goto_error: Optional[Exception] = None

    def add(self, selector: str, element: Optional[FakeElement] = None, **kwargs: Any) -> FakeElement:
        element = element or FakeElement(**kwargs)
        self.elements.setdefault(selector, []).append(element)
        return element

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def emit(self, event: str, payload: Any) -> List[Any]:
        return [handler(payload) for handler in self.handlers.get(event, [])]

    async def goto(self, url: str, wait_until: Optional[str] = None, **kwargs: Any) -> None:
        if self.goto_error is not None:
            raise self.goto_error
        self.visited.append(url)
        self.url = url

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        return None

    async def wait_for_url(self, url: Any, timeout: Optional[float] = None, **kwargs: Any) -> None:
        return None

    async def title(self) -> str:
        return "Superbet"

    async def screenshot(self, path: Optional[str] = None, full_page: bool = False) -> bytes:
        data = b"\x89PNG"
        if path:
            with open(path, "wb") as f:
                f.write(data)
        return data


class FakeResponse:
    def __init__(self, url: str, status: int = 200, body: str = "{}", readable: bool = True):
        self.url = url
        self.status = status
        self._body = body
        self._readable = readable

    async def text(self) -> str:
        if not self._readable:
            raise RuntimeError("body unavailable")
        return self._body


class DummyConfig:
    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data = dict(data or {})

    def get(self, key, default=None):
        return self.data.get(key, default)


# Short budgets for consent handling in unit tests
FAST_CONSENT = {
    "consent.probe_timeout_ms": 200,
    "consent.click_timeout_ms": 200,
    "consent.verify_timeout_ms": 300,
    "consent.escape_verify_timeout_ms": 200,
    "consent.max_retries": 2,
}
