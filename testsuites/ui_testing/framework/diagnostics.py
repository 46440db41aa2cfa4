"""
================================================================================
Diagnostics Capture
================================================================================

Per-test capture of browser-side signals used when reporting failures.

    - ConsoleLogSink: append-only buffer of browser console messages
    - ResponseCapture: rolling window of recent API responses
    - PageDiagnostics: both of the above, attached to one test page

Both are created per test and passed to the page objects that need them;
nothing here is process-wide, so parallel workers never share a buffer.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List

from loguru import logger
from playwright.async_api import ConsoleMessage, Page, Response


@dataclass(frozen=True)
class ConsoleEntry:
    """One browser console message."""
    type: str
    message: str
    timestamp: float


class ConsoleLogSink:
    """
    Append-only capture of browser console output.

    Usage:
        >>> console = ConsoleLogSink()
        >>> console.attach(page)
        >>> ...
        >>> assert not console.has_errors(), console.errors()
    """

    def __init__(self, echo: bool = True):
        """
        Args:
            echo: Mirror each message to the loguru logger at DEBUG level
        """
        self.echo = echo
        self._entries: List[ConsoleEntry] = []

    def attach(self, page: Page) -> "ConsoleLogSink":
        """Subscribe to `console` events of `page`."""
        page.on("console", self._on_console)
        return self

    def _on_console(self, message: ConsoleMessage) -> None:
        self.record(message.type, message.text)

    def record(self, type_: str, message: str) -> ConsoleEntry:
        entry = ConsoleEntry(type=type_, message=message, timestamp=time.time())
        self._entries.append(entry)
        if self.echo:
            logger.debug(f"[Browser {type_}] {message}")
        return entry

    @property
    def entries(self) -> List[ConsoleEntry]:
        return list(self._entries)

    def by_type(self, type_: str) -> List[ConsoleEntry]:
        return [entry for entry in self._entries if entry.type == type_]

    def errors(self) -> List[ConsoleEntry]:
        return self.by_type("error")

    def has_errors(self) -> bool:
        return any(entry.type == "error" for entry in self._entries)

    def clear(self) -> None:
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)


class ResponseCapture:
    """Keeps the last `limit` responses whose URL contains `url_fragment`."""

    def __init__(self, url_fragment: str = "/api/", limit: int = 20, body_limit: int = 1000):
        self.url_fragment = url_fragment
        self.limit = limit
        self.body_limit = body_limit
        self._captured: List[Dict[str, Any]] = []

    def attach(self, page: Page) -> "ResponseCapture":
        page.on("response", self._on_response)
        return self

    async def _on_response(self, response: Response) -> None:
        if self.url_fragment not in response.url:
            return
        try:
            body = await response.text()
        except Exception:
            body = "<unable to read>"

        self._captured.append({
            "timestamp": datetime.now().isoformat(),
            "url": response.url,
            "status": response.status,
            "body": body[:self.body_limit],
        })

        if len(self._captured) > self.limit:
            self._captured.pop(0)

    @property
    def captured(self) -> List[Dict[str, Any]]:
        return list(self._captured)


@dataclass
class PageDiagnostics:
    """Console and API response capture of one test page."""
    console: ConsoleLogSink
    responses: ResponseCapture

    @classmethod
    def attach(cls, page: Page, echo: bool = True) -> "PageDiagnostics":
        return cls(
            console=ConsoleLogSink(echo=echo).attach(page),
            responses=ResponseCapture().attach(page),
        )


__all__ = [
    "ConsoleEntry",
    "ConsoleLogSink",
    "PageDiagnostics",
    "ResponseCapture",
]
