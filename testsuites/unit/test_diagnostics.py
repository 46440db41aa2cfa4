from types import SimpleNamespace

import pytest

from testsuites.ui_testing.framework.diagnostics import ConsoleLogSink, ResponseCapture
from testsuites.unit.fakes import FakePage, FakeResponse


def test_console_sink_collects_page_messages():
    page = FakePage()
    console = ConsoleLogSink(echo=False).attach(page)

    page.emit("console", SimpleNamespace(type="log", text="app booted"))
    page.emit("console", SimpleNamespace(type="error", text="Failed to load resource"))
    page.emit("console", SimpleNamespace(type="warning", text="deprecated API"))

    assert len(console) == 3
    assert console.has_errors()
    assert [entry.message for entry in console.errors()] == ["Failed to load resource"]
    assert [entry.type for entry in console.entries] == ["log", "error", "warning"]

    console.clear()
    assert len(console) == 0
    assert not console.has_errors()


def test_sinks_are_independent():
    first, second = ConsoleLogSink(echo=False), ConsoleLogSink(echo=False)
    first.record("error", "boom")
    assert first.has_errors()
    assert not second.has_errors()


@pytest.mark.asyncio
async def test_response_capture_filters_and_trims():
    page = FakePage()
    capture = ResponseCapture(url_fragment="/api/", limit=2, body_limit=5).attach(page)
    handler = page.handlers["response"][0]

    await handler(FakeResponse("https://superbet.ro/static/app.js"))
    await handler(FakeResponse("https://superbet.ro/api/events", body="0123456789"))
    await handler(FakeResponse("https://superbet.ro/api/odds", status=500, readable=False))
    await handler(FakeResponse("https://superbet.ro/api/live"))

    captured = capture.captured
    assert [entry["url"] for entry in captured] == [
        "https://superbet.ro/api/odds",
        "https://superbet.ro/api/live",
    ]
    assert captured[0]["status"] == 500
    assert captured[0]["body"] == "<unab"
