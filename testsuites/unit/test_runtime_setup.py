import pytest
from loguru import logger

from testsuites.ui_testing.framework import logging_config
from testsuites.ui_testing.framework.browser_manager import BrowserManager
from testsuites.ui_testing.framework.logging_config import init_logger
from testsuites.unit.fakes import DummyConfig


def test_init_logger_writes_file_sink(tmp_path, monkeypatch):
    monkeypatch.setattr(logging_config, "_logger_initialized", False)
    log_file = tmp_path / "logs" / "ui.log"

    init_logger(level="debug", log_file=str(log_file), config=DummyConfig())
    logger.info("consent overlay dismissed")
    logger.complete()

    assert "consent overlay dismissed" in log_file.read_text(encoding="utf-8")

    # Already initialized: second call is a no-op unless forced
    init_logger(level="info", config=DummyConfig())
    assert logging_config._logger_initialized

    init_logger(level="info", config=DummyConfig(), force=True)


class FakeTracing:
    def __init__(self):
        self.started = False
        self.saved_to = "unset"

    async def start(self, **kwargs):
        self.started = True

    async def stop(self, path=None):
        self.saved_to = path


class FakeContext:
    def __init__(self):
        self.tracing = FakeTracing()
        self.timeout = None
        self.closed = False

    def set_default_timeout(self, timeout):
        self.timeout = timeout

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self):
        self.options = []

    async def new_context(self, **options):
        self.options.append(options)
        return FakeContext()


def test_browser_manager_from_config():
    manager = BrowserManager.from_config(DummyConfig({
        "ui.headless": False,
        "ui.browser": "firefox",
        "ui.timeout_ms": 30000,
        "ui.locale": "en-GB",
        "ui.viewport": {"width": 1280, "height": 720},
    }))
    assert manager.headless is False
    assert manager.browser_type == "firefox"
    assert manager.default_timeout_ms == 30000
    assert manager.context_options["locale"] == "en-GB"
    assert manager.context_options["viewport"] == {"width": 1280, "height": 720}
    assert manager.context_options["ignore_https_errors"] is True
    assert manager.trace is False
    assert manager.browser is None


@pytest.mark.asyncio
async def test_contexts_get_timeout_and_trace(tmp_path):
    manager = BrowserManager(default_timeout_ms=15000, trace=True)
    manager._browser = FakeBrowser()

    context = await manager.new_context(locale="en-US")
    assert manager._browser.options[0]["locale"] == "en-US"
    assert manager._browser.options[0]["viewport"] == {"width": 1920, "height": 1080}
    assert context.timeout == 15000
    assert context.tracing.started

    trace_path = tmp_path / "traces" / "failed.zip"
    await manager.close_context(context, trace_path=trace_path)
    assert context.tracing.saved_to == str(trace_path)
    assert trace_path.parent.is_dir()
    assert context.closed

    passed = await manager.new_context()
    await manager.close_context(passed)
    assert passed.tracing.saved_to is None


def test_browser_manager_rejects_unknown_browser():
    with pytest.raises(ValueError):
        BrowserManager(browser_type="netscape")


@pytest.mark.asyncio
async def test_new_context_requires_started_browser():
    with pytest.raises(RuntimeError):
        await BrowserManager().new_context()


@pytest.mark.asyncio
async def test_context_closed_when_trace_cannot_be_saved(tmp_path):
    manager = BrowserManager(trace=True)
    manager._browser = FakeBrowser()
    context = await manager.new_context()

    async def disk_full(path=None):
        raise OSError("No space left on device")

    context.tracing.stop = disk_full
    with pytest.raises(OSError):
        await manager.close_context(context, trace_path=tmp_path / "failed.zip")
    assert context.closed
    assert context not in manager._contexts
