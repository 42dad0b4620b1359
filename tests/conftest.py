"""Shared fakes for the browser_runner tests.

``FakePage`` mimics the slice of a playwright ``Page`` the runner uses: ``on`` /
``remove_listener`` for console events, plus an async ``emit`` that awaits coroutine
handlers the way playwright schedules them.
"""

import inspect
import os

import pytest

from browser_runner.constants import ENV_BROWSER_BIN, ENV_BROWSER_HEADLESS


class FakeHandle:
    def __init__(self, value):
        self.value = value

    async def json_value(self):
        return self.value


class FakeConsoleMessage:
    def __init__(self, text=None, type="log", args=None):
        if args is None:
            args = [] if text is None else [text]
        if text is None:
            text = " ".join(str(a) for a in args)
        self._text = text
        self.type = type
        self.args = [FakeHandle(a) for a in args]
        self.inspected = 0

    @property
    def text(self):
        self.inspected += 1
        return self._text


class FakePage:
    def __init__(self):
        self.listeners = {}

    def on(self, event, handler):
        self.listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event, handler):
        self.listeners[event].remove(handler)

    def listener_count(self, event="console"):
        return len(self.listeners.get(event, []))

    async def emit(self, msg, event="console"):
        for handler in list(self.listeners.get(event, [])):
            result = handler(msg)
            if inspect.isawaitable(result):
                await result

    async def console(self, *texts):
        messages = [FakeConsoleMessage(text) for text in texts]
        for msg in messages:
            await self.emit(msg)
        return messages


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def message():
    return FakeConsoleMessage


@pytest.fixture(autouse=True)
def restore_browser_env():
    """load_dotenv writes into os.environ; put the browser variables back after each test."""
    saved = {name: os.environ.get(name) for name in (ENV_BROWSER_BIN, ENV_BROWSER_HEADLESS)}
    for name in saved:
        os.environ.pop(name, None)
    yield
    for name, value in saved.items():
        if value is None:
            os.environ.pop(name, None)
        else:
            os.environ[name] = value


@pytest.fixture
def browser_env(tmp_path):
    """A dotenv file pointing BROWSER_BIN at an existing (fake) binary."""
    binary = tmp_path / "chromium"
    binary.write_text("")
    env_file = tmp_path / "browser.env"
    env_file.write_text(f"{ENV_BROWSER_BIN}={binary}\n")
    return env_file, binary
