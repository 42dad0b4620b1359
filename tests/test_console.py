import logging
import re

import pytest

from browser_runner.console import ConsoleForwarder, format_args

LOGGER = "browser_runner.console"


@pytest.fixture
def records(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER)
    return caplog


def forwarded(caplog):
    return [(r.levelno, r.getMessage()) for r in caplog.records if r.name == LOGGER]


@pytest.mark.asyncio
async def test_forwards_plain_log(records, message):
    await ConsoleForwarder()(message("hello world"))

    assert forwarded(records) == [(logging.INFO, "hello world")]


@pytest.mark.asyncio
async def test_ignore_patterns_drop_message_regardless_of_args(records, message):
    forwarder = ConsoleForwarder(ignore_console=["[vite]", re.compile(r"^Download the")])

    await forwarder(message("[vite] connected.", args=["[MOCHA]", "[vite] connected."]))
    await forwarder(message("Download the React DevTools"))

    assert forwarded(records) == []


@pytest.mark.asyncio
async def test_end_markers_are_never_forwarded(records, message):
    await ConsoleForwarder()(message("[MOCHA_END_PASSED]"))

    assert forwarded(records) == []


@pytest.mark.asyncio
async def test_message_without_args_is_dropped(records, message):
    await ConsoleForwarder()(message("", args=[]))

    assert forwarded(records) == []


@pytest.mark.asyncio
async def test_only_mocha_drops_untagged(records, message):
    forwarder = ConsoleForwarder(only_mocha=True)

    await forwarder(message(args=["unrelated", "noise"]))
    await forwarder(message(args=["[MOCHA]", "  ✓ adds two"]))

    assert forwarded(records) == [(logging.INFO, "  ✓ adds two")]


@pytest.mark.asyncio
async def test_mocha_marker_is_stripped_without_only_mocha(records, message):
    forwarder = ConsoleForwarder()

    await forwarder(message(args=["[MOCHA]", "DemoModule"]))
    await forwarder(message(args=["plain", 1]))

    assert forwarded(records) == [(logging.INFO, "DemoModule"), (logging.INFO, "plain 1")]


@pytest.mark.asyncio
async def test_level_follows_message_type(records, message):
    forwarder = ConsoleForwarder()

    await forwarder(message("careful", type="warning"))
    await forwarder(message("broken", type="error"))
    await forwarder(message("details", type="debug"))
    await forwarder(message("fyi", type="info"))

    assert forwarded(records) == [
        (logging.WARNING, "careful"),
        (logging.ERROR, "broken"),
        (logging.DEBUG, "details"),
        (logging.INFO, "fyi"),
    ]


@pytest.mark.asyncio
async def test_raw_observer_sees_every_message(page, message):
    seen = []
    page.on("console", seen.append)
    page.on("console", ConsoleForwarder(only_mocha=True))

    msgs = [message("noise"), message("[MOCHA_END_PASSED]")]
    for msg in msgs:
        await page.emit(msg)

    assert seen == msgs


def test_format_args_substitution():
    assert format_args(["%s passing (%dms)", 3, "12.7"]) == "3 passing (12ms)"
    assert format_args(["%c styled", "color: red"]) == " styled"
    assert format_args(["100%%"]) == "100%"
    assert format_args(["%s and %s", "one"]) == "one and %s"


def test_format_args_encodes_objects():
    assert format_args(["result", {"a": 1}, [1, 2], None]) == 'result {"a": 1} [1, 2] null'
    assert format_args([]) == ""
