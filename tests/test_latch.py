import asyncio
import io
import os
import sys

import pytest

from browser_runner.latch import stdin_raw_mode, wait_for_interrupt

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs termios")


@pytest.mark.asyncio
async def test_not_a_tty_returns_immediately(caplog):
    await asyncio.wait_for(wait_for_interrupt(io.StringIO()), 1)

    assert "not a terminal" in caplog.text


@posix_only
def test_raw_mode_is_restored():
    import termios

    master, slave = os.openpty()
    try:
        with os.fdopen(slave, "r", closefd=False) as stream:
            before = termios.tcgetattr(slave)
            with stdin_raw_mode(stream):
                assert termios.tcgetattr(slave) != before
            assert termios.tcgetattr(slave) == before
    finally:
        os.close(slave)
        os.close(master)


@posix_only
@pytest.mark.asyncio
async def test_ctrl_c_releases_latch():
    import termios

    master, slave = os.openpty()
    try:
        with os.fdopen(slave, "r", closefd=False) as stream:
            before = termios.tcgetattr(slave)
            waiting = asyncio.ensure_future(wait_for_interrupt(stream))

            # Let the latch switch the terminal to raw mode before typing.
            await asyncio.sleep(0.05)
            os.write(master, b"x")
            await asyncio.sleep(0.05)
            assert not waiting.done()

            os.write(master, b"\x03")
            await asyncio.wait_for(waiting, 2)

            assert termios.tcgetattr(slave) == before
    finally:
        os.close(slave)
        os.close(master)
