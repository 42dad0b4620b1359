import asyncio
import contextlib
import logging
import os
import sys

log = logging.getLogger(__name__)

# ctrl-c (end of text)
CTRL_C = b"\x03"


@contextlib.contextmanager
def stdin_raw_mode(stream=None):
    """Put the terminal behind ``stream`` into raw mode, restoring its attributes on exit."""
    import termios
    import tty

    stream = stream or sys.stdin
    fd = stream.fileno()
    previous = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        yield fd
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, previous)


async def wait_for_interrupt(stream=None):
    """Block until ``ctrl-c`` is typed on stdin."""
    stream = stream or sys.stdin

    if not stream.isatty():
        log.warning("stdin is not a terminal; not waiting for ctrl-c.")
        return

    sys.stdout.write("Hit `ctrl-c` to exit.\n")
    sys.stdout.flush()

    loop = asyncio.get_running_loop()
    pressed = loop.create_future()

    with stdin_raw_mode(stream) as fd:
        def on_key():
            key = os.read(fd, 1)
            # EOF releases the latch as well.
            if key in (CTRL_C, b"") and not pressed.done():
                pressed.set_result(None)

        loop.add_reader(fd, on_key)
        try:
            await pressed
        finally:
            loop.remove_reader(fd)
