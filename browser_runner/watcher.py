import asyncio
import logging
import re

from .errors import NakError

log = logging.getLogger(__name__)


def matches(text, pattern):
    """Literal strings match as substrings, compiled patterns with ``search``."""
    if isinstance(pattern, re.Pattern):
        return pattern.search(text) is not None
    return pattern in text


def wait_for_message(source, ack, nak=None, event="console"):
    """
    Wait for a console message from ``source`` (a playwright ``Page`` or anything
    exposing ``on`` / ``remove_listener``).

    Returns a future that resolves with the text of the first message matching
    ``ack``, or fails with ``NakError`` for the first message matching ``nak``.
    ``ack`` is checked first, so a message matching both resolves. The handler is
    removed as soon as the future settles or is cancelled.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def handler(msg):
        if future.done():
            return

        text = msg.text

        if matches(text, ack):
            detach()
            future.set_result(text)
            return

        if nak and matches(text, nak):
            detach()
            future.set_exception(NakError(text))

    detached = False

    def detach(_=None):
        nonlocal detached
        if not detached:
            detached = True
            source.remove_listener(event, handler)

    source.on(event, handler)

    # Cancellation (e.g. a caller's asyncio.wait_for) must also unsubscribe.
    future.add_done_callback(detach)

    log.debug("Watching %r for %r (nak: %r)", event, ack, nak)
    return future
