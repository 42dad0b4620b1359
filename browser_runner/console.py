import asyncio
import json
import logging
import re

from .constants import DEFAULT_IGNORE_CONSOLE, MOCHA_CONSOLE, MOCHA_END_STATE
from .watcher import matches

log = logging.getLogger(__name__)

# Browser console types mapped onto local log levels. Anything else logs at INFO.
LEVELS = {
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "assert": logging.ERROR,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}

_SUBSTITUTION = re.compile(r"%[sdifoOc%]")


def _format_arg(value):
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


def format_args(args):
    """Render console arguments the way a browser console would, including %s style substitution."""
    if not args:
        return ""

    first, rest = args[0], list(args[1:])

    if isinstance(first, str) and _SUBSTITUTION.search(first):
        def substitute(match):
            directive = match.group(0)
            if directive == "%%":
                return "%"
            if not rest:
                return directive
            value = rest.pop(0)
            if directive == "%c":
                # CSS styling, nothing to render locally.
                return ""
            if directive in ("%d", "%i"):
                try:
                    return str(int(float(value)))
                except (TypeError, ValueError, OverflowError):
                    return "NaN"
            if directive == "%f":
                try:
                    return str(float(value))
                except (TypeError, ValueError):
                    return "NaN"
            return _format_arg(value)

        first = _SUBSTITUTION.sub(substitute, first)

    return " ".join([_format_arg(first)] + [_format_arg(a) for a in rest])


class ConsoleForwarder:
    """
    Console listener that forwards browser output to the local ``browser_runner.console`` logger.

    Messages matching an ignore pattern, messages without arguments and, in ``only_mocha`` mode,
    messages not tagged with the ``[MOCHA]`` marker are dropped.
    """

    def __init__(self, ignore_console=(), only_mocha=False, logger=None):
        self.ignore_console = [MOCHA_END_STATE, *DEFAULT_IGNORE_CONSOLE, *ignore_console]
        self.only_mocha = only_mocha
        self.logger = logger or log

    def is_ignored(self, text):
        return any(matches(text, pattern) for pattern in self.ignore_console)

    async def __call__(self, msg):
        text = msg.text

        if self.is_ignored(text):
            return

        # Resolve arguments so string substitution and objects log properly.
        args = list(await asyncio.gather(*(arg.json_value() for arg in msg.args)))

        # Only log console output that has arguments.
        if not args:
            return

        if self.only_mocha and args[0] != MOCHA_CONSOLE:
            return

        # Remove the mocha console log identifier if any.
        if args[0] == MOCHA_CONSOLE:
            args.pop(0)

        self.logger.log(LEVELS.get(msg.type, logging.INFO), "%s", format_args(args))
