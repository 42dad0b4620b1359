from .config import ServerOptions, TestSuiteOptions
from .console import ConsoleForwarder
from .constants import MOCHA_CONSOLE, MOCHA_END_STATE, MOCHA_PASSED
from .errors import NakError, OptionsError, PreconditionError
from .runner import run_server_and_test_suite, run_test_suite
from .watcher import wait_for_message

__version__ = "0.1.0"

__all__ = [
    "ConsoleForwarder",
    "MOCHA_CONSOLE",
    "MOCHA_END_STATE",
    "MOCHA_PASSED",
    "NakError",
    "OptionsError",
    "PreconditionError",
    "ServerOptions",
    "TestSuiteOptions",
    "run_server_and_test_suite",
    "run_test_suite",
    "wait_for_message",
]
