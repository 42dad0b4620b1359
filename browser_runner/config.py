from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable

from dotenv import load_dotenv

from .constants import DEFAULT_ENV_FILE, ENV_BROWSER_BIN, ENV_BROWSER_HEADLESS
from .errors import OptionsError, PreconditionError


def _expect(name: str, value: Any, kind: type | tuple, description: str) -> None:
    # bool is an int subclass; never accept it where a number is wanted.
    if isinstance(value, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
        raise OptionsError(f"'{name}' must be {description}.")
    if not isinstance(value, kind):
        raise OptionsError(f"'{name}' must be {description}.")


@dataclass
class TestSuiteOptions:
    """
    Options for a single browser test suite run.

    url:             page hosting the Mocha suite instrumented to log through the console.
    empty_coverage:  empty ``report_dir`` before the run.
    headless:        launch the browser headless (``BROWSER_HEADLESS`` overrides it).
    keep_alive:      wait for ``ctrl-c`` before closing the browser.
    launch_options:  passed on to ``chromium.launch``.
    ignore_console:  strings / compiled regexes; matching console output is not forwarded.
    only_mocha:      only forward console output tagged with ``[MOCHA]``.
    coverage_global: window global (or dotted path) holding Istanbul coverage data.
    report_dir:      coverage report directory, created before the run.
    page_console:    callable attached to the page console, receives every raw message.
    env_file:        dotenv file providing ``BROWSER_BIN`` / ``BROWSER_HEADLESS``.
    timeout:         seconds to wait for the end of the suite, ``None`` waits forever.
    """

    url: str | None = None
    empty_coverage: bool = True
    headless: bool = True
    keep_alive: bool = False
    launch_options: dict = field(default_factory=dict)
    ignore_console: list = field(default_factory=list)
    only_mocha: bool = False
    coverage_global: str = "__coverage__"
    report_dir: str = "./coverage"
    page_console: Callable | None = None
    env_file: str = DEFAULT_ENV_FILE
    timeout: float | None = None

    def __post_init__(self) -> None:
        _expect("url", self.url, str, "a string")
        _expect("empty_coverage", self.empty_coverage, bool, "a boolean")
        _expect("headless", self.headless, bool, "a boolean")
        _expect("keep_alive", self.keep_alive, bool, "a boolean")
        _expect("launch_options", self.launch_options, dict, "a dict")
        _expect("ignore_console", self.ignore_console, (list, tuple), "a list")
        for pattern in self.ignore_console:
            if not isinstance(pattern, (str, re.Pattern)):
                raise OptionsError("'ignore_console' entries must be strings or compiled regular expressions.")
        _expect("only_mocha", self.only_mocha, bool, "a boolean")
        _expect("coverage_global", self.coverage_global, str, "a string")
        if not all(part.isidentifier() for part in self.coverage_global.split(".")):
            raise OptionsError("'coverage_global' must be an identifier or a dotted path of identifiers.")
        _expect("report_dir", self.report_dir, str, "a string")
        if self.page_console is not None and not callable(self.page_console):
            raise OptionsError("'page_console' must be a function.")
        _expect("env_file", self.env_file, str, "a string")
        if self.timeout is not None:
            _expect("timeout", self.timeout, (int, float), "a number")
            if self.timeout <= 0:
                raise OptionsError("'timeout' must be positive.")
        self.ignore_console = list(self.ignore_console)


@dataclass
class ServerOptions:
    """Local static server wrapped around a test suite run."""

    root: str = "./test/public"
    port: int = 8080
    exit_on_fail: bool = True

    def __post_init__(self) -> None:
        _expect("root", self.root, str, "a directory path string")
        _expect("exit_on_fail", self.exit_on_fail, bool, "a boolean")
        _expect("port", self.port, int, "an integer")

    @property
    def default_url(self) -> str:
        return f"http://localhost:{self.port}/"

    def resolve_root(self) -> Path:
        root = Path(self.root).resolve()
        if not root.exists():
            raise PreconditionError(f"Server root path does not exist:\n{root}")
        return root


@dataclass(frozen=True)
class BrowserEnvironment:
    executable_path: str
    headless: bool


def load_browser_environment(env_file: str, headless: bool) -> BrowserEnvironment:
    """
    Load ``BROWSER_BIN`` / ``BROWSER_HEADLESS`` from the dotenv file into the process environment.

    ``BROWSER_HEADLESS``, when set, overrides the ``headless`` option.
    """
    if not Path(env_file).is_file():
        raise PreconditionError(
            f"Could not find dotenv file: {env_file}\nPlease provide a dotenv configuration file: {env_file}"
        )

    load_dotenv(env_file)

    executable_path = os.environ.get(ENV_BROWSER_BIN)
    if not executable_path:
        raise PreconditionError(f"Please define '{ENV_BROWSER_BIN}' in dotenv configuration file: {env_file}")

    if not Path(executable_path).exists():
        raise PreconditionError(f"Could not locate Chrome binary path:\n{executable_path}")

    env_headless = os.environ.get(ENV_BROWSER_HEADLESS)
    if env_headless is not None:
        headless = env_headless == "true"

    return BrowserEnvironment(executable_path=executable_path, headless=headless)


def build_options(cls, values: dict):
    """Construct an options dataclass from keyword values, reporting unknown names as ``OptionsError``."""
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise OptionsError(f"Unknown option(s): {', '.join(unknown)}.")
    return cls(**values)


def suite_options(options=None, **values) -> TestSuiteOptions:
    """
    Normalise the ways a test suite run can be configured.

    ``options`` may be ``None``, a mapping of option names or a ``TestSuiteOptions``; keyword
    ``values`` are applied on top of it. Unknown names and other types raise ``OptionsError``.
    """
    if options is None:
        return build_options(TestSuiteOptions, values)
    if isinstance(options, Mapping):
        return build_options(TestSuiteOptions, {**options, **values})
    if isinstance(options, TestSuiteOptions):
        if not values:
            return options
        return build_options(TestSuiteOptions, {**_field_values(options), **values})
    raise OptionsError("'options' must be a TestSuiteOptions or a mapping of options.")


def _field_values(options) -> dict:
    return {f.name: getattr(options, f.name) for f in fields(options)}
