from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path

import typer

from .constants import DEFAULT_ENV_FILE
from .errors import OptionsError, PreconditionError
from .runner import run_server_and_test_suite

app = typer.Typer(add_completion=False, help="browser-runner: run a Mocha browser test suite headless")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")


def _compile(patterns: list[str]) -> list[re.Pattern]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise typer.BadParameter(f"Invalid --ignore-console pattern {pattern!r}: {exc}") from exc
    return compiled


@app.command("run")
def run_cmd(
    root: Path = typer.Option(Path("./test/public"), "--root", help="Local server directory root"),
    port: int = typer.Option(8080, "--port", help="Port for the local server"),
    url: str | None = typer.Option(None, "--url", help="URL of the test page (default http://localhost:{port}/)"),
    exit_on_fail: bool = typer.Option(True, "--exit-on-fail/--no-exit-on-fail", help="Exit 1 when the suite fails"),
    headless: bool = typer.Option(True, "--headless/--no-headless", help="Launch the browser headless"),
    keep_alive: bool = typer.Option(False, "--keep-alive", help="Wait for ctrl-c before closing the browser"),
    ignore_console: list[str] = typer.Option([], "--ignore-console", help="Regex of console output to ignore"),
    only_mocha: bool = typer.Option(False, "--only-mocha", help="Only forward [MOCHA] console output"),
    coverage_global: str = typer.Option("__coverage__", "--coverage-global", help="Window global with coverage"),
    report_dir: str = typer.Option("./coverage", "--report-dir", help="Coverage report directory"),
    no_empty_coverage: bool = typer.Option(False, "--no-empty-coverage", help="Keep existing coverage reports"),
    env_file: str = typer.Option(DEFAULT_ENV_FILE, "--env-file", help="dotenv file with BROWSER_BIN"),
    timeout: float | None = typer.Option(None, "--timeout", help="Seconds to wait for the suite to finish"),
) -> None:
    options = dict(
        headless=headless,
        keep_alive=keep_alive,
        ignore_console=_compile(ignore_console),
        only_mocha=only_mocha,
        coverage_global=coverage_global,
        report_dir=report_dir,
        empty_coverage=not no_empty_coverage,
        env_file=env_file,
        timeout=timeout,
    )
    if url is not None:
        options["url"] = url

    try:
        passed = asyncio.run(
            run_server_and_test_suite(root=str(root), exit_on_fail=False, port=port, **options)
        )
    except (OptionsError, PreconditionError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    except asyncio.TimeoutError as exc:
        typer.secho(f"Test suite did not finish within {timeout}s", fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    if exit_on_fail and not passed:
        raise typer.Exit(code=1)
