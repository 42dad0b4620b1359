import asyncio
import dataclasses
import logging
import sys

from playwright.async_api import async_playwright

from .config import ServerOptions, TestSuiteOptions, build_options, load_browser_environment, suite_options
from .console import ConsoleForwarder
from .constants import MOCHA_END_STATE, MOCHA_PASSED
from .coverage import coverage_expression, prepare_coverage_dirs, write_coverage
from .latch import wait_for_interrupt
from .server import StaticServer
from .watcher import wait_for_message

log = logging.getLogger(__name__)


async def run_test_suite(options=None, **kwargs):
    """
    Launch Chromium, open ``url`` and follow the console output of the Mocha suite running there.

    Resolves with ``True`` once ``[MOCHA_END_PASSED]`` is logged and ``False`` for any other
    ``[MOCHA_END...`` marker. Coverage found in ``window.<coverage_global>`` is written to
    ``./.nyc_output/out.json``. Accepts a ``TestSuiteOptions`` or a mapping, with keyword fields applied on top.
    """
    options = suite_options(options, **kwargs)

    prepare_coverage_dirs(options.report_dir, options.empty_coverage)

    env = load_browser_environment(options.env_file, options.headless)

    launch_options = {"executable_path": env.executable_path, "headless": env.headless}
    launch_options.update(options.launch_options)

    async with async_playwright() as p:
        browser = await p.chromium.launch(**launch_options)
        finish = None
        try:
            page = await browser.new_page()

            # If there is a page console listener then add it to the page.
            if options.page_console:
                page.on("console", options.page_console)

            page.on("console", ConsoleForwarder(options.ignore_console, options.only_mocha))

            finish = wait_for_message(page, MOCHA_END_STATE)

            log.debug("Navigating to %s", options.url)
            await page.goto(options.url, wait_until="load")

            if options.timeout is None:
                end_state = await finish
            else:
                end_state = await asyncio.wait_for(finish, options.timeout)

            log.debug("Test suite finished: %s", end_state)

            coverage = await page.evaluate(coverage_expression(options.coverage_global))
            write_coverage(coverage)

            # Potentially wait for ctrl-c to be pressed
            if options.keep_alive:
                await wait_for_interrupt()
        finally:
            if finish is not None and not finish.done():
                finish.cancel()
            await browser.close()

    return end_state == MOCHA_PASSED


async def run_server_and_test_suite(root="./test/public", exit_on_fail=True, port=8080, **options):
    """
    Serve ``root`` locally and run the test suite against it.

    ``url`` defaults to ``http://localhost:{port}/``. With ``exit_on_fail`` a failing suite
    exits the process with status 1.
    """
    server_options = ServerOptions(root=root, port=port, exit_on_fail=exit_on_fail)

    default_url = "url" not in options
    if default_url:
        options["url"] = server_options.default_url

    suite_options = build_options(TestSuiteOptions, options)

    # Location of the public / server root.
    server_root = server_options.resolve_root()

    with StaticServer(server_root, server_options.port) as server:
        if default_url and server.port != server_options.port:
            suite_options = dataclasses.replace(suite_options, url=f"http://localhost:{server.port}/")

        passed = await run_test_suite(suite_options)

    if passed:
        log.info("Test suite passed.")
    else:
        log.error("Test suite failed.")

    if exit_on_fail and not passed:
        sys.exit(1)

    return passed
