import re

# Console messages from the browser prepended with this marker are forwarded locally.
MOCHA_CONSOLE = "[MOCHA]"

MOCHA_END_STATE = re.compile(r"^\[MOCHA_END")

MOCHA_PASSED = "[MOCHA_END_PASSED]"

# No default ignore console.
DEFAULT_IGNORE_CONSOLE = ()

NYC_OUTPUT_DIR = "./.nyc_output"
NYC_OUTPUT_FILE = "out.json"

DEFAULT_ENV_FILE = "./env/browser.env"
ENV_BROWSER_BIN = "BROWSER_BIN"
ENV_BROWSER_HEADLESS = "BROWSER_HEADLESS"
