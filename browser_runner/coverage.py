import json
import logging
import shutil
from pathlib import Path

from .constants import NYC_OUTPUT_DIR, NYC_OUTPUT_FILE

log = logging.getLogger(__name__)


def empty_dir(path):
    """Create ``path`` if needed and remove everything inside it."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()
    return path


def prepare_coverage_dirs(report_dir, empty_coverage=True, nyc_output=NYC_OUTPUT_DIR):
    """Reset the raw coverage output directory and make sure the report directory exists."""
    empty_dir(nyc_output)

    report_dir = Path(report_dir)
    report_dir.mkdir(parents=True, exist_ok=True)
    if empty_coverage:
        empty_dir(report_dir)


def coverage_expression(coverage_global):
    return f"() => window.{coverage_global}"


def write_coverage(coverage, nyc_output=NYC_OUTPUT_DIR):
    """Persist harvested coverage; returns the file written or ``None`` when there was nothing to write."""
    if coverage is None:
        log.debug("No coverage data found on the page.")
        return None

    out = Path(nyc_output) / NYC_OUTPUT_FILE
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(coverage), encoding="utf-8")
    log.debug("Coverage written to %s", out)
    return out
