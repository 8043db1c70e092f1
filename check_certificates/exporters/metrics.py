"""Prometheus text-format metrics exporter."""

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Iterable

from ..config import ConfigurationError
from ..log import get_logger
from ..models import CheckResult
from ..report import days_remaining

METRIC_NAME = "check_certificates_expiration"
METRIC_HELP = "Days until HTTPs SSL certificate expires"
METRIC_FILE_MODE = 0o644


def escape_label_value(value: str) -> str:
    """Escape a label value for the Prometheus text format."""
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def render_metric_line(result: CheckResult, now: datetime) -> str:
    """Render one gauge sample.

    Error results carry the check time as notAfter, so they report 0 days.
    """
    labels = (
        f'domain="{escape_label_value(result.hostname)}",'
        f'outcome="{result.status.value}"'
    )
    return f"{METRIC_NAME}{{{labels}}} {days_remaining(result.not_after, now)}"


def render_metrics(results: Iterable[CheckResult], now: datetime) -> str:
    """Render the metrics file content, one sample per result in input order."""
    lines = [
        f"# HELP {METRIC_NAME} {METRIC_HELP}",
        f"# TYPE {METRIC_NAME} gauge",
    ]
    lines.extend(render_metric_line(result, now) for result in results)
    return "\n".join(lines) + "\n"


def ensure_writable(path: str | Path, logger: logging.Logger | None = None) -> Path:
    """Make sure the metrics file can be written before any probing starts.

    The final write renames a temporary file over the target, so the
    directory holding the (symlink-resolved) file must be writable too.

    Raises:
        ConfigurationError: If the file or a temporary file next to it
            can't be created.
    """
    logger = logger or get_logger("metrics")
    path = Path(path)
    try:
        path.touch(exist_ok=True)
        with open(path, "a"):
            pass
        target = path.resolve()
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        os.close(fd)
        os.unlink(tmp_name)
    except OSError as e:
        raise ConfigurationError(f"Can't create Prometheus metrics file '{path}': {e}") from e
    logger.info("Prometheus metrics file touched: '%s'", path)
    return path


def write_metrics(
    path: str | Path,
    results: Iterable[CheckResult],
    now: datetime,
    logger: logging.Logger | None = None,
) -> Path:
    """Overwrite the metrics file atomically.

    The content is written to a temporary file in the same directory and
    then renamed over the target, so a scraper never sees a partial file.
    A symlinked path is resolved first so the link itself is kept.

    Args:
        path: Metrics file path.
        results: Full, unfiltered check results in aggregator order.
        now: Check time used for day counts.
        logger: Logger for diagnostics.

    Returns:
        The path written.
    """
    logger = logger or get_logger("metrics")
    path = Path(path).resolve()
    content = render_metrics(results, now)

    logger.info("Exporting Prometheus metrics into file '%s'", path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.chmod(tmp_name, METRIC_FILE_MODE)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.info("Finished Prometheus metrics export")
    return path
