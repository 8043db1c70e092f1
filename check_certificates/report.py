"""Format, filter and sort check results for display."""

import logging
from datetime import datetime
from typing import Iterable

from .log import get_logger
from .models import CheckResult, FormattedRow, ReportOptions


def days_remaining(not_after: datetime, now: datetime) -> int:
    """Whole days from ``now`` until ``not_after``, rounded down.

    Negative for certificates that have already expired.
    """
    return (not_after - now).days


def format_result(result: CheckResult, now: datetime) -> FormattedRow:
    """Convert a single result into a display row."""
    return FormattedRow(
        hostname=result.hostname,
        not_before=result.not_before,
        not_after=result.not_after,
        days_remaining=None if result.is_error else days_remaining(result.not_after, now),
        status=result.status,
    )


def is_alerting(row: FormattedRow, alert_limit_days: int) -> bool:
    """Errors always alert; valid certificates alert within the limit."""
    if row.is_error:
        return True
    return row.days_remaining is not None and row.days_remaining <= alert_limit_days


def sort_key(row: FormattedRow) -> tuple[int, int]:
    """Errors rank first as most urgent, then by days remaining ascending."""
    if row.is_error or row.days_remaining is None:
        return (0, 0)
    return (1, row.days_remaining)


def format_results(
    results: Iterable[CheckResult],
    now: datetime,
    options: ReportOptions | None = None,
    logger: logging.Logger | None = None,
) -> list[FormattedRow]:
    """Build the sorted, optionally filtered list of display rows.

    Ties keep their input order.

    Args:
        results: Check results in aggregator order.
        now: Check time used for day counts.
        options: Filtering options.
        logger: Logger for diagnostics.

    Returns:
        Display rows, most urgent first.
    """
    options = options or ReportOptions()
    logger = logger or get_logger("report")

    rows: list[FormattedRow] = []
    for result in results:
        row = format_result(result, now)
        if options.only_alerting and not is_alerting(row, options.alert_limit_days):
            logger.debug(
                "Certificate on %s expiring later than alert limit (%d day(s))",
                row.hostname,
                options.alert_limit_days,
            )
            continue
        rows.append(row)

    return sorted(rows, key=sort_key)


def render_names(rows: Iterable[FormattedRow]) -> str:
    """Render hostnames only, one per line."""
    return "\n".join(row.hostname for row in rows)
