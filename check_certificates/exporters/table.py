"""Console table exporter."""

import io
from typing import Iterable

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..models import FormattedRow, Status

# Wide enough that long hostnames never wrap in plain output.
PLAIN_WIDTH = 1000


def get_status_color(status: Status) -> str:
    """Get a Rich color name for a result status."""
    return {
        Status.OK: "green",
        Status.ERROR: "red",
    }.get(status, "white")


def build_table(rows: Iterable[FormattedRow]) -> Table:
    """Build a borderless, headerless table of display rows.

    Columns: hostname, not before, not after, days remaining, status.
    """
    table = Table(
        show_header=False,
        box=None,
        padding=(0, 2),
        pad_edge=False,
    )
    for justify in ("left", "left", "left", "right", "left"):
        table.add_column(justify=justify, no_wrap=True)

    for row in rows:
        hostname, not_before, not_after, days, status = row.to_columns()
        table.add_row(
            Text(hostname),
            Text(not_before),
            Text(not_after),
            Text(days),
            Text(status, style=get_status_color(row.status)),
        )
    return table


def render_table(rows: Iterable[FormattedRow]) -> str:
    """Render rows as plain whitespace-aligned text without styling."""
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=PLAIN_WIDTH,
        color_system=None,
        highlight=False,
        emoji=False,
    )
    console.print(build_table(rows))
    return "\n".join(line.rstrip() for line in buffer.getvalue().splitlines())
