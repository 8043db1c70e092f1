"""Report exporters."""

from .metrics import METRIC_NAME, ensure_writable, render_metrics, write_metrics
from .table import build_table, render_table

__all__ = [
    "METRIC_NAME",
    "build_table",
    "ensure_writable",
    "render_metrics",
    "render_table",
    "write_metrics",
]
