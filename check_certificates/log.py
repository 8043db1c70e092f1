"""Logging setup for check-certificates."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "check_certificates"


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the package namespace."""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Configure the package logger.

    Diagnostics go to stderr so that the report on stdout stays clean.

    Args:
        verbose: Enable debug output.
        console: Console to log to. Defaults to a stderr console.

    Returns:
        The configured package logger.
    """
    logger = get_logger()
    level = logging.DEBUG if verbose else logging.WARNING
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=verbose,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    return logger
