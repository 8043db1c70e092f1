"""Resolve the list of hostnames to check from the selected input source."""

import logging
import tempfile
from pathlib import Path

from .backends import get_backend
from .config import ConfigurationError, Settings
from .log import get_logger


def read_hostnames(path: str | Path) -> list[str]:
    """Read raw lines from a newline-separated hostname file.

    Raises:
        ConfigurationError: If the file can't be opened.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().splitlines()
    except OSError as e:
        raise ConfigurationError(f"Can't open input file: '{path}'") from e


def check_single_source(
    input_filename: str | Path | None,
    domain: str | None,
    backend_name: str | None,
) -> None:
    """Require exactly one of input file, domain and backend.

    Raises:
        ConfigurationError: If zero or several sources are given.
    """
    given = [value for value in (input_filename, domain, backend_name) if value]
    if not given:
        raise ConfigurationError("Specify one of these: input file, domain, domain backend")
    if len(given) > 1:
        raise ConfigurationError("Only one parameter is allowed: input file, domain or domain backend")


def resolve_hostnames(
    input_filename: str | Path | None = None,
    domain: str | None = None,
    backend_name: str | None = None,
    settings: Settings | None = None,
    logger: logging.Logger | None = None,
) -> list[str]:
    """Collect hostnames from exactly one source.

    Args:
        input_filename: File with one hostname per line.
        domain: A single hostname.
        backend_name: Name of a registered domain list backend.
        settings: Settings holding backend credentials.
        logger: Logger for diagnostics.

    Returns:
        Raw hostname lines; blank lines are left for the scanner to skip.

    Raises:
        ConfigurationError: If zero or several sources are given, or the
            source can't be read.
        BackendError: If a backend fetch fails.
    """
    logger = logger or get_logger("sources")
    check_single_source(input_filename, domain, backend_name)

    if input_filename:
        logger.info("Reading hostnames from '%s'", input_filename)
        return read_hostnames(input_filename)

    if domain:
        return [domain]

    backend = get_backend(backend_name, settings or Settings(), logger)
    with tempfile.TemporaryDirectory(prefix="check_certificates.") as tmp_dir:
        destination = Path(tmp_dir) / "domains.txt"
        backend.fetch(destination)
        return read_hostnames(destination)
