"""Domain list backends, selected by name."""

import logging
from typing import Callable

from ..config import ConfigurationError, Settings
from .base import BackendError, DomainBackend, write_hostnames
from .pastebin import PastebinBackend

BackendFactory = Callable[[Settings, logging.Logger | None], DomainBackend]

BACKENDS: dict[str, BackendFactory] = {
    PastebinBackend.name: PastebinBackend.from_settings,
}


def get_backend(name: str, settings: Settings, logger: logging.Logger | None = None) -> DomainBackend:
    """Look up a backend by name and build it from settings.

    Raises:
        ConfigurationError: For an unknown name or missing credentials.
    """
    try:
        factory = BACKENDS[name]
    except KeyError:
        known = ", ".join(sorted(BACKENDS))
        raise ConfigurationError(f"Unknown backend '{name}' (available: {known})") from None
    return factory(settings, logger)


__all__ = [
    "BACKENDS",
    "BackendError",
    "DomainBackend",
    "PastebinBackend",
    "get_backend",
    "write_hostnames",
]
