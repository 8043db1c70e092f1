"""Domain list backend interface."""

from pathlib import Path
from typing import Protocol


class BackendError(Exception):
    """A backend could not deliver the domain list."""


class DomainBackend(Protocol):
    """Source of hostnames other than a local file."""

    def fetch(self, destination: Path) -> list[str]:
        """Write the newline-separated hostname list to destination and return it."""
        ...


def write_hostnames(destination: Path, hostnames: list[str]) -> None:
    """Write hostnames in the plain input file format."""
    content = "\n".join(hostnames)
    destination.write_text(content + "\n" if content else "", encoding="utf-8")
