"""Pastebin domain list backend."""

import json
import logging
from pathlib import Path

import httpx

from ..config import ConfigurationError, Settings
from ..log import get_logger
from .base import BackendError, write_hostnames

PASTEBIN_API_ENDPOINT = "https://pastebin.com/api/api_raw.php"
# Key of the hostname array inside the paste's JSON document.
PASTEBIN_DATASET_KEY = "check_ssl"


class PastebinBackend:
    """Read the domain list from a private paste.

    The paste holds a JSON document such as
    ``{"check_ssl": ["example.com", "example.org"]}``.
    """

    name = "pastebin"

    def __init__(
        self,
        user_key: str,
        dev_key: str,
        paste_id: str,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
        logger: logging.Logger | None = None,
    ):
        for env_name, value in (
            ("PASTEBIN_USERKEY", user_key),
            ("PASTEBIN_DEVKEY", dev_key),
            ("PASTEBIN_PASTEID", paste_id),
        ):
            if not value:
                raise ConfigurationError(f"{env_name} not set!")

        self.user_key = user_key
        self.dev_key = dev_key
        self.paste_id = paste_id
        self.client = client
        self.timeout = timeout
        self.logger = logger or get_logger("backends.pastebin")

    @classmethod
    def from_settings(cls, settings: Settings, logger: logging.Logger | None = None) -> "PastebinBackend":
        return cls(
            user_key=settings.pastebin_userkey,
            dev_key=settings.pastebin_devkey,
            paste_id=settings.pastebin_pasteid,
            logger=logger,
        )

    def _payload(self) -> dict[str, str]:
        return {
            "api_option": "show_paste",
            "api_user_key": self.user_key,
            "api_dev_key": self.dev_key,
            "api_paste_key": self.paste_id,
        }

    def _request(self) -> httpx.Response:
        if self.client is not None:
            return self.client.post(PASTEBIN_API_ENDPOINT, data=self._payload(), timeout=self.timeout)
        with httpx.Client() as client:
            return client.post(PASTEBIN_API_ENDPOINT, data=self._payload(), timeout=self.timeout)

    def fetch(self, destination: Path) -> list[str]:
        """Download the paste and write its hostnames to destination.

        Raises:
            BackendError: On HTTP failure or an unexpected paste format.
        """
        self.logger.info("Fetching domain list from paste '%s'", self.paste_id)
        try:
            response = self._request()
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise BackendError(f"Pastebin request failed: {e}") from e

        try:
            document = json.loads(response.text)
        except json.JSONDecodeError as e:
            raise BackendError(f"Pastebin paste is not valid JSON: {e}") from e

        if not isinstance(document, dict) or PASTEBIN_DATASET_KEY not in document:
            raise BackendError(f"Pastebin paste has no '{PASTEBIN_DATASET_KEY}' list")
        dataset = document[PASTEBIN_DATASET_KEY]
        if not isinstance(dataset, list) or not all(isinstance(item, str) for item in dataset):
            raise BackendError(f"Pastebin '{PASTEBIN_DATASET_KEY}' must be a list of strings")

        write_hostnames(destination, dataset)
        self.logger.info("Fetched %d hostnames from pastebin", len(dataset))
        return dataset
