"""Configuration loader for check-certificates."""

import os
import re
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, ValidationError

CONFIG_ENV_VAR = "CHECK_CERTIFICATES_CONFIG"

# Environment variables override values from the config file.
ENV_OVERRIDES = {
    "PASTEBIN_USERKEY": "pastebin_userkey",
    "PASTEBIN_DEVKEY": "pastebin_devkey",
    "PASTEBIN_PASTEID": "pastebin_pasteid",
    "PROMETHEUS_EXPORT_FILENAME": "prometheus_export_filename",
}


class ConfigurationError(Exception):
    """Invalid invocation or missing configuration; fatal before probing."""


class Settings(BaseModel):
    """Runtime settings."""
    pastebin_userkey: str = ""
    pastebin_devkey: str = ""
    pastebin_pasteid: str = ""
    prometheus_export_filename: str = ""
    timeout: float = Field(default=10.0, gt=0, description="Connect and handshake timeout in seconds")
    workers: int = Field(default=1, ge=1, le=64, description="Hosts probed concurrently")


def substitute_env_vars(value: Any, environ: Mapping[str, str] | None = None) -> Any:
    """Recursively substitute ${VAR} patterns with environment variables."""
    if environ is None:
        environ = os.environ
    if isinstance(value, str):
        pattern = r'\$\{(\w+)\}'
        for match in re.findall(pattern, value):
            value = value.replace(f"${{{match}}}", environ.get(match, ""))
        return value
    elif isinstance(value, dict):
        return {k: substitute_env_vars(v, environ) for k, v in value.items()}
    elif isinstance(value, list):
        return [substitute_env_vars(item, environ) for item in value]
    return value


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from an optional YAML file and the environment.

    Args:
        path: Path to a YAML configuration file. If None, only defaults
            and environment variables are used.
        environ: Environment mapping, defaults to ``os.environ``.

    Returns:
        Loaded settings.

    Raises:
        ConfigurationError: If the file is missing or invalid.
    """
    if environ is None:
        environ = os.environ

    raw_config: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")
        try:
            with open(path, "r") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Can't parse configuration file '{path}': {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Configuration file '{path}' must contain a mapping")
        raw_config = substitute_env_vars(loaded, environ)

    for env_name, field_name in ENV_OVERRIDES.items():
        if environ.get(env_name):
            raw_config[field_name] = environ[env_name]

    try:
        return Settings.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
