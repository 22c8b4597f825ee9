"""Configuration loading for Sprout."""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import ValidationError

from .errors import ConfigurationError
from .models import SproutConfig


def load_toml(path: Path) -> dict:
    """Read and parse a TOML file.

    Raises:
        ConfigurationError: If the file is missing, unreadable, or invalid.
    """
    if not path.exists():
        raise ConfigurationError(
            f"config file not found: {path}",
            recovery_hint="create it with a [launch] table and a script",
        )
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except OSError as exc:
        raise ConfigurationError(f"cannot read config file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"invalid TOML in {path}: {exc}") from exc


def parse_config(payload: dict, source: Path | str | None = None) -> SproutConfig:
    """Validate a config payload.

    Example:
        >>> parse_config({"launch": {"script": "true"}}).launch.script
        'true'
    """
    try:
        return SproutConfig.model_validate(payload)
    except ValidationError as exc:
        location = f" at {source}" if source else ""
        raise ConfigurationError(f"invalid config{location}:\n{exc}") from exc


def load_config(path: Path) -> SproutConfig:
    """Load and validate the Sprout config file at ``path``."""
    return parse_config(load_toml(path), source=path)
