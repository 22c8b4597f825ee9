"""Path helpers for locating Sprout's per-user files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from platformdirs import user_config_dir

SPROUT_APP_NAME = "sprout"
SPROUT_HOME_DIRNAME = ".sprout"
CONFIG_FILENAME = "config.toml"
PROMPTS_DIRNAME = "prompts"
HOOKS_DIRNAME = "hooks"
CONFIG_ENV_VAR = "SPROUT_CONFIG"


def sprout_home() -> Path:
    """Return the per-user Sprout directory (``~/.sprout``).

    Example:
        >>> sprout_home().name == SPROUT_HOME_DIRNAME
        True
    """
    return Path.home() / SPROUT_HOME_DIRNAME


def default_config_path() -> Path:
    """Return ``~/.sprout/config.toml``.

    Example:
        >>> default_config_path().name == CONFIG_FILENAME
        True
    """
    return sprout_home() / CONFIG_FILENAME


def platform_config_path() -> Path:
    """Return the platform-native config path used as a fallback."""
    return Path(user_config_dir(SPROUT_APP_NAME)) / CONFIG_FILENAME


def resolve_config_path(
    explicit: str | Path | None = None, *, env: Mapping[str, str] | None = None
) -> Path:
    """Pick the config file to load.

    Args:
        explicit: Path given on the command line; used as-is when set.
        env: Environment mapping (defaults to ``os.environ``).

    Returns:
        ``explicit`` if given, else ``$SPROUT_CONFIG``, else
        ``~/.sprout/config.toml`` if it exists, else the platform config
        path if that exists, else ``~/.sprout/config.toml`` so the
        missing-file error names the documented location.
    """
    if explicit:
        return Path(explicit).expanduser()
    environ = os.environ if env is None else env
    override = (environ.get(CONFIG_ENV_VAR) or "").strip()
    if override:
        return Path(override).expanduser()
    primary = default_config_path()
    if primary.exists():
        return primary
    fallback = platform_config_path()
    if fallback.exists():
        return fallback
    return primary


def prompts_dir() -> Path:
    """Return the directory where composed prompts are written.

    Example:
        >>> prompts_dir().name == PROMPTS_DIRNAME
        True
    """
    return sprout_home() / PROMPTS_DIRNAME


def repo_hooks_dir(repo_root: Path) -> Path:
    """Return the hooks directory for a repository.

    Example:
        >>> repo_hooks_dir(Path("/tmp/repo")).as_posix()
        '/tmp/repo/.sprout/hooks'
    """
    return repo_root / SPROUT_HOME_DIRNAME / HOOKS_DIRNAME
