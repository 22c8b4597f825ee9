"""Leveled terminal logging for Sprout commands.

Messages at ``warning`` and above go to stderr; everything else goes to
stdout so that ``sprout list --branches-only`` style output stays pipeable
when verbose logging is enabled.
"""

from __future__ import annotations

import os
import sys
from enum import IntEnum

from rich.console import Console
from rich.text import Text


class LogLevel(IntEnum):
    TRACE = 10
    DEBUG = 20
    INFO = 30
    SUCCESS = 35
    WARNING = 40
    ERROR = 50


LEVEL_NAMES: tuple[str, ...] = ("trace", "debug", "info", "success", "warning", "error")
_ALIASES = {"warn": LogLevel.WARNING, "verbose": LogLevel.DEBUG}
_STYLES = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "cyan",
    LogLevel.INFO: "",
    LogLevel.SUCCESS: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}

_state: dict[str, object] = {"level": None, "no_color": None}


def parse_level(value: str | None) -> LogLevel:
    """Map a user-supplied level name to a ``LogLevel`` (default ``INFO``)."""
    normalized = (value or "").strip().lower()
    if not normalized:
        return LogLevel.INFO
    if normalized in _ALIASES:
        return _ALIASES[normalized]
    try:
        return LogLevel[normalized.upper()]
    except KeyError:
        return LogLevel.INFO


def configured_level() -> LogLevel:
    level = _state["level"]
    if level is None:
        level = parse_level(os.environ.get("SPROUT_LOG_LEVEL"))
        _state["level"] = level
    return level  # type: ignore[return-value]


def set_level(value: str | None) -> None:
    """Set the active log level."""
    _state["level"] = parse_level(value)


def set_no_color(value: bool) -> None:
    """Force colorless output regardless of ``NO_COLOR``."""
    _state["no_color"] = value


def is_enabled(level: LogLevel) -> bool:
    return level >= configured_level()


def _color_disabled() -> bool:
    override = _state["no_color"]
    if override is not None:
        return bool(override)
    return bool(os.environ.get("NO_COLOR") or os.environ.get("SPROUT_NO_COLOR"))


def emit(level: LogLevel, message: str, *, style: str | None = None) -> None:
    if not is_enabled(level):
        return
    console = Console(
        file=sys.stderr if level >= LogLevel.WARNING else sys.stdout,
        soft_wrap=True,
        highlight=False,
        no_color=_color_disabled(),
    )
    console.print(Text(message, style=style or _STYLES[level]))


def trace(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.TRACE, message, style=style)


def debug(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.DEBUG, message, style=style)


def info(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.INFO, message, style=style)


def success(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.SUCCESS, message, style=style)


def warning(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.WARNING, message, style=style)


def error(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.ERROR, message, style=style)
