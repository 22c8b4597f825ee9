"""Console I/O helpers for user-facing messages, prompts, and selection."""

from __future__ import annotations

import sys
from typing import Callable, Iterable, Sequence, TextIO, TypeVar

import questionary

T = TypeVar("T")


def _use_questionary() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def say(message: str = "") -> None:
    """Print a normal message to stdout.

    Example:
        >>> say("Hello")
        Hello
    """
    print(message)


def die(message: str, code: int = 1) -> None:
    """Print an error message and exit with ``code``.

    Args:
        message: Error message to display.
        code: Process exit code (see ``sprout.errors`` for the contract).
    """
    print(f"error: {message}", file=sys.stderr)
    sys.exit(code)


def confirm(text: str, default: bool = False) -> bool:
    """Prompt for a yes/no confirmation.

    Args:
        text: Prompt label shown to the user.
        default: Default answer when the user presses enter.

    Returns:
        ``True`` when the user confirms. End-of-input counts as a refusal.
    """
    if _use_questionary():
        response = questionary.confirm(text, default=default).ask()
        return bool(response)
    suffix = "[Y/n]" if default else "[y/N]"
    try:
        response = input(f"{text} {suffix}: ").strip().lower()
    except EOFError:
        return False
    if response == "":
        return default
    return response in {"y", "yes"}


def select_many(
    text: str, choices: Sequence[T], *, label: Callable[[T], str] = str
) -> list[T] | None:
    """Let the user pick any number of ``choices``.

    Returns the selected items in their original order, or ``None`` when the
    user cancels (Ctrl-C or end-of-input). An empty list means the user
    confirmed without picking anything.
    """
    if not choices:
        return []
    if _use_questionary():
        options = [
            questionary.Choice(title=label(item), value=index)
            for index, item in enumerate(choices)
        ]
        picked = questionary.checkbox(text, choices=options).ask()
        if picked is None:
            return None
        return [choices[index] for index in sorted(picked)]

    for index, item in enumerate(choices, start=1):
        say(f"  {index}) {label(item)}")
    try:
        raw = input(f"{text} (numbers separated by spaces, 'a' for all): ")
    except (EOFError, KeyboardInterrupt):
        return None
    return _parse_numbered_selection(raw, choices)


def _parse_numbered_selection(raw: str, choices: Sequence[T]) -> list[T]:
    tokens = raw.replace(",", " ").split()
    if any(token.lower() in {"a", "all"} for token in tokens):
        return list(choices)
    picked: set[int] = set()
    for token in tokens:
        if not token.isdigit():
            continue
        index = int(token) - 1
        if 0 <= index < len(choices):
            picked.add(index)
    return [choices[index] for index in sorted(picked)]


def read_lines(stream: TextIO | None = None) -> list[str]:
    """Read non-empty, stripped lines from ``stream`` (stdin by default)."""
    source: Iterable[str] = stream if stream is not None else sys.stdin
    return [line.strip() for line in source if line.strip()]
