"""Slug and template helpers."""

from __future__ import annotations

import re
from typing import Mapping

_SEPARATOR_RE = re.compile(r"[\s_]+")
_DROP_RE = re.compile(r"[^a-z0-9-]+")
_HYPHENS_RE = re.compile(r"-{2,}")
_PLACEHOLDER_RE = re.compile(r"\{([^{}\s]+)\}")

SLUG_MAX_LEN = 50


def slugify(text: str, *, max_len: int = SLUG_MAX_LEN) -> str:
    """Return a lowercase, hyphenated slug for ``text``.

    Whitespace and underscores become hyphens, anything else outside
    ``[a-z0-9-]`` is dropped.

    Example:
        >>> slugify("Fix the Login_Button crash!")
        'fix-the-login-button-crash'
    """
    slug = _SEPARATOR_RE.sub("-", text.strip().lower())
    slug = _DROP_RE.sub("", slug)
    slug = _HYPHENS_RE.sub("-", slug).strip("-")
    if max_len and len(slug) > max_len:
        slug = slug[:max_len].rstrip("-")
    return slug


def interpolate(template: str, variables: Mapping[str, str]) -> str:
    """Replace ``{key}`` placeholders with values from ``variables``.

    Unknown placeholders are left as written. Substituted values are not
    scanned again, so a value containing ``{branch}`` stays literal.

    Example:
        >>> interpolate("cd {worktree} && {missing}", {"worktree": "/w"})
        'cd /w && {missing}'
    """

    def replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in variables:
            return variables[key]
        return match.group(0)

    return _PLACEHOLDER_RE.sub(replace, template)


def truncate(value: str, limit: int = 80) -> str:
    """Shorten ``value`` for display, marking the cut with ``...``.

    Example:
        >>> truncate("abcdef", 5)
        'ab...'
    """
    if len(value) <= limit:
        return value
    return value[: max(limit - 3, 0)] + "..."
