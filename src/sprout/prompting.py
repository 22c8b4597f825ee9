"""Prompt composition and persistence."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from . import paths
from .models import PromptSection
from .text import interpolate
from .variables import sanitize_branch_for_path


def compose_prompt(prompt: PromptSection, variables: Mapping[str, str]) -> str:
    """Join the interpolated prefix, body, and suffix with blank lines.

    Each segment is trimmed; empty optional segments are skipped.

    Example:
        >>> compose_prompt(
        ...     PromptSection(prefix="Work in {worktree}"),
        ...     {"worktree": "/w", "title": "Fix it", "description": "Details"},
        ... )
        'Work in /w\\n\\n# Fix it\\n\\nDetails'
    """
    parts: list[str] = []
    if prompt.prefix:
        parts.append(interpolate(prompt.prefix, variables).strip())
    parts.append(interpolate(prompt.template, variables).strip())
    if prompt.suffix:
        parts.append(interpolate(prompt.suffix, variables).strip())
    return "\n\n".join(part for part in parts if part)


def prompt_file_path(branch: str, directory: Path | None = None) -> Path:
    """Return where the prompt for ``branch`` is stored.

    Example:
        >>> prompt_file_path("feat/x", Path("/p")).as_posix()
        '/p/feat_x.md'
    """
    base = directory or paths.prompts_dir()
    return base / f"{sanitize_branch_for_path(branch) or 'prompt'}.md"


def write_prompt_file(text: str, branch: str, directory: Path | None = None) -> Path:
    """Write ``text`` to the branch's prompt file and return its path.

    Filesystem errors propagate to the caller.
    """
    target = prompt_file_path(branch, directory)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text + "\n", encoding="utf-8")
    return target
