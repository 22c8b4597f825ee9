"""Normalized context record produced by every context source."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from .text import slugify

RAW_PROMPT_ID_PREFIX = "prompt-"


@dataclass(frozen=True)
class Context:
    """Descriptive record for one work item, independent of its origin.

    Attributes:
        id: Stable identifier; drives the default branch name.
        title: Short summary.
        description: Long-form body text.
        slug: Filesystem-safe rendering of the title.
        url: Link back to the item.
        author: Creator's display name or login.
        labels: Labels in the order the source returned them.
        source_branch: Existing branch for pull requests. When set, the
            worktree must attach to it instead of creating a new branch.
    """

    id: str
    title: str | None = None
    description: str | None = None
    slug: str | None = None
    url: str | None = None
    author: str | None = None
    labels: tuple[str, ...] = field(default_factory=tuple)
    source_branch: str | None = None


def raw_text_context(text: str) -> Context:
    """Build a context for free-form prompt text without any I/O.

    The id is a digest of the trimmed text so the same prompt always maps
    to the same branch and worktree.

    Example:
        >>> ctx = raw_text_context("  Add dark mode ")
        >>> ctx.id.startswith("prompt-"), ctx.title, ctx.slug
        (True, 'Add dark mode', 'add-dark-mode')
    """
    trimmed = text.strip()
    digest = hashlib.sha256(trimmed.encode("utf-8")).hexdigest()[:8]
    return Context(
        id=f"{RAW_PROMPT_ID_PREFIX}{digest}",
        title=trimmed,
        description=trimmed,
        slug=slugify(trimmed) or None,
    )
