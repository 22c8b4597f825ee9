"""Build the flat variable map used by every template."""

from __future__ import annotations

import os
import re
from datetime import datetime
from pathlib import Path

from . import git
from .context import Context
from .models import SproutConfig
from .text import interpolate, slugify

_PATH_HOSTILE_RE = re.compile(r"[/\\:]")


def sanitize_branch_for_path(branch: str) -> str:
    """Make a branch name safe to use as a single path segment.

    Example:
        >>> sanitize_branch_for_path("feature/login:v2")
        'feature_login_v2'
    """
    return _PATH_HOSTILE_RE.sub("_", branch)


def resolve_branch(
    context: Context, config: SproutConfig, override: str | None = None
) -> str:
    """Pick the branch name: override, then PR branch, then the template.

    Example:
        >>> from sprout.models import SproutConfig
        >>> cfg = SproutConfig(launch={"script": "true"})
        >>> resolve_branch(Context(id="IOS-1"), cfg)
        'IOS-1'
    """
    if override and override.strip():
        return override.strip()
    if context.source_branch:
        return context.source_branch
    return interpolate(
        config.worktree.branch_template,
        {
            "ticket_id": context.id,
            "slug": context.slug or slugify(context.title or context.id),
            "user": config.variables.get("user", ""),
        },
    )


def resolve_worktree_path(
    template: str, *, branch: str, repo_root: Path, repo_name: str
) -> Path:
    """Render the worktree path template to an absolute, canonical path.

    The branch is sanitized first so ``feature/x`` cannot create nested
    directories. Relative results are taken from ``repo_root``.

    Example:
        >>> resolve_worktree_path(
        ...     "../worktrees/{branch}",
        ...     branch="feat/x",
        ...     repo_root=Path("/src/app"),
        ...     repo_name="app",
        ... ).as_posix()
        '/src/worktrees/feat_x'
    """
    rendered = interpolate(
        template,
        {"branch": sanitize_branch_for_path(branch), "repo_name": repo_name},
    )
    candidate = Path(rendered).expanduser()
    if not candidate.is_absolute():
        candidate = repo_root / candidate
    return Path(os.path.normpath(candidate)).resolve()


def build_variables(
    context: Context,
    config: SproutConfig,
    *,
    cwd: Path,
    branch_override: str | None = None,
    now: datetime | None = None,
) -> dict[str, str]:
    """Combine context, repository metadata, and config into one map.

    Config ``[variables]`` are merged last and win any collision.

    Raises:
        NotInRepositoryError: If ``cwd`` is not inside a git repository.
    """
    repo_root = git.repo_root(cwd)
    repo_name = repo_root.name
    moment = now or datetime.now()
    branch = resolve_branch(context, config, branch_override)
    worktree = resolve_worktree_path(
        config.worktree.path_template,
        branch=branch,
        repo_root=repo_root,
        repo_name=repo_name,
    )

    variables: dict[str, str] = {
        "ticket_id": context.id,
        "branch": branch,
        "worktree": str(worktree),
        "repo_root": str(repo_root),
        "repo_name": repo_name,
        "timestamp": str(int(moment.timestamp())),
        "date": moment.date().isoformat(),
    }
    remote = git.origin_url(repo_root)
    if remote:
        variables["remote_url"] = remote

    optional = {
        "title": context.title,
        "description": context.description,
        "slug": context.slug,
        "url": context.url,
        "author": context.author,
        "labels": ", ".join(context.labels) if context.labels else None,
        "source_branch": context.source_branch,
    }
    for key, value in optional.items():
        if value:
            variables[key] = value

    variables.update(config.variables)
    return variables
