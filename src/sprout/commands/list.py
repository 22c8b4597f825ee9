"""Implementation for the ``sprout list`` command."""

from __future__ import annotations

from pathlib import Path

from .. import git
from ..errors import GitError
from ..io import die, say


def list_worktrees(args: object) -> None:
    """List worktrees of the current repository.

    Args:
        args: CLI argument object with ``branches_only`` and
            ``include_main`` flags.

    Example:
        $ sprout list --branches-only | grep IOS-
    """
    branches_only = bool(getattr(args, "branches_only", False))
    include_main = bool(getattr(args, "include_main", False))
    try:
        repo_root = git.repo_root(Path.cwd())
        records = git.list_worktrees(repo_root)
    except GitError as exc:
        die(str(exc), exc.exit_code)

    shown = [
        record
        for record in records
        if record.branch and (include_main or not record.is_main)
    ]
    if not shown:
        if not branches_only:
            say("No worktrees found.")
        return
    for record in shown:
        if branches_only:
            say(record.branch or "")
        else:
            say(f"{record.branch}\t{record.path}")
