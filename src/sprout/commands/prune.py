"""Implementation for the ``sprout prune`` command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from .. import git, hooks, log
from ..errors import GitError, HookError
from ..git import WorktreeRecord
from ..io import confirm, die, read_lines, say, select_many


def _label(record: WorktreeRecord) -> str:
    return f"{record.branch}  ({record.path})"


def _candidates(records: list[WorktreeRecord]) -> list[WorktreeRecord]:
    return [
        record
        for record in records
        if not record.is_main and not record.is_bare and record.branch
    ]


def _say_available(records: list[WorktreeRecord]) -> None:
    say("Available worktrees:")
    for record in records:
        say(f"  {_label(record)}")


def select_by_pattern(records: list[WorktreeRecord], pattern: str) -> list[WorktreeRecord]:
    """Return worktrees whose branch contains ``pattern``."""
    return [record for record in records if pattern in (record.branch or "")]


def select_by_names(
    records: list[WorktreeRecord], names: list[str]
) -> tuple[list[WorktreeRecord], list[str]]:
    """Return worktrees whose branch is in ``names``, plus unknown names."""
    wanted = set(names)
    selected = [record for record in records if record.branch in wanted]
    known = {record.branch for record in selected}
    missing = [name for name in names if name not in known]
    return selected, missing


def prune_one(main_root: Path, record: WorktreeRecord) -> str:
    """Remove one worktree and its branch, running hooks around it.

    Returns ``"removed"``, ``"skipped"`` (the pre-prune hook failed) or
    ``"failed"`` (git could not remove it).
    """
    branch = record.branch or ""
    env = hooks.hook_environment(
        worktree_path=record.path, branch=branch, repo_root=main_root
    )
    try:
        hooks.run_hook(hooks.PRE_PRUNE, main_root, env)
    except HookError as exc:
        log.error(f"{exc}; skipping {branch}")
        return "skipped"

    try:
        if record.path.exists():
            git.remove_worktree(main_root, record.path, force=True)
        else:
            log.debug(f"{record.path} is already gone; pruning its metadata")
            git.prune_worktrees(main_root)
        git.delete_branch(main_root, branch)
    except GitError as exc:
        log.error(f"failed to prune {branch}: {exc}")
        return "failed"
    log.success(f"Removed {branch}")

    try:
        hooks.run_hook(hooks.POST_PRUNE, main_root, env)
    except HookError as exc:
        log.warning(str(exc))
    return "removed"


def prune(args: object, *, stdin: TextIO | None = None) -> None:
    """Remove worktrees and their branches.

    Args:
        args: CLI argument object with ``pattern``, ``stdin``, ``force`` and
            ``dry_run`` attributes.
        stdin: Stream to read branch names from (defaults to ``sys.stdin``).

    Example:
        $ sprout prune IOS-
        $ sprout list --branches-only | grep old | sprout prune --stdin --force
    """
    pattern = (getattr(args, "pattern", None) or "").strip()
    from_stdin = bool(getattr(args, "stdin", False))
    force = bool(getattr(args, "force", False))
    dry_run = bool(getattr(args, "dry_run", False))

    try:
        repo_root = git.repo_root(Path.cwd())
        main_root = hooks.find_main_repo_root(repo_root) or repo_root
        records = _candidates(git.list_worktrees(main_root))
    except GitError as exc:
        die(str(exc), exc.exit_code)

    if not records:
        say("No worktrees to prune.")
        return

    interactive = False
    if from_stdin:
        names = read_lines(stdin)
        selected, missing = select_by_names(records, names)
        for name in missing:
            log.warning(f"no worktree for branch {name!r}")
        if not selected:
            say("No matching worktrees.")
            return
    elif pattern:
        selected = select_by_pattern(records, pattern)
        if not selected:
            say(f"No worktrees match {pattern!r}.")
            _say_available(records)
            return
    elif dry_run:
        selected = records
    else:
        picked = select_many("Select worktrees to prune", records, label=_label)
        if not picked:
            say("Nothing selected.")
            return
        selected = picked
        interactive = True

    if dry_run:
        for record in selected:
            say(f"Would remove {_label(record)} and delete branch {record.branch}")
        return

    if not (force or interactive):
        say(f"About to remove {len(selected)} worktree(s) and their branches:")
        for record in selected:
            say(f"  {_label(record)}")
        if not confirm("Continue?", default=False):
            say("Cancelled.")
            return

    failures = 0
    for record in selected:
        if prune_one(main_root, record) == "failed":
            failures += 1

    try:
        git.prune_worktrees(main_root)
    except GitError as exc:
        log.warning(f"final worktree prune failed: {exc}")

    if failures:
        log.error(f"{failures} of {len(selected)} worktree(s) could not be pruned")
        sys.exit(GitError.exit_code)
