"""Repository lifecycle hooks under ``<repo>/.sprout/hooks/``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from . import exec as exec_util
from . import git, log, paths
from .errors import GitError, HookError

PRE_PRUNE = "pre-prune"
POST_PRUNE = "post-prune"
POST_LAUNCH = "post-launch"
HOOK_NAMES = (PRE_PRUNE, POST_PRUNE, POST_LAUNCH)


def hook_path(repo_root: Path, name: str) -> Path:
    """Return the path of hook ``name`` in ``repo_root``.

    Example:
        >>> hook_path(Path("/repo"), "post-prune").as_posix()
        '/repo/.sprout/hooks/post-prune'
    """
    if name not in HOOK_NAMES:
        raise ValueError(f"unknown hook: {name}")
    return paths.repo_hooks_dir(repo_root) / name


def hook_environment(
    *,
    worktree_path: Path | str | None = None,
    branch: str | None = None,
    repo_root: Path | str | None = None,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return ``base`` (default ``os.environ``) plus the ``SPROUT_*`` values."""
    env = dict(os.environ if base is None else base)
    if worktree_path is not None:
        env["SPROUT_WORKTREE_PATH"] = str(worktree_path)
    if branch is not None:
        env["SPROUT_BRANCH"] = branch
    if repo_root is not None:
        env["SPROUT_REPO_ROOT"] = str(repo_root)
    return env


def run_hook(name: str, repo_root: Path, env: Mapping[str, str]) -> bool:
    """Run hook ``name`` from the main repository root.

    Returns ``True`` when a hook ran, ``False`` when none was installed or it
    was skipped for not being executable.

    Raises:
        HookError: If the hook exits non-zero. Callers report it and go on.
    """
    path = hook_path(repo_root, name)
    if not path.exists():
        log.debug(f"no {name} hook at {path}")
        return False
    if not os.access(path, os.X_OK):
        log.warning(f"hook exists but is not executable: {path} (run: chmod +x {path})")
        return False
    log.info(f"Running {name} hook...")
    returncode = exec_util.run_streaming([str(path)], cwd=repo_root, env=env)
    if returncode is None:
        raise HookError(name, 127)
    if returncode != 0:
        raise HookError(name, returncode)
    return True


def find_main_repo_root(path: Path) -> Path | None:
    """Locate the main repository root from ``path`` or any of its worktrees.

    A linked worktree's ``.git`` file reads ``gitdir: <main>/.git/worktrees/<name>``;
    otherwise the first entry of the worktree list is the main checkout.
    """
    git_file = path / ".git"
    if git_file.is_file():
        content = git_file.read_text(encoding="utf-8").strip()
        if content.startswith("gitdir:"):
            gitdir = Path(content[len("gitdir:") :].strip())
            if not gitdir.is_absolute():
                gitdir = (path / gitdir).resolve()
            if gitdir.parent.name == "worktrees" and gitdir.parent.parent.name == ".git":
                return gitdir.parent.parent.parent
    if git_file.is_dir():
        return path
    try:
        return git.main_worktree_root(path)
    except GitError:
        return None
