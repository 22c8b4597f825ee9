"""Git helper functions used by the Sprout CLI.

Worktree state is never cached: every query re-reads ``git worktree list``
because other processes may change it between calls.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from . import exec as exec_util
from . import log
from .errors import GitCommandError, GitError, NotInRepositoryError

_CONFLICT_RE = re.compile(
    r"is already (?:checked out|used by worktree) at '(?P<path>[^']+)'"
)


@dataclass(frozen=True)
class WorktreeRecord:
    """One entry of ``git worktree list --porcelain``.

    ``branch`` is the short branch name, or ``None`` for detached or bare
    entries. The first entry git reports is the main worktree.
    """

    path: Path
    branch: str | None
    head: str | None = None
    is_main: bool = False
    is_bare: bool = False
    is_detached: bool = False
    is_prunable: bool = False


def git_command(args: list[str]) -> list[str]:
    """Build a git command line.

    Example:
        >>> git_command(["-C", "/repo", "status"])
        ['git', '-C', '/repo', 'status']
    """
    return ["git", *args]


def _run_git(args: list[str]) -> exec_util.CommandResult:
    cmd = git_command(args)
    log.trace(f"$ {' '.join(cmd)}")
    result = exec_util.run_with_runner(exec_util.CommandRequest(argv=tuple(cmd)))
    if result is None:
        raise GitError("missing required command: git")
    return result


def _run_git_checked(args: list[str]) -> exec_util.CommandResult:
    result = _run_git(args)
    if result.returncode != 0:
        raise GitCommandError(result.argv, result.stderr or result.stdout)
    return result


def repo_root(start: Path) -> Path:
    """Return the top-level directory of the repository containing ``start``.

    Raises:
        NotInRepositoryError: If ``start`` is not inside a git work tree.
    """
    result = _run_git(["-C", str(start), "rev-parse", "--show-toplevel"])
    resolved = result.stdout.strip()
    if result.returncode != 0 or not resolved:
        raise NotInRepositoryError(str(start))
    return Path(resolved)


def origin_url(repo_dir: Path) -> str | None:
    """Return the ``origin`` remote URL, or ``None`` if there is none."""
    result = _run_git(["-C", str(repo_dir), "remote", "get-url", "origin"])
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def ref_exists(repo_dir: Path, ref: str) -> bool:
    """Check whether a fully-qualified ref exists.

    Example:
        >>> ref_exists(Path("."), "refs/heads/main") in {True, False}
        True
    """
    result = _run_git(["-C", str(repo_dir), "show-ref", "--verify", "--quiet", ref])
    return result.returncode == 0


def local_branch_exists(repo_dir: Path, branch: str) -> bool:
    return ref_exists(repo_dir, f"refs/heads/{branch}")


def remote_branch_exists(repo_dir: Path, branch: str) -> bool:
    """Check ``origin`` for ``branch``, locally tracked or via ``ls-remote``.

    A missing or unreachable remote counts as "not there".
    """
    if ref_exists(repo_dir, f"refs/remotes/origin/{branch}"):
        return True
    ref = f"refs/heads/{branch}"
    result = _run_git(["-C", str(repo_dir), "ls-remote", "--heads", "origin", ref])
    if result.returncode != 0:
        return False
    for line in result.stdout.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[1] == ref:
            return True
    return False


def fetch_branch(repo_dir: Path, branch: str) -> bool:
    """Fetch ``branch`` from ``origin``, falling back to a plain fetch.

    Never raises on git failure; returns whether either fetch succeeded.
    """
    result = _run_git(["-C", str(repo_dir), "fetch", "origin", branch])
    if result.returncode == 0:
        return True
    log.debug(f"fetch of {branch!r} failed, trying a plain fetch: {result.stderr.strip()}")
    fallback = _run_git(["-C", str(repo_dir), "fetch", "origin"])
    if fallback.returncode != 0:
        log.warning(f"could not fetch from origin: {fallback.stderr.strip()}")
        return False
    return True


def parse_worktree_list(output: str) -> list[WorktreeRecord]:
    """Parse ``git worktree list --porcelain`` output.

    Example:
        >>> records = parse_worktree_list(
        ...     "worktree /repo\\nHEAD abc\\nbranch refs/heads/main\\n\\n"
        ...     "worktree /wt/feat\\nHEAD def\\nbranch refs/heads/feat/x\\n"
        ... )
        >>> [(r.path.as_posix(), r.branch, r.is_main) for r in records]
        [('/repo', 'main', True), ('/wt/feat', 'feat/x', False)]
    """
    records: list[WorktreeRecord] = []
    current: dict[str, object] | None = None

    def flush() -> None:
        if current is None:
            return
        records.append(
            WorktreeRecord(
                path=Path(str(current["path"])),
                branch=current.get("branch"),  # type: ignore[arg-type]
                head=current.get("head"),  # type: ignore[arg-type]
                is_main=not records,
                is_bare=bool(current.get("bare")),
                is_detached=bool(current.get("detached")),
                is_prunable=bool(current.get("prunable")),
            )
        )

    for line in output.splitlines():
        if line.startswith("worktree "):
            flush()
            current = {"path": line[len("worktree ") :]}
            continue
        if current is None or not line.strip():
            continue
        key, _, value = line.partition(" ")
        if key == "branch":
            current["branch"] = value.removeprefix("refs/heads/")
        elif key == "HEAD":
            current["head"] = value
        elif key in {"bare", "detached", "prunable"}:
            current[key] = True
    flush()
    return records


def list_worktrees(repo_dir: Path) -> list[WorktreeRecord]:
    """Return the live worktree list for the repository."""
    result = _run_git_checked(["-C", str(repo_dir), "worktree", "list", "--porcelain"])
    return parse_worktree_list(result.stdout)


def same_path(left: Path, right: Path) -> bool:
    return left.expanduser().resolve() == right.expanduser().resolve()


def find_worktree(repo_dir: Path, path: Path) -> WorktreeRecord | None:
    """Return the worktree registered at ``path``, if any."""
    for record in list_worktrees(repo_dir):
        if same_path(record.path, path):
            return record
    return None


def main_worktree_root(repo_dir: Path) -> Path:
    """Return the main worktree's path, even when called from a linked one."""
    records = list_worktrees(repo_dir)
    if not records:
        raise NotInRepositoryError(str(repo_dir))
    return records[0].path


def add_worktree_new_branch(repo_dir: Path, path: Path, branch: str) -> None:
    """Create a worktree at ``path`` on a new branch from ``HEAD``."""
    _run_git_checked(["-C", str(repo_dir), "worktree", "add", "-b", branch, str(path)])


def add_worktree_existing(
    repo_dir: Path, path: Path, branch: str, *, force: bool = False
) -> None:
    """Create a worktree at ``path`` checked out on an existing branch.

    ``force`` lets git attach a branch that another worktree already uses.
    """
    args = ["-C", str(repo_dir), "worktree", "add"]
    if force:
        args.append("--force")
    args.extend([str(path), branch])
    _run_git_checked(args)


def parse_branch_conflict(stderr: str) -> Path | None:
    """Return the worktree path from git's "branch already in use" error.

    This is the only place that interprets git's English error text.

    Example:
        >>> parse_branch_conflict(
        ...     "fatal: 'feat' is already checked out at '/wt/feat'"
        ... ).as_posix()
        '/wt/feat'
        >>> parse_branch_conflict(
        ...     "fatal: 'feat' is already used by worktree at '/wt/x'"
        ... ).as_posix()
        '/wt/x'
        >>> parse_branch_conflict("fatal: invalid reference: nope") is None
        True
    """
    match = _CONFLICT_RE.search(stderr)
    if not match:
        return None
    return Path(match.group("path"))


def prune_worktrees(repo_dir: Path) -> None:
    """Drop metadata for worktrees whose directories are gone."""
    _run_git_checked(["-C", str(repo_dir), "worktree", "prune"])


def remove_worktree(repo_dir: Path, path: Path, *, force: bool = True) -> None:
    args = ["-C", str(repo_dir), "worktree", "remove"]
    if force:
        args.append("--force")
    args.append(str(path))
    _run_git_checked(args)


def delete_branch(repo_dir: Path, branch: str) -> None:
    """Force-delete a local branch."""
    _run_git_checked(["-C", str(repo_dir), "branch", "-D", branch])
