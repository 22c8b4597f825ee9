"""Provision a git worktree for a branch, healing stale or conflicting state.

``ensure_worktree`` walks these steps:

1. If a worktree is already registered at the target path, it stops
   there and changes nothing.
2. It creates the parent directory.
3. It resolves the branch. Pull-request branches are fetched first, and
   a fetch failure is tolerated.
4. An unknown branch is created from ``HEAD`` together with the worktree.
5. A known branch is attached. When git says the branch is in use
   elsewhere:

   - a missing directory means stale metadata, so it prunes and retries
     once;
   - an existing directory means a real second checkout, so it attaches
     with ``--force``.

Any other failure is fatal. Uncommitted work is never discarded.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from . import git, log
from .errors import GitCommandError, WorktreeCreationError

ALREADY_EXISTS = "already_exists"
CREATED = "created"
ATTACHED = "attached"
RECOVERED = "recovered"
FORCED = "forced"
DRY_RUN = "dry_run"


@dataclass(frozen=True)
class ProvisionResult:
    path: Path
    branch: str
    outcome: str

    @property
    def created(self) -> bool:
        """Whether this call produced (or would produce) a new worktree."""
        return self.outcome != ALREADY_EXISTS


def _branch_kind(is_pr: bool) -> str:
    return "PR branch" if is_pr else "branch"


def _resolve_branch(repo_dir: Path, branch: str, *, is_pr: bool) -> bool:
    if is_pr:
        log.debug(f"fetching branch {branch!r} from origin")
        git.fetch_branch(repo_dir, branch)
    if git.local_branch_exists(repo_dir, branch):
        return True
    if not git.remote_branch_exists(repo_dir, branch):
        return False
    if not git.ref_exists(repo_dir, f"refs/remotes/origin/{branch}"):
        # Known only through ls-remote; git needs a tracking ref to attach.
        git.fetch_branch(repo_dir, branch)
    return True


def _create_new(repo_dir: Path, path: Path, branch: str) -> ProvisionResult:
    try:
        git.add_worktree_new_branch(repo_dir, path, branch)
    except GitCommandError as exc:
        raise WorktreeCreationError(
            f"failed to create worktree at {path} with new branch {branch!r}: {exc.stderr}"
        ) from exc
    log.debug(f"created worktree with new branch {branch!r}")
    return ProvisionResult(path=path, branch=branch, outcome=CREATED)


def _recover_conflict(
    repo_dir: Path, path: Path, branch: str, conflict: Path, *, is_pr: bool
) -> ProvisionResult:
    kind = _branch_kind(is_pr)
    if not conflict.exists():
        log.info(
            f"{kind} {branch!r} is recorded at missing worktree {conflict}; "
            "pruning stale worktree metadata"
        )
        git.prune_worktrees(repo_dir)
        if is_pr:
            git.fetch_branch(repo_dir, branch)
        try:
            git.add_worktree_existing(repo_dir, path, branch)
        except GitCommandError as exc:
            raise WorktreeCreationError(
                f"{kind} {branch!r} still could not be attached after pruning "
                f"stale worktrees: {exc.stderr}"
            ) from exc
        return ProvisionResult(path=path, branch=branch, outcome=RECOVERED)

    log.warning(f"{kind} {branch!r} is already checked out at {conflict}; attaching anyway")
    try:
        git.add_worktree_existing(repo_dir, path, branch, force=True)
    except GitCommandError as exc:
        raise WorktreeCreationError(
            f"failed to force-attach {kind} {branch!r} at {path}: {exc.stderr}"
        ) from exc
    return ProvisionResult(path=path, branch=branch, outcome=FORCED)


def _attach_existing(
    repo_dir: Path, path: Path, branch: str, *, is_pr: bool
) -> ProvisionResult:
    try:
        git.add_worktree_existing(repo_dir, path, branch)
    except GitCommandError as exc:
        conflict = git.parse_branch_conflict(exc.stderr)
        if conflict is None:
            raise WorktreeCreationError(
                f"{_branch_kind(is_pr)} {branch!r} exists but worktree creation "
                f"failed: {exc.stderr}"
            ) from exc
        return _recover_conflict(repo_dir, path, branch, conflict, is_pr=is_pr)
    log.debug(f"created worktree from existing branch {branch!r}")
    return ProvisionResult(path=path, branch=branch, outcome=ATTACHED)


def ensure_worktree(
    repo_dir: Path,
    path: Path,
    branch: str,
    *,
    has_source_branch: bool = False,
    dry_run: bool = False,
) -> ProvisionResult:
    """Make sure a worktree for ``branch`` is checked out at ``path``.

    Args:
        repo_dir: Any directory inside the repository.
        path: Absolute target path for the worktree.
        branch: Branch to check out (created when it does not exist).
        has_source_branch: The branch comes from a pull request and must
            be fetched from ``origin`` first.
        dry_run: Report the plan without touching the repository.

    Returns:
        ``ProvisionResult`` whose ``outcome`` names the path taken.

    Raises:
        WorktreeCreationError: If the worktree cannot be provisioned.
        GitError: If a supporting git command fails.
    """
    if git.find_worktree(repo_dir, path) is not None:
        log.debug(f"worktree already exists at {path}")
        return ProvisionResult(path=path, branch=branch, outcome=ALREADY_EXISTS)

    parent = path.parent
    if not parent.exists():
        if dry_run:
            log.info(f"Would create directory: {parent}")
        else:
            parent.mkdir(parents=True, exist_ok=True)
            log.debug(f"created directory {parent}")

    if dry_run:
        log.info(f"Would create worktree at {path} with branch {branch}")
        return ProvisionResult(path=path, branch=branch, outcome=DRY_RUN)

    if not _resolve_branch(repo_dir, branch, is_pr=has_source_branch):
        return _create_new(repo_dir, path, branch)
    return _attach_existing(repo_dir, path, branch, is_pr=has_source_branch)
