import os
from pathlib import Path

import pytest

import sprout.hooks as hooks
from sprout.errors import HookError
from tests.sprout.helpers import init_repo, run_git


def _install_hook(repo: Path, name: str, body: str, *, executable: bool = True) -> Path:
    path = hooks.hook_path(repo, name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    if executable:
        path.chmod(0o755)
    return path


def test_hook_path_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="unknown hook"):
        hooks.hook_path(Path("/repo"), "pre-commit")


def test_hook_environment_adds_sprout_values() -> None:
    env = hooks.hook_environment(
        worktree_path=Path("/wt/x"), branch="x", repo_root="/repo", base={"PATH": "/bin"}
    )

    assert env == {
        "PATH": "/bin",
        "SPROUT_WORKTREE_PATH": "/wt/x",
        "SPROUT_BRANCH": "x",
        "SPROUT_REPO_ROOT": "/repo",
    }


def test_run_hook_without_hook_is_skipped(tmp_path: Path) -> None:
    assert hooks.run_hook(hooks.POST_LAUNCH, tmp_path, dict(os.environ)) is False


def test_run_hook_runs_from_repo_root(tmp_path: Path) -> None:
    marker = tmp_path / "marker"
    _install_hook(tmp_path, hooks.POST_PRUNE, f'echo "$SPROUT_BRANCH $(pwd)" > {marker}')
    env = hooks.hook_environment(branch="IOS-1", repo_root=tmp_path)

    assert hooks.run_hook(hooks.POST_PRUNE, tmp_path, env) is True
    assert marker.read_text(encoding="utf-8").strip() == f"IOS-1 {tmp_path}"


def test_run_hook_failure_raises(tmp_path: Path) -> None:
    _install_hook(tmp_path, hooks.PRE_PRUNE, "exit 3")

    with pytest.raises(HookError) as excinfo:
        hooks.run_hook(hooks.PRE_PRUNE, tmp_path, dict(os.environ))

    assert excinfo.value.returncode == 3
    assert excinfo.value.hook == hooks.PRE_PRUNE


def test_non_executable_hook_warns(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _install_hook(tmp_path, hooks.POST_LAUNCH, "exit 0", executable=False)

    assert hooks.run_hook(hooks.POST_LAUNCH, tmp_path, dict(os.environ)) is False
    assert "chmod +x" in capsys.readouterr().err


def test_find_main_repo_root_from_main_and_linked_worktree(tmp_path: Path) -> None:
    repo = init_repo(tmp_path / "repo")
    linked = tmp_path / "linked"
    run_git(repo, "worktree", "add", "-q", "-b", "feat", str(linked))

    assert hooks.find_main_repo_root(repo) == repo
    assert hooks.find_main_repo_root(linked).resolve() == repo


def test_find_main_repo_root_outside_repository(tmp_path: Path) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()

    assert hooks.find_main_repo_root(plain) is None
