from datetime import datetime
from pathlib import Path

from hypothesis import given
from hypothesis import strategies as st

import sprout.variables as variables
from sprout.context import Context
from sprout.models import SproutConfig
from tests.sprout.helpers import init_repo

FIXED_NOW = datetime(2026, 3, 14, 9, 26, 53)


def _config(**sections: object) -> SproutConfig:
    return SproutConfig.model_validate({"launch": {"script": "true"}, **sections})


@given(st.text(max_size=60))
def test_sanitized_branch_is_a_single_segment(branch: str) -> None:
    sanitized = variables.sanitize_branch_for_path(branch)

    assert "/" not in sanitized
    assert "\\" not in sanitized
    assert ":" not in sanitized
    assert len(sanitized) == len(branch)


def test_sanitize_replaces_each_hostile_character() -> None:
    assert variables.sanitize_branch_for_path("a/b\\c:d") == "a_b_c_d"


def test_resolve_branch_precedence() -> None:
    cfg = _config(worktree={"branch_template": "feature/{ticket_id}-{slug}"})
    ticket = Context(id="IOS-1", title="Fix Login", slug="fix-login")
    pull = Context(id="pr-7", source_branch="contrib/fix")

    assert variables.resolve_branch(ticket, cfg) == "feature/IOS-1-fix-login"
    assert variables.resolve_branch(ticket, cfg, "  mine ") == "mine"
    assert variables.resolve_branch(pull, cfg) == "contrib/fix"
    assert variables.resolve_branch(pull, cfg, "override") == "override"


def test_resolve_branch_derives_slug_from_title() -> None:
    cfg = _config(worktree={"branch_template": "{slug}"})

    assert variables.resolve_branch(Context(id="7", title="Add Dark Mode"), cfg) == "add-dark-mode"


def test_resolve_worktree_path_variants(tmp_path: Path) -> None:
    repo_root = tmp_path / "src" / "app"

    relative = variables.resolve_worktree_path(
        "../worktrees/{branch}", branch="feature/x", repo_root=repo_root, repo_name="app"
    )
    absolute = variables.resolve_worktree_path(
        str(tmp_path / "wt" / "{repo_name}" / "{branch}"),
        branch="a:b",
        repo_root=repo_root,
        repo_name="app",
    )
    home = variables.resolve_worktree_path(
        "~/wt/{branch}", branch="x", repo_root=repo_root, repo_name="app"
    )

    assert relative == (tmp_path / "src" / "worktrees" / "feature_x").resolve()
    assert absolute == (tmp_path / "wt" / "app" / "a_b").resolve()
    assert home == (Path.home() / "wt" / "x").resolve()


def test_build_variables_from_ticket(tmp_path: Path) -> None:
    repo = init_repo(tmp_path / "widgets", origin="git@github.com:acme/widgets.git")
    ctx = Context(
        id="IOS-1234",
        title="Fix login",
        description="Steps to reproduce",
        slug="fix-login",
        url="https://acme.atlassian.net/browse/IOS-1234",
        author="Dana",
        labels=("mobile", "bug"),
    )

    result = variables.build_variables(ctx, _config(), cwd=repo, now=FIXED_NOW)

    assert result["ticket_id"] == "IOS-1234"
    assert result["branch"] == "IOS-1234"
    assert result["worktree"] == str((tmp_path / "worktrees" / "IOS-1234").resolve())
    assert result["repo_root"] == str(repo)
    assert result["repo_name"] == "widgets"
    assert result["remote_url"] == "git@github.com:acme/widgets.git"
    assert result["labels"] == "mobile, bug"
    assert result["author"] == "Dana"
    assert result["date"] == "2026-03-14"
    assert result["timestamp"] == str(int(FIXED_NOW.timestamp()))
    assert "source_branch" not in result


def test_build_variables_omits_empty_fields_and_merges_config_last(tmp_path: Path) -> None:
    repo = init_repo(tmp_path / "repo")
    cfg = _config(variables={"team": "mobile", "repo_name": "renamed"})

    result = variables.build_variables(Context(id="prompt-abc"), cfg, cwd=repo, now=FIXED_NOW)

    for key in ("title", "description", "slug", "url", "author", "labels", "remote_url"):
        assert key not in result
    assert result["team"] == "mobile"
    assert result["repo_name"] == "renamed"


def test_build_variables_uses_pr_branch_and_override(tmp_path: Path) -> None:
    repo = init_repo(tmp_path / "repo")
    ctx = Context(id="pr-9", source_branch="contrib/fix")

    pr_vars = variables.build_variables(ctx, _config(), cwd=repo, now=FIXED_NOW)
    override_vars = variables.build_variables(
        ctx, _config(), cwd=repo, branch_override="mine", now=FIXED_NOW
    )

    assert pr_vars["branch"] == "contrib/fix"
    assert pr_vars["source_branch"] == "contrib/fix"
    assert pr_vars["worktree"].endswith("contrib_fix")
    assert override_vars["branch"] == "mine"
