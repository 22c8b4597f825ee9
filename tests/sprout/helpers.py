from __future__ import annotations

import subprocess
from pathlib import Path
from types import SimpleNamespace


def launch_config(marker: Path, extra: str = "") -> str:
    """Config whose launch script records the branch in ``marker``."""
    return (
        "[launch]\n"
        f"script = \"echo {{branch}} {{worktree_created}} >> {marker}\"\n"
        "batch_delay = 0\n"
        "\n"
        "[sources.jira]\n"
        "base_url = \"https://acme.atlassian.net\"\n"
        "email = \"dev@acme.io\"\n"
        "token = \"jira-token\"\n"
        f"{extra}"
    )


def run_git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


def init_repo(path: Path, *, origin: str | None = None) -> Path:
    """Create a repository with one commit on ``main``."""
    path.mkdir(parents=True, exist_ok=True)
    run_git(path, "init", "-q")
    run_git(path, "checkout", "-q", "-b", "main")
    (path / "README.md").write_text("hello\n", encoding="utf-8")
    run_git(path, "add", "README.md")
    run_git(path, "commit", "-q", "-m", "initial")
    if origin:
        run_git(path, "remote", "add", "origin", origin)
    return path.resolve()


def worktree_paths(repo: Path) -> list[Path]:
    output = run_git(repo, "worktree", "list", "--porcelain")
    return [
        Path(line.split(" ", 1)[1]).resolve()
        for line in output.splitlines()
        if line.startswith("worktree ")
    ]


def branches(repo: Path) -> set[str]:
    output = run_git(repo, "branch", "--format=%(refname:short)")
    return {line.strip() for line in output.splitlines() if line.strip()}


def write_config(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def make_launch_args(**overrides: object) -> SimpleNamespace:
    data = {
        "input": None,
        "jira": None,
        "github": None,
        "pr": None,
        "prompt": None,
        "branch": None,
        "config": None,
        "dry_run": False,
        "verbose": False,
    }
    data.update(overrides)
    return SimpleNamespace(**data)


def make_prune_args(**overrides: object) -> SimpleNamespace:
    data = {"pattern": None, "stdin": False, "force": False, "dry_run": False}
    data.update(overrides)
    return SimpleNamespace(**data)
