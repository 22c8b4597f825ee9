# ruff: noqa: E402

import builtins
import sys
from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import sprout.io as io
import sprout.log as sprout_log

PACKAGE = ROOT / "src" / "sprout"
DOCTEST_MODULES = {
    PACKAGE / "__init__.py",
    PACKAGE / "cli.py",
    PACKAGE / "config.py",
    PACKAGE / "context.py",
    PACKAGE / "detection.py",
    PACKAGE / "git.py",
    PACKAGE / "hooks.py",
    PACKAGE / "models.py",
    PACKAGE / "paths.py",
    PACKAGE / "prompting.py",
    PACKAGE / "scripts.py",
    PACKAGE / "text.py",
    PACKAGE / "variables.py",
    PACKAGE / "commands" / "launch.py",
    PACKAGE / "sources" / "credentials.py",
    PACKAGE / "sources" / "github.py",
    PACKAGE / "sources" / "jira.py",
}

_SCRUBBED_ENV = (
    "SPROUT_CONFIG",
    "SPROUT_LOG_LEVEL",
    "SPROUT_NO_COLOR",
    "NO_COLOR",
    "JIRA_TOKEN",
    "JIRA_API_TOKEN",
    "JIRA_EMAIL",
    "JIRA_USER",
    "JIRA_BASE_URL",
    "GITHUB_TOKEN",
    "GH_TOKEN",
    "GITHUB_API_URL",
    "XDG_CONFIG_HOME",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in _SCRUBBED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SHELL", "/bin/sh")
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    # github.com origins in tests must never reach the network.
    monkeypatch.setenv("GIT_SSH_COMMAND", "false")
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Sprout Tests")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "tests@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Sprout Tests")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "tests@example.com")
    monkeypatch.setitem(sprout_log._state, "level", None)
    monkeypatch.setitem(sprout_log._state, "no_color", True)


@pytest.fixture(autouse=True)
def _default_io_patches(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(io, "_use_questionary", lambda: False)

    def fail_input(prompt: str = "") -> str:
        raise AssertionError("prompted unexpectedly")

    monkeypatch.setattr(builtins, "input", fail_input)


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
