from pathlib import Path

import pytest

import sprout.scripts as scripts
from sprout.errors import ScriptError


def test_shell_command_falls_back_to_sh() -> None:
    assert scripts.shell_command("true", {}) == ["/bin/sh", "-c", "true"]
    assert scripts.shell_command("true", {"SHELL": " "}) == ["/bin/sh", "-c", "true"]


def test_run_script_runs_in_cwd_with_env(tmp_path: Path) -> None:
    marker = tmp_path / "out.txt"
    env = {"PATH": "/usr/bin:/bin", "SHELL": "/bin/sh", "GREETING": "hello"}

    scripts.run_script(f'echo "$GREETING $(pwd)" > {marker}', cwd=tmp_path, env=env)

    assert marker.read_text(encoding="utf-8").strip() == f"hello {tmp_path}"


def test_run_script_failure_carries_exit_code(tmp_path: Path) -> None:
    with pytest.raises(ScriptError) as excinfo:
        scripts.run_script("exit 7", cwd=tmp_path)

    assert excinfo.value.returncode == 7
    assert excinfo.value.exit_code == 4


def test_run_script_missing_shell(tmp_path: Path) -> None:
    env = {"SHELL": str(tmp_path / "no-such-shell")}

    with pytest.raises(ScriptError) as excinfo:
        scripts.run_script("true", cwd=tmp_path, env=env)

    assert excinfo.value.returncode == 127
