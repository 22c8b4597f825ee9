"""Run the user's launch script."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from . import exec as exec_util
from . import log
from .errors import ScriptError


def shell_command(script: str, env: Mapping[str, str] | None = None) -> list[str]:
    """Return the argv that runs ``script`` through the user's shell.

    Example:
        >>> shell_command("echo hi", {"SHELL": "/bin/zsh"})
        ['/bin/zsh', '-c', 'echo hi']
    """
    environ = os.environ if env is None else env
    shell = (environ.get("SHELL") or "").strip() or "/bin/sh"
    return [shell, "-c", script]


def run_script(
    script: str,
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> None:
    """Run ``script`` in a shell, streaming its output to ours.

    Raises:
        ScriptError: If the shell exits non-zero or cannot be started.
    """
    cmd = shell_command(script, env)
    log.debug(f"running launch script with {cmd[0]}")
    returncode = exec_util.run_streaming(cmd, cwd=cwd, env=env)
    if returncode is None:
        raise ScriptError(127)
    if returncode != 0:
        raise ScriptError(returncode)
