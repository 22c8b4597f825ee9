"""Failure contracts shared by every Sprout command.

Library code raises these; only the command layer turns them into an
``error: ...`` line and a process exit code. The exit codes are a stable
contract for shell scripts that wrap ``sprout``:

- ``0`` success
- ``1`` configuration error
- ``2`` context-source error (auth, not found, network, repo mismatch)
- ``3`` git / worktree error
- ``4`` launch script exited non-zero
"""

from __future__ import annotations


class SproutError(Exception):
    """Base class for expected, user-facing failures."""

    exit_code = 1

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__(message)
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        message = super().__str__()
        if self.recovery_hint:
            return f"{message} ({self.recovery_hint})"
        return message


class ConfigurationError(SproutError):
    """Config file missing, unreadable, unparseable, or invalid."""

    exit_code = 1


class SourceError(SproutError):
    """A context source could not produce a ``Context``."""

    exit_code = 2


class AuthMissingError(SourceError):
    """No credentials were available; no request was sent."""

    def __init__(self, source: str, *, recovery_hint: str | None = None) -> None:
        super().__init__(f"{source}: credentials not configured", recovery_hint=recovery_hint)
        self.source = source


class AuthFailedError(SourceError):
    """The remote rejected the supplied credentials (HTTP 401)."""

    def __init__(self, source: str) -> None:
        super().__init__(f"authentication failed for {source}")
        self.source = source


class NotFoundError(SourceError):
    """The remote item does not exist (HTTP 404)."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"not found: {identifier}")
        self.identifier = identifier


class NetworkError(SourceError):
    """Transport failure, unexpected status, or undecodable response."""

    def __init__(self, source: str, detail: str) -> None:
        super().__init__(f"{source} request failed: {detail}")
        self.source = source
        self.detail = detail


class RepoMismatchError(SourceError):
    """A pasted link points at a different repository than the checkout."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            f"repository mismatch: link is for {expected!r} but this checkout is {actual!r}"
        )
        self.expected = expected
        self.actual = actual


class SourceNotConfiguredError(SourceError):
    """A source was requested but has no configuration to work with."""


class GitError(SproutError):
    """A git operation failed."""

    exit_code = 3


class NotInRepositoryError(GitError):
    def __init__(self, path: str) -> None:
        super().__init__(f"not inside a git repository: {path}")


class GitCommandError(GitError):
    """A git subcommand exited non-zero; ``stderr`` holds git's own text."""

    def __init__(self, argv: list[str] | tuple[str, ...], stderr: str) -> None:
        self.argv = tuple(argv)
        self.stderr = stderr.strip()
        command = " ".join(self.argv)
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"git command failed ({command}){detail}")


class WorktreeCreationError(GitError):
    """A worktree could not be provisioned, including exhausted recovery."""


class ScriptError(SproutError):
    """The launch script exited non-zero."""

    exit_code = 4

    def __init__(self, returncode: int) -> None:
        super().__init__(f"launch script failed with exit code {returncode}")
        self.returncode = returncode


class HookError(SproutError):
    """A repository hook exited non-zero. Reported, never fatal."""

    exit_code = 0

    def __init__(self, hook: str, returncode: int) -> None:
        super().__init__(f"hook {hook!r} failed with exit code {returncode}")
        self.hook = hook
        self.returncode = returncode
