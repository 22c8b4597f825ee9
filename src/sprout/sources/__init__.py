"""Context sources: turn a work-item reference into a ``Context``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from .. import git, log
from ..context import Context, raw_text_context
from ..detection import (
    IssueRef,
    PullRequestRef,
    RawTextRef,
    TicketRef,
    WorkItemReference,
)
from ..errors import RepoMismatchError, SourceNotConfiguredError
from ..models import SproutConfig
from . import credentials, github, jira


def remote_repo(repo_dir: Path) -> str | None:
    """Return ``owner/repo`` for the checkout's GitHub ``origin``, if any."""
    url = git.origin_url(repo_dir)
    if not url:
        return None
    return github.repo_from_remote_url(url)


def resolve_github_repo(
    repo_hint: str | None, config: SproutConfig, repo_dir: Path
) -> str:
    """Decide which ``owner/repo`` an issue or PR lives in.

    A repo taken from a pasted URL must match the checkout's ``origin``
    (case-insensitively) so the worktree is not created in the wrong
    repository. The check is skipped when ``origin`` is missing or is not a
    GitHub remote.

    Raises:
        RepoMismatchError: If the URL's repo differs from ``origin``.
        SourceNotConfiguredError: If no repo can be determined.
    """
    if repo_hint:
        current = remote_repo(repo_dir)
        if current and current.lower() != repo_hint.lower():
            raise RepoMismatchError(expected=repo_hint, actual=current)
        return repo_hint
    section = config.sources.github
    if section is not None and section.repo:
        return section.repo
    current = remote_repo(repo_dir)
    if current:
        return current
    raise SourceNotConfiguredError(
        "github repository could not be determined",
        recovery_hint="set [sources.github] repo or add a GitHub origin remote",
    )


def fetch_context(
    reference: WorkItemReference,
    config: SproutConfig,
    *,
    repo_dir: Path,
    env: Mapping[str, str] | None = None,
) -> Context:
    """Fetch the context for ``reference`` from the matching source.

    Credentials are resolved from ``env`` (default ``os.environ``) and the
    config before any request is made.
    """
    environ = os.environ if env is None else env
    if isinstance(reference, RawTextRef):
        return raw_text_context(reference.content)

    if isinstance(reference, TicketRef):
        section = config.sources.jira
        if section is None:
            raise SourceNotConfiguredError(
                "jira source is not configured",
                recovery_hint="add a [sources.jira] table to the config",
            )
        creds = credentials.resolve_jira(section, environ)
        key = jira.normalize_key(reference.key, section.default_project)
        log.debug(f"fetching jira ticket {key} from {creds.base_url}")
        return jira.fetch_ticket(key, creds, fields=section.fields)

    if isinstance(reference, (IssueRef, PullRequestRef)):
        repo = resolve_github_repo(reference.repo_hint, config, repo_dir)
        creds = credentials.resolve_github(config.sources.github, environ)
        if isinstance(reference, PullRequestRef):
            log.debug(f"fetching pull request #{reference.number} from {repo}")
            return github.fetch_pr(reference.number, repo, creds)
        log.debug(f"fetching issue #{reference.number} from {repo}")
        return github.fetch_issue(reference.number, repo, creds)

    raise TypeError(f"unsupported reference: {reference!r}")
