"""Resolve source credentials from an explicit environment and config.

Providers never read ``os.environ`` themselves; callers resolve a
credentials object here and pass it in.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from typing import Mapping

from .. import exec as exec_util
from ..errors import AuthMissingError, SourceNotConfiguredError
from ..models import GitHubSection, JiraSection


@dataclass(frozen=True)
class JiraCredentials:
    base_url: str
    email: str
    token: str


@dataclass(frozen=True)
class GitHubCredentials:
    token: str
    api_url: str = "https://api.github.com"


def _first(env: Mapping[str, str], *names: str) -> str | None:
    for name in names:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None


def resolve_jira(section: JiraSection | None, env: Mapping[str, str]) -> JiraCredentials:
    """Return Jira credentials, environment first, then config.

    Raises:
        SourceNotConfiguredError: If no base URL is known.
        AuthMissingError: If the email or token is missing.

    Example:
        >>> resolve_jira(
        ...     JiraSection(base_url="https://acme.atlassian.net"),
        ...     {"JIRA_EMAIL": "me@acme.io", "JIRA_API_TOKEN": "t"},
        ... ).email
        'me@acme.io'
    """
    config = section or JiraSection()
    base_url = _first(env, "JIRA_BASE_URL") or config.base_url
    if not base_url:
        raise SourceNotConfiguredError(
            "jira source is not configured",
            recovery_hint="set [sources.jira] base_url or JIRA_BASE_URL",
        )
    token = _first(env, "JIRA_TOKEN", "JIRA_API_TOKEN") or config.token
    email = _first(env, "JIRA_EMAIL", "JIRA_USER") or config.email
    if not token or not email:
        raise AuthMissingError(
            "jira", recovery_hint="set JIRA_EMAIL and JIRA_API_TOKEN"
        )
    return JiraCredentials(base_url=base_url.rstrip("/"), email=email, token=token)


def gh_cli_token() -> str | None:
    """Return ``gh auth token`` output when the GitHub CLI is installed."""
    if shutil.which("gh") is None:
        return None
    result = exec_util.try_run_command(["gh", "auth", "token"])
    if result is None or result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_github(
    section: GitHubSection | None, env: Mapping[str, str]
) -> GitHubCredentials:
    """Return GitHub credentials.

    Order: ``GITHUB_TOKEN``, ``GH_TOKEN``, ``sources.github.token``, then
    ``gh auth token``.

    Raises:
        AuthMissingError: If no token can be found.
    """
    config = section or GitHubSection()
    token = _first(env, "GITHUB_TOKEN", "GH_TOKEN") or config.token or gh_cli_token()
    if not token:
        raise AuthMissingError(
            "github", recovery_hint="set GITHUB_TOKEN or run `gh auth login`"
        )
    api_url = _first(env, "GITHUB_API_URL") or GitHubCredentials.api_url
    return GitHubCredentials(token=token, api_url=api_url.rstrip("/"))
