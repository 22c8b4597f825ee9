"""GitHub issue and pull-request source."""

from __future__ import annotations

import re

from ..context import Context
from ..errors import NetworkError
from ..text import slugify
from . import http
from .credentials import GitHubCredentials

SOURCE_NAME = "github"
API_VERSION = "2022-11-28"

_REMOTE_RE = re.compile(
    r"github\.com[:/](?P<repo>[^/\s]+/[^/\s]+?)(?:\.git)?/?$", re.IGNORECASE
)


def repo_from_remote_url(url: str) -> str | None:
    """Extract ``owner/repo`` from a GitHub remote URL.

    Returns ``None`` for remotes that are not on github.com.

    Example:
        >>> repo_from_remote_url("git@github.com:acme/widgets.git")
        'acme/widgets'
        >>> repo_from_remote_url("https://github.com/acme/widgets")
        'acme/widgets'
        >>> repo_from_remote_url("git@gitlab.com:acme/widgets.git") is None
        True
    """
    match = _REMOTE_RE.search(url.strip())
    if not match:
        return None
    return match.group("repo")


def _headers(credentials: GitHubCredentials) -> dict[str, str]:
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {credentials.token}",
        "X-GitHub-Api-Version": API_VERSION,
    }


def fetch_issue(number: str, repo: str, credentials: GitHubCredentials) -> Context:
    """Fetch issue ``number`` from ``repo`` (``owner/name``)."""
    payload = http.get_json(
        f"{credentials.api_url}/repos/{repo}/issues/{number}",
        headers=_headers(credentials),
        source=SOURCE_NAME,
        identifier=f"{repo}#{number}",
    )
    return _context_from_payload(payload, context_id=str(number))


def fetch_pr(number: str, repo: str, credentials: GitHubCredentials) -> Context:
    """Fetch pull request ``number``; the context carries its head branch."""
    payload = http.get_json(
        f"{credentials.api_url}/repos/{repo}/pulls/{number}",
        headers=_headers(credentials),
        source=SOURCE_NAME,
        identifier=f"{repo} PR #{number}",
    )
    head = payload.get("head") if isinstance(payload, dict) else None
    branch = head.get("ref") if isinstance(head, dict) else None
    if not branch:
        raise NetworkError(SOURCE_NAME, f"PR #{number} response has no head branch")
    return _context_from_payload(
        payload, context_id=f"pr-{number}", source_branch=str(branch)
    )


def _context_from_payload(
    payload: object, *, context_id: str, source_branch: str | None = None
) -> Context:
    if not isinstance(payload, dict):
        raise NetworkError(SOURCE_NAME, "unexpected response shape")
    title = str(payload.get("title") or "").strip() or None
    body = payload.get("body")
    description = str(body).strip() if body else None
    user = payload.get("user")
    author = user.get("login") if isinstance(user, dict) else None
    raw_labels = payload.get("labels") if isinstance(payload.get("labels"), list) else []
    labels = tuple(
        str(label.get("name"))
        for label in raw_labels
        if isinstance(label, dict) and label.get("name")
    )
    return Context(
        id=context_id,
        title=title,
        description=description or None,
        slug=slugify(title) if title else None,
        url=payload.get("html_url") or None,
        author=author or None,
        labels=labels,
        source_branch=source_branch,
    )
