"""Classify free-form launcher input into a work-item reference.

``classify`` never fails: anything it does not recognize becomes a
``RawTextRef``. Precedence, first match wins:

1. a URL with a ``/browse/<KEY>`` tracker path
2. a URL with an ``<owner>/<repo>/pull/<n>`` path
3. a URL with an ``<owner>/<repo>/issues/<n>`` path
4. the whole input is a ticket key (``IOS-1234``)
5. ``pr:<n>`` (case-insensitive)
6. ``#<n>`` or ``gh:<n>`` (case-insensitive)
7. raw text
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from .models import DetectionSection


@dataclass(frozen=True)
class TicketRef:
    key: str


@dataclass(frozen=True)
class IssueRef:
    number: str
    repo_hint: str | None = None


@dataclass(frozen=True)
class PullRequestRef:
    number: str
    repo_hint: str | None = None


@dataclass(frozen=True)
class RawTextRef:
    content: str


WorkItemReference = Union[TicketRef, IssueRef, PullRequestRef, RawTextRef]

_URL_PREFIX = r"https?://[^/\s]+/"
_REPO_SEGMENT = r"(?P<repo>[^/\s?#]+/[^/\s?#]+)"
_END = r"(?=[/?#\s]|$)"
_PR_URL_RE = re.compile(_URL_PREFIX + _REPO_SEGMENT + r"/pull/(?P<number>[0-9]+)" + _END)
_ISSUE_URL_RE = re.compile(
    _URL_PREFIX + _REPO_SEGMENT + r"/issues/(?P<number>[0-9]+)" + _END
)
_PR_SHORTHAND_RE = re.compile(r"pr:(?P<number>[0-9]+)", re.IGNORECASE)
_DIGITS_RE = re.compile(r"[0-9]+")


def _browse_url_re(ticket_pattern: str) -> re.Pattern[str]:
    return re.compile(r"https?://\S*?/browse/(?P<key>" + ticket_pattern + r")" + _END)


def classify(text: str, detection: DetectionSection | None = None) -> WorkItemReference:
    """Classify ``text`` into a work-item reference.

    Args:
        text: Raw user input.
        detection: Shorthand patterns; defaults apply when omitted.

    Returns:
        The first matching reference, or ``RawTextRef`` of the trimmed text.

    Example:
        >>> classify("IOS-1234")
        TicketRef(key='IOS-1234')
        >>> classify("https://github.com/acme/widgets/pull/42")
        PullRequestRef(number='42', repo_hint='acme/widgets')
        >>> classify("GH:7")
        IssueRef(number='7', repo_hint=None)
    """
    settings = detection or DetectionSection()
    trimmed = text.strip()

    match = _browse_url_re(settings.jira_pattern).search(trimmed)
    if match:
        return TicketRef(key=match.group("key"))

    match = _PR_URL_RE.search(trimmed)
    if match:
        return PullRequestRef(number=match.group("number"), repo_hint=match.group("repo"))

    match = _ISSUE_URL_RE.search(trimmed)
    if match:
        return IssueRef(number=match.group("number"), repo_hint=match.group("repo"))

    if re.fullmatch(settings.jira_pattern, trimmed):
        return TicketRef(key=trimmed)

    match = _PR_SHORTHAND_RE.fullmatch(trimmed)
    if match:
        return PullRequestRef(number=match.group("number"))

    for pattern in settings.github_patterns:
        if re.fullmatch(pattern, trimmed, re.IGNORECASE):
            digits = _DIGITS_RE.search(trimmed)
            if digits:
                return IssueRef(number=digits.group(0))

    return RawTextRef(content=trimmed)


def _issue_number(value: str, flag: str) -> str:
    normalized = value.strip().lstrip("#")
    if not normalized.isdigit():
        raise ValueError(f"{flag} expects a number, got {value!r}")
    return normalized


def reference_from_flags(
    *,
    jira: str | None = None,
    github: str | None = None,
    pr: str | None = None,
    prompt: str | None = None,
) -> WorkItemReference | None:
    """Build a reference from explicit source flags, bypassing detection.

    Returns ``None`` when no flag was given.

    Raises:
        ValueError: If more than one flag is set or a number is malformed.
    """
    given = [name for name, value in (
        ("--jira", jira),
        ("--github", github),
        ("--pr", pr),
        ("--prompt", prompt),
    ) if value is not None]
    if len(given) > 1:
        raise ValueError(f"options {', '.join(given)} are mutually exclusive")
    if jira is not None:
        return TicketRef(key=jira.strip())
    if github is not None:
        return IssueRef(number=_issue_number(github, "--github"))
    if pr is not None:
        return PullRequestRef(number=_issue_number(pr, "--pr"))
    if prompt is not None:
        return RawTextRef(content=prompt.strip())
    return None


def describe(reference: WorkItemReference) -> str:
    """Return a short human-readable label for logging."""
    if isinstance(reference, TicketRef):
        return f"ticket {reference.key}"
    if isinstance(reference, PullRequestRef):
        suffix = f" in {reference.repo_hint}" if reference.repo_hint else ""
        return f"pull request #{reference.number}{suffix}"
    if isinstance(reference, IssueRef):
        suffix = f" in {reference.repo_hint}" if reference.repo_hint else ""
        return f"issue #{reference.number}{suffix}"
    return "raw prompt"
