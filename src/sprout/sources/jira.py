"""Jira ticket source."""

from __future__ import annotations

import base64
import urllib.parse

from ..context import Context
from ..text import slugify
from . import http
from .credentials import JiraCredentials

SOURCE_NAME = "jira"
_ALWAYS_FIELDS = ("summary", "description", "creator", "labels")


def normalize_key(key: str, default_project: str | None = None) -> str:
    """Uppercase ``key`` and prefix a bare number with the default project.

    Example:
        >>> normalize_key("1234", "IOS")
        'IOS-1234'
        >>> normalize_key("ios-7")
        'IOS-7'
    """
    cleaned = key.strip()
    if cleaned.isdigit() and default_project:
        return f"{default_project.strip().upper()}-{cleaned}"
    return cleaned.upper()


def adf_to_text(node: object) -> str:
    """Flatten an Atlassian document to plain text.

    Each top-level block contributes the concatenation of its text nodes;
    blocks are separated by newlines. Plain strings pass through.

    Example:
        >>> adf_to_text({"content": [
        ...     {"content": [{"text": "Hello "}, {"text": "world"}]},
        ...     {"content": [{"text": "Second"}]},
        ... ]})
        'Hello world\\nSecond'
    """
    if node is None:
        return ""
    if isinstance(node, str):
        return node
    if not isinstance(node, dict):
        return ""
    blocks = node.get("content")
    if not isinstance(blocks, list):
        return str(node.get("text") or "")
    return "\n".join(_collect_text(block) for block in blocks)


def _collect_text(node: object) -> str:
    if not isinstance(node, dict):
        return ""
    text = node.get("text")
    if isinstance(text, str):
        return text
    children = node.get("content")
    if not isinstance(children, list):
        return ""
    return "".join(_collect_text(child) for child in children)


def _auth_header(credentials: JiraCredentials) -> str:
    raw = f"{credentials.email}:{credentials.token}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


def fetch_ticket(
    key: str,
    credentials: JiraCredentials,
    *,
    fields: list[str] | tuple[str, ...] = (),
) -> Context:
    """Fetch a ticket and map it to a ``Context``.

    Raises:
        AuthFailedError: On HTTP 401.
        NotFoundError: On HTTP 404.
        NetworkError: On any other failure.
    """
    requested = list(dict.fromkeys([*fields, *_ALWAYS_FIELDS]))
    query = urllib.parse.urlencode({"fields": ",".join(requested)})
    url = (
        f"{credentials.base_url}/rest/api/3/issue/"
        f"{urllib.parse.quote(key, safe='')}?{query}"
    )
    payload = http.get_json(
        url,
        headers={"Accept": "application/json", "Authorization": _auth_header(credentials)},
        source=SOURCE_NAME,
        identifier=key,
    )
    return context_from_issue(payload, key=key, base_url=credentials.base_url)


def context_from_issue(payload: object, *, key: str, base_url: str) -> Context:
    """Map a Jira issue payload to a ``Context``."""
    data = payload if isinstance(payload, dict) else {}
    fields = data.get("fields") if isinstance(data.get("fields"), dict) else {}
    ticket_key = str(data.get("key") or key)
    summary = fields.get("summary")
    title = str(summary).strip() if summary else None
    description = adf_to_text(fields.get("description")).strip() or None
    creator = fields.get("creator")
    author = creator.get("displayName") if isinstance(creator, dict) else None
    labels = fields.get("labels") if isinstance(fields.get("labels"), list) else []
    return Context(
        id=ticket_key,
        title=title,
        description=description,
        slug=slugify(title) if title else None,
        url=f"{base_url}/browse/{ticket_key}",
        author=author or None,
        labels=tuple(str(label) for label in labels),
    )
