"""Single-attempt JSON GET shared by the context sources."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import Mapping

from .. import log
from ..errors import AuthFailedError, NetworkError, NotFoundError

DEFAULT_TIMEOUT = 20.0


def get_json(
    url: str,
    *,
    headers: Mapping[str, str],
    source: str,
    identifier: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> object:
    """Fetch ``url`` and decode its JSON body.

    There are no retries. Status handling:

    - ``200``: decoded JSON is returned
    - ``401``: ``AuthFailedError``
    - ``404``: ``NotFoundError(identifier)``
    - anything else, malformed URLs, transport failures, and undecodable
      bodies: ``NetworkError``
    """
    log.debug(f"GET {url}")
    try:
        request = urllib.request.Request(url, headers=dict(headers), method="GET")
        with urllib.request.urlopen(request, timeout=timeout) as response:
            status = getattr(response, "status", 200)
            raw = response.read()
    except urllib.error.HTTPError as exc:
        if exc.code == 401:
            raise AuthFailedError(source) from exc
        if exc.code == 404:
            raise NotFoundError(identifier) from exc
        raise NetworkError(source, f"HTTP {exc.code} {exc.reason}") from exc
    except (urllib.error.URLError, TimeoutError, OSError) as exc:
        reason = getattr(exc, "reason", exc)
        raise NetworkError(source, str(reason)) from exc
    except ValueError as exc:
        raise NetworkError(source, f"invalid URL {url!r}: {exc}") from exc

    if status != 200:
        raise NetworkError(source, f"unexpected HTTP status {status}")
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise NetworkError(source, "response was not valid JSON") from exc
