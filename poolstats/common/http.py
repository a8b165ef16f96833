"""Authenticated GET helper for the build-orchestration API (stdlib only)."""

from __future__ import annotations

import base64
from http.client import HTTPException, IncompleteRead
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import structlog

_UA = "PoolStats/1.0"

_log = structlog.get_logger("http")


def basic_auth_header(token: str) -> str:
    """Basic credentials with an empty username and *token* as password."""
    raw = f":{token}".encode()
    return "Basic " + base64.b64encode(raw).decode("ascii")


def fetch(url: str, token: str, *, timeout: float | None = None) -> bytes:
    """GET *url* and return the raw response body.

    Never raises.  Failures are logged and the caller gets whatever body
    was available: the error response, a partial read, or ``b""``.
    Callers must tolerate empty or malformed bytes.
    """
    hdr = {
        "Accept": "application/json",
        "User-Agent": _UA,
        "Authorization": basic_auth_header(token),
    }
    try:
        req = Request(url, method="GET", headers=hdr)
    except ValueError as exc:
        _log.warning("request_build_failed", url=url, error=str(exc))
        return b""

    try:
        resp = urlopen(req) if timeout is None else urlopen(req, timeout=timeout)
    except HTTPError as exc:
        _log.warning("http_error", url=url, status=exc.code, reason=str(exc.reason))
        return _read_body(exc, url)
    except (URLError, OSError, ValueError, HTTPException) as exc:
        # http.client raises InvalidURL and BadStatusLine outside OSError.
        _log.warning("http_request_failed", url=url, error=repr(exc))
        return b""

    with resp:
        return _read_body(resp, url)


def _read_body(resp, url: str) -> bytes:  # noqa: ANN001
    try:
        return resp.read()
    except IncompleteRead as exc:
        _log.warning("body_read_incomplete", url=url, read=len(exc.partial))
        return exc.partial
    except (OSError, HTTPException) as exc:
        _log.warning("body_read_failed", url=url, error=str(exc))
        return b""
