"""Posting to an HTTP endpoint and insisting on success."""

from __future__ import annotations

import urllib.error
import urllib.request

from fxlite.apptesting.iohelp import read_all

__all__ = ["UnexpectedStatus", "post_success"]

_TIMEOUT_SECONDS = 30


class UnexpectedStatus(Exception):
    """Raised when a response does not carry status 200."""

    def __init__(self, status: int, body: str = "") -> None:
        super().__init__(f"status code did not match: want 200, got {status}")
        self.status = status
        self.body = body


def post_success(url: str, body: str) -> str:
    """POST ``body`` as text/plain to ``url`` and return the response body.

    Raises :class:`UnexpectedStatus` unless the response status is 200.
    """
    request = urllib.request.Request(
        url,
        data=body.encode("utf-8"),
        method="POST",
        headers={"Content-Type": "text/plain"},
    )
    try:
        with urllib.request.urlopen(request, timeout=_TIMEOUT_SECONDS) as response:
            status = response.status
            text = read_all(response)
    except urllib.error.HTTPError as exc:
        with exc:
            text = read_all(exc)
        raise UnexpectedStatus(exc.code, text) from None
    if status != 200:
        raise UnexpectedStatus(status, text)
    return text