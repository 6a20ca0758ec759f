"""Immutable HTTP request.

Frozen metadata only. The server never reads request bodies, so the
ASGI receive channel is not kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pdfhost.http.dates import parse_http_date
from pdfhost.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``method`` is upper-cased at creation; ``path`` is the decoded ASGI
    path without the query string.
    """

    method: str
    path: str
    headers: Headers

    @property
    def is_head(self) -> bool:
        """True for HEAD requests (headers only, no body)."""
        return self.method == "HEAD"

    @property
    def range(self) -> str | None:
        """The raw ``Range`` header value."""
        return self.headers.get("range")

    @property
    def if_modified_since(self) -> int | None:
        """``If-Modified-Since`` as POSIX seconds, or None if absent/invalid."""
        return parse_http_date(self.headers.get("if-modified-since"))

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
        )
