"""HTTP responses with a chainable .with_*() transformation API.

Each transformation returns a new response; responders build them up
step by step and the sender turns the result into ASGI messages.

Three shapes, all sharing the same header API:

- ``Response``: an in-memory body (status pages, 204/304/416).
- ``FileResponse``: a byte span of a file on disk, read while sending.
- ``StreamingResponse``: an iterator of byte chunks of unknown length.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Self, TypeAlias


class _Chainable:
    """``with_*`` helpers shared by every response dataclass.

    Subclasses are frozen dataclasses with ``status``, ``content_type``
    and ``headers`` fields.
    """

    __slots__ = ()

    status: int
    content_type: str | None
    headers: tuple[tuple[str, str], ...]

    def with_header(self, name: str, value: str) -> Self:
        """Append a header; earlier headers with the same name are kept."""
        return replace(self, headers=(*self.headers, (name, value)))  # type: ignore[type-var]

    def with_headers(self, headers: Mapping[str, str]) -> Self:
        return replace(self, headers=(*self.headers, *headers.items()))  # type: ignore[type-var]

    def header(self, name: str) -> str | None:
        """First header called *name*, ignoring case."""
        wanted = name.lower()
        return next((v for k, v in self.headers if k.lower() == wanted), None)


@dataclass(frozen=True, slots=True)
class Response(_Chainable):
    """An HTTP response with an in-memory body.

    ``content_type=None`` omits the ``Content-Type`` header (304, 204).
    """

    body: str | bytes = b""
    status: int = 200
    content_type: str | None = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class FileResponse(_Chainable):
    """A response whose body is ``length`` bytes of *path* from ``offset``.

    The file is opened only when the body is sent, so HEAD responses
    never touch its contents.
    """

    path: Path
    length: int
    offset: int = 0
    status: int = 200
    content_type: str | None = "application/octet-stream"
    headers: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class StreamingResponse(_Chainable):
    """A response that sends chunks progressively, length unknown.

    ``chunks`` is consumed on a worker thread. If it is a generator it
    is closed after sending (or instead of sending, for HEAD), so any
    ``with`` block inside it releases its resource on every path.
    """

    chunks: Iterator[bytes]
    status: int = 200
    content_type: str | None = "application/octet-stream"
    headers: tuple[tuple[str, str], ...] = ()


AnyResponse: TypeAlias = Response | FileResponse | StreamingResponse
