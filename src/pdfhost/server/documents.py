"""Serving registered documents.

Registered documents are always sent whole as ``application/pdf``.
There is no conditional GET: a token only lives as long as the host
keeps it registered, so validators buy nothing.
"""

import logging
from collections.abc import Callable, Iterator
from typing import BinaryIO

from pdfhost.http.request import Request
from pdfhost.http.response import AnyResponse, FileResponse, StreamingResponse
from pdfhost.registry import DocumentSource, FileSource, StreamSource

logger = logging.getLogger("pdfhost.server")

PDF_CONTENT_TYPE = "application/pdf"


def iter_stream(factory: Callable[[], BinaryIO], chunk_size: int) -> Iterator[bytes]:
    """Yield the stream returned by *factory* in chunks, then close it.

    *factory* is not called until the first chunk is requested, and the
    stream is closed when the generator finishes, raises, or is closed
    early by the sender.
    """
    with factory() as stream:
        while chunk := stream.read(chunk_size):
            yield chunk


class DocumentResponder:
    """Builds responses for ``FileSource`` and ``StreamSource`` documents."""

    __slots__ = ("_cache_max_age", "_chunk_size")

    def __init__(self, *, cache_max_age: int = 86400, chunk_size: int = 64 * 1024) -> None:
        self._cache_max_age = cache_max_age
        self._chunk_size = chunk_size

    def serve(self, request: Request, source: DocumentSource) -> AnyResponse | None:
        """Build the response for *source*, or None if its file is gone."""
        cache_control = f"public, max-age={self._cache_max_age}"

        match source:
            case FileSource(path=path):
                if not path.is_file():
                    logger.debug("registered file no longer exists: %s", path)
                    return None
                return FileResponse(
                    path=path,
                    length=path.stat().st_size,
                    content_type=PDF_CONTENT_TYPE,
                ).with_header("Cache-Control", cache_control)

            case StreamSource(factory=factory):
                # HEAD must never run the factory.
                chunks = iter(()) if request.is_head else iter_stream(factory, self._chunk_size)
                return StreamingResponse(
                    chunks=chunks,
                    content_type=PDF_CONTENT_TYPE,
                ).with_header("Cache-Control", cache_control)
