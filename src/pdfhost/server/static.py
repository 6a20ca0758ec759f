"""Static file serving for the extracted viewer bundle.

Serves files under the asset root with conditional GET
(``If-Modified-Since`` → 304) and, when enabled, single byte ranges
(``Range`` → 206/416). Returns ``None`` for anything that isn't a
regular file under the root so the router can answer 404.
"""

import logging
import mimetypes
import os
from pathlib import Path

from pdfhost.http.dates import format_http_date
from pdfhost.http.ranges import parse_range
from pdfhost.http.request import Request
from pdfhost.http.response import AnyResponse, FileResponse, Response

logger = logging.getLogger("pdfhost.server")

# Types the PDF.js viewer needs that platform MIME tables often lack.
_EXTRA_TYPES = {
    ".mjs": "text/javascript",
    ".wasm": "application/wasm",
    ".ftl": "text/plain",
    ".properties": "text/plain",
    ".bcmap": "application/octet-stream",
    ".pfb": "application/octet-stream",
}


def guess_content_type(path: Path) -> str:
    """Content type for *path* from its extension."""
    extra = _EXTRA_TYPES.get(path.suffix.lower())
    if extra is not None:
        return extra
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type or "application/octet-stream"


class StaticFileResponder:
    """Serves files from the extracted viewer directory.

    Security: resolves symlinks and verifies the final path is within
    the root to prevent path traversal. Directories are never listed.
    """

    __slots__ = ("_accept_ranges", "_cache_max_age", "_root")

    def __init__(
        self,
        root: Path,
        *,
        accept_ranges: bool = False,
        cache_max_age: int = 86400,
    ) -> None:
        self._root = root.resolve()
        self._accept_ranges = accept_ranges
        self._cache_max_age = cache_max_age

    def resolve(self, relative: str) -> Path | None:
        """Map a URL path (relative to the root) to a regular file, or None."""
        relative = relative.lstrip("/")
        if not relative:
            return None
        try:
            file_path = (self._root / relative).resolve()
            if not file_path.is_relative_to(self._root):
                logger.debug("traversal attempt blocked: %s", relative)
                return None
            if not file_path.is_file():
                return None
        except (OSError, ValueError):
            # NUL bytes, over-long names, symlink loops
            logger.debug("unresolvable asset path: %r", relative)
            return None
        return file_path

    def serve(self, request: Request, relative: str) -> AnyResponse | None:
        """Build the response for *relative*, or None if there is no such file."""
        file_path = self.resolve(relative)
        if file_path is None:
            return None

        stat = file_path.stat()
        size = stat.st_size
        # HTTP dates have whole-second precision.
        modified = int(stat.st_mtime)

        since = request.if_modified_since
        if since is not None and modified <= since:
            return Response(status=304, content_type=None)

        headers = {
            "Cache-Control": f"public, max-age={self._cache_max_age}",
            "Last-Modified": format_http_date(modified),
            "Expires": format_http_date(modified + self._cache_max_age),
        }
        response = FileResponse(
            path=file_path,
            length=size,
            content_type=guess_content_type(file_path),
        )

        if self._accept_ranges:
            headers["Accept-Ranges"] = "bytes"
            ranges = parse_range(request.range, size)
            # Multiple ranges degrade to the full body; no multipart output.
            if ranges is not None and len(ranges) == 1:
                (selected,) = ranges
                if not selected.is_satisfiable(size):
                    return Response(status=416, content_type=None).with_header(
                        "Content-Range", f"bytes */{size}"
                    )
                headers["Content-Range"] = selected.content_range(size)
                response = FileResponse(
                    path=file_path,
                    offset=selected.start,
                    length=selected.length,
                    status=206,
                    content_type=response.content_type,
                )

        return response.with_headers(headers)
