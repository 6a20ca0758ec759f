"""Request routing: method check, then document-or-asset dispatch.

Routes:

- ``OPTIONS *``              → 204 with ``Allow``
- ``GET|HEAD /doc/{t}.pdf``  → registered document ``t``
- ``GET|HEAD`` anything else → file under the extracted viewer root
- any other method           → 405

Everything that finds nothing raises ``NotFound``. Unexpected errors
propagate to the ASGI handler, which turns them into 500s.
"""

import logging

from pdfhost.assets import AssetExtractor
from pdfhost.errors import MethodNotAllowed, NotFound
from pdfhost.http.request import Request
from pdfhost.http.response import AnyResponse, Response
from pdfhost.registry import DocumentRegistry
from pdfhost.server.documents import DocumentResponder
from pdfhost.server.static import StaticFileResponder

logger = logging.getLogger("pdfhost.server")

ALLOWED_METHODS = ("OPTIONS", "GET", "HEAD")
DOCUMENT_PREFIX = "/doc/"
DOCUMENT_SUFFIX = ".pdf"


def is_document_path(path: str) -> bool:
    """True if *path* lives under the document prefix (case-insensitive)."""
    return path.lower().startswith(DOCUMENT_PREFIX)


def document_token(path: str) -> str | None:
    """Extract the token from ``/doc/{token}.pdf``, or None if the shape is wrong."""
    if not is_document_path(path):
        return None
    filename = path.rsplit("/", 1)[-1]
    if not filename.lower().endswith(DOCUMENT_SUFFIX):
        return None
    return filename[: -len(DOCUMENT_SUFFIX)] or None


def document_path(token: str) -> str:
    """The request path that serves *token*."""
    return f"{DOCUMENT_PREFIX}{token}{DOCUMENT_SUFFIX}"


class RequestRouter:
    """Single entry point for every request.

    Stateless per call and safe to use from many requests at once; the
    only shared mutable state it touches is the registry, which locks
    internally.
    """

    __slots__ = ("_assets", "_documents", "_registry", "_static")

    def __init__(
        self,
        *,
        registry: DocumentRegistry,
        static: StaticFileResponder,
        documents: DocumentResponder,
        assets: AssetExtractor | None = None,
    ) -> None:
        self._registry = registry
        self._static = static
        self._documents = documents
        self._assets = assets

    def route(self, request: Request) -> AnyResponse:
        """Produce the response for *request*.

        Raises:
            MethodNotAllowed: For methods other than OPTIONS, GET and HEAD.
            NotFound: When no document or asset matches.
        """
        if request.method == "OPTIONS":
            return Response(status=204, content_type=None).with_header(
                "Allow", ", ".join(ALLOWED_METHODS)
            )
        if request.method not in ("GET", "HEAD"):
            raise MethodNotAllowed(ALLOWED_METHODS)

        response: AnyResponse | None = None
        if is_document_path(request.path):
            token = document_token(request.path)
            source = self._registry.lookup(token) if token else None
            if source is not None:
                response = self._documents.serve(request, source)
            else:
                logger.debug("no live document for %s", request.path)
        else:
            if self._assets is not None:
                # One-time barrier: free once extraction has completed.
                self._assets.wait()
            response = self._static.serve(request, request.path)

        if response is None:
            raise NotFound
        return response
