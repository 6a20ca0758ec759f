"""Error handling for pdfhost requests.

Maps HTTPError exceptions and unexpected failures to Response objects.
Nothing raised while building a response ever reaches the transport.
"""

import logging
import sys

from pdfhost.errors import HTTPError
from pdfhost.http.request import Request
from pdfhost.http.response import Response

logger = logging.getLogger("pdfhost.server")

_REASONS = {
    404: "Not Found",
    405: "Method Not Allowed",
    500: "Internal Server Error",
}


def handle_http_error(exc: HTTPError, request: Request, debug: bool = False) -> Response:
    """Map an HTTPError to a short plain-text Response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    detail = exc.detail or _REASONS.get(exc.status, f"Error {exc.status}")
    if debug:
        detail = f"{exc.status}: {detail} ({request.method} {request.path})"

    resp = Response(body=detail, status=exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(
    exc: Exception,
    request: Request,
    debug: bool = False,
    *,
    break_on_error: bool = False,
) -> Response:
    """Handle unexpected exceptions as 500 errors.

    With *break_on_error* and a debugger attached, execution pauses in
    the debugger before the error is turned into a response.
    """
    logger.exception("500 %s %s", request.method, request.path)

    if break_on_error and sys.gettrace() is not None:
        sys.breakpointhook()

    body = _REASONS[500]
    if debug:
        body = f"{body}: {type(exc).__name__}: {exc}"
    return Response(body=body, status=500)
