"""ASGI handler. Translates ASGI scope/messages to pdfhost types.

The only component that touches raw ASGI directly. Converts the scope
to a Request, routes it, and sends the response back through send().
This is the error boundary: nothing propagates to the transport. A
failure before headers are sent becomes a 4xx/500 response; one after
leaves the body unfinished, which makes the server drop the connection.
"""

import logging
from collections.abc import MutableMapping
from typing import Any

import anyio.to_thread

from pdfhost._internal.asgi import Receive, Scope, Send
from pdfhost.errors import HTTPError
from pdfhost.http.request import Request
from pdfhost.http.response import AnyResponse
from pdfhost.server.errors import handle_http_error, handle_internal_error
from pdfhost.server.router import RequestRouter
from pdfhost.server.sender import DEFAULT_CHUNK_SIZE, send_response

logger = logging.getLogger("pdfhost.server")


async def handle_request(
    scope: Scope,
    receive: Receive,  # noqa: ARG001
    send: Send,
    *,
    router: RequestRouter,
    debug: bool = False,
    break_on_error: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    try:
        # Routing stats files and may wait on extraction; keep it off the loop.
        response: AnyResponse = await anyio.to_thread.run_sync(router.route, request)
    except HTTPError as exc:
        response = handle_http_error(exc, request, debug)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug, break_on_error=break_on_error)

    logger.debug("%d %s %s", response.status, request.method, request.path)

    started = False

    async def tracked_send(message: MutableMapping[str, Any]) -> None:
        nonlocal started
        if message["type"] == "http.response.start":
            started = True
        await send(message)

    try:
        await send_response(response, tracked_send, head=request.is_head, chunk_size=chunk_size)
    except Exception as exc:
        if started:
            # The body stays incomplete; the server closes the connection.
            logger.exception("aborted %s %s mid-body", request.method, request.path)
            return
        # Raised before headers went out (file vanished, stream factory failed).
        fallback = handle_internal_error(exc, request, debug, break_on_error=break_on_error)
        await send_response(fallback, send, head=request.is_head)
