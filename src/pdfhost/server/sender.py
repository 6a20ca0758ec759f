"""ASGI response sending. Translates pdfhost responses to ASGI messages.

Handles in-memory, file-span, and chunked streaming responses. File
and stream I/O runs on anyio worker threads so a slow disk or a slow
stream factory never blocks the event loop.

Failure contract: every error propagates to the caller. Before the
response start message the caller can still answer 500. After it, the
final body message is never sent, so the server drops the connection
and the client sees a truncated response instead of a short one that
looks complete.
"""

from collections.abc import Iterator

import anyio
import anyio.to_thread

from pdfhost._internal.asgi import Send
from pdfhost.http.response import AnyResponse, FileResponse, Response, StreamingResponse

DEFAULT_CHUNK_SIZE = 64 * 1024


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _raw_headers(response: AnyResponse) -> list[tuple[bytes, bytes]]:
    raw: list[tuple[bytes, bytes]] = []
    if response.content_type is not None:
        raw.append((b"content-type", response.content_type.encode("latin-1")))
    for name, value in response.headers:
        raw.append((name.lower().encode("latin-1"), value.encode("latin-1")))
    return raw


async def send_response(
    response: AnyResponse,
    send: Send,
    *,
    head: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Send any pdfhost response. *head* sends headers and status only."""
    match response:
        case FileResponse():
            await send_file_response(response, send, head=head, chunk_size=chunk_size)
        case StreamingResponse():
            await send_streaming_response(response, send, head=head)
        case Response():
            await send_body_response(response, send, head=head)


async def send_body_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send an in-memory Response with an exact Content-Length."""
    raw_headers = _raw_headers(response)
    body = response.body_bytes if _body_allowed(response.status) else b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )


async def send_file_response(
    response: FileResponse,
    send: Send,
    *,
    head: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Send ``response.length`` bytes of a file starting at ``response.offset``.

    The file is opened (read-only) before any message is sent, so a
    missing or unreadable file surfaces as an exception the caller can
    still turn into a 500. HEAD never opens the file.
    """
    raw_headers = _raw_headers(response)
    raw_headers.append((b"content-length", str(response.length).encode("latin-1")))
    start = {
        "type": "http.response.start",
        "status": response.status,
        "headers": raw_headers,
    }

    if head:
        await send(start)
        await send({"type": "http.response.body", "body": b""})
        return

    async with await anyio.open_file(response.path, "rb") as f:
        await f.seek(response.offset)
        await send(start)

        remaining = response.length
        while remaining > 0:
            chunk = await f.read(min(chunk_size, remaining))
            if not chunk:
                msg = f"{response.path} ended {remaining} bytes short of Content-Length"
                raise EOFError(msg)
            remaining -= len(chunk)
            await send(
                {
                    "type": "http.response.body",
                    "body": chunk,
                    "more_body": remaining > 0,
                }
            )
        if response.length == 0:
            await send({"type": "http.response.body", "body": b"", "more_body": False})


async def send_streaming_response(
    response: StreamingResponse,
    send: Send,
    *,
    head: bool = False,
) -> None:
    """Send a streaming response via chunked transfer encoding.

    The first chunk is pulled before headers are sent, so a stream
    factory that fails immediately still yields a clean 500. The chunk
    iterator is always closed afterwards, on every path, which is what
    releases the underlying stream.
    """
    raw_headers = _raw_headers(response)
    raw_headers.append((b"transfer-encoding", b"chunked"))
    start = {
        "type": "http.response.start",
        "status": response.status,
        "headers": raw_headers,
    }
    chunks = response.chunks

    try:
        if head:
            await send(start)
            await send({"type": "http.response.body", "body": b""})
            return

        first = await _next_chunk(chunks)
        await send(start)

        chunk = first
        while chunk is not None:
            if chunk:
                await send(
                    {
                        "type": "http.response.body",
                        "body": chunk,
                        "more_body": True,
                    }
                )
            chunk = await _next_chunk(chunks)

        await send({"type": "http.response.body", "body": b"", "more_body": False})
    finally:
        await _close_chunks(chunks)


async def _next_chunk(chunks: Iterator[bytes]) -> bytes | None:
    return await anyio.to_thread.run_sync(next, chunks, None)


async def _close_chunks(chunks: Iterator[bytes]) -> None:
    close = getattr(chunks, "close", None)
    if close is not None:
        # Shielded: a cancelled request must still release its stream.
        with anyio.CancelScope(shield=True):
            await anyio.to_thread.run_sync(close)
