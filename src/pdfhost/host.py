"""The embeddable document preview host.

``Host`` ties the pieces together: it extracts the viewer bundle in
the background as soon as it is created, serves it (and registered
documents) over loopback HTTP, and hands out viewer URLs for
registered documents.

Lifecycle:
    ``Host()`` starts extraction. ``start()`` waits for it and begins
    serving; registering a document starts the server on demand.
    ``stop()`` stops serving but keeps registrations and the extracted
    bundle. ``close()`` stops, waits for extraction, deletes the bundle
    and forgets every registration. All three are idempotent, and the
    host is a context manager that closes on every exit path.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO
from urllib.parse import quote

from pdfhost._internal.asgi import Receive, Scope, Send
from pdfhost.assets import AssetExtractor
from pdfhost.config import HostConfig
from pdfhost.registry import DocumentRegistry, DocumentSource, FileSource, StreamSource
from pdfhost.server.documents import DocumentResponder
from pdfhost.server.handler import handle_request
from pdfhost.server.router import RequestRouter, document_path
from pdfhost.server.static import StaticFileResponder
from pdfhost.server.transport import LoopbackServer

logger = logging.getLogger("pdfhost.host")


class Host:
    """Loopback HTTP server for previewing documents in an embedded browser.

    Usage::

        with Host(HostConfig(accept_ranges=True)) as host:
            url = host.register_file("report.pdf")
            browser.navigate(url)

    The instance is also the ASGI application it serves, so it can be
    mounted in any ASGI server or driven in-process by
    ``pdfhost.testing.TestClient``.
    """

    __slots__ = ("_assets", "_closed", "_lock", "_router", "_server", "config", "registry")

    def __init__(self, config: HostConfig | None = None) -> None:
        self.config: HostConfig = config or HostConfig()
        self.config.validate()

        self.registry = DocumentRegistry(ttl=self.config.url_lifetime)
        self._assets = AssetExtractor(
            self.config.archive,
            self.config.asset_root,
            chunk_size=self.config.chunk_size,
        )
        self._router = RequestRouter(
            registry=self.registry,
            static=StaticFileResponder(
                self.config.asset_root,
                accept_ranges=self.config.accept_ranges,
                cache_max_age=self.config.cache_max_age,
            ),
            documents=DocumentResponder(
                cache_max_age=self.config.cache_max_age,
                chunk_size=self.config.chunk_size,
            ),
            assets=self._assets,
        )
        self._server = LoopbackServer(
            self,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level,
            startup_timeout=self.config.startup_timeout,
            shutdown_timeout=self.config.shutdown_timeout,
        )
        self._closed = False
        self._lock = threading.Lock()

        self._assets.start()

    # -- Properties --

    @property
    def asset_root(self) -> Path:
        """Directory holding the extracted viewer bundle."""
        return self._assets.root

    @property
    def port(self) -> int:
        """The port the server listens on (available after ``start()``)."""
        return self._server.port

    @property
    def is_running(self) -> bool:
        """True while the server is accepting connections."""
        return self._server.is_running

    # -- Lifecycle --

    def wait_until_ready(self, timeout: float | None = None) -> Path:
        """Block until the viewer bundle is extracted.

        Raises:
            ExtractionError: If extraction failed.
        """
        return self._assets.wait(timeout)

    def start(self) -> None:
        """Start serving if not already serving."""
        with self._lock:
            if self._closed:
                msg = "host is closed"
                raise RuntimeError(msg)
            self.wait_until_ready()
            self._server.start()

    def stop(self) -> None:
        """Stop serving. Registrations and extracted files are kept."""
        self._server.stop()

    def close(self) -> None:
        """Stop serving, delete the extracted bundle, forget registrations."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        try:
            self._server.stop()
        finally:
            self._assets.cleanup()
            self.registry.clear()
            logger.info("host closed")

    def __enter__(self) -> Host:
        try:
            self.start()
        except BaseException:
            self.close()
            raise
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # -- Registration --

    def register_file(self, path: str | Path) -> str:
        """Register a local file and return the URL that previews it.

        The file is read fresh on every request until the URL expires.

        Raises:
            FileNotFoundError: If *path* is not an existing file.
        """
        file_path = Path(path).resolve()
        if not file_path.is_file():
            raise FileNotFoundError(file_path)
        return self._register(FileSource(file_path))

    def register_stream(self, factory: Callable[[], BinaryIO]) -> str:
        """Register a stream factory and return the URL that previews it.

        *factory* is called once per GET request for a fresh binary
        stream, which is closed after the response. HEAD requests do
        not call it.
        """
        if not callable(factory):
            msg = f"factory must be callable, got {type(factory).__name__}"
            raise TypeError(msg)
        return self._register(StreamSource(factory))

    def url_for(self, token: str) -> str:
        """The viewer URL that opens the document registered as *token*."""
        file_param = quote(document_path(token), safe="")
        return (
            f"http://{self.config.public_host}:{self.port}"
            f"{self.config.viewer_path}?file={file_param}"
        )

    def _register(self, source: DocumentSource) -> str:
        self.start()
        token = self.registry.register(source)
        return self.url_for(token)

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI entry point."""
        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            debug=self.config.debug,
            break_on_error=self.config.break_on_error,
            chunk_size=self.config.chunk_size,
        )
