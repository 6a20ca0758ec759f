"""Loopback transport: runs the ASGI app on uvicorn in a background thread.

uvicorn normally owns the main thread and binds its own socket. An
embedded host needs neither: the socket is bound here (port 0 lets the
OS choose, and the port is known before serving starts) and the server
loop runs on a daemon thread that ``stop()`` shuts down gracefully,
letting in-flight responses finish before returning.
"""

from __future__ import annotations

import logging
import socket
import threading
import time
from typing import Any

import uvicorn

logger = logging.getLogger("pdfhost.server")


class LoopbackServer:
    """Start/stop wrapper around ``uvicorn.Server`` for a loopback socket.

    ``start()`` and ``stop()`` are idempotent. A stopped server can be
    started again; it binds a new socket (and so may get a new port).
    """

    __slots__ = (
        "_app",
        "_bound_port",
        "_host",
        "_lock",
        "_log_level",
        "_port",
        "_server",
        "_shutdown_timeout",
        "_socket",
        "_startup_timeout",
        "_thread",
    )

    def __init__(
        self,
        app: Any,
        *,
        host: str = "127.0.0.1",
        port: int = 0,
        log_level: str = "warning",
        startup_timeout: float = 10.0,
        shutdown_timeout: float = 5.0,
    ) -> None:
        self._app = app
        self._host = host
        self._port = port
        self._log_level = log_level
        self._startup_timeout = startup_timeout
        self._shutdown_timeout = shutdown_timeout
        self._lock = threading.Lock()
        self._server: uvicorn.Server | None = None
        self._socket: socket.socket | None = None
        self._thread: threading.Thread | None = None
        self._bound_port: int | None = None

    @property
    def is_running(self) -> bool:
        """True while the server thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def port(self) -> int:
        """The bound port. Raises RuntimeError before the first start()."""
        if self._bound_port is None:
            msg = "server has not been started"
            raise RuntimeError(msg)
        return self._bound_port

    def start(self) -> None:
        """Bind the socket and serve on a background thread, if not already."""
        with self._lock:
            if self.is_running:
                return

            family = socket.AF_INET6 if ":" in self._host else socket.AF_INET
            sock = socket.socket(family, socket.SOCK_STREAM)
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock.bind((self._host, self._port))
                self._bound_port = sock.getsockname()[1]
            except OSError:
                sock.close()
                raise

            config = uvicorn.Config(
                self._app,
                lifespan="off",
                log_config=None,
                log_level=self._log_level,
                access_log=False,
                timeout_graceful_shutdown=self._shutdown_timeout,
            )
            server = uvicorn.Server(config)
            thread = threading.Thread(
                target=server.run,
                kwargs={"sockets": [sock]},
                name="pdfhost-server",
                daemon=True,
            )
            self._server, self._socket, self._thread = server, sock, thread
            thread.start()

            deadline = time.monotonic() + self._startup_timeout
            while not server.started:
                if not thread.is_alive():
                    self._release()
                    msg = "server thread exited during startup"
                    raise RuntimeError(msg)
                if time.monotonic() > deadline:
                    self._shutdown()
                    msg = f"server did not start within {self._startup_timeout}s"
                    raise TimeoutError(msg)
                time.sleep(0.01)

            logger.info("serving on http://%s:%d", self._host, self.port)

    def stop(self) -> None:
        """Stop accepting connections and wait for in-flight responses."""
        with self._lock:
            if self._thread is None:
                return
            self._shutdown()
            logger.info("server stopped")

    def _shutdown(self) -> None:
        assert self._server is not None and self._thread is not None
        self._server.should_exit = True
        self._thread.join(self._shutdown_timeout + 5.0)
        if self._thread.is_alive():
            logger.warning("server thread did not exit within the shutdown timeout")
        self._release()

    def _release(self) -> None:
        if self._socket is not None:
            self._socket.close()
        self._socket = None
        self._server = None
        self._thread = None
