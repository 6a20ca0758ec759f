"""Host configuration.

HostConfig is a frozen dataclass, immutable once created. ``validate()``
checks it before a host is built from it.
"""

import ipaddress
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from pdfhost.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class HostConfig:
    """Host configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = HostConfig(accept_ranges=True, archive="vendor/pdfjs.zip")
    """

    # Server (loopback only; port 0 lets the OS pick)
    host: str = "127.0.0.1"
    port: int = 0
    public_host: str = "localhost"  # Host name used in generated URLs
    debug: bool = False
    break_on_error: bool = False  # Pause in an attached debugger on 500s

    # Partial content for viewer assets, off by default
    accept_ranges: bool = False

    # Registered documents
    url_lifetime: float = 30 * 60  # Sliding expiration, seconds
    viewer_path: str = "/web/viewer.html"

    # Caching headers
    cache_max_age: int = 86400

    # Viewer bundle
    archive: str | Path | None = None  # None = packaged pdfhost/pdfjs.zip
    temp_dir: str | Path | None = None  # None = {tempdir}/{temp_dir_name}-{pid}
    temp_dir_name: str = "pdfhost"

    # I/O
    chunk_size: int = 64 * 1024

    # Lifecycle
    startup_timeout: float = 10.0
    shutdown_timeout: float = 5.0

    # Logging (forwarded to uvicorn)
    log_level: str = "warning"

    @property
    def asset_root(self) -> Path:
        """Directory the viewer bundle is extracted into."""
        if self.temp_dir is not None:
            return Path(self.temp_dir)
        return Path(tempfile.gettempdir()) / f"{self.temp_dir_name}-{os.getpid()}"

    def validate(self) -> None:
        """Raise ``ConfigurationError`` if the configuration is unusable."""
        try:
            address = ipaddress.ip_address(self.host)
        except ValueError as exc:
            msg = f"host must be a loopback IP address, got {self.host!r}"
            raise ConfigurationError(msg) from exc
        if not address.is_loopback:
            msg = f"host must be a loopback address, got {self.host!r}"
            raise ConfigurationError(msg)
        if not 0 <= self.port <= 65535:
            msg = f"port out of range: {self.port}"
            raise ConfigurationError(msg)
        if self.url_lifetime <= 0:
            msg = "url_lifetime must be positive"
            raise ConfigurationError(msg)
        if self.chunk_size <= 0:
            msg = "chunk_size must be positive"
            raise ConfigurationError(msg)
        if not self.viewer_path.startswith("/"):
            msg = f"viewer_path must start with '/', got {self.viewer_path!r}"
            raise ConfigurationError(msg)
