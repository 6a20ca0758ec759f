"""Token → document registry with sliding expiration.

The host registers a document (a local file or a stream factory) and
gets back an unguessable token to embed in the viewer URL. Entries
stay reachable while they keep being requested; one left idle for a
full ``ttl`` disappears.

Thread safety:
    A single dict guarded by one ``threading.Lock``. Requests are served
    from the event loop and worker threads at the same time as the host
    application registers new documents; every read and write of the
    dict (including the last-access refresh) happens under the lock, and
    an entry is only published once it is fully built.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, TypeAlias

logger = logging.getLogger("pdfhost.registry")


@dataclass(frozen=True, slots=True)
class FileSource:
    """A document backed by a local file, read fresh on every request."""

    path: Path


@dataclass(frozen=True, slots=True)
class StreamSource:
    """A document produced on demand.

    ``factory`` is called once per GET and must return a new readable
    binary stream; the server closes it when the response ends.
    """

    factory: Callable[[], BinaryIO]


DocumentSource: TypeAlias = FileSource | StreamSource


@dataclass(slots=True)
class RegistryEntry:
    """A registered source and the clock value of its last access."""

    token: str
    source: DocumentSource
    last_access: float


class DocumentRegistry:
    """Maps opaque tokens to document sources.

    Usage::

        registry = DocumentRegistry(ttl=30 * 60)
        token = registry.register(FileSource(Path("report.pdf")))
        source = registry.lookup(token)  # None once expired
    """

    __slots__ = ("_clock", "_entries", "_lock", "ttl")

    def __init__(
        self,
        ttl: float = 30 * 60,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, RegistryEntry] = {}
        self._lock = threading.Lock()

    def register(self, source: DocumentSource) -> str:
        """Store *source* under a fresh token and return the token."""
        token = str(uuid.uuid4())
        with self._lock:
            now = self._clock()
            self._purge_locked(now)
            self._entries[token] = RegistryEntry(token, source, now)
        logger.debug("registered %s (%s)", token, type(source).__name__)
        return token

    def lookup(self, token: str) -> DocumentSource | None:
        """Return the source for *token*, or None if unknown or expired.

        A hit refreshes the entry's last access, extending its life by
        another full ``ttl``.
        """
        with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            now = self._clock()
            if now - entry.last_access >= self.ttl:
                del self._entries[token]
                logger.debug("expired %s", token)
                return None
            entry.last_access = now
            return entry.source

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        with self._lock:
            return self._purge_locked(self._clock())

    def clear(self) -> None:
        """Forget every registered document."""
        with self._lock:
            self._entries.clear()

    def _purge_locked(self, now: float) -> int:
        expired = [t for t, e in self._entries.items() if now - e.last_access >= self.ttl]
        for token in expired:
            del self._entries[token]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, token: object) -> bool:
        # Does not refresh the entry.
        with self._lock:
            entry = self._entries.get(token)  # type: ignore[arg-type]
            return entry is not None and self._clock() - entry.last_access < self.ttl
