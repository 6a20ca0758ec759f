"""Viewer bundle extraction.

The PDF.js viewer ships as a zip archive. ``AssetExtractor`` unpacks it
once per host into a temp directory on a background thread, and
exposes the result as a ``concurrent.futures.Future`` so that starting
the server and registering documents can wait for it without a lock
on the request path.
"""

from __future__ import annotations

import logging
import shutil
import threading
import zipfile
from concurrent.futures import Future
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from pdfhost.errors import ExtractionError

logger = logging.getLogger("pdfhost.assets")

BUNDLED_ARCHIVE = "pdfjs.zip"


def bundled_archive() -> Traversable:
    """The viewer archive packaged alongside this module."""
    return resources.files("pdfhost").joinpath(BUNDLED_ARCHIVE)


class AssetExtractor:
    """Unpacks a zip archive into *root*, once, off the calling thread.

    Usage::

        extractor = AssetExtractor("pdfjs.zip", Path("/tmp/pdfhost-123"))
        extractor.start()
        ...
        extractor.wait()  # raises ExtractionError if unpacking failed

    Failures are never swallowed: every ``wait()`` re-raises the same
    ``ExtractionError``.
    """

    __slots__ = ("_archive", "_chunk_size", "_future", "_lock", "root")

    def __init__(
        self,
        archive: str | Path | Traversable | None,
        root: Path,
        *,
        chunk_size: int = 64 * 1024,
    ) -> None:
        self._archive = Path(archive) if isinstance(archive, str) else archive
        self.root = root
        self._chunk_size = chunk_size
        self._future: Future[Path] | None = None
        self._lock = threading.Lock()

    @property
    def done(self) -> bool:
        """True once extraction has finished, successfully or not."""
        return self._future is not None and self._future.done()

    def start(self) -> Future[Path]:
        """Begin extraction if it hasn't started; return the completion signal."""
        with self._lock:
            if self._future is None:
                self._future = Future()
                self._future.set_running_or_notify_cancel()
                thread = threading.Thread(
                    target=self._run, name="pdfhost-extract", daemon=True
                )
                thread.start()
            return self._future

    def wait(self, timeout: float | None = None) -> Path:
        """Block until the bundle is on disk and return its root.

        Raises:
            ExtractionError: If extraction failed.
            TimeoutError: If *timeout* elapsed first.
        """
        return self.start().result(timeout)

    def cleanup(self) -> None:
        """Wait for extraction to settle, then delete the extracted tree."""
        if self._future is not None:
            # A failed extraction still leaves partial output to remove.
            self._future.exception()
        if not self.root.exists():
            return
        try:
            shutil.rmtree(self.root)
        except OSError:
            logger.warning("could not remove %s", self.root, exc_info=True)
        else:
            logger.info("removed %s", self.root)

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------

    def _run(self) -> None:
        assert self._future is not None
        try:
            self._extract()
        except Exception as exc:
            error = exc if isinstance(exc, ExtractionError) else ExtractionError(str(exc))
            if error is not exc:
                error.__cause__ = exc
            logger.exception("viewer extraction into %s failed", self.root)
            self._future.set_exception(error)
        else:
            self._future.set_result(self.root)

    def _extract(self) -> None:
        archive = self._archive if self._archive is not None else bundled_archive()
        if not archive.is_file():
            msg = f"viewer archive not found: {archive}"
            raise ExtractionError(msg)

        self.root.mkdir(parents=True, exist_ok=True)
        root = self.root.resolve()
        count = 0

        with archive.open("rb") as fh, zipfile.ZipFile(fh) as bundle:
            for info in bundle.infolist():
                target = (root / info.filename).resolve()
                if not target.is_relative_to(root):
                    msg = f"archive entry escapes the extraction root: {info.filename!r}"
                    raise ExtractionError(msg)

                # Directory-only entries just create the directory.
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)

                with bundle.open(info) as src, target.open("wb") as dest:
                    shutil.copyfileobj(src, dest, self._chunk_size)
                count += 1

        logger.info("extracted %d files into %s", count, self.root)
