"""Shared fixtures: a tiny viewer bundle, hosts built on it, a sample PDF."""

import zipfile
from collections.abc import Iterator
from pathlib import Path

import pytest

from pdfhost.config import HostConfig
from pdfhost.host import Host

VIEWER_HTML = b"<!DOCTYPE html><title>viewer</title>"
DATA_BIN = bytes(range(256)) + bytes(range(244))  # 500 bytes
PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer << /Root 1 0 R >>\n%%EOF\n"


@pytest.fixture
def viewer_archive(tmp_path: Path) -> Path:
    """A zip shaped like the PDF.js generic build, with directory entries."""
    archive = tmp_path / "pdfjs.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("web/", b"")
        zf.writestr("web/viewer.html", VIEWER_HTML)
        zf.writestr("web/viewer.mjs", b"export {};")
        zf.writestr("web/viewer.css", b"body { margin: 0; }")
        zf.writestr("web/data.bin", DATA_BIN)
        zf.writestr("web/images/", b"")
        zf.writestr("web/images/loading.svg", b"<svg/>")
        zf.writestr("web/locale/en-US/viewer.ftl", b"pdfjs-title = PDF")
        zf.writestr("build/pdf.mjs", b"export const version = '4';")
    return archive


@pytest.fixture
def config(tmp_path: Path, viewer_archive: Path) -> HostConfig:
    return HostConfig(archive=viewer_archive, temp_dir=tmp_path / "assets")


@pytest.fixture
def host(config: HostConfig) -> Iterator[Host]:
    host = Host(config)
    yield host
    host.close()


@pytest.fixture
def ranged_host(tmp_path: Path, viewer_archive: Path) -> Iterator[Host]:
    host = Host(
        HostConfig(archive=viewer_archive, temp_dir=tmp_path / "ranged", accept_ranges=True)
    )
    yield host
    host.close()


@pytest.fixture
def pdf_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.pdf"
    path.write_bytes(PDF_BYTES)
    return path
