"""Tests for pdfhost.server.router: methods, path classification, errors."""

from dataclasses import replace

import pytest

from pdfhost.config import HostConfig
from pdfhost.host import Host
from pdfhost.server.router import RequestRouter, document_path, document_token
from pdfhost.testing import TestClient


class TestDocumentPaths:
    def test_round_trip(self) -> None:
        assert document_token(document_path("abc")) == "abc"

    @pytest.mark.parametrize(
        ("path", "token"),
        [
            ("/doc/abc.pdf", "abc"),
            ("/DOC/abc.PDF", "abc"),
            ("/doc/nested/abc.pdf", "abc"),
            ("/doc/abc", None),
            ("/doc/.pdf", None),
            ("/web/abc.pdf", None),
        ],
    )
    def test_document_token(self, path, token) -> None:
        assert document_token(path) == token


class TestMethods:
    async def test_options_gives_204_with_allow(self, host: Host) -> None:
        async with TestClient(host) as client:
            response = await client.options("*")
        assert response.status == 204
        assert response.header("allow") == "OPTIONS, GET, HEAD"
        assert response.body == b""

    async def test_options_on_any_path(self, host: Host) -> None:
        async with TestClient(host) as client:
            response = await client.options("/web/viewer.html")
        assert response.status == 204

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH", "TRACE"])
    async def test_other_methods_give_405(self, host: Host, method: str) -> None:
        async with TestClient(host) as client:
            response = await client.request(method, "/web/viewer.html")
        assert response.status == 405
        assert response.header("allow") == "OPTIONS, GET, HEAD"

    async def test_lowercase_method_is_normalised(self, host: Host) -> None:
        async with TestClient(host) as client:
            response = await client.request("get", "/web/viewer.html")
        assert response.status == 200


class TestErrors:
    async def test_unroutable_path_is_404(self, host: Host) -> None:
        async with TestClient(host) as client:
            response = await client.get("/nothing/here")
        assert response.status == 404
        assert response.text == "Not Found"

    async def test_unexpected_exception_gives_500(self, host: Host, monkeypatch) -> None:
        def boom(self, request):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(RequestRouter, "route", boom)
        async with TestClient(host) as client:
            response = await client.get("/web/viewer.html")
        assert response.status == 500
        assert response.text == "Internal Server Error"

    async def test_debug_500_includes_exception(self, config, monkeypatch) -> None:
        def boom(self, request):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(RequestRouter, "route", boom)
        host = Host(replace(config, debug=True))
        try:
            async with TestClient(host) as client:
                response = await client.get("/web/viewer.html")
        finally:
            host.close()
        assert response.status == 500
        assert "RuntimeError: kaboom" in response.text

    async def test_extraction_failure_gives_500_for_assets(self, tmp_path) -> None:
        host = Host(HostConfig(archive=tmp_path / "missing.zip", temp_dir=tmp_path / "a"))
        try:
            client = TestClient(host)
            response = await client.get("/web/viewer.html")
        finally:
            host.close()
        assert response.status == 500

    async def test_non_http_scope_is_ignored(self, host: Host) -> None:
        sent: list[dict] = []

        async def receive() -> dict:
            return {"type": "lifespan.startup"}

        async def send(message: dict) -> None:
            sent.append(message)

        await host({"type": "lifespan"}, receive, send)
        assert sent == []

    async def test_failure_after_headers_sends_no_second_start(self, host: Host) -> None:
        host.wait_until_ready()
        sent: list[dict] = []

        async def receive() -> dict:
            return {"type": "http.request", "body": b"", "more_body": False}

        async def send(message: dict) -> None:
            sent.append(message)
            if message["type"] == "http.response.body":
                raise OSError("client went away")

        scope = {"type": "http", "method": "GET", "path": "/web/viewer.html", "headers": []}
        await host(scope, receive, send)
        assert [m["type"] for m in sent] == ["http.response.start", "http.response.body"]
        assert sent[0]["status"] == 200
