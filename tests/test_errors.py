"""Tests for the exception hierarchy and error → response mapping."""

import pytest

from pdfhost.errors import (
    ConfigurationError,
    ExtractionError,
    HTTPError,
    MethodNotAllowed,
    NotFound,
    PdfHostError,
)
from pdfhost.http.headers import Headers
from pdfhost.http.request import Request
from pdfhost.server.errors import handle_http_error, handle_internal_error


def _request() -> Request:
    return Request(method="GET", path="/missing", headers=Headers())


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_type", [ConfigurationError, ExtractionError, HTTPError, NotFound, MethodNotAllowed]
    )
    def test_all_derive_from_base(self, exc_type: type) -> None:
        assert issubclass(exc_type, PdfHostError)

    def test_not_found(self) -> None:
        exc = NotFound()
        assert exc.status == 404
        assert str(exc) == "404: Not Found"

    def test_method_not_allowed_carries_allow(self) -> None:
        exc = MethodNotAllowed(("OPTIONS", "GET", "HEAD"))
        assert exc.status == 405
        assert exc.headers == (("Allow", "OPTIONS, GET, HEAD"),)

    def test_bare_status_str(self) -> None:
        assert str(HTTPError(status=418)) == "418"


class TestHandleHttpError:
    def test_detail_is_body(self) -> None:
        response = handle_http_error(NotFound(), _request())
        assert response.status == 404
        assert response.text == "Not Found"

    def test_headers_copied(self) -> None:
        response = handle_http_error(MethodNotAllowed(("GET",)), _request())
        assert response.header("Allow") == "GET"

    def test_reason_fallback(self) -> None:
        response = handle_http_error(HTTPError(status=405), _request())
        assert response.text == "Method Not Allowed"

    def test_debug_adds_request_line(self) -> None:
        response = handle_http_error(NotFound(), _request(), debug=True)
        assert response.text == "404: Not Found (GET /missing)"


class TestHandleInternalError:
    def test_generic_body(self) -> None:
        response = handle_internal_error(ValueError("secret"), _request())
        assert response.status == 500
        assert response.text == "Internal Server Error"

    def test_debug_shows_exception(self) -> None:
        response = handle_internal_error(ValueError("secret"), _request(), debug=True)
        assert response.text == "Internal Server Error: ValueError: secret"

    def test_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        try:
            raise ValueError("boom")
        except ValueError as exc:
            handle_internal_error(exc, _request())
        assert any(r.name == "pdfhost.server" and r.exc_info for r in caplog.records)

    def test_break_on_error_without_debugger(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []
        monkeypatch.setattr("sys.breakpointhook", lambda: calls.append(True))
        monkeypatch.setattr("sys.gettrace", lambda: None)
        handle_internal_error(ValueError("x"), _request(), break_on_error=True)
        assert calls == []

    def test_break_on_error_with_debugger(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []
        monkeypatch.setattr("sys.breakpointhook", lambda: calls.append(True))
        monkeypatch.setattr("sys.gettrace", lambda: object())
        handle_internal_error(ValueError("x"), _request(), break_on_error=True)
        assert calls == [True]
