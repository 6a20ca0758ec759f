"""pdfhost exception hierarchy.

Shared across the router, responders, and host so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class PdfHostError(Exception):
    """Base for all pdfhost-specific errors."""


class ConfigurationError(PdfHostError):
    """Raised when host configuration is invalid.

    Caught by ``HostConfig.validate()`` callers at construction time.
    """


class ExtractionError(PdfHostError):
    """The bundled viewer archive could not be extracted.

    Raised from the background extraction task and re-raised to every
    caller waiting on the completion barrier.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(PdfHostError):
    """An error that maps directly to an HTTP status code.

    Raised by the router and responders. The ASGI handler catches
    these and turns them into bodyless-or-short responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no asset or live document matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: only OPTIONS, GET and HEAD are served.

    Carries an ``Allow`` header listing the supported methods.
    """

    def __init__(self, allowed: tuple[str, ...], detail: str = "Method Not Allowed") -> None:
        super().__init__(
            status=405,
            detail=detail,
            headers=(("Allow", ", ".join(allowed)),),
        )

