"""pdfhost: preview documents in any embedded browser over loopback HTTP.

Serves a bundled PDF.js viewer plus registered documents behind
short-lived, unguessable URLs.

Basic usage::

    from pdfhost import Host

    with Host() as host:
        url = host.register_file("report.pdf")
        webview.load_url(url)

Documents can also come from a stream factory, called once per request::

    url = host.register_stream(lambda: open("report.pdf", "rb"))
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DocumentRegistry",
    "ExtractionError",
    "FileSource",
    "HTTPError",
    "Host",
    "HostConfig",
    "MethodNotAllowed",
    "NotFound",
    "PdfHostError",
    "StreamSource",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import pdfhost`` fast (uvicorn is only imported with ``Host``).
    """
    if name == "Host":
        from pdfhost.host import Host

        return Host

    if name == "HostConfig":
        from pdfhost.config import HostConfig

        return HostConfig

    if name in ("DocumentRegistry", "FileSource", "StreamSource"):
        from pdfhost import registry as _registry

        return getattr(_registry, name)

    if name in (
        "ConfigurationError",
        "ExtractionError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "PdfHostError",
    ):
        from pdfhost import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
