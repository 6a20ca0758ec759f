"""``pdfhost open``: register documents, open them, serve until interrupted."""

import argparse
import sys
import threading
import webbrowser
from pathlib import Path

from pdfhost.config import HostConfig
from pdfhost.errors import PdfHostError
from pdfhost.host import Host

_UVICORN_LEVELS = {0: "warning", 1: "info"}


def open_documents(args: argparse.Namespace, *, stop: threading.Event | None = None) -> None:
    """Register ``args.files``, print their URLs, and serve until Ctrl+C.

    *stop* lets callers (tests) end the serve loop without a signal.
    """
    paths = [Path(f) for f in args.files]
    missing = [p for p in paths if not p.is_file()]
    if missing:
        for p in missing:
            print(f"Error: no such file: {p}", file=sys.stderr)
        raise SystemExit(1)

    config = HostConfig(
        port=args.port,
        accept_ranges=args.accept_ranges,
        archive=args.archive,
        log_level=_UVICORN_LEVELS.get(getattr(args, "verbose", 0), "debug"),
    )

    try:
        with Host(config) as host:
            _serve(host, paths, args, stop or threading.Event())
    except (PdfHostError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def _serve(host: Host, paths: list[Path], args: argparse.Namespace, stop: threading.Event) -> None:
    for path in paths:
        if args.stream:
            url = host.register_stream(lambda p=path: p.open("rb"))
        else:
            url = host.register_file(path)
        print(f"{path.name}: {url}")
        if not args.no_browser:
            # Browser opening is best-effort.
            webbrowser.open(url, new=2)

    print("\nPress Ctrl+C to stop.")
    try:
        stop.wait()
    except KeyboardInterrupt:
        pass
