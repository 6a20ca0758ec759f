"""pdfhost CLI: preview local documents in the system browser.

Entry point registered as ``pdfhost`` in ``pyproject.toml``::

    [project.scripts]
    pdfhost = "pdfhost.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``pdfhost`` command."""
    parser = argparse.ArgumentParser(
        prog="pdfhost",
        description="pdfhost: preview documents through a local PDF.js viewer.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="More logging (-v info, -vv debug)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- pdfhost open -----------------------------------------------------
    open_parser = subparsers.add_parser("open", help="Serve documents and open them")
    open_parser.add_argument("files", nargs="+", help="Documents to preview")
    open_parser.add_argument(
        "--stream",
        action="store_true",
        help="Register files as stream factories instead of paths",
    )
    open_parser.add_argument(
        "--accept-ranges",
        action="store_true",
        help="Serve viewer assets with byte-range support",
    )
    open_parser.add_argument(
        "--archive",
        default=None,
        help="Viewer zip archive (default: the bundled PDF.js)",
    )
    open_parser.add_argument("--port", type=int, default=0, help="Port (default: OS-assigned)")
    open_parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Print the URLs without opening a browser",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command == "open":
        from pdfhost.cli._open import open_documents

        open_documents(args)
