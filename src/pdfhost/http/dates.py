"""HTTP-date formatting and parsing (RFC 9110 §5.6.7).

Used for ``Last-Modified``, ``Expires`` and ``If-Modified-Since``.
Timestamps are POSIX seconds; HTTP dates carry whole seconds only.
"""

from datetime import UTC
from email.utils import formatdate, parsedate_to_datetime


def format_http_date(timestamp: float) -> str:
    """Format *timestamp* as an IMF-fixdate, e.g. ``Sun, 06 Nov 1994 08:49:37 GMT``."""
    return formatdate(int(timestamp), usegmt=True)


def parse_http_date(value: str | None) -> int | None:
    """Parse an HTTP date into whole POSIX seconds.

    Returns ``None`` for a missing or malformed value so callers can
    treat a bad ``If-Modified-Since`` as if it were absent.
    Dates without a zone are taken as UTC.
    """
    if not value or not value.strip():
        return None
    try:
        parsed = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp())
