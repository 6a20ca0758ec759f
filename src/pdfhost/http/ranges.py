"""``Range`` header parsing (``bytes=start-end`` grammar).

Parsing is permissive: fragments that don't look like a range are
dropped rather than rejected, and a header without ``=`` is treated
as absent. Bounds checking is the caller's job, see
``ByteRange.is_satisfiable``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_RANGE_SPEC = re.compile(r"(\d*)-(\d*)")


@dataclass(frozen=True, slots=True)
class ByteRange:
    """An inclusive ``(start, end)`` byte offset pair."""

    start: int
    end: int

    @property
    def length(self) -> int:
        """Number of bytes covered by the range."""
        return self.end - self.start + 1

    def is_satisfiable(self, size: int) -> bool:
        """True if ``0 <= start <= end <= size - 1``."""
        return 0 <= self.start <= self.end < size

    def content_range(self, size: int) -> str:
        """``Content-Range`` header value for a 206 response."""
        return f"bytes {self.start}-{self.end}/{size}"


def parse_range(value: str | None, size: int) -> list[ByteRange] | None:
    """Parse a ``Range`` header value against a resource of *size* bytes.

    Returns ``None`` when there is no usable header (absent, blank, or
    missing ``=``). Otherwise returns the ranges in header order::

        parse_range("bytes=0-99", 500)     # [ByteRange(0, 99)]
        parse_range("bytes=100-", 500)     # [ByteRange(100, 499)]
        parse_range("bytes=-50", 500)      # [ByteRange(449, 499)]

    A suffix longer than the resource is clamped to start at 0.
    The list may be empty when nothing after ``=`` matched.
    """
    if not value or not value.strip():
        return None
    _, sep, specs = value.partition("=")
    if not sep:
        return None

    last = size - 1
    ranges: list[ByteRange] = []
    for match in _RANGE_SPEC.finditer(specs):
        first, second = match.group(1), match.group(2)
        if first and second:
            ranges.append(ByteRange(int(first), int(second)))
        elif first:
            ranges.append(ByteRange(int(first), last))
        elif second:
            ranges.append(ByteRange(max(last - int(second), 0), last))
    return ranges
