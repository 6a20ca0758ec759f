"""Read-only request headers keyed case-insensitively.

The server only ever consults a handful of request headers (``Range``,
``If-Modified-Since``), always the first occurrence, so the lookup
table is built once from the ASGI byte pairs and never changes.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """First-value header mapping with lower-cased names.

    ``raw`` keeps the original ASGI pairs, duplicates included.
    """

    __slots__ = ("_first", "_raw")

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        self._raw = tuple((bytes(name), bytes(value)) for name, value in raw)
        first: dict[str, str] = {}
        for name, value in self._raw:
            first.setdefault(name.decode("latin-1").lower(), value.decode("latin-1"))
        self._first = first

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> Headers:
        """Headers from ``(name, value)`` strings, as a client would send them."""
        return cls((name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs)

    def __getitem__(self, name: str) -> str:
        return self._first[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._first

    def __iter__(self) -> Iterator[str]:
        return iter(self._first)

    def __len__(self) -> int:
        return len(self._first)

    def __repr__(self) -> str:
        return f"Headers({self._first!r})"

    def get(self, name: str, default: str | None = None) -> str | None:  # type: ignore[override]
        return self._first.get(name.lower(), default)

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        return self._raw
