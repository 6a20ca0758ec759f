"""Tests for pdfhost.http.ranges: Range header parsing."""

import pytest

from pdfhost.http.ranges import ByteRange, parse_range


class TestNoRange:
    @pytest.mark.parametrize("value", [None, "", "   ", "bytes 0-99", "0-99"])
    def test_absent_blank_or_without_equals(self, value) -> None:
        assert parse_range(value, 500) is None

    def test_nothing_after_equals_gives_empty_list(self) -> None:
        assert parse_range("bytes=", 500) == []

    def test_garbage_fragments_are_dropped(self) -> None:
        assert parse_range("bytes=abc, -, x", 500) == []


class TestSingleRange:
    def test_explicit(self) -> None:
        assert parse_range("bytes=0-99", 500) == [ByteRange(0, 99)]

    def test_open_ended(self) -> None:
        assert parse_range("bytes=100-", 500) == [ByteRange(100, 499)]

    def test_suffix(self) -> None:
        assert parse_range("bytes=-50", 500) == [ByteRange(449, 499)]

    def test_suffix_longer_than_resource_clamps_to_zero(self) -> None:
        assert parse_range("bytes=-900", 500) == [ByteRange(0, 499)]

    def test_whitespace_tolerated(self) -> None:
        assert parse_range("  bytes = 5-10 ", 500) == [ByteRange(5, 10)]

    def test_out_of_bounds_is_not_rejected_by_parser(self) -> None:
        assert parse_range("bytes=600-700", 500) == [ByteRange(600, 700)]


class TestMultipleRanges:
    def test_keeps_header_order(self) -> None:
        assert parse_range("bytes=0-9, 20-29, -5", 100) == [
            ByteRange(0, 9),
            ByteRange(20, 29),
            ByteRange(94, 99),
        ]


class TestByteRange:
    def test_length_is_inclusive(self) -> None:
        assert ByteRange(0, 99).length == 100
        assert ByteRange(7, 7).length == 1

    def test_content_range(self) -> None:
        assert ByteRange(0, 99).content_range(500) == "bytes 0-99/500"

    @pytest.mark.parametrize(
        ("rng", "size", "ok"),
        [
            (ByteRange(0, 99), 500, True),
            (ByteRange(0, 499), 500, True),
            (ByteRange(0, 500), 500, False),
            (ByteRange(500, 500), 500, False),
            (ByteRange(10, 5), 500, False),
            (ByteRange(0, 0), 0, False),
        ],
    )
    def test_is_satisfiable(self, rng, size, ok) -> None:
        assert rng.is_satisfiable(size) is ok
