"""Tests for shared helpers and title sorting."""

from __future__ import annotations

import pytest

from conftest import make_record
from save_exporter.core.sorting import SortItem, sort_records
from save_exporter.utils import format_size, parse_count, sanitize_filename


class TestFormatSize:
    @pytest.mark.parametrize(
        "size, expected",
        [(0, "0 B"), (350, "350 B"), (1536, "1.5 KB"), (5 * 1024**2, "5.0 MB"), (3 * 1024**3, "3.00 GB"), (None, "0 B")],
    )
    def test_units(self, size, expected) -> None:
        assert format_size(size) == expected


class TestParseCount:
    @pytest.mark.parametrize("text, expected", [("3", 3), (" 7 ", 7), ("", 1), ("abc", 1), ("0", 1), ("-4", 1), (5, 5)])
    def test_parse(self, text, expected) -> None:
        assert parse_count(text) == expected


class TestSanitizeFilename:
    def test_replaces_illegal_chars(self) -> None:
        assert sanitize_filename('Zelda: Link/"Past"') == "Zelda_ Link_Past_"


class TestSortRecords:
    def test_case_and_width_insensitive(self) -> None:
        items = [
            SortItem(make_record("a/1", "zelda"), "zelda"),
            SortItem(make_record("a/2", "Metroid"), "Metroid"),
            SortItem(make_record("a/3", "ＡＲＭＳ"), "ＡＲＭＳ"),
        ]
        assert [r.id for r in sort_records(items)] == ["a/3", "a/2", "a/1"]

    def test_ties_broken_by_id(self) -> None:
        items = [SortItem(make_record("b/1", "Same"), "Same"), SortItem(make_record("a/1", "same"), "same")]
        assert [r.id for r in sort_records(items)] == ["a/1", "b/1"]
