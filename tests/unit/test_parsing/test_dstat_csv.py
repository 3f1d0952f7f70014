"""
Unit tests for dstat CSV decoding.

Tests header parsing, data row decoding and the line-counter state machine.
"""

import pytest

from dstatmon.models.records import KeyTable
from dstatmon.parsing.dstat_csv import (
    DstatCsvDecoder,
    LineKind,
    classify_line,
    decode_data_line,
    parse_first_header,
    parse_second_header,
)


@pytest.mark.unit
class TestHeaderParsing:
    """Test cases for the two header rows."""

    def test_first_header_forward_fills_empty_fields(self):
        """Test that sparse categories are carried over to their columns."""
        keys = parse_first_header('"total cpu usage",,,"dsk/total",,"memory usage"')
        assert keys == [
            "total_cpu_usage",
            "total_cpu_usage",
            "total_cpu_usage",
            "dsk/total",
            "dsk/total",
            "memory_usage",
        ]

    def test_first_header_trailing_empty_field(self):
        """Test that a trailing empty field repeats the last category."""
        keys = parse_first_header('"total cpu usage",,"memory usage",')
        assert keys == ["total_cpu_usage", "total_cpu_usage", "memory_usage", "memory_usage"]

    def test_first_header_leading_empty_field_stays_empty(self):
        """Test that a leading empty field has nothing to inherit."""
        assert parse_first_header(',"net/total",') == ["", "net/total", "net/total"]

    def test_first_header_replaces_each_whitespace_character(self):
        """Test that every whitespace character becomes an underscore."""
        assert parse_first_header('"a  b\tc"') == ["a__b_c"]

    def test_second_header_strips_quotes_only(self):
        """Test that metric names keep their spelling."""
        assert parse_second_header('"usr","sys","1m","read"') == ["usr", "sys", "1m", "read"]


@pytest.mark.unit
class TestDataDecoding:
    """Test cases for data row decoding."""

    def test_decode_groups_by_category(self):
        """Test decoding a row against a complete key table."""
        table = KeyTable(first_keys=["a", "a", "b"], second_keys=["x", "y", "z"])
        assert decode_data_line("1,2,3", table) == {"a": {"x": "1", "y": "2"}, "b": {"z": "3"}}

    def test_values_are_kept_as_strings(self):
        """Test that numeric-looking values are not converted."""
        table = KeyTable(first_keys=["cpu"], second_keys=["usr"])
        assert decode_data_line("01.50", table) == {"cpu": {"usr": "01.50"}}

    def test_short_row_uses_available_columns(self):
        """Test that missing trailing values are simply absent."""
        table = KeyTable(first_keys=["a", "a", "b"], second_keys=["x", "y", "z"])
        assert decode_data_line("1,2", table) == {"a": {"x": "1", "y": "2"}}

    def test_long_row_ignores_extra_values(self):
        """Test that values beyond the key table are dropped."""
        table = KeyTable(first_keys=["a"], second_keys=["x"])
        assert decode_data_line("1,2,3", table) == {"a": {"x": "1"}}

    def test_key_table_width_is_shorter_header(self):
        """Test that mismatched header widths truncate to the shorter one."""
        table = KeyTable(first_keys=["a", "a", "b"], second_keys=["x", "y"])
        assert table.width == 2
        assert decode_data_line("1,2,3", table) == {"a": {"x": "1", "y": "2"}}

    def test_empty_key_table_decodes_nothing(self):
        """Test decoding before any header was seen."""
        assert decode_data_line("1,2,3", KeyTable()) == {}


@pytest.mark.unit
class TestDstatCsvDecoder:
    """Test cases for the per-run state machine."""

    @pytest.mark.parametrize(
        "index,kind",
        [
            (0, LineKind.BANNER),
            (1, LineKind.BANNER),
            (2, LineKind.FIRST_HEADER),
            (3, LineKind.SECOND_HEADER),
            (4, LineKind.DATA),
            (250, LineKind.DATA),
        ],
    )
    def test_classify_line(self, index, kind):
        """Test line kinds by index."""
        assert classify_line(index) is kind

    def test_full_run(self, dstat_lines):
        """Test decoding banner, headers and data rows in order."""
        decoder = DstatCsvDecoder()
        results = [decoder.feed(line) for line in dstat_lines]

        assert [r.index for r in results] == [0, 1, 2, 3, 4, 5]
        assert all(r.data is None for r in results[:4])
        assert results[4].data == {
            "total_cpu_usage": {"usr": "1.2", "sys": "3.4", "idl": "95.4"},
            "dsk/total": {"read": "0", "writ": "8192"},
            "memory_usage": {"used": "1024"},
        }
        assert results[5].data["memory_usage"] == {"used": "2048"}
        assert decoder.line_number == 6

    def test_banner_content_is_ignored(self):
        """Test that banner lines never affect the key table."""
        decoder = DstatCsvDecoder()
        decoder.feed('"cat"')
        decoder.feed('"x"')
        assert decoder.key_table == KeyTable()

    def test_reset_keeps_key_table_until_new_headers(self, dstat_lines):
        """Test that a reset restarts counting but keeps the previous keys."""
        decoder = DstatCsvDecoder()
        for line in dstat_lines:
            decoder.feed(line)
        previous = decoder.key_table

        decoder.reset_line_counter()
        assert decoder.line_number == 0
        assert decoder.key_table == previous

        decoder.feed('"banner"')
        decoder.feed('"banner"')
        decoder.feed('"load avg",,')
        decoder.feed('"1m","5m","15m"')
        decoded = decoder.feed("0.1,0.2,0.3")
        assert decoded.index == 4
        assert decoded.data == {"load_avg": {"1m": "0.1", "5m": "0.2", "15m": "0.3"}}
