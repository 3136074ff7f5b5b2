"""Unit tests for the CSV parser.

Tests cover:
- Header and value trimming
- Quoted fields containing commas
- Blank lines and CRLF line endings
- Short and long rows
"""

import pytest

from dropin.ingest.csv_parser import parse_csv, parse_csv_line


@pytest.mark.unit
class TestParseCsvLine:
    """Test single-line tokenizing."""

    def test_plain_fields(self):
        assert parse_csv_line("a,b,c") == ["a", "b", "c"]

    def test_quoted_comma_is_kept(self):
        assert parse_csv_line('1,"Fully Accessible, elevator",x') == [
            "1",
            "Fully Accessible, elevator",
            "x",
        ]

    def test_quote_characters_are_dropped(self):
        assert parse_csv_line('"a","b"') == ["a", "b"]

    def test_doubled_quotes_only_toggle(self):
        # "" closes and reopens the quoted section; no literal quote survives
        assert parse_csv_line('"say ""hi"", ok",2') == ["say hi, ok", "2"]

    def test_empty_fields(self):
        assert parse_csv_line(",,") == ["", "", ""]

    def test_empty_line(self):
        assert parse_csv_line("") == [""]


@pytest.mark.unit
class TestParseCsv:
    """Test whole-document parsing."""

    def test_records_keyed_by_trimmed_header(self):
        text = " Location ID , Location Name \n 1 ,  Metro Hall \n"
        assert parse_csv(text) == [{"Location ID": "1", "Location Name": "Metro Hall"}]

    def test_blank_lines_skipped(self):
        text = "a,b\n\n1,2\n   \n3,4\n"
        assert parse_csv(text) == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_crlf_line_endings(self):
        text = "a,b\r\n1,2\r\n"
        assert parse_csv(text) == [{"a": "1", "b": "2"}]

    def test_short_row_padded_with_empty_strings(self):
        assert parse_csv("a,b,c\n1\n") == [{"a": "1", "b": "", "c": ""}]

    def test_surplus_fields_ignored(self):
        assert parse_csv("a,b\n1,2,3,4\n") == [{"a": "1", "b": "2"}]

    def test_empty_input(self):
        assert parse_csv("") == []
        assert parse_csv("\n\n") == []

    def test_header_only(self):
        assert parse_csv("a,b\n") == []

    def test_byte_order_mark_stripped(self):
        text = "\ufeffLocation ID,Name\n7,Pool\n"
        assert parse_csv(text) == [{"Location ID": "7", "Name": "Pool"}]

    def test_pandas_written_csv(self, sample_locations_data, locations_csv_text):
        """Quoted fields written by pandas parse back to the original values."""
        records = parse_csv(locations_csv_text)

        assert len(records) == len(sample_locations_data)
        assert records[1]["Accessibility"] == "Partially Accessible, elevator to pool"
        assert records[1]["District"] == "Scarborough"
