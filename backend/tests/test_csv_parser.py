"""Tests for line-oriented CSV parsing."""

import pytest

from rentals.exceptions import ParseError
from rentals.ingestion.csv_parser import decode_text, parse_rows, read_header, split_line, unquote


class TestQuoting:
    def test_quoted_field_keeps_commas_and_collapses_doubled_quotes(self):
        text = 'title,address\n"Cozy, 2BR ""sunny"" unit",12 Oak St\n'
        rows = list(parse_rows(text))

        assert rows == [{"title": 'Cozy, 2BR "sunny" unit', "address": "12 Oak St"}]

    def test_comma_outside_quotes_splits(self):
        assert split_line('a,"b, c",d') == ["a", "b, c", "d"]

    def test_unquote_trims_before_stripping_quotes(self):
        assert unquote('  "Dolores Park"  ') == "Dolores Park"

    def test_unquoted_field_is_trimmed(self):
        assert unquote("  Mission ") == "Mission"

    def test_lone_quote_is_not_stripped(self):
        assert unquote('"') == '"'


class TestLines:
    def test_mixed_line_endings(self):
        text = "title,price\r\nA,$1\rB,$2\nC,$3"
        assert [row["title"] for row in parse_rows(text)] == ["A", "B", "C"]

    def test_blank_lines_dropped_including_before_header(self):
        text = "\n   \ntitle,price\n\nA,$1\n  \nB,$2\n"
        rows = list(parse_rows(text))

        assert [row["title"] for row in rows] == ["A", "B"]
        assert set(rows[0]) == {"title", "price"}

    def test_short_row_padded_with_empty_strings(self):
        rows = list(parse_rows("title,price,sqft\nA,$1\n"))
        assert rows == [{"title": "A", "price": "$1", "sqft": ""}]

    def test_extra_values_discarded(self):
        rows = list(parse_rows("title,price\nA,$1,extra,more\n"))
        assert rows == [{"title": "A", "price": "$1"}]

    def test_header_only_yields_nothing(self):
        assert list(parse_rows("title,price\n")) == []


class TestInput:
    def test_empty_input_yields_empty_sequence(self):
        assert list(parse_rows("")) == []
        assert list(parse_rows("\n\n")) == []

    def test_parsing_is_restartable(self):
        text = "title,price\nA,$1\nB,$2\n"
        assert list(parse_rows(text)) == list(parse_rows(text))

    def test_bytes_with_byte_order_mark(self):
        rows = list(parse_rows(b"\xef\xbb\xbftitle,price\nA,$1\n"))
        assert rows == [{"title": "A", "price": "$1"}]

    def test_undecodable_bytes_raise_parse_error(self):
        with pytest.raises(ParseError):
            list(parse_rows(b"title,price\n\xff\xfe\xfa,1\n"))

    def test_decode_text_strips_bom_from_str(self):
        assert decode_text("\ufefftitle") == "title"

    def test_read_header(self):
        assert read_header("\n title , \"price\" \nA,1") == ["title", "price"]
        assert read_header("") == []
