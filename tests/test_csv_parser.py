"""Tests for the CSV parser and row formatter."""

import logging

import pytest

from data_diff.comparators.csv.parser import format_row, parse_csv


class TestParseCsv:
    def test_simple_rows(self):
        parsed = parse_csv("a,b\n1,2", delimiter=",")
        assert parsed.rows == [["a", "b"], ["1", "2"]]
        assert parsed.errors == []

    def test_quoted_field_with_delimiter(self):
        parsed = parse_csv('name,desc\n"x","a,b"', delimiter=",")
        assert parsed.rows[1] == ["x", "a,b"]

    def test_escaped_quotes(self):
        parsed = parse_csv('"he said ""hi"""', delimiter=",")
        assert parsed.rows == [['he said "hi"']]

    def test_newline_inside_quotes(self):
        parsed = parse_csv('a,b\n"line1\nline2",x', delimiter=",")
        assert parsed.rows[1] == ["line1\nline2", "x"]

    def test_crlf_and_trailing_newline(self):
        parsed = parse_csv("a,b\r\n1,2\r\n", delimiter=",")
        assert parsed.rows == [["a", "b"], ["1", "2"]]

    def test_old_mac_line_endings(self):
        parsed = parse_csv("a,b\r1,2", delimiter=",")
        assert parsed.rows == [["a", "b"], ["1", "2"]]

    def test_blank_lines_skipped(self):
        parsed = parse_csv("a,b\n\n\n1,2", delimiter=",")
        assert parsed.rows == [["a", "b"], ["1", "2"]]

    def test_empty_fields_kept(self):
        parsed = parse_csv("a,,c\n,,", delimiter=",")
        assert parsed.rows == [["a", "", "c"], ["", "", ""]]

    def test_bom_stripped(self):
        parsed = parse_csv("\ufeffid,name\n1,x", delimiter=",")
        assert parsed.rows[0][0] == "id"

    def test_whitespace_after_closing_quote_ignored(self):
        parsed = parse_csv('"a"  ,b', delimiter=",")
        assert parsed.rows == [["a", "b"]]
        assert parsed.errors == []

    def test_content_after_closing_quote_warns(self):
        parsed = parse_csv('"a"b,c', delimiter=",")
        assert parsed.rows == [["ab", "c"]]
        assert len(parsed.errors) == 1
        error = parsed.errors[0]
        assert error.severity == "warning"
        assert error.row == 0
        assert "content" in error.message.lower()

    def test_quote_after_closing_quote_warns(self):
        parsed = parse_csv('"a" "b"', delimiter=",")
        assert parsed.rows == [['a"b']]
        assert len(parsed.errors) == 1
        assert "quote" in parsed.errors[0].message.lower()

    def test_unterminated_quote_warns(self):
        parsed = parse_csv('x,"abc', delimiter=",")
        assert parsed.rows == [["x", "abc"]]
        assert parsed.errors[0].message == "Unterminated quoted field"

    def test_warnings_are_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="data_diff.comparators.csv.parser"):
            parse_csv('"a"b,c', delimiter=",")
        assert "after closing quote" in caplog.text

    def test_empty_input(self):
        parsed = parse_csv("", delimiter=",")
        assert parsed.rows == []
        assert parsed.metadata.row_count == 0
        assert parsed.csv_schema.columns == []

    def test_custom_quote_char(self):
        parsed = parse_csv("'a,b',c", delimiter=",", quote_char="'")
        assert parsed.rows == [["a,b", "c"]]


class TestParseMetadata:
    def test_delimiter_detected(self):
        parsed = parse_csv("a;b;c\n1;2;3")
        assert parsed.metadata.delimiter == ";"
        assert parsed.rows[1] == ["1", "2", "3"]

    def test_auto_delimiter_keyword(self):
        parsed = parse_csv("a\tb\n1\t2", delimiter="auto")
        assert parsed.metadata.delimiter == "\t"

    def test_ragged_rows(self):
        parsed = parse_csv("a,b,c\n1,2", delimiter=",")
        assert parsed.metadata.row_count == 2
        assert parsed.metadata.column_count == 3
        assert len(parsed.csv_schema.columns) == 3

    def test_header_detected(self):
        parsed = parse_csv("id,name\n1,Alice\n2,Bob", delimiter=",")
        assert parsed.metadata.has_header is True
        assert [c.name for c in parsed.csv_schema.columns] == ["id", "name"]

    def test_header_forced_off(self):
        parsed = parse_csv("id,name\n1,Alice", delimiter=",", has_header=False)
        assert parsed.metadata.has_header is False
        assert [c.name for c in parsed.csv_schema.columns] == ["Column A", "Column B"]

    def test_header_forced_on(self):
        parsed = parse_csv("1,2\n3,4", delimiter=",", has_header=True)
        assert parsed.csv_schema.header_row == 0
        assert parsed.csv_schema.columns[0].name == "1"

    def test_encoding_is_utf8(self):
        assert parse_csv("a,b", delimiter=",").metadata.encoding == "utf-8"


class TestFormatRow:
    def test_plain_cells(self):
        assert format_row(["a", "b", "c"]) == "a,b,c"

    def test_quotes_special_cells(self):
        assert format_row(["a,b", 'say "hi"', "x\ny"]) == '"a,b","say ""hi""","x\ny"'

    def test_other_delimiter(self):
        assert format_row(["a;b", "c"], delimiter=";") == '"a;b";c'
        assert format_row(["a,b", "c"], delimiter=";") == "a,b;c"

    @pytest.mark.parametrize(
        "row",
        [
            ["plain", "with,comma", 'with "quote"', "multi\nline"],
            ['"', ",", "\n"],
            ["", "trailing,"],
        ],
    )
    def test_round_trip(self, row):
        line = format_row(row)
        assert format_row(parse_csv(line, delimiter=",").rows[0]) == line
