"""Tests for type-aware cell normalization."""

import pytest

from data_diff.comparators.csv.normalizer import normalize_row, normalize_value
from data_diff.models import CsvColumnType


class TestNormalizeValue:
    def test_untyped_value_untouched(self):
        assert normalize_value("  Mixed Case  ") == "  Mixed Case  "

    def test_whitespace_and_case(self):
        assert normalize_value("  Mixed Case  ", ignore_whitespace=True, ignore_case=True) == "mixed case"

    @pytest.mark.parametrize(
        "value, expected",
        [(" 42 ", "42"), ("007", "7"), ("-3", "-3"), ("abc", "abc")],
    )
    def test_integer(self, value, expected):
        assert normalize_value(value, type=CsvColumnType.INTEGER) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [("3.14159", "3.14"), ("7", "7.00"), ("7.0", "7.00"), ("1e2", "100.00"), ("n/a", "n/a")],
    )
    def test_float(self, value, expected):
        assert normalize_value(value, type=CsvColumnType.FLOAT) == expected

    @pytest.mark.parametrize("value", ["1_000", "\u0661\u0662\u0663", "12abc"])
    def test_integer_keeps_non_plain_numerals(self, value):
        assert normalize_value(value, type=CsvColumnType.INTEGER) == value

    @pytest.mark.parametrize("value", ["1_000.5", "\u0661.5"])
    def test_float_keeps_non_plain_numerals(self, value):
        assert normalize_value(value, type=CsvColumnType.FLOAT) == value

    @pytest.mark.parametrize(
        "value, expected",
        [("Yes", "true"), ("1", "true"), ("t", "true"), ("no", "false"), ("off", "false")],
    )
    def test_boolean(self, value, expected):
        assert normalize_value(value, type=CsvColumnType.BOOLEAN) == expected

    def test_unrecognized_boolean_reads_as_false(self):
        assert normalize_value("garbage", type=CsvColumnType.BOOLEAN) == "false"

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2024/01/15", "2024-01-15"),
            ("2024-01-15", "2024-01-15"),
            ("2024-01-15T10:00:00", "2024-01-15"),
            ("2024-01-15T23:30:00-02:00", "2024-01-16"),
            ("not a date", "not a date"),
        ],
    )
    def test_date(self, value, expected):
        assert normalize_value(value, type=CsvColumnType.DATE) == expected

    def test_null(self):
        assert normalize_value("anything", type=CsvColumnType.NULL) == ""

    def test_string_is_trimmed(self):
        assert normalize_value("  x ", type=CsvColumnType.STRING) == "x"

    def test_case_applied_after_type(self):
        assert normalize_value("TRUE", type=CsvColumnType.STRING, ignore_case=True) == "true"


def test_normalize_row():
    """normalize_row applies the same options to every cell."""
    assert normalize_row([" A ", "b"], ignore_whitespace=True, ignore_case=True) == ["a", "b"]
