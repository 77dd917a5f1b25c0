"""Tests for delimiter, header and type heuristics and similarity metrics."""

import pytest

from data_diff.comparators.csv.heuristics import (
    DELIMITER_CANDIDATES,
    compute_jaccard_similarity,
    compute_string_similarity,
    count_delimiters,
    detect_delimiter,
    detect_header,
    infer_column_type,
    is_integer,
    is_iso_date,
    is_numeric,
    levenshtein_distance,
    parse_iso_date,
)
from data_diff.models import CsvColumnType


class TestDetectDelimiter:
    def test_comma(self):
        scores = detect_delimiter("a,b,c\n1,2,3")
        assert scores[0].delimiter == ","
        assert len(scores) == len(DELIMITER_CANDIDATES)

    def test_tab(self):
        assert detect_delimiter("a\tb\n1\t2")[0].delimiter == "\t"

    def test_pipe(self):
        assert detect_delimiter("a|b|c\n1|2|3")[0].delimiter == "|"

    def test_scores_sorted_descending(self):
        scores = detect_delimiter("a;b\n1;2\n3;4")
        confidences = [s.confidence for s in scores]
        assert confidences == sorted(confidences, reverse=True)

    def test_consistent_delimiter_confidence(self):
        best = detect_delimiter("a,b\n1,2")[0]
        assert best.consistency == 1.0
        assert best.confidence == pytest.approx(0.7 + 0.3 * (1 / 6))
        assert best.sample_size == 2

    def test_blank_input(self):
        scores = detect_delimiter("   \n  ")
        assert len(scores) == 1
        assert scores[0].delimiter == ","
        assert scores[0].confidence == 0.0

    def test_quoted_delimiters_not_counted(self):
        assert count_delimiters('"a,b",c', ",") == 1
        assert count_delimiters('"a "" , b",c', ",") == 1


class TestDetectHeader:
    def test_named_header(self):
        assert detect_header([["id", "name"], ["1", "Alice"], ["2", "Bob"]]) is True

    def test_single_row_never_header(self):
        assert detect_header([["id", "name"]]) is False

    def test_duplicate_numeric_first_row(self):
        assert detect_header([["1", "1"], ["2", "3"]]) is False

    def test_single_text_column_over_numbers(self):
        assert detect_header([["name"], ["1"], ["2"]]) is True

    def test_single_column_of_words(self):
        assert detect_header([["x"], ["y"]]) is False


class TestInferColumnType:
    @pytest.mark.parametrize(
        "values, expected",
        [
            (["1", "2", "-3"], CsvColumnType.INTEGER),
            (["1.5", "2.25"], CsvColumnType.FLOAT),
            (["1e5", "2.5E-3"], CsvColumnType.FLOAT),
            (["true", "False", "yes"], CsvColumnType.BOOLEAN),
            (["1", "0"], CsvColumnType.INTEGER),
            (["2024-01-15", "2024/02/01", "2024-03-01T10:30:00"], CsvColumnType.DATE),
            (["hello", "world"], CsvColumnType.STRING),
            (["abc", "1"], CsvColumnType.MIXED),
            (["1.5", "2"], CsvColumnType.MIXED),
            ([], CsvColumnType.NULL),
            (["", "  "], CsvColumnType.NULL),
        ],
    )
    def test_types(self, values, expected):
        assert infer_column_type(values) == expected

    def test_ninety_percent_rule(self):
        values = [str(i) for i in range(9)] + ["n/a"]
        assert infer_column_type(values) == CsvColumnType.INTEGER

    def test_below_ninety_percent_is_mixed(self):
        values = [str(i) for i in range(8)] + ["n/a", "none"]
        assert infer_column_type(values) == CsvColumnType.MIXED

    def test_impossible_date_is_not_a_date(self):
        assert is_iso_date("2024-13-45") is False
        assert infer_column_type(["2024-13-45"]) == CsvColumnType.STRING

    @pytest.mark.parametrize("value", ["\u0661\u0662\u0663", "\uff11\uff12", "1_000"])
    def test_only_ascii_digits_are_numbers(self, value):
        assert is_integer(value) is False
        assert is_numeric(value) is False

    def test_non_ascii_digit_column_is_string(self):
        assert infer_column_type(["\u0661\u0662\u0663", "\u0664\u0665"]) == CsvColumnType.STRING

    def test_parse_iso_date_with_zone(self):
        parsed = parse_iso_date("2024-01-15T10:30:00Z")
        assert parsed is not None
        assert parsed.tzinfo is not None


class TestSimilarity:
    def test_levenshtein(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_string_similarity(self):
        assert compute_string_similarity("kitten", "sitting") == pytest.approx(4 / 7)
        assert compute_string_similarity("", "") == 1.0
        assert compute_string_similarity("abc", "abc") == 1.0
        assert compute_string_similarity("abc", "") == 0.0

    def test_jaccard_normalizes_cells(self):
        assert compute_jaccard_similarity(["a", "b"], ["A ", " b"]) == 1.0

    def test_jaccard_partial_overlap(self):
        assert compute_jaccard_similarity(["a", "b"], ["a", "c"]) == pytest.approx(1 / 3)

    def test_jaccard_empty_rows(self):
        assert compute_jaccard_similarity([], []) == 0.0
