"""Tests for the LCS line and character diff engine."""

import pytest

from data_diff.comparators.diff_engine import compute_lcs, diff_chars, diff_lines
from data_diff.comparators.exceptions import ComparisonTooLargeError, InputValidationError
from data_diff.models import ChangeType, DiffOptions


def _is_subsequence(sub, seq) -> bool:
    it = iter(seq)
    return all(item in it for item in sub)


def _types(result) -> list[ChangeType]:
    return [change.type for change in result.changes]


# ---------------------------------------------------------------------------
# compute_lcs
# ---------------------------------------------------------------------------
class TestComputeLcs:
    def test_classic_example_length(self):
        lcs = compute_lcs("ABCBDAB", "BDCABA")
        assert len(lcs) == 4
        assert _is_subsequence(lcs, "ABCBDAB")
        assert _is_subsequence(lcs, "BDCABA")

    def test_no_common_elements(self):
        assert compute_lcs(["a", "b"], ["c", "d"]) == []

    def test_identical_sequences(self):
        assert compute_lcs(["x", "y", "z"], ["x", "y", "z"]) == ["x", "y", "z"]

    def test_empty_side(self):
        assert compute_lcs([], ["a"]) == []

    def test_cell_budget_exceeded(self):
        with pytest.raises(ComparisonTooLargeError):
            compute_lcs("abc", "abc", max_cells=8)

    def test_cell_budget_exactly_met(self):
        assert compute_lcs("abc", "abc", max_cells=9) == list("abc")

    def test_budget_error_is_input_validation_error(self):
        with pytest.raises(InputValidationError):
            compute_lcs("ab", "ab", max_cells=1)


# ---------------------------------------------------------------------------
# diff_lines
# ---------------------------------------------------------------------------
class TestDiffLines:
    def test_single_line_modified(self):
        result = diff_lines("a\nb\nc", "a\nx\nc")
        assert _types(result) == [ChangeType.UNCHANGED, ChangeType.MODIFIED, ChangeType.UNCHANGED]
        modified = result.changes[1]
        assert modified.left_content == "b"
        assert modified.right_content == "x"
        assert modified.left_line_number == 2
        assert modified.right_line_number == 2
        assert result.stats.modifications == 1
        assert result.stats.unchanged == 2
        assert result.stats.additions == 0
        assert result.stats.deletions == 0

    def test_identical_input_is_all_unchanged(self):
        text = "one\ntwo\nthree"
        result = diff_lines(text, text)
        assert all(t == ChangeType.UNCHANGED for t in _types(result))
        assert result.stats.has_differences is False

    def test_empty_strings_compare_one_empty_line(self):
        result = diff_lines("", "")
        assert len(result.changes) == 1
        assert result.changes[0].type == ChangeType.UNCHANGED
        assert result.changes[0].left_content == ""

    def test_inserted_line(self):
        result = diff_lines("a\nc", "a\nb\nc")
        assert _types(result) == [ChangeType.UNCHANGED, ChangeType.ADDED, ChangeType.UNCHANGED]
        added = result.changes[1]
        assert added.right_line_number == 2
        assert added.right_content == "b"
        assert added.left_line_number is None

    def test_removed_line(self):
        result = diff_lines("a\nb\nc", "a\nc")
        assert _types(result) == [ChangeType.UNCHANGED, ChangeType.DELETED, ChangeType.UNCHANGED]
        assert result.changes[1].left_line_number == 2

    def test_trailing_addition(self):
        result = diff_lines("a", "a\nb")
        assert _types(result) == [ChangeType.UNCHANGED, ChangeType.ADDED]

    def test_non_matching_lines_are_paired(self):
        """Lines off the LCS on both sides pair up as modifications."""
        result = diff_lines("a\nb\nc\nd", "a\nx\nd\ne")
        assert _types(result) == [
            ChangeType.UNCHANGED,
            ChangeType.MODIFIED,
            ChangeType.DELETED,
            ChangeType.UNCHANGED,
            ChangeType.ADDED,
        ]

    def test_ignore_case_keeps_original_content(self):
        result = diff_lines("Hello", "hello", DiffOptions(ignore_case=True))
        assert _types(result) == [ChangeType.UNCHANGED]
        assert result.changes[0].left_content == "Hello"
        assert result.changes[0].right_content == "hello"

    def test_case_sensitive_by_default(self):
        result = diff_lines("Hello", "hello")
        assert _types(result) == [ChangeType.MODIFIED]

    def test_ignore_whitespace(self):
        result = diff_lines("  a\nb  ", "a\nb", DiffOptions(ignore_whitespace=True))
        assert result.stats.unchanged == 2

    def test_ignore_blank_lines(self):
        result = diff_lines("a\n\nb", "a\nb", DiffOptions(ignore_blank_lines=True))
        assert _types(result) == [ChangeType.UNCHANGED, ChangeType.UNCHANGED]
        assert result.changes[1].left_line_number == 2

    def test_max_lcs_cells_from_options(self):
        with pytest.raises(ComparisonTooLargeError):
            diff_lines("a\nb", "a\nb", DiffOptions(max_lcs_cells=3))

    def test_explicit_max_cells_overrides_options(self):
        result = diff_lines("a\nb", "a\nb", DiffOptions(max_lcs_cells=1), max_cells=4)
        assert result.stats.unchanged == 2

    def test_swapping_sides_swaps_additions_and_deletions(self):
        left = "a\nb\nc\nd\nf"
        right = "a\nx\nd\ne\nf\ng"
        forward = diff_lines(left, right).stats
        backward = diff_lines(right, left).stats
        assert forward.additions == backward.deletions
        assert forward.deletions == backward.additions
        assert forward.modifications == backward.modifications
        assert forward.unchanged == backward.unchanged

    @pytest.mark.parametrize(
        "left, right",
        [
            ("a\nb\nc", "a\nx\nc"),
            ("a\nb", "c\nd\ne\nf"),
            ("x\ny\nz\nw", "w"),
            ("", "one\ntwo"),
        ],
    )
    def test_every_line_is_accounted_for(self, left, right):
        result = diff_lines(left, right)
        left_numbers = [c.left_line_number for c in result.changes if c.left_line_number is not None]
        right_numbers = [c.right_line_number for c in result.changes if c.right_line_number is not None]
        assert left_numbers == list(range(1, len(left.split("\n")) + 1))
        assert right_numbers == list(range(1, len(right.split("\n")) + 1))

    def test_stats_match_changes(self):
        result = diff_lines("a\nb\nc\nd", "b\nc\ne")
        assert result.stats.additions == _types(result).count(ChangeType.ADDED)
        assert result.stats.deletions == _types(result).count(ChangeType.DELETED)
        assert result.stats.modifications == _types(result).count(ChangeType.MODIFIED)
        assert result.stats.unchanged == _types(result).count(ChangeType.UNCHANGED)


# ---------------------------------------------------------------------------
# diff_chars
# ---------------------------------------------------------------------------
class TestDiffChars:
    def test_identical_is_one_unchanged_run(self):
        result = diff_chars("abc", "abc")
        assert len(result.changes) == 1
        assert result.changes[0].type == ChangeType.UNCHANGED
        assert result.changes[0].left_content == "abc"

    def test_substitution_in_the_middle(self):
        result = diff_chars("cat", "cut")
        assert _types(result) == [ChangeType.UNCHANGED, ChangeType.MODIFIED, ChangeType.UNCHANGED]
        assert result.changes[0].left_content == "c"
        assert result.changes[1].left_content == "a"
        assert result.changes[1].right_content == "u"
        assert result.changes[2].right_content == "t"

    def test_appended_characters(self):
        result = diff_chars("ab", "abc")
        assert _types(result) == [ChangeType.UNCHANGED, ChangeType.ADDED]
        assert result.changes[1].right_content == "c"
        assert result.changes[1].left_content is None

    def test_removed_characters(self):
        result = diff_chars("abcd", "ab")
        assert _types(result) == [ChangeType.UNCHANGED, ChangeType.DELETED]
        assert result.changes[1].left_content == "cd"

    def test_completely_different_is_one_modification(self):
        result = diff_chars("abc", "xyz")
        assert _types(result) == [ChangeType.MODIFIED]
        assert result.changes[0].left_content == "abc"
        assert result.changes[0].right_content == "xyz"

    def test_empty_inputs(self):
        result = diff_chars("", "")
        assert result.changes == []
        assert result.stats.has_differences is False

    def test_char_changes_have_no_line_numbers(self):
        result = diff_chars("ab", "ac")
        assert all(c.left_line_number is None and c.right_line_number is None for c in result.changes)

    def test_cell_budget(self):
        with pytest.raises(ComparisonTooLargeError):
            diff_chars("abcd", "abcd", max_cells=15)
