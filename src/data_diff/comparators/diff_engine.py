"""Line and character diffing built on a longest-common-subsequence table.

The walk over both sequences is a simplified Myers diff: whenever neither
current element belongs to the LCS and both sides still have elements, the
pair is reported as a single ``modified`` change instead of a delete followed
by an add. Callers that depend on exact output rely on this pairing.

The LCS table costs O(len(left) * len(right)) time and memory, so every entry
point refuses inputs whose table would exceed ``max_cells`` cells.
"""

import logging
from collections.abc import Sequence
from typing import TypeVar

from data_diff.comparators.exceptions import ComparisonTooLargeError
from data_diff.models.config_models import DEFAULT_MAX_LCS_CELLS, DiffOptions
from data_diff.models.diff_models import ChangeType, DiffChange, DiffResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Stands in for an element past the end of a sequence; equal to nothing.
_EXHAUSTED = object()


def compute_lcs(
    left: Sequence[T],
    right: Sequence[T],
    max_cells: int = DEFAULT_MAX_LCS_CELLS,
) -> list[T]:
    """Compute the longest common subsequence of two sequences.

    Args:
        left: First sequence.
        right: Second sequence.
        max_cells: Upper bound on ``len(left) * len(right)``.

    Returns:
        The LCS elements in order.

    Raises:
        ComparisonTooLargeError: If the DP table would exceed ``max_cells``.
    """
    m = len(left)
    n = len(right)
    if m * n > max_cells:
        raise ComparisonTooLargeError(
            f"Comparison needs a {m}x{n} table, above the limit of {max_cells} cells"
        )

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        row = dp[i]
        prev = dp[i - 1]
        item = left[i - 1]
        for j in range(1, n + 1):
            if item == right[j - 1]:
                row[j] = prev[j - 1] + 1
            elif prev[j] >= row[j - 1]:
                row[j] = prev[j]
            else:
                row[j] = row[j - 1]

    lcs: list[T] = []
    i, j = m, n
    while i > 0 and j > 0:
        if left[i - 1] == right[j - 1]:
            lcs.append(left[i - 1])
            i -= 1
            j -= 1
        elif dp[i - 1][j] > dp[i][j - 1]:
            i -= 1
        else:
            j -= 1
    lcs.reverse()
    return lcs


def diff_lines(
    left: str,
    right: str,
    options: DiffOptions | None = None,
    *,
    max_cells: int | None = None,
) -> DiffResult:
    """Compute a line-by-line diff.

    ``ignore_whitespace`` and ``ignore_case`` only affect comparison; the
    reported content is always the original line. ``ignore_blank_lines``
    drops blank lines before comparison, so line numbers then count
    non-blank lines only.
    """
    options = options or DiffOptions()
    if max_cells is None:
        max_cells = options.max_lcs_cells

    left_lines = left.split("\n")
    right_lines = right.split("\n")

    if options.ignore_blank_lines:
        left_lines = [line for line in left_lines if line.strip()]
        right_lines = [line for line in right_lines if line.strip()]

    def normalize(line: str) -> str:
        if options.ignore_whitespace:
            line = line.strip()
        if options.ignore_case:
            line = line.lower()
        return line

    norm_left = [normalize(line) for line in left_lines]
    norm_right = [normalize(line) for line in right_lines]

    lcs = compute_lcs(norm_left, norm_right, max_cells)
    logger.debug(
        "Line diff: %d left lines, %d right lines, LCS length %d",
        len(left_lines), len(right_lines), len(lcs),
    )

    changes: list[DiffChange] = []
    left_idx = right_idx = lcs_idx = 0
    left_count = len(left_lines)
    right_count = len(right_lines)

    while left_idx < left_count or right_idx < right_count:
        left_key = norm_left[left_idx] if left_idx < left_count else _EXHAUSTED
        right_key = norm_right[right_idx] if right_idx < right_count else _EXHAUSTED
        target = lcs[lcs_idx] if lcs_idx < len(lcs) else _EXHAUSTED
        left_on_lcs = target is not _EXHAUSTED and left_key == target
        right_on_lcs = target is not _EXHAUSTED and right_key == target

        if left_on_lcs and right_on_lcs:
            changes.append(DiffChange(
                type=ChangeType.UNCHANGED,
                left_line_number=left_idx + 1,
                right_line_number=right_idx + 1,
                left_content=left_lines[left_idx],
                right_content=right_lines[right_idx],
            ))
            left_idx += 1
            right_idx += 1
            lcs_idx += 1
        elif left_on_lcs and right_idx < right_count:
            changes.append(DiffChange(
                type=ChangeType.ADDED,
                right_line_number=right_idx + 1,
                right_content=right_lines[right_idx],
            ))
            right_idx += 1
        elif right_on_lcs and left_idx < left_count:
            changes.append(DiffChange(
                type=ChangeType.DELETED,
                left_line_number=left_idx + 1,
                left_content=left_lines[left_idx],
            ))
            left_idx += 1
        elif left_idx < left_count and right_idx < right_count:
            changes.append(DiffChange(
                type=ChangeType.MODIFIED,
                left_line_number=left_idx + 1,
                right_line_number=right_idx + 1,
                left_content=left_lines[left_idx],
                right_content=right_lines[right_idx],
            ))
            left_idx += 1
            right_idx += 1
        elif left_idx < left_count:
            changes.append(DiffChange(
                type=ChangeType.DELETED,
                left_line_number=left_idx + 1,
                left_content=left_lines[left_idx],
            ))
            left_idx += 1
        else:
            changes.append(DiffChange(
                type=ChangeType.ADDED,
                right_line_number=right_idx + 1,
                right_content=right_lines[right_idx],
            ))
            right_idx += 1

    return DiffResult.from_changes(changes)


def diff_chars(
    left: str,
    right: str,
    *,
    max_cells: int = DEFAULT_MAX_LCS_CELLS,
) -> DiffResult:
    """Compute a character-level diff.

    Uses the same walk as :func:`diff_lines` with single characters as
    elements. Consecutive unchanged characters form one ``unchanged`` change,
    and everything between two unchanged runs is reported as one ``modified``,
    ``deleted`` or ``added`` change depending on which sides contributed.
    """
    lcs = compute_lcs(left, right, max_cells)

    changes: list[DiffChange] = []
    unchanged_buf: list[str] = []
    left_buf: list[str] = []
    right_buf: list[str] = []

    def flush_unchanged() -> None:
        if unchanged_buf:
            text = "".join(unchanged_buf)
            changes.append(DiffChange(
                type=ChangeType.UNCHANGED, left_content=text, right_content=text,
            ))
            unchanged_buf.clear()

    def flush_edits() -> None:
        if left_buf and right_buf:
            changes.append(DiffChange(
                type=ChangeType.MODIFIED,
                left_content="".join(left_buf),
                right_content="".join(right_buf),
            ))
        elif left_buf:
            changes.append(DiffChange(type=ChangeType.DELETED, left_content="".join(left_buf)))
        elif right_buf:
            changes.append(DiffChange(type=ChangeType.ADDED, right_content="".join(right_buf)))
        left_buf.clear()
        right_buf.clear()

    left_idx = right_idx = lcs_idx = 0
    left_count = len(left)
    right_count = len(right)

    while left_idx < left_count or right_idx < right_count:
        left_char = left[left_idx] if left_idx < left_count else _EXHAUSTED
        right_char = right[right_idx] if right_idx < right_count else _EXHAUSTED
        target = lcs[lcs_idx] if lcs_idx < len(lcs) else _EXHAUSTED
        left_on_lcs = target is not _EXHAUSTED and left_char == target
        right_on_lcs = target is not _EXHAUSTED and right_char == target

        if left_on_lcs and right_on_lcs:
            flush_edits()
            unchanged_buf.append(left_char)
            left_idx += 1
            right_idx += 1
            lcs_idx += 1
            continue

        flush_unchanged()
        if left_on_lcs and right_idx < right_count:
            right_buf.append(right_char)
            right_idx += 1
        elif right_on_lcs and left_idx < left_count:
            left_buf.append(left_char)
            left_idx += 1
        elif left_idx < left_count and right_idx < right_count:
            left_buf.append(left_char)
            right_buf.append(right_char)
            left_idx += 1
            right_idx += 1
        elif left_idx < left_count:
            left_buf.append(left_char)
            left_idx += 1
        else:
            right_buf.append(right_char)
            right_idx += 1

    flush_unchanged()
    flush_edits()

    return DiffResult.from_changes(changes)
