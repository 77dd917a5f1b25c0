"""Delimiter detection, header detection, type inference and similarity metrics."""

import math
import re
from datetime import datetime

from data_diff.models.csv_models import CsvColumnType, DelimiterScore

DELIMITER_CANDIDATES: tuple[str, ...] = (",", "\t", "|", ";", ":")
DELIMITER_SAMPLE_LINES = 50
HEADER_SAMPLE_ROWS = 10
HEADER_SCORE_THRESHOLD = 3
TYPE_SAMPLE_SIZE = 100
TYPE_MATCH_RATIO = 0.9

BOOLEAN_VALUES: frozenset[str] = frozenset(
    {"true", "false", "1", "0", "yes", "no", "on", "off"}
)

HEADER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^[A-Z][a-z]+([A-Z][a-z]+)*$"),  # PascalCase
    re.compile(r"^[a-z]+([A-Z][a-z]+)*$"),  # camelCase
    re.compile(r"^[a-z_]+$"),  # snake_case
    re.compile(r"^[A-Z_]+$"),  # UPPER_SNAKE_CASE
    re.compile(r"^[a-zA-Z][a-zA-Z0-9\s_-]*$"),  # general identifier
)

_INTEGER_RE = re.compile(r"^-?\d+$", re.ASCII)
_FLOAT_RE = re.compile(r"^-?\d+\.\d+$", re.ASCII)
_EXPONENT_RE = re.compile(r"^-?\d+(\.\d+)?[eE][+-]?\d+$", re.ASCII)
_NUMERIC_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)
_ISO_DATE_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII),  # YYYY-MM-DD
    re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", re.ASCII),  # YYYY-MM-DDTHH:MM:SS...
    re.compile(r"^\d{4}/\d{2}/\d{2}$", re.ASCII),  # YYYY/MM/DD
)


def detect_delimiter(text: str) -> list[DelimiterScore]:
    """Score every candidate delimiter against the first lines of ``text``.

    Returns:
        All candidates, most likely first. A blank input yields a single
        zero-confidence comma.
    """
    lines = text.split("\n")[:DELIMITER_SAMPLE_LINES]
    sample = [line for line in lines if line.strip()]

    if not sample:
        return [DelimiterScore(delimiter=",", confidence=0.0, consistency=0.0, sample_size=0)]

    scores = []
    for delimiter in DELIMITER_CANDIDATES:
        counts = [count_delimiters(line, delimiter) for line in sample]
        mean = sum(counts) / len(counts)
        variance = sum((c - mean) ** 2 for c in counts) / len(counts)
        std_dev = math.sqrt(variance)

        if mean > 0:
            consistency = 1.0 if variance == 0 else 1 / (1 + std_dev / mean)
        else:
            consistency = 0.0
        frequency = mean / (mean + 5)  # saturates as delimiters get more frequent

        scores.append(DelimiterScore(
            delimiter=delimiter,
            confidence=consistency * 0.7 + frequency * 0.3,
            consistency=consistency,
            sample_size=len(sample),
        ))

    return sorted(scores, key=lambda score: score.confidence, reverse=True)


def count_delimiters(line: str, delimiter: str, quote_char: str = '"') -> int:
    """Count ``delimiter`` occurrences in ``line`` outside quoted sections."""
    count = 0
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == quote_char:
            if i + 1 < len(line) and line[i + 1] == quote_char:
                i += 1  # escaped quote
            else:
                in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            count += 1
        i += 1
    return count


def is_numeric(value: str) -> bool:
    return _NUMERIC_RE.match(value.strip()) is not None


def detect_header(rows: list[list[str]]) -> bool:
    """Decide whether the first row is a header.

    Scoring against up to ten following rows:
      * +3 when the first row has more than one cell and no duplicates
      * +2 when the first row is all non-numeric text and data rows hold numbers
      * +1 when some first-row cell looks like an identifier
      * +2 when data rows are noticeably more numeric than the first row

    A score of 3 or more means a header is present.
    """
    if len(rows) < 2:
        return False

    first_row = rows[0]
    data_rows = rows[1:HEADER_SAMPLE_ROWS + 1]
    score = 0

    if len(set(first_row)) == len(first_row) and len(first_row) > 1:
        score += 3

    first_row_all_text = all(cell.strip() and not is_numeric(cell) for cell in first_row)
    data_has_numbers = any(is_numeric(cell) for row in data_rows for cell in row)
    if first_row_all_text and data_has_numbers:
        score += 2

    if any(pattern.match(cell.strip()) for cell in first_row for pattern in HEADER_PATTERNS):
        score += 1

    first_ratio = _numeric_ratio(first_row)
    data_ratio = sum(_numeric_ratio(row) for row in data_rows) / len(data_rows)
    if data_ratio > first_ratio + 0.2:
        score += 2

    return score >= HEADER_SCORE_THRESHOLD


def _numeric_ratio(row: list[str]) -> float:
    if not row:
        return 0.0
    return sum(1 for cell in row if is_numeric(cell)) / len(row)


def is_integer(value: str) -> bool:
    return _INTEGER_RE.match(value.strip()) is not None


def is_float(value: str) -> bool:
    trimmed = value.strip()
    return _FLOAT_RE.match(trimmed) is not None or _EXPONENT_RE.match(trimmed) is not None


def is_boolean(value: str) -> bool:
    return value.strip().lower() in BOOLEAN_VALUES


def parse_iso_date(value: str) -> datetime | None:
    """Parse the ISO-like date forms accepted as dates, or return None."""
    trimmed = value.strip()
    if not any(pattern.match(trimmed) for pattern in _ISO_DATE_RES):
        return None
    candidate = trimmed.replace("/", "-") if "T" not in trimmed else trimmed
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return None


def is_iso_date(value: str) -> bool:
    return parse_iso_date(value) is not None


_TYPE_CHECKS = (
    (CsvColumnType.INTEGER, is_integer),
    (CsvColumnType.FLOAT, is_float),
    (CsvColumnType.BOOLEAN, is_boolean),
    (CsvColumnType.DATE, is_iso_date),
)


def infer_single_type(value: str) -> CsvColumnType:
    for column_type, check in _TYPE_CHECKS:
        if check(value):
            return column_type
    return CsvColumnType.STRING


def infer_column_type(values: list[str]) -> CsvColumnType:
    """Infer a column type from its values.

    Only the first 100 non-empty values are considered. A type that matches
    every value wins first, then one that matches at least 90%, in the order
    integer, float, boolean, date. Otherwise the column is ``mixed`` when
    values fall into different single-value types, else ``string``.
    """
    sample = [v for v in values if v.strip()][:TYPE_SAMPLE_SIZE]
    if not sample:
        return CsvColumnType.NULL

    for column_type, check in _TYPE_CHECKS:
        if all(check(v) for v in sample):
            return column_type

    for column_type, check in _TYPE_CHECKS:
        if sum(1 for v in sample if check(v)) / len(sample) >= TYPE_MATCH_RATIO:
            return column_type

    if len({infer_single_type(v) for v in sample}) > 1:
        return CsvColumnType.MIXED
    return CsvColumnType.STRING


def levenshtein_distance(first: str, second: str) -> int:
    """Minimum number of single-character edits turning ``first`` into ``second``."""
    previous = list(range(len(first) + 1))
    for i, char_b in enumerate(second, start=1):
        current = [i]
        for j, char_a in enumerate(first, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j - 1], current[j - 1], previous[j]) + 1)
        previous = current
    return previous[-1]


def compute_string_similarity(first: str, second: str) -> float:
    """Normalized Levenshtein similarity in [0, 1]; two empty strings are identical."""
    longer, shorter = (first, second) if len(first) > len(second) else (second, first)
    if not longer:
        return 1.0
    return (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)


def compute_jaccard_similarity(row1: list[str], row2: list[str]) -> float:
    """Jaccard similarity of the trimmed, lower-cased cell sets of two rows."""
    set1 = {cell.strip().lower() for cell in row1}
    set2 = {cell.strip().lower() for cell in row2}
    union = set1 | set2
    if not union:
        return 0.0
    return len(set1 & set2) / len(union)
