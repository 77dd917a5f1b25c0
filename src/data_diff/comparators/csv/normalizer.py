"""Normalize cell values before comparison."""

from datetime import timezone

from data_diff.comparators.csv.heuristics import is_integer, is_numeric, parse_iso_date
from data_diff.models.csv_models import CsvColumnType

TRUTHY_VALUES: frozenset[str] = frozenset({"true", "1", "yes", "on", "t", "y"})


def normalize_value(
    value: str,
    *,
    ignore_whitespace: bool = False,
    ignore_case: bool = False,
    type: CsvColumnType | None = None,
) -> str:
    """Normalize a cell value for comparison.

    Type-aware normalization runs first, then trimming and lower-casing when
    requested. Values that cannot be parsed as their column type are kept
    (trimmed) so they still compare as text.
    """
    normalized = value
    if type is not None:
        normalized = _normalize_by_type(normalized, type)
    if ignore_whitespace:
        normalized = normalized.strip()
    if ignore_case:
        normalized = normalized.lower()
    return normalized


def _normalize_by_type(value: str, column_type: CsvColumnType) -> str:
    trimmed = value.strip()

    # plain ASCII numerals only: int() and float() would also accept "1_000"
    if column_type == CsvColumnType.INTEGER:
        return str(int(trimmed)) if is_integer(trimmed) else trimmed
    if column_type == CsvColumnType.FLOAT:
        return f"{float(trimmed):.2f}" if is_numeric(trimmed) else trimmed
    if column_type == CsvColumnType.BOOLEAN:
        # anything outside the truthy set reads as false, including garbage
        return "true" if trimmed.lower() in TRUTHY_VALUES else "false"
    if column_type == CsvColumnType.DATE:
        return _normalize_date(trimmed)
    if column_type == CsvColumnType.NULL:
        return ""
    return trimmed


def _normalize_date(value: str) -> str:
    parsed = parse_iso_date(value)
    if parsed is None:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def normalize_row(row: list[str], **kwargs) -> list[str]:
    """Apply :func:`normalize_value` to every cell of ``row``."""
    return [normalize_value(cell, **kwargs) for cell in row]
