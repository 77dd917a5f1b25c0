"""Table-aware diff for CSV documents."""

import logging

from data_diff.comparators.csv.heuristics import compute_jaccard_similarity
from data_diff.comparators.csv.normalizer import normalize_value
from data_diff.comparators.csv.parser import format_row, parse_csv
from data_diff.comparators.csv.schema import build_column_mapping, compare_schemas
from data_diff.comparators.exceptions import InputValidationError
from data_diff.models.config_models import DiffMode, DiffOptions
from data_diff.models.csv_models import (
    CellChange,
    CsvDiffResult,
    CsvDiffStats,
    CsvRowChange,
    CsvSchema,
    RowMatch,
    RowMatchConfig,
    RowMatchStrategy,
)
from data_diff.models.diff_models import ChangeType

logger = logging.getLogger(__name__)


def csv_diff(
    left: str,
    right: str,
    options: DiffOptions | None = None,
    *,
    mode: DiffMode = DiffMode.ADVANCED,
) -> CsvDiffResult:
    """Compare two CSV documents row by row.

    Args:
        left: Left CSV text.
        right: Right CSV text.
        options: Parsing and matching options.
        mode: ``simple`` reports row-level changes only. ``advanced`` also
            compares schemas and inspects the cells of modified rows.

    Returns:
        CsvDiffResult with one change per matched or unmatched row.

    Raises:
        InputValidationError: If primary-key matching cannot resolve its key columns.
    """
    options = options or DiffOptions()
    mode = DiffMode(mode)

    left_parsed = parse_csv(left, delimiter=options.delimiter, has_header=options.has_header)
    right_parsed = parse_csv(right, delimiter=options.delimiter, has_header=options.has_header)
    left_schema = left_parsed.csv_schema
    right_schema = right_parsed.csv_schema

    if mode == DiffMode.SIMPLE:
        schema_changes = []
    else:
        schema_changes = compare_schemas(
            left_schema, right_schema, detect_renames=options.detect_renames
        )

    column_mapping = build_column_mapping(left_schema, right_schema)

    left_rows = left_parsed.rows
    if options.ignore_header and left_parsed.metadata.has_header:
        left_rows = left_rows[1:]
    right_rows = right_parsed.rows
    if options.ignore_header and right_parsed.metadata.has_header:
        right_rows = right_rows[1:]

    strategy = options.match_strategy
    if strategy is None:
        strategy = RowMatchStrategy.PRIMARY_KEY if options.key_columns else RowMatchStrategy.POSITION
    logger.debug("Matching %d/%d rows by %s", len(left_rows), len(right_rows), strategy.value)

    config = RowMatchConfig(
        strategy=strategy,
        key_columns=options.key_columns,
        similarity_threshold=options.similarity_threshold,
    )
    matches = match_rows(left_rows, right_rows, config, left_schema, right_schema)

    left_delimiter = left_parsed.metadata.delimiter
    right_delimiter = right_parsed.metadata.delimiter

    changes: list[CsvRowChange] = []
    for match in matches:
        if match.type == ChangeType.ADDED:
            changes.append(CsvRowChange(
                type=ChangeType.ADDED,
                right_line_number=match.right_index + 1,
                right_content=format_row(right_rows[match.right_index], right_delimiter),
                key=match.key,
            ))
            continue
        if match.type == ChangeType.DELETED:
            changes.append(CsvRowChange(
                type=ChangeType.DELETED,
                left_line_number=match.left_index + 1,
                left_content=format_row(left_rows[match.left_index], left_delimiter),
                key=match.key,
            ))
            continue

        left_row = left_rows[match.left_index]
        right_row = right_rows[match.right_index]
        change_type = match.type
        cell_changes: list[CellChange] = []
        if change_type == ChangeType.MODIFIED and mode == DiffMode.ADVANCED:
            cell_changes = compare_row_cells(left_row, right_row, column_mapping, left_schema, options)
            if not cell_changes:
                # equal once values are normalized
                change_type = ChangeType.UNCHANGED

        changes.append(CsvRowChange(
            type=change_type,
            left_line_number=match.left_index + 1,
            right_line_number=match.right_index + 1,
            left_content=format_row(left_row, left_delimiter),
            right_content=format_row(right_row, right_delimiter),
            cell_changes=cell_changes,
            key=match.key,
            similarity=match.similarity,
        ))

    return CsvDiffResult(
        changes=changes,
        stats=CsvDiffStats.from_changes(changes),
        schema_changes=schema_changes,
        left_errors=left_parsed.errors,
        right_errors=right_parsed.errors,
    )


def match_rows(
    left_rows: list[list[str]],
    right_rows: list[list[str]],
    config: RowMatchConfig,
    left_schema: CsvSchema,
    right_schema: CsvSchema,
) -> list[RowMatch]:
    """Pair rows of the two tables using ``config.strategy``."""
    if config.strategy == RowMatchStrategy.PRIMARY_KEY:
        return match_by_primary_key(
            left_rows, right_rows, config.key_columns or [], left_schema, right_schema
        )
    if config.strategy == RowMatchStrategy.FUZZY:
        return match_by_fuzzy(left_rows, right_rows, config.similarity_threshold)
    return match_by_position(left_rows, right_rows)


def match_by_position(left_rows: list[list[str]], right_rows: list[list[str]]) -> list[RowMatch]:
    matches = []
    for i in range(max(len(left_rows), len(right_rows))):
        if i < len(left_rows) and i < len(right_rows):
            same = rows_equal(left_rows[i], right_rows[i])
            matches.append(RowMatch(
                left_index=i,
                right_index=i,
                type=ChangeType.UNCHANGED if same else ChangeType.MODIFIED,
            ))
        elif i < len(left_rows):
            matches.append(RowMatch(left_index=i, type=ChangeType.DELETED))
        else:
            matches.append(RowMatch(right_index=i, type=ChangeType.ADDED))
    return matches


def match_by_primary_key(
    left_rows: list[list[str]],
    right_rows: list[list[str]],
    key_columns: list[str],
    left_schema: CsvSchema,
    right_schema: CsvSchema,
) -> list[RowMatch]:
    """Join rows on the trimmed, lower-cased values of ``key_columns``.

    Key columns missing from one side are ignored as long as at least one
    resolves. The resolved indices are recorded on each schema's
    ``key_columns``. When a key repeats, the last row with that key is used.

    Raises:
        InputValidationError: If no key columns are given, or none of them
            exist in one of the schemas.
    """
    if not key_columns:
        raise InputValidationError("Primary key matching requires at least one key column")

    left_indices = _resolve_key_columns(key_columns, left_schema, "left")
    right_indices = _resolve_key_columns(key_columns, right_schema, "right")
    left_schema.key_columns = left_indices
    right_schema.key_columns = right_indices

    left_map = _index_rows(left_rows, left_indices, "left")
    right_map = _index_rows(right_rows, right_indices, "right")

    matches = []
    for key, left_index in left_map.items():
        right_index = right_map.get(key)
        if right_index is None:
            matches.append(RowMatch(left_index=left_index, type=ChangeType.DELETED, key=key))
            continue
        same = rows_equal(left_rows[left_index], right_rows[right_index])
        matches.append(RowMatch(
            left_index=left_index,
            right_index=right_index,
            type=ChangeType.UNCHANGED if same else ChangeType.MODIFIED,
            key=key,
        ))

    for key, right_index in right_map.items():
        if key not in left_map:
            matches.append(RowMatch(right_index=right_index, type=ChangeType.ADDED, key=key))

    return sorted(matches, key=lambda match: match.sort_index)


def _resolve_key_columns(key_columns: list[str], schema: CsvSchema, side: str) -> list[int]:
    indices = []
    for name in key_columns:
        index = schema.find_column(name)
        if index is None:
            logger.warning("Key column %r not found on %s side", name, side)
        else:
            indices.append(index)
    if not indices:
        raise InputValidationError(
            f"None of the key columns {key_columns} exist in the {side} CSV"
        )
    return indices


def _index_rows(rows: list[list[str]], key_indices: list[int], side: str) -> dict[str, int]:
    index: dict[str, int] = {}
    for i, row in enumerate(rows):
        key = compute_row_key(row, key_indices)
        if key in index:
            logger.warning("Duplicate key %r on %s side; keeping row %d", key, side, i + 1)
        index[key] = i
    return index


def compute_row_key(row: list[str], key_indices: list[int]) -> str:
    return "|".join(
        (row[i] if i < len(row) else "").strip().lower() for i in key_indices
    )


def match_by_fuzzy(
    left_rows: list[list[str]],
    right_rows: list[list[str]],
    threshold: float,
) -> list[RowMatch]:
    """Greedily pair each left row with its most similar unused right row.

    Candidates must reach ``threshold`` Jaccard similarity; ties keep the
    earliest right row.
    """
    matches = []
    used_right: set[int] = set()

    for i, left_row in enumerate(left_rows):
        best_index: int | None = None
        best_similarity = 0.0
        for j, right_row in enumerate(right_rows):
            if j in used_right:
                continue
            similarity = compute_jaccard_similarity(left_row, right_row)
            if similarity >= threshold and (best_index is None or similarity > best_similarity):
                best_index = j
                best_similarity = similarity

        if best_index is None:
            matches.append(RowMatch(left_index=i, type=ChangeType.DELETED))
            continue
        matches.append(RowMatch(
            left_index=i,
            right_index=best_index,
            type=ChangeType.UNCHANGED if best_similarity == 1.0 else ChangeType.MODIFIED,
            similarity=best_similarity,
        ))
        used_right.add(best_index)

    for j in range(len(right_rows)):
        if j not in used_right:
            matches.append(RowMatch(right_index=j, type=ChangeType.ADDED))

    return matches


def rows_equal(row1: list[str], row2: list[str]) -> bool:
    if len(row1) != len(row2):
        return False
    return all(a.strip() == b.strip() for a, b in zip(row1, row2))


def compare_row_cells(
    left_row: list[str],
    right_row: list[str],
    column_mapping: dict[int, int],
    left_schema: CsvSchema,
    options: DiffOptions,
) -> list[CellChange]:
    """Compare mapped cells after type-aware normalization.

    Both cells are normalized with the left column's type. Missing cells
    read as empty strings; unmapped columns are not compared.
    """
    changes = []
    for left_col, right_col in column_mapping.items():
        left_value = left_row[left_col] if left_col < len(left_row) else ""
        right_value = right_row[right_col] if right_col < len(right_row) else ""
        column = left_schema.columns[left_col] if left_col < len(left_schema.columns) else None
        column_type = column.type if column else None

        left_normalized = normalize_value(
            left_value,
            ignore_whitespace=options.ignore_whitespace,
            ignore_case=options.ignore_case,
            type=column_type,
        )
        right_normalized = normalize_value(
            right_value,
            ignore_whitespace=options.ignore_whitespace,
            ignore_case=options.ignore_case,
            type=column_type,
        )
        if left_normalized != right_normalized:
            changes.append(CellChange(
                column=left_col,
                column_name=column.name if column else None,
                old_value=left_value,
                new_value=right_value,
            ))
    return changes
