"""Schema construction, schema comparison and column mapping."""

import logging

from data_diff.comparators.csv.heuristics import (
    compute_string_similarity,
    detect_header,
    infer_column_type,
)
from data_diff.models.csv_models import (
    ColumnDefinition,
    ColumnRename,
    CsvSchema,
    SchemaChange,
    SchemaChangeType,
)

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 10
RENAME_THRESHOLD = 0.7
RENAME_NAME_WEIGHT = 0.4
RENAME_TYPE_WEIGHT = 0.3
RENAME_SAMPLE_WEIGHT = 0.3


def column_label(index: int) -> str:
    """Spreadsheet-style label for a 0-based column index: A, B, ..., Z, AA, AB."""
    label = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        label = chr(65 + remainder) + label
    return label


def build_schema(rows: list[list[str]], has_header: bool | None = None) -> CsvSchema:
    """Build a schema from parsed rows.

    Args:
        rows: Parsed rows; rows may have different lengths.
        has_header: Force the header decision; detected when None.

    Returns:
        One column per index up to the widest row.
    """
    if not rows:
        return CsvSchema()

    if has_header is None:
        has_header = detect_header(rows)
        logger.debug("Header detection: %s", has_header)

    header = rows[0] if has_header else []
    data_rows = rows[1:] if has_header else rows
    column_count = max(len(row) for row in rows)

    columns = []
    for i in range(column_count):
        if i < len(header) and header[i]:
            name = header[i].strip()
        else:
            name = f"Column {column_label(i)}"

        values = [row[i] if i < len(row) else "" for row in data_rows]
        samples = [v for v in values[:SAMPLE_SIZE] if v.strip()]
        column_type = infer_column_type([v for v in values if v.strip()])

        columns.append(ColumnDefinition(index=i, name=name, type=column_type, samples=samples))

    return CsvSchema(columns=columns, header_row=0 if has_header else None)


def compare_schemas(
    left: CsvSchema,
    right: CsvSchema,
    *,
    detect_renames: bool = False,
) -> list[SchemaChange]:
    """Compare two schemas by column name.

    Deletions, reorders and type changes come first in left column order,
    then additions in right column order. With ``detect_renames`` a
    deleted/added pair that scores above the rename threshold is replaced by
    a single ``column_renamed`` change appended at the end.
    """
    changes: list[SchemaChange] = []
    left_by_name = {col.name: col for col in left.columns}
    right_by_name = {col.name: col for col in right.columns}
    matched: set[str] = set()

    for left_col in left.columns:
        right_col = right_by_name.get(left_col.name)
        if right_col is None:
            changes.append(SchemaChange(
                type=SchemaChangeType.COLUMN_DELETED,
                column=left_col.name,
                left_index=left_col.index,
            ))
            continue

        matched.add(left_col.name)
        if left_col.index != right_col.index:
            changes.append(SchemaChange(
                type=SchemaChangeType.COLUMN_REORDERED,
                column=left_col.name,
                left_index=left_col.index,
                right_index=right_col.index,
            ))
        if left_col.type != right_col.type:
            changes.append(SchemaChange(
                type=SchemaChangeType.COLUMN_TYPE_CHANGED,
                column=left_col.name,
                left_index=left_col.index,
                right_index=right_col.index,
                old_type=left_col.type,
                new_type=right_col.type,
            ))

    added_columns = []
    for right_col in right.columns:
        if right_col.name not in matched:
            added_columns.append(right_col)
            changes.append(SchemaChange(
                type=SchemaChangeType.COLUMN_ADDED,
                column=right_col.name,
                right_index=right_col.index,
            ))

    if detect_renames:
        deleted_columns = [col for col in left.columns if col.name not in right_by_name]
        for rename in detect_column_renames(deleted_columns, added_columns):
            delete_idx = _find_change(changes, SchemaChangeType.COLUMN_DELETED, rename.old_name)
            add_idx = _find_change(changes, SchemaChangeType.COLUMN_ADDED, rename.new_name)
            if delete_idx is None or add_idx is None:
                continue
            for idx in sorted((delete_idx, add_idx), reverse=True):
                del changes[idx]
            changes.append(SchemaChange(
                type=SchemaChangeType.COLUMN_RENAMED,
                column=rename.old_name,
                left_index=left_by_name[rename.old_name].index,
                right_index=right_by_name[rename.new_name].index,
                confidence=rename.confidence,
            ))
            logger.debug(
                "Column rename %r -> %r (confidence %.2f)",
                rename.old_name, rename.new_name, rename.confidence,
            )

    return changes


def _find_change(changes: list[SchemaChange], change_type: SchemaChangeType, column: str) -> int | None:
    for idx, change in enumerate(changes):
        if change.type == change_type and change.column == column:
            return idx
    return None


def detect_column_renames(
    deleted_columns: list[ColumnDefinition],
    added_columns: list[ColumnDefinition],
) -> list[ColumnRename]:
    """Pair each deleted column with its best-scoring added column.

    Score = 0.4 * name similarity + 0.3 * same type + 0.3 * sample overlap;
    only scores strictly above 0.7 count.
    """
    renames = []
    for deleted in deleted_columns:
        best: ColumnDefinition | None = None
        best_score = 0.0
        for added in added_columns:
            score = (
                compute_string_similarity(deleted.name, added.name) * RENAME_NAME_WEIGHT
                + (RENAME_TYPE_WEIGHT if deleted.type == added.type else 0.0)
                + compute_sample_similarity(deleted.samples, added.samples) * RENAME_SAMPLE_WEIGHT
            )
            if score > RENAME_THRESHOLD and (best is None or score > best_score):
                best = added
                best_score = score
        if best is not None:
            renames.append(ColumnRename(old_name=deleted.name, new_name=best.name, confidence=best_score))
    return renames


def compute_sample_similarity(samples1: list[str], samples2: list[str]) -> float:
    """Jaccard similarity of two sample lists; two empty lists count as identical."""
    if not samples1 and not samples2:
        return 1.0
    if not samples1 or not samples2:
        return 0.0
    set1 = {s.strip().lower() for s in samples1}
    set2 = {s.strip().lower() for s in samples2}
    union = set1 | set2
    return len(set1 & set2) / len(union) if union else 0.0


def build_column_mapping(left: CsvSchema, right: CsvSchema) -> dict[int, int]:
    """Map left column indices to right column indices.

    Columns are matched by name when both sides have a header, otherwise by
    position up to the narrower schema; extra columns stay unmapped.
    """
    if left.has_header and right.has_header:
        right_by_name = {col.name: col for col in right.columns}
        return {
            col.index: right_by_name[col.name].index
            for col in left.columns
            if col.name in right_by_name
        }

    shared = min(len(left.columns), len(right.columns))
    return {i: i for i in range(shared)}
