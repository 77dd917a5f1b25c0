"""CSV parsing, schema analysis and table-aware diffing."""

from data_diff.comparators.csv.diff import csv_diff, match_rows
from data_diff.comparators.csv.heuristics import (
    compute_jaccard_similarity,
    compute_string_similarity,
    detect_delimiter,
    detect_header,
    infer_column_type,
    levenshtein_distance,
)
from data_diff.comparators.csv.normalizer import normalize_row, normalize_value
from data_diff.comparators.csv.parser import format_row, parse_csv
from data_diff.comparators.csv.schema import (
    build_column_mapping,
    build_schema,
    compare_schemas,
    detect_column_renames,
)

__all__ = [
    "build_column_mapping",
    "build_schema",
    "compare_schemas",
    "compute_jaccard_similarity",
    "compute_string_similarity",
    "csv_diff",
    "detect_column_renames",
    "detect_delimiter",
    "detect_header",
    "format_row",
    "infer_column_type",
    "levenshtein_distance",
    "match_rows",
    "normalize_row",
    "normalize_value",
    "parse_csv",
]
