"""Data models for the diff engine."""

from data_diff.models.config_models import (
    DEFAULT_MAX_LCS_CELLS,
    DetectedFormat,
    DiffConfig,
    DiffFormat,
    DiffMode,
    DiffOptions,
    FormatDetectionResult,
    PairDetectionResult,
)
from data_diff.models.csv_models import (
    DEFAULT_SIMILARITY_THRESHOLD,
    CellChange,
    ColumnDefinition,
    ColumnRename,
    CsvColumnType,
    CsvDiffResult,
    CsvDiffStats,
    CsvMetadata,
    CsvRowChange,
    CsvSchema,
    DelimiterScore,
    ParsedCSV,
    ParseError,
    ParseState,
    RowMatch,
    RowMatchConfig,
    RowMatchStrategy,
    SchemaChange,
    SchemaChangeType,
)
from data_diff.models.diff_models import ChangeType, DiffChange, DiffResult, DiffStats

__all__ = [
    "DEFAULT_MAX_LCS_CELLS",
    "DEFAULT_SIMILARITY_THRESHOLD",
    "CellChange",
    "ChangeType",
    "ColumnDefinition",
    "ColumnRename",
    "CsvColumnType",
    "CsvDiffResult",
    "CsvDiffStats",
    "CsvMetadata",
    "CsvRowChange",
    "CsvSchema",
    "DelimiterScore",
    "DetectedFormat",
    "DiffChange",
    "DiffConfig",
    "DiffFormat",
    "DiffMode",
    "DiffOptions",
    "DiffResult",
    "DiffStats",
    "FormatDetectionResult",
    "PairDetectionResult",
    "ParseError",
    "ParseState",
    "ParsedCSV",
    "RowMatch",
    "RowMatchConfig",
    "RowMatchStrategy",
    "SchemaChange",
    "SchemaChangeType",
]
