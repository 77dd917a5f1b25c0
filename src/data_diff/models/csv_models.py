"""CSV parsing, schema and comparison models."""

from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field

from data_diff.models.diff_models import ChangeType, DiffChange, DiffResult, DiffStats


DEFAULT_SIMILARITY_THRESHOLD = 0.8


class CsvColumnType(str, Enum):
    """Inferred type of a CSV column."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    NULL = "null"
    MIXED = "mixed"


class ParseState(IntEnum):
    """Tokenizer states of the CSV parser."""

    START_FIELD = 0
    IN_FIELD = 1
    IN_QUOTED_FIELD = 2
    QUOTE_IN_QUOTED_FIELD = 3


class RowMatchStrategy(str, Enum):
    """How rows of the two tables are paired."""

    POSITION = "position"
    PRIMARY_KEY = "primary_key"
    FUZZY = "fuzzy"


class ParseError(BaseModel):
    model_config = ConfigDict(frozen=False)

    row: int
    col: int
    message: str
    severity: str = "warning"  # "warning" | "error"


class ColumnDefinition(BaseModel):
    model_config = ConfigDict(frozen=False)

    index: int
    name: str  # header value or "Column A", "Column B", ...
    type: CsvColumnType
    samples: list[str] = Field(default_factory=list)  # first 10 non-empty values


class CsvSchema(BaseModel):
    model_config = ConfigDict(frozen=False)

    columns: list[ColumnDefinition] = Field(default_factory=list)
    header_row: int | None = None  # 0-indexed, None when there is no header
    key_columns: list[int] | None = None

    @property
    def has_header(self) -> bool:
        return self.header_row is not None

    def find_column(self, name: str) -> int | None:
        """Return the index of the first column called ``name``."""
        for col in self.columns:
            if col.name == name:
                return col.index
        return None


class CsvMetadata(BaseModel):
    model_config = ConfigDict(frozen=False)

    delimiter: str
    quote_char: str
    row_count: int = 0
    column_count: int = 0
    has_header: bool = False
    encoding: str = "utf-8"


class ParsedCSV(BaseModel):
    """Result of parsing one CSV document."""

    model_config = ConfigDict(frozen=False, populate_by_name=True)

    rows: list[list[str]] = Field(default_factory=list)
    csv_schema: CsvSchema = Field(default_factory=CsvSchema, alias="schema")
    metadata: CsvMetadata
    errors: list[ParseError] = Field(default_factory=list)


class DelimiterScore(BaseModel):
    model_config = ConfigDict(frozen=False)

    delimiter: str
    confidence: float  # 0-1
    consistency: float
    sample_size: int  # lines analysed


class RowMatchConfig(BaseModel):
    model_config = ConfigDict(frozen=False)

    strategy: RowMatchStrategy = RowMatchStrategy.POSITION
    key_columns: list[str] | None = None  # for PRIMARY_KEY
    similarity_threshold: float = Field(default=DEFAULT_SIMILARITY_THRESHOLD, ge=0.0, le=1.0)


class RowMatch(BaseModel):
    model_config = ConfigDict(frozen=False)

    left_index: int | None = None
    right_index: int | None = None
    type: ChangeType
    key: str | None = None  # primary-key join value
    similarity: float | None = None  # fuzzy score

    @property
    def sort_index(self) -> int:
        return self.left_index if self.left_index is not None else self.right_index


class CellChange(BaseModel):
    model_config = ConfigDict(frozen=False)

    column: int
    column_name: str | None = None
    old_value: str
    new_value: str


class SchemaChangeType(str, Enum):
    COLUMN_ADDED = "column_added"
    COLUMN_DELETED = "column_deleted"
    COLUMN_REORDERED = "column_reordered"
    COLUMN_TYPE_CHANGED = "column_type_changed"
    COLUMN_RENAMED = "column_renamed"


class SchemaChange(BaseModel):
    model_config = ConfigDict(frozen=False)

    type: SchemaChangeType
    column: str
    left_index: int | None = None
    right_index: int | None = None
    old_type: CsvColumnType | None = None
    new_type: CsvColumnType | None = None
    confidence: float | None = None  # rename detection only


class ColumnRename(BaseModel):
    model_config = ConfigDict(frozen=False)

    old_name: str
    new_name: str
    confidence: float


class CsvRowChange(DiffChange):
    """A row-level change with optional cell detail."""

    cell_changes: list[CellChange] = Field(default_factory=list)
    key: str | None = None
    similarity: float | None = None


class CsvDiffStats(DiffStats):
    total: int = 0

    @classmethod
    def from_changes(cls, changes: list[DiffChange]) -> "CsvDiffStats":
        stats = super().from_changes(changes)
        stats.total = stats.additions + stats.deletions + stats.modifications + stats.unchanged
        return stats


class CsvDiffResult(DiffResult):
    """Row changes plus schema changes and parser warnings."""

    changes: list[CsvRowChange] = Field(default_factory=list)
    stats: CsvDiffStats = Field(default_factory=CsvDiffStats)
    schema_changes: list[SchemaChange] = Field(default_factory=list)
    left_errors: list[ParseError] = Field(default_factory=list)
    right_errors: list[ParseError] = Field(default_factory=list)
