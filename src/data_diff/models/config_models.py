"""Request models: diff configuration, options and format detection."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from data_diff.models.csv_models import DEFAULT_SIMILARITY_THRESHOLD, RowMatchStrategy


DEFAULT_MAX_LCS_CELLS = 10_000_000


class DiffMode(str, Enum):
    SIMPLE = "simple"
    ADVANCED = "advanced"


class DetectedFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    TEXT = "text"


class DiffFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    TEXT = "text"
    AUTO = "auto"


class FormatDetectionResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    format: DetectedFormat
    confidence: float  # 0-1
    reason: str  # human-readable explanation


class PairDetectionResult(FormatDetectionResult):
    left_format: DetectedFormat
    right_format: DetectedFormat


class DiffOptions(BaseModel):
    """Per-call comparison options. Each engine reads only the fields it understands."""

    model_config = ConfigDict(frozen=False)

    # text (ignore_case / ignore_whitespace also apply to CSV cells)
    ignore_case: bool = False
    ignore_whitespace: bool = False
    ignore_blank_lines: bool = False

    # json
    ignore_key_order: bool = False
    ignore_formatting: bool = False

    # csv
    delimiter: str | None = None  # None or "auto" detects
    has_header: bool | None = None  # None detects
    ignore_header: bool = False
    key_columns: list[str] | None = None
    match_strategy: RowMatchStrategy | None = None
    detect_renames: bool = False
    similarity_threshold: float = Field(default=DEFAULT_SIMILARITY_THRESHOLD, ge=0.0, le=1.0)

    # line/char engine guard
    max_lcs_cells: int = Field(default=DEFAULT_MAX_LCS_CELLS, ge=1)


class DiffConfig(BaseModel):
    """Everything a caller serializes across the boundary to request one diff."""

    model_config = ConfigDict(frozen=False)

    left: str
    right: str
    mode: DiffMode
    format: DiffFormat
    options: DiffOptions = Field(default_factory=DiffOptions)
