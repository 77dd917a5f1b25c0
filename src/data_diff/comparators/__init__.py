"""Comparators for text, JSON and CSV inputs."""

from data_diff.comparators.exceptions import (
    ComparisonTooLargeError,
    DiffError,
    EmptyInputError,
    InputTooLargeError,
    InputValidationError,
    JsonParseError,
)
from data_diff.comparators.csv import csv_diff
from data_diff.comparators.diff_engine import compute_lcs, diff_chars, diff_lines
from data_diff.comparators.format_detector import detect_format, detect_format_from_pair
from data_diff.comparators.json_diff import json_diff
from data_diff.comparators.validation import DIFF_SIZE_LIMIT, validate_diff_inputs

__all__ = [
    "DIFF_SIZE_LIMIT",
    "ComparisonTooLargeError",
    "DiffError",
    "EmptyInputError",
    "InputTooLargeError",
    "InputValidationError",
    "JsonParseError",
    "compute_lcs",
    "csv_diff",
    "detect_format",
    "detect_format_from_pair",
    "diff_chars",
    "diff_lines",
    "json_diff",
    "validate_diff_inputs",
]
