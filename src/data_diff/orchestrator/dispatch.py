"""Route a DiffConfig to the comparator for its format and mode."""

import logging

from data_diff.comparators.csv.diff import csv_diff
from data_diff.comparators.diff_engine import diff_chars, diff_lines
from data_diff.comparators.format_detector import detect_format_from_pair
from data_diff.comparators.json_diff import json_diff
from data_diff.comparators.validation import validate_diff_inputs
from data_diff.models.config_models import DiffConfig, DiffFormat, DiffMode
from data_diff.models.csv_models import CsvDiffResult
from data_diff.models.diff_models import DiffResult

logger = logging.getLogger(__name__)


def resolve_format(config: DiffConfig) -> DiffFormat:
    """Return the concrete format of ``config``, detecting it when set to auto."""
    if config.format != DiffFormat.AUTO:
        return config.format
    detection = detect_format_from_pair(config.left, config.right)
    logger.info(
        "Auto-detected %s (confidence %.2f): %s",
        detection.format.value, detection.confidence, detection.reason,
    )
    return DiffFormat(detection.format.value)


def data_diff(config: DiffConfig) -> DiffResult | CsvDiffResult:
    """Compare ``config.left`` with ``config.right``.

    JSON goes to :func:`json_diff` and CSV to :func:`csv_diff`. Text is
    diffed character by character in advanced mode and line by line in
    simple mode.

    Raises:
        EmptyInputError: If either side is blank.
        InputTooLargeError: If either side is over the size limit.
        ComparisonTooLargeError: If a text diff would exceed the LCS budget.
        JsonParseError: If a JSON side cannot be decoded.
    """
    validate_diff_inputs(config.left, config.right)

    diff_format = resolve_format(config)
    options = config.options
    logger.debug("Dispatching %s diff in %s mode", diff_format.value, config.mode.value)

    if diff_format == DiffFormat.JSON:
        return json_diff(config.left, config.right, options, mode=config.mode)
    if diff_format == DiffFormat.CSV:
        return csv_diff(config.left, config.right, options, mode=config.mode)
    if config.mode == DiffMode.ADVANCED:
        return diff_chars(config.left, config.right, max_cells=options.max_lcs_cells)
    return diff_lines(config.left, config.right, options)
