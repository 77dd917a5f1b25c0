"""Format auto-detection: classify input as JSON, CSV or plain text."""

import json
import logging
import re
from collections import Counter

from data_diff.models.config_models import (
    DetectedFormat,
    FormatDetectionResult,
    PairDetectionResult,
)

logger = logging.getLogger(__name__)

JSON_THRESHOLD = 0.9
CSV_THRESHOLD = 0.7
WEAK_THRESHOLD = 0.5

CSV_DELIMITERS: tuple[str, ...] = (",", "\t", "|", ";")
JSON_MARKERS: tuple[str, ...] = ('":', '":{', '":[')
FORMAT_PRIORITY: dict[DetectedFormat, int] = {
    DetectedFormat.JSON: 3,
    DetectedFormat.CSV: 2,
    DetectedFormat.TEXT: 1,
}

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_QUOTED_RE = re.compile(r"[\",'].*[\",']")
_IDENTIFIER_RE = re.compile(r"^[a-z_][a-z0-9_]*$", re.IGNORECASE)
_DELIMITER_NAMES = {"\t": "tab", ",": "comma"}


def _reject_constant(name: str) -> float:
    raise ValueError(f"Non-standard JSON constant: {name}")


def detect_format(text: str) -> FormatDetectionResult:
    """Auto-detect the format of ``text``.

    JSON is tried first because it is the most specific; CSV second. Anything
    that is neither confidently JSON nor CSV is reported as text.
    """
    if not text or not text.strip():
        return FormatDetectionResult(
            format=DetectedFormat.TEXT,
            confidence=1.0,
            reason="Empty input defaults to text",
        )

    trimmed = text.strip()

    json_result = _detect_json(trimmed)
    if json_result.confidence >= JSON_THRESHOLD:
        return json_result

    csv_result = _detect_csv(trimmed)
    if csv_result.confidence >= CSV_THRESHOLD:
        return csv_result

    if json_result.confidence >= WEAK_THRESHOLD and csv_result.confidence < WEAK_THRESHOLD:
        return json_result

    return FormatDetectionResult(
        format=DetectedFormat.TEXT,
        confidence=max(0.3, 1.0 - max(json_result.confidence, csv_result.confidence)),
        reason="No strong format indicators detected, treating as plain text",
    )


def _detect_json(text: str) -> FormatDetectionResult:
    if not (text.startswith(("{", "[")) and text.endswith(("}", "]"))):
        return FormatDetectionResult(
            format=DetectedFormat.JSON,
            confidence=0.0,
            reason="Does not have JSON structure (missing braces/brackets)",
        )

    try:
        json.loads(text, parse_constant=_reject_constant)
    except RecursionError:
        return FormatDetectionResult(
            format=DetectedFormat.JSON,
            confidence=0.2,
            reason="Nested too deeply to decode as JSON",
        )
    except ValueError:
        if any(marker in text for marker in JSON_MARKERS):
            return FormatDetectionResult(
                format=DetectedFormat.JSON,
                confidence=0.6,
                reason="Has JSON-like structure but contains syntax errors",
            )
        return FormatDetectionResult(
            format=DetectedFormat.JSON,
            confidence=0.2,
            reason="Has braces but does not appear to be valid JSON",
        )

    return FormatDetectionResult(
        format=DetectedFormat.JSON,
        confidence=1.0,
        reason="Valid JSON structure detected",
    )


def _detect_csv(text: str) -> FormatDetectionResult:
    lines = [line for line in _LINE_SPLIT_RE.split(text) if line.strip()]

    if not lines:
        return FormatDetectionResult(
            format=DetectedFormat.CSV, confidence=0.0, reason="No content to analyze"
        )
    if len(lines) == 1:
        return FormatDetectionResult(
            format=DetectedFormat.CSV,
            confidence=0.1,
            reason="Only one line - unlikely to be CSV",
        )

    best_delimiter = ","
    best_score = 0.0
    for delimiter in CSV_DELIMITERS:
        score = analyze_delimiter_consistency(lines, delimiter)
        if score > best_score:
            best_score = score
            best_delimiter = delimiter

    first_line = lines[0]
    has_delimiter = any(d in first_line for d in CSV_DELIMITERS)
    has_quoted_fields = _QUOTED_RE.search(text) is not None
    looks_like_headers = any(
        _IDENTIFIER_RE.match(re.sub(r"['\"]", "", field.strip()))
        for field in first_line.split(best_delimiter)
    )

    confidence = 0.0
    if best_score > 0.7:
        confidence += 0.5
    if has_delimiter:
        confidence += 0.2
    if has_quoted_fields:
        confidence += 0.1
    if looks_like_headers:
        confidence += 0.2
    if best_score < 0.3:
        confidence *= 0.5
    confidence = min(confidence, 1.0)

    name = _DELIMITER_NAMES.get(best_delimiter, best_delimiter)
    if confidence >= CSV_THRESHOLD:
        reason = f"Detected {name}-delimited CSV with consistent column structure"
    elif confidence >= WEAK_THRESHOLD:
        reason = f"Possibly {name}-delimited CSV but structure is inconsistent"
    else:
        reason = "Does not appear to be CSV format"
    return FormatDetectionResult(format=DetectedFormat.CSV, confidence=confidence, reason=reason)


def analyze_delimiter_consistency(lines: list[str], delimiter: str) -> float:
    """Score from 0 to 1 how consistently ``delimiter`` splits ``lines``.

    Delimiters inside double quotes are not counted. Lines without the
    delimiter are ignored; if fewer than half the lines contain it the score
    is capped at 0.2.
    """
    if len(lines) < 2:
        return 0.0

    counts = []
    for line in lines:
        count = 0
        in_quotes = False
        for char in line:
            if char == '"':
                in_quotes = not in_quotes
            elif char == delimiter and not in_quotes:
                count += 1
        counts.append(count)

    non_zero = [c for c in counts if c > 0]
    if not non_zero:
        return 0.0
    if len(non_zero) < len(lines) * 0.5:
        return 0.2

    if len(non_zero) == len(lines) and all(c == non_zero[0] for c in non_zero):
        return 1.0

    mean = sum(non_zero) / len(non_zero)
    variance = sum((c - mean) ** 2 for c in non_zero) / len(non_zero)
    consistency = max(0.0, 1.0 - variance / (mean + 1))

    _, mode_count = Counter(non_zero).most_common(1)[0]
    mode_frequency = mode_count / len(non_zero)

    return consistency * 0.7 + mode_frequency * 0.3


def detect_format_from_pair(left: str, right: str) -> PairDetectionResult:
    """Resolve the format of two inputs to a single decision."""
    left_result = detect_format(left)
    right_result = detect_format(right)
    sides = {"left_format": left_result.format, "right_format": right_result.format}

    if left_result.format == right_result.format and left_result.confidence >= CSV_THRESHOLD:
        result = PairDetectionResult(
            format=left_result.format,
            confidence=min(left_result.confidence, right_result.confidence),
            reason=f"Both inputs detected as {left_result.format.value}",
            **sides,
        )
    elif left_result.confidence >= JSON_THRESHOLD and right_result.confidence < WEAK_THRESHOLD:
        result = PairDetectionResult(
            format=left_result.format,
            confidence=left_result.confidence,
            reason=f"Left input strongly suggests {left_result.format.value}",
            **sides,
        )
    elif right_result.confidence >= JSON_THRESHOLD and left_result.confidence < WEAK_THRESHOLD:
        result = PairDetectionResult(
            format=right_result.format,
            confidence=right_result.confidence,
            reason=f"Right input strongly suggests {right_result.format.value}",
            **sides,
        )
    elif left_result.confidence >= CSV_THRESHOLD and right_result.confidence >= CSV_THRESHOLD:
        if FORMAT_PRIORITY[left_result.format] >= FORMAT_PRIORITY[right_result.format]:
            winner = left_result
        else:
            winner = right_result
        result = PairDetectionResult(
            format=winner.format,
            confidence=0.6,
            reason=f"Inputs have different formats, using {winner.format.value} based on priority",
            **sides,
        )
    else:
        winner = left_result if left_result.confidence >= right_result.confidence else right_result
        result = PairDetectionResult(
            format=winner.format,
            confidence=winner.confidence,
            reason=(
                f"Using {winner.format.value} based on higher confidence "
                f"({round(winner.confidence * 100)}%)"
            ),
            **sides,
        )

    logger.debug("Pair detection: %s (%s)", result.format.value, result.reason)
    return result
