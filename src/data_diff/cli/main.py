"""CLI entry point for data-diff."""
import argparse
from dotenv import load_dotenv
import json
import logging
import os
import sys
import traceback
from pathlib import Path

from pydantic import ValidationError

from data_diff.comparators.exceptions import InputValidationError, JsonParseError
from data_diff.comparators.format_detector import detect_format_from_pair
from data_diff.models import (
    DEFAULT_MAX_LCS_CELLS,
    ChangeType,
    CsvDiffResult,
    DiffConfig,
    DiffFormat,
    DiffMode,
    DiffOptions,
    DiffResult,
    RowMatchStrategy,
)
from data_diff.orchestrator.dispatch import data_diff

load_dotenv()

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_PARSE_ERROR = 2
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130

# Defaults (overridable from the environment / .env)
DEFAULT_MODE = DiffMode.ADVANCED.value
DEFAULT_FORMAT = DiffFormat.AUTO.value
STDIN_PATH = "-"

_CHANGE_MARKERS = {
    ChangeType.ADDED: "+",
    ChangeType.DELETED: "-",
    ChangeType.MODIFIED: "~",
    ChangeType.UNCHANGED: " ",
}


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="data-diff",
        description="Compare two text, JSON or CSV documents",
    )
    parser.add_argument("left", type=str, help="Left input file ('-' for stdin)")
    parser.add_argument("right", type=str, help="Right input file ('-' for stdin)")
    parser.add_argument(
        "--format",
        type=str,
        default=os.getenv("DATA_DIFF_FORMAT", DEFAULT_FORMAT),
        choices=[f.value for f in DiffFormat],
        help="Input format (default: $DATA_DIFF_FORMAT or auto)",
    )
    parser.add_argument(
        "--mode",
        type=str,
        default=os.getenv("DATA_DIFF_MODE", DEFAULT_MODE),
        choices=[m.value for m in DiffMode],
        help="simple or advanced comparison (default: $DATA_DIFF_MODE or advanced)",
    )
    parser.add_argument(
        "--max-lcs-cells",
        type=int,
        default=os.getenv("DATA_DIFF_MAX_LCS_CELLS", str(DEFAULT_MAX_LCS_CELLS)),
        help=f"Largest LCS table a text diff may build (default: {DEFAULT_MAX_LCS_CELLS})",
    )

    text = parser.add_argument_group("text options")
    text.add_argument("--ignore-case", action="store_true", help="Compare case-insensitively")
    text.add_argument(
        "--ignore-whitespace", action="store_true", help="Ignore leading/trailing whitespace"
    )
    text.add_argument(
        "--ignore-blank-lines", action="store_true", help="Drop blank lines before comparing"
    )

    json_group = parser.add_argument_group("json options")
    json_group.add_argument(
        "--ignore-key-order", action="store_true", help="Sort object keys before comparing"
    )
    json_group.add_argument(
        "--ignore-formatting", action="store_true", help="Trim string values before comparing"
    )

    csv_group = parser.add_argument_group("csv options")
    csv_group.add_argument(
        "--delimiter", type=str, default=None, help="Field delimiter (default: detected)"
    )
    header = csv_group.add_mutually_exclusive_group()
    header.add_argument(
        "--has-header", dest="has_header", action="store_true", help="First row is a header"
    )
    header.add_argument(
        "--no-header", dest="has_header", action="store_false", help="First row is data"
    )
    csv_group.set_defaults(has_header=None)
    csv_group.add_argument(
        "--ignore-header", action="store_true", help="Leave header rows out of the row diff"
    )
    csv_group.add_argument(
        "--key-columns",
        type=str,
        default="",
        help="Comma-separated key column names for primary-key matching",
    )
    csv_group.add_argument(
        "--match-strategy",
        type=str,
        default=None,
        choices=[s.value for s in RowMatchStrategy],
        help="Row matching strategy (default: primary_key with --key-columns, else position)",
    )
    csv_group.add_argument(
        "--detect-renames", action="store_true", help="Report likely column renames"
    )
    csv_group.add_argument(
        "--similarity-threshold",
        type=float,
        default=None,
        help="Minimum Jaccard similarity for fuzzy row matching (default: 0.8)",
    )

    parser.add_argument(
        "--show-unchanged", action="store_true", help="Also print unchanged entries"
    )
    parser.add_argument(
        "--detect-only", action="store_true", help="Print the detected format and exit"
    )
    parser.add_argument("--output-json", action="store_true", help="Output results as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    return parser


def read_input_file(raw_path: str) -> str:
    """Read one input document.

    Args:
        raw_path: File path from CLI arguments, or '-' for stdin.

    Returns:
        File contents decoded as UTF-8.

    Raises:
        SystemExit: If the file does not exist or cannot be decoded.
    """
    if raw_path == STDIN_PATH:
        return sys.stdin.read()

    path = Path(raw_path).expanduser()
    if not path.is_file():
        print(f"Error: '{raw_path}' is not a readable file.", file=sys.stderr)
        raise SystemExit(EXIT_INVALID_INPUT)
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        print(f"Error: '{raw_path}' is not valid UTF-8: {exc}", file=sys.stderr)
        raise SystemExit(EXIT_INVALID_INPUT)


def build_options(args: argparse.Namespace) -> DiffOptions:
    """Collect comparison options from parsed CLI arguments."""
    key_columns = [name.strip() for name in args.key_columns.split(",") if name.strip()]
    fields = {
        "ignore_case": args.ignore_case,
        "ignore_whitespace": args.ignore_whitespace,
        "ignore_blank_lines": args.ignore_blank_lines,
        "ignore_key_order": args.ignore_key_order,
        "ignore_formatting": args.ignore_formatting,
        "delimiter": args.delimiter,
        "has_header": args.has_header,
        "ignore_header": args.ignore_header,
        "key_columns": key_columns or None,
        "match_strategy": args.match_strategy,
        "detect_renames": args.detect_renames,
        "max_lcs_cells": args.max_lcs_cells,
    }
    if args.similarity_threshold is not None:
        fields["similarity_threshold"] = args.similarity_threshold
    return DiffOptions(**fields)


def format_result_json(result: DiffResult) -> str:
    """Serialize a diff result to a JSON string, leaving out unset fields."""
    return json.dumps(result.model_dump(mode="json", exclude_none=True), indent=2)


def print_result_human(result: DiffResult, show_unchanged: bool = False) -> None:
    """Print results in human-readable format."""
    print(f"\n{'='*60}")
    print("Diff Results")
    print(f"{'='*60}")

    if isinstance(result, CsvDiffResult):
        if result.schema_changes:
            print(f"\nSchema changes ({len(result.schema_changes)}):")
            for change in result.schema_changes:
                print(f"  {change.type.value}: {change.column}")
        warnings = [("left", e) for e in result.left_errors] + [
            ("right", e) for e in result.right_errors
        ]
        if warnings:
            print(f"\nParse warnings ({len(warnings)}):")
            for side, err in warnings:
                print(f"  {side} row {err.row} col {err.col}: {err.message}")

    print()
    for change in result.changes:
        if change.type == ChangeType.UNCHANGED and not show_unchanged:
            continue
        marker = _CHANGE_MARKERS[change.type]
        if change.type == ChangeType.ADDED:
            print(f"{marker} {change.right_content}")
        elif change.type == ChangeType.MODIFIED:
            print(f"{marker} {change.left_content}  ->  {change.right_content}")
        else:
            print(f"{marker} {change.left_content}")

    stats = result.stats
    print(
        f"\n{stats.additions} added, {stats.deletions} deleted, "
        f"{stats.modifications} modified, {stats.unchanged} unchanged"
    )
    print(f"{'='*60}")


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.left == STDIN_PATH and args.right == STDIN_PATH:
        print("Error: stdin ('-') can be used for only one of LEFT and RIGHT.", file=sys.stderr)
        return EXIT_INVALID_INPUT

    try:
        left = read_input_file(args.left)
        right = read_input_file(args.right)
    except SystemExit as exc:
        return exc.code

    if args.detect_only:
        detection = detect_format_from_pair(left, right)
        if args.output_json:
            print(json.dumps(detection.model_dump(mode="json"), indent=2))
        else:
            print(
                f"{detection.format.value} "
                f"(confidence {detection.confidence:.2f}): {detection.reason}"
            )
        return EXIT_SUCCESS

    try:
        config = DiffConfig(
            left=left,
            right=right,
            mode=args.mode,
            format=args.format,
            options=build_options(args),
        )
        result = data_diff(config)

        if args.output_json:
            print(format_result_json(result))
        else:
            print_result_human(result, show_unchanged=args.show_unchanged)
        return EXIT_SUCCESS

    except ValidationError as exc:
        return _handle_error("Invalid options", exc, args.verbose, EXIT_INVALID_INPUT)

    except JsonParseError as exc:
        return _handle_error("Parse error", exc, args.verbose, EXIT_PARSE_ERROR)

    except InputValidationError as exc:
        return _handle_error("Invalid input", exc, args.verbose, EXIT_INVALID_INPUT)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)
