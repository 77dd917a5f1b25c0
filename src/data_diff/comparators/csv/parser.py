"""RFC 4180 style CSV parser with delimiter, header and type detection."""

import logging

from data_diff.comparators.csv.heuristics import detect_delimiter
from data_diff.comparators.csv.schema import build_schema
from data_diff.models.csv_models import CsvMetadata, ParsedCSV, ParseError, ParseState

logger = logging.getLogger(__name__)

BOM = "\ufeff"
AUTO_DELIMITER = "auto"
DEFAULT_QUOTE_CHAR = '"'


def parse_csv(
    text: str,
    *,
    delimiter: str | None = None,
    quote_char: str = DEFAULT_QUOTE_CHAR,
    has_header: bool | None = None,
) -> ParsedCSV:
    """Parse CSV text into rows, schema and metadata.

    Args:
        text: Raw CSV text; a leading UTF-8 BOM is ignored.
        delimiter: Field delimiter, or None / "auto" to detect it.
        quote_char: Quote character.
        has_header: Force the header decision; detected when None.

    Returns:
        ParsedCSV. Malformed quoting never raises; it is reported in
        ``errors`` as warnings.
    """
    if text.startswith(BOM):
        text = text[1:]

    if not delimiter or delimiter == AUTO_DELIMITER:
        delimiter = detect_delimiter(text)[0].delimiter
        logger.debug("Detected delimiter %r", delimiter)
    quote_char = quote_char or DEFAULT_QUOTE_CHAR

    rows, errors = _parse_rows(text, delimiter, quote_char)
    for error in errors:
        logger.warning("CSV row %d col %d: %s", error.row, error.col, error.message)

    if not rows:
        return ParsedCSV(
            rows=[],
            metadata=CsvMetadata(delimiter=delimiter, quote_char=quote_char),
            errors=errors,
        )

    schema = build_schema(rows, has_header)
    return ParsedCSV(
        rows=rows,
        csv_schema=schema,
        metadata=CsvMetadata(
            delimiter=delimiter,
            quote_char=quote_char,
            row_count=len(rows),
            column_count=max(len(row) for row in rows),
            has_header=schema.has_header,
        ),
        errors=errors,
    )


def _parse_rows(text: str, delimiter: str, quote_char: str) -> tuple[list[list[str]], list[ParseError]]:
    rows: list[list[str]] = []
    errors: list[ParseError] = []

    row: list[str] = []
    field: list[str] = []
    state = ParseState.START_FIELD
    row_number = 0
    col_number = 0

    def end_field() -> None:
        row.append("".join(field))
        field.clear()

    def end_row() -> None:
        nonlocal row, row_number, col_number
        end_field()
        rows.append(row)
        row = []
        row_number += 1
        col_number = 0

    def warn(message: str) -> None:
        errors.append(ParseError(row=row_number, col=col_number, message=message, severity="warning"))

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    i = 0
    length = len(text)
    while i < length:
        char = text[i]

        if state == ParseState.START_FIELD:
            col_number += 1
            if char == quote_char:
                state = ParseState.IN_QUOTED_FIELD
            elif char == delimiter:
                end_field()
            elif char == "\n":
                # blank lines are skipped
                if row:
                    end_row()
            else:
                field.append(char)
                state = ParseState.IN_FIELD

        elif state == ParseState.IN_FIELD:
            if char == delimiter:
                end_field()
                state = ParseState.START_FIELD
            elif char == "\n":
                end_row()
                state = ParseState.START_FIELD
            else:
                field.append(char)

        elif state == ParseState.IN_QUOTED_FIELD:
            if char == quote_char:
                if i + 1 < length and text[i + 1] == quote_char:
                    field.append(quote_char)
                    i += 1
                else:
                    state = ParseState.QUOTE_IN_QUOTED_FIELD
            else:
                field.append(char)

        else:  # QUOTE_IN_QUOTED_FIELD
            if char == delimiter:
                end_field()
                state = ParseState.START_FIELD
            elif char == "\n":
                end_row()
                state = ParseState.START_FIELD
            elif char == quote_char:
                warn("Unexpected quote after closing quote")
                field.append(char)
                state = ParseState.IN_QUOTED_FIELD
            elif char.isspace():
                pass
            else:
                warn("Unexpected content after closing quote")
                field.append(char)
                state = ParseState.IN_FIELD

        i += 1

    if state == ParseState.IN_QUOTED_FIELD:
        warn("Unterminated quoted field")
    if field or row or state == ParseState.QUOTE_IN_QUOTED_FIELD:
        end_field()
    if row:
        rows.append(row)

    return rows, errors


def format_row(row: list[str], delimiter: str = ",", quote_char: str = DEFAULT_QUOTE_CHAR) -> str:
    """Format a row as one CSV record, quoting cells that need it."""
    cells = []
    for cell in row:
        if delimiter in cell or "\n" in cell or quote_char in cell:
            escaped = cell.replace(quote_char, quote_char * 2)
            cells.append(f"{quote_char}{escaped}{quote_char}")
        else:
            cells.append(cell)
    return delimiter.join(cells)
