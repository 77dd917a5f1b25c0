"""Input validation shared by the diff entry points."""

from data_diff.comparators.exceptions import EmptyInputError, InputTooLargeError

# Size limit for each input (10MB)
DIFF_SIZE_LIMIT = 10 * 1024 * 1024


def validate_not_empty(text: str, field_name: str = "Input") -> None:
    if not text or not text.strip():
        raise EmptyInputError(f"{field_name} cannot be empty")


def validate_size_limit(text: str, limit: int = DIFF_SIZE_LIMIT, field_name: str = "Input") -> None:
    """Reject ``text`` when its UTF-8 encoding is longer than ``limit`` bytes."""
    size = len(text.encode("utf-8"))
    if size > limit:
        limit_mb = limit / 1024 / 1024
        raise InputTooLargeError(
            f"{field_name} exceeds size limit of {limit_mb:g}MB ({size} bytes)"
        )


def validate_diff_inputs(left: str, right: str, limit: int = DIFF_SIZE_LIMIT) -> None:
    """Validate both sides of a comparison.

    Raises:
        EmptyInputError: If either side is empty or whitespace only.
        InputTooLargeError: If either side is larger than ``limit`` bytes.
    """
    validate_not_empty(left, "Left input")
    validate_not_empty(right, "Right input")
    validate_size_limit(left, limit, "Left input")
    validate_size_limit(right, limit, "Right input")
