"""Exceptions for comparison operations."""


class DiffError(Exception):
    """Base exception for all comparison operations."""


class InputValidationError(DiffError):
    """Raised when an input or option set cannot be compared at all."""


class EmptyInputError(InputValidationError):
    """Raised when one side of the comparison is empty or blank."""


class InputTooLargeError(InputValidationError):
    """Raised when one side exceeds the size ceiling."""


class ComparisonTooLargeError(InputValidationError):
    """Raised when the LCS table for a line/char diff would exceed its cell budget."""


class JsonParseError(DiffError, ValueError):
    """Raised when one side of a JSON diff is not valid JSON."""

    def __init__(self, side: str, reason: str) -> None:
        self.side = side
        self.reason = reason
        super().__init__(f"Invalid JSON on {side}: {reason}")
