"""Single entry point that validates inputs and routes to a comparator."""

from data_diff.orchestrator.dispatch import data_diff, resolve_format

__all__ = [
    "data_diff",
    "resolve_format",
]
