"""Structural comparison of JSON documents with path tracking."""

import json
import logging
from enum import Enum
from typing import Any

from data_diff.comparators.exceptions import JsonParseError
from data_diff.comparators.validation import validate_not_empty, validate_size_limit
from data_diff.models.config_models import DiffMode, DiffOptions
from data_diff.models.diff_models import ChangeType, DiffChange, DiffResult

logger = logging.getLogger(__name__)

OBJECT_PREVIEW_KEYS = 3


class JsonKind(str, Enum):
    """Tag of a decoded JSON value."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def json_kind(value: Any) -> JsonKind:
    if value is None:
        return JsonKind.NULL
    # bool before number: bool is an int subclass
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name}")


def parse_json(text: str, side: str) -> Any:
    """Decode ``text``, raising JsonParseError that names ``side`` on failure."""
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except RecursionError as e:
        raise JsonParseError(side, "nesting too deep") from e
    except ValueError as e:
        raise JsonParseError(side, str(e)) from e


def json_diff(
    left: str,
    right: str,
    options: DiffOptions | None = None,
    *,
    mode: DiffMode = DiffMode.ADVANCED,
) -> DiffResult:
    """Compare two JSON documents.

    Args:
        left: Left JSON text.
        right: Right JSON text.
        options: ``ignore_key_order`` and ``ignore_formatting`` are honoured.
        mode: ``simple`` compares the top level only and treats nested
            containers as opaque values; ``advanced`` recurses fully.

    Returns:
        DiffResult with one change per compared path.

    Raises:
        EmptyInputError: If either side is blank.
        InputTooLargeError: If either side exceeds the size limit.
        JsonParseError: If either side is not valid JSON.
    """
    options = options or DiffOptions()
    mode = DiffMode(mode)

    validate_not_empty(left, "Left JSON")
    validate_not_empty(right, "Right JSON")
    validate_size_limit(left, field_name="Left JSON")
    validate_size_limit(right, field_name="Right JSON")

    left_value = parse_json(left, "left")
    right_value = parse_json(right, "right")

    if options.ignore_key_order or options.ignore_formatting:
        left_value = normalize_for_comparison(left_value, options)
        right_value = normalize_for_comparison(right_value, options)

    max_depth = 1 if mode == DiffMode.SIMPLE else None
    changes: list[DiffChange] = []
    compare_values(left_value, right_value, "", changes, max_depth=max_depth)
    logger.debug("JSON diff (%s): %d changes", mode.value, len(changes))

    return DiffResult.from_changes(changes)


def normalize_for_comparison(value: Any, options: DiffOptions) -> Any:
    """Return a normalized copy of ``value``; the input is never mutated.

    Object keys are sorted with ``ignore_key_order``; string leaves are
    trimmed with ``ignore_formatting``. Works iteratively, so any depth the
    decoder accepts can be normalized.
    """
    root: list[Any] = [None]
    stack: list[tuple[Any, Any, Any]] = [(value, root, 0)]
    while stack:
        source, parent, slot = stack.pop()
        kind = json_kind(source)
        if kind == JsonKind.ARRAY:
            copy: Any = [None] * len(source)
            stack.extend((item, copy, i) for i, item in enumerate(source))
        elif kind == JsonKind.OBJECT:
            keys = sorted(source) if options.ignore_key_order else list(source)
            copy = dict.fromkeys(keys)
            stack.extend((source[key], copy, key) for key in keys)
        elif kind == JsonKind.STRING and options.ignore_formatting:
            copy = source.strip()
        else:
            copy = source
        parent[slot] = copy
    return root[0]


def compare_values(
    left: Any,
    right: Any,
    path: str,
    changes: list[DiffChange],
    depth: int = 0,
    max_depth: int | None = None,
) -> None:
    """Append the changes between ``left`` and ``right`` at ``path`` to ``changes``.

    Containers of the same kind are walked until ``max_depth`` is reached;
    beyond it they are compared as whole values, key order included.
    Changes come out in document order.
    """
    # pending items are either DiffChanges ready to emit or (left, right, path, depth) pairs
    pending: list[Any] = [(left, right, path, depth)]
    while pending:
        item = pending.pop()
        if isinstance(item, DiffChange):
            changes.append(item)
            continue

        left, right, path, depth = item
        left_kind = json_kind(left)
        right_kind = json_kind(right)

        if left_kind == right_kind and left_kind in (JsonKind.OBJECT, JsonKind.ARRAY):
            if max_depth is not None and depth >= max_depth:
                _append_pair(changes, left, right, path, _ordered_equal(left, right))
                continue
            if left_kind == JsonKind.OBJECT:
                children = _object_children(left, right, path, depth)
            else:
                children = _array_children(left, right, path, depth)
            pending.extend(reversed(children))
            continue

        same = left_kind == right_kind and left == right
        _append_pair(changes, left, right, path, same)


def _object_children(
    left: dict[str, Any], right: dict[str, Any], path: str, depth: int
) -> list[Any]:
    children: list[Any] = []
    keys = list(left) + [key for key in right if key not in left]
    for key in keys:
        child_path = f"{path}.{key}" if path else key
        if key in left and key in right:
            children.append((left[key], right[key], child_path, depth + 1))
        elif key in left:
            children.append(DiffChange(
                type=ChangeType.DELETED, left_content=format_value(left[key], child_path),
            ))
        else:
            children.append(DiffChange(
                type=ChangeType.ADDED, right_content=format_value(right[key], child_path),
            ))
    return children


def _array_children(left: list[Any], right: list[Any], path: str, depth: int) -> list[Any]:
    # positional only: reordered elements show up as modifications
    children: list[Any] = []
    for i in range(max(len(left), len(right))):
        child_path = f"{path}[{i}]"
        if i < len(left) and i < len(right):
            children.append((left[i], right[i], child_path, depth + 1))
        elif i < len(left):
            children.append(DiffChange(
                type=ChangeType.DELETED, left_content=format_value(left[i], child_path),
            ))
        else:
            children.append(DiffChange(
                type=ChangeType.ADDED, right_content=format_value(right[i], child_path),
            ))
    return children


def _append_pair(changes: list[DiffChange], left: Any, right: Any, path: str, same: bool) -> None:
    changes.append(DiffChange(
        type=ChangeType.UNCHANGED if same else ChangeType.MODIFIED,
        left_content=format_value(left, path),
        right_content=format_value(right, path),
    ))


def _ordered_equal(left: Any, right: Any) -> bool:
    """Whole-value equality where object key order matters and 1 equals 1.0."""
    stack = [(left, right)]
    while stack:
        a, b = stack.pop()
        kind = json_kind(a)
        if kind != json_kind(b):
            return False
        if kind == JsonKind.OBJECT:
            if list(a) != list(b):
                return False
            stack.extend((a[key], b[key]) for key in a)
        elif kind == JsonKind.ARRAY:
            if len(a) != len(b):
                return False
            stack.extend(zip(a, b))
        elif a != b:
            return False
    return True


def format_value(value: Any, path: str) -> str:
    """Render ``value`` as ``path: value`` (or just the value at the root)."""
    formatted = _format_scalar(value)
    return f"{path}: {formatted}" if path else formatted


def _format_scalar(value: Any) -> str:
    kind = json_kind(value)
    if kind == JsonKind.NULL:
        return "null"
    if kind == JsonKind.BOOLEAN:
        return "true" if value else "false"
    if kind == JsonKind.NUMBER:
        if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return str(value)
    if kind == JsonKind.STRING:
        return f'"{value}"'
    if kind == JsonKind.ARRAY:
        return f"Array({len(value)})"
    keys = list(value)
    more = "..." if len(keys) > OBJECT_PREVIEW_KEYS else ""
    return f"Object {{{', '.join(keys[:OBJECT_PREVIEW_KEYS])}{more}}}"
