"""
Value model for expression evaluation.

Every value seen by the evaluator is canonicalized into one of five kinds:
Number (``Decimal``), Boolean, String, Null and Collection (``list``).
Comparison is total: same-kind values compare naturally, Null sorts below
everything else, and any other cross-kind pair is compared after numeric
coercion (non-numeric kinds coerce to 0).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Union

Value = Union[Decimal, bool, str, None, list]

NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

_QUOTES = ("'", '"')


class ValueKind(str, Enum):
    """Kinds of canonical values."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    NULL = "null"
    COLLECTION = "collection"


def kind_of(value: Any) -> ValueKind:
    """Classify a canonical value."""
    if value is None:
        return ValueKind.NULL
    # bool before numbers: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (Decimal, int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.COLLECTION
    raise TypeError(f"Not a canonical value: {value!r}")


def to_value(raw: Any) -> Value:
    """Canonicalize a host value read from a scope or a rule document."""
    if raw is None or isinstance(raw, (bool, str, Decimal)):
        return raw
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        return Decimal(repr(raw))
    if isinstance(raw, (list, tuple, set, frozenset)):
        return [to_value(item) for item in raw]
    return str(raw)


def to_number(value: Any) -> Decimal:
    """Numeric coercion used by arithmetic and cross-kind comparison."""
    value = to_value(value)
    if isinstance(value, bool) or value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str) and NUMBER_PATTERN.match(value.strip()):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            return Decimal(0)
    return Decimal(0)


def _sign(difference: int) -> int:
    return (difference > 0) - (difference < 0)


def compare(left: Any, right: Any) -> int:
    """Compare two values, returning -1, 0 or 1."""
    left, right = to_value(left), to_value(right)
    left_kind, right_kind = kind_of(left), kind_of(right)

    if left_kind is ValueKind.NULL or right_kind is ValueKind.NULL:
        return _sign((left_kind is not ValueKind.NULL) - (right_kind is not ValueKind.NULL))

    if left_kind is right_kind:
        if left_kind is ValueKind.COLLECTION:
            for left_item, right_item in zip(left, right):
                result = compare(left_item, right_item)
                if result:
                    return result
            return _sign(len(left) - len(right))
        if left_kind is ValueKind.BOOLEAN:
            return _sign(int(left) - int(right))
        return (left > right) - (left < right)

    left_number, right_number = to_number(left), to_number(right)
    return (left_number > right_number) - (left_number < right_number)


COMPARATORS: dict[str, Callable[[int], bool]] = {
    ">": lambda result: result > 0,
    ">=": lambda result: result >= 0,
    "<": lambda result: result < 0,
    "<=": lambda result: result <= 0,
    "==": lambda result: result == 0,
    "!=": lambda result: result != 0,
}


def compare_with(op: str, left: Any, right: Any) -> bool:
    """Apply a comparison operator to two values."""
    try:
        comparator = COMPARATORS[op]
    except KeyError:
        raise ValueError(f"Unknown comparison operator: {op}") from None
    return comparator(compare(left, right))


def is_truthy(value: Any) -> bool:
    """Truthiness of a value used as a bare condition."""
    value = to_value(value)
    if isinstance(value, bool):
        return value
    return to_number(value) != 0


def try_parse_literal(text: str) -> tuple[bool, Value]:
    """Resolve a literal token.

    Resolution order: number (decimal, floating and integer notations all
    parse to ``Decimal``), quoted string, boolean, null. Matching is
    case-insensitive for ``true``/``false``/``null``.

    Returns:
        ``(True, value)`` for a literal, ``(False, None)`` otherwise.
    """
    text = text.strip()
    if NUMBER_PATTERN.match(text):
        return True, Decimal(text)

    if len(text) >= 2 and text[0] in _QUOTES and text[-1] == text[0]:
        inner = text[1:-1]
        if text[0] not in inner:
            return True, inner

    lowered = text.lower()
    if lowered == "true":
        return True, True
    if lowered == "false":
        return True, False
    if lowered == "null":
        return True, None

    return False, None


def format_literal(value: Any) -> str:
    """Render a value as expression text that parses back to the same value."""
    value = to_value(value)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, str):
        if "'" not in value:
            return f"'{value}'"
        if '"' not in value:
            return f'"{value}"'
        raise ValueError(f"String cannot be written as a literal: {value!r}")
    raise ValueError(f"Collections have no literal form: {value!r}")


def is_collection(raw: Any) -> bool:
    """Whether a raw scope value can drive an iteration."""
    if isinstance(raw, (str, bytes, Mapping)):
        return False
    return isinstance(raw, (list, tuple, set, frozenset)) or hasattr(raw, "__iter__")
