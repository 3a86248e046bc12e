"""
Expression evaluator for declarative rule actions and conditions.

Expressions are decomposed textually, one operator level at a time:

1. Logical: ``and``/``&&`` is split first, then ``or``/``||``.
2. Comparison: exactly one of ``>=, <=, ==, !=, >, <`` (checked in that
   order so two-character operators win over their one-character prefix).
3. Arithmetic: parentheses innermost-first (the sub-result is substituted
   back into the text), then ``+``, then ``-``, then ``*``, then ``/``.
4. Primary: literal or variable lookup.

The arithmetic ladder splits addition before subtraction and
multiplication before division. Numbers are ``Decimal`` throughout.

Example:
    >>> scope = {"x": 10, "y": 5}
    >>> evaluate_expression("z = x + y", scope)
    Decimal('15')
    >>> scope["z"]
    Decimal('15')
"""

from __future__ import annotations

import re
from collections.abc import MutableMapping
from decimal import localcontext
from typing import Any

from rulify.core.config import get_settings
from rulify.core.errors import (
    DivideByZeroError,
    ExpressionParseError,
    InvalidExpressionError,
    UnresolvedReferenceError,
)
from .values import (
    Value,
    compare_with,
    format_literal,
    is_truthy,
    to_number,
    to_value,
    try_parse_literal,
)


_AND = re.compile(r"\s+(?:and|&&)\s+", re.IGNORECASE)
_OR = re.compile(r"\s+(?:or|\|\|)\s+", re.IGNORECASE)

# Two-character operators must be tried before their one-character prefixes.
COMPARISON_OPERATORS = (">=", "<=", "==", "!=", ">", "<")

ARITHMETIC_OPERATORS = "+-*/"

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Mantissa of a number in scientific notation, e.g. the "1e" of "1e-2"
_EXPONENT_PREFIX = re.compile(r"(?<![A-Za-z0-9_.])(?:\d+(?:\.\d*)?|\.\d+)[eE]$")

_MASK = "\0"


def _mask_quoted(text: str) -> str:
    """Blank out the contents of quoted literals, keeping offsets intact."""
    chars = list(text)
    quote = None
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
            else:
                chars[i] = _MASK
        elif ch in ("'", '"'):
            quote = ch
    return "".join(chars)


def _split_on(pattern: re.Pattern, text: str) -> list[str]:
    """Split text on a keyword pattern found outside quoted literals."""
    masked = _mask_quoted(text)
    parts = []
    start = 0
    for match in pattern.finditer(masked):
        parts.append(text[start:match.start()])
        start = match.end()
    parts.append(text[start:])
    return parts


def _is_binary(masked: str, index: int) -> bool:
    """An operator is binary when an operand, not another operator, precedes it."""
    if _EXPONENT_PREFIX.search(masked[:index]):
        return False
    preceding = masked[:index].rstrip()
    return bool(preceding) and preceding[-1] not in ARITHMETIC_OPERATORS + "("


def _find_binary(masked: str, op: str, last: bool = False) -> int:
    """Index of the first (or last) binary occurrence of ``op``, or -1."""
    positions = [i for i, ch in enumerate(masked) if ch == op]
    if last:
        positions.reverse()
    for index in positions:
        if _is_binary(masked, index):
            return index
    return -1


class ExpressionEvaluator:
    """Evaluates expression strings against a mutable variable scope.

    The scope is used by reference: assignments write straight into it.
    """

    def __init__(self, variables: MutableMapping[str, Any] | None = None):
        self.variables = variables if variables is not None else {}

    def evaluate_condition(self, expression: str | None) -> bool:
        """Evaluate a boolean expression. Blank text is true."""
        if expression is None or not expression.strip():
            return True
        with localcontext() as ctx:
            ctx.prec = get_settings().decimal_precision
            return self._evaluate_boolean(expression)

    def evaluate_expression(self, expression: str | None) -> Value:
        """Evaluate an assignment or a pure computation.

        ``name = rhs`` binds ``name`` to the value of ``rhs`` and returns it;
        ``name op= rhs`` is shorthand for ``name = name op (rhs)``.
        Anything else is evaluated without touching the scope.

        Raises:
            InvalidExpressionError: More than one ``=`` or a bad target.
        """
        if expression is None or not expression.strip():
            return None

        text = expression.strip()
        with localcontext() as ctx:
            ctx.prec = get_settings().decimal_precision

            masked = _mask_quoted(text)
            if "=" not in masked:
                return self._evaluate_arithmetic(text)

            if masked.count("=") != 1:
                raise InvalidExpressionError(f"Invalid assignment expression: {expression}")

            index = masked.index("=")
            target = text[:index].strip()
            rhs = text[index + 1:].strip()

            if target and target[-1] in ARITHMETIC_OPERATORS:
                op = target[-1]
                target = target[:-1].strip()
                rhs = f"{target} {op} ({rhs})"

            if not IDENTIFIER.match(target):
                raise InvalidExpressionError(f"Invalid assignment target in: {expression}")
            if not rhs:
                raise InvalidExpressionError(f"Missing value in assignment: {expression}")

            value = self._evaluate_arithmetic(rhs)
            self.variables[target] = value
            return value

    # -------------------------------------------------------------------------
    # Logical and comparison levels
    # -------------------------------------------------------------------------

    def _evaluate_boolean(self, text: str) -> bool:
        text = text.strip()

        parts = _split_on(_AND, text)
        if len(parts) > 1:
            return all(self._evaluate_boolean(part) for part in parts)

        parts = _split_on(_OR, text)
        if len(parts) > 1:
            return any(self._evaluate_boolean(part) for part in parts)

        return self._evaluate_comparison(text)

    def _evaluate_comparison(self, text: str) -> bool:
        masked = _mask_quoted(text)
        for op in COMPARISON_OPERATORS:
            index = masked.find(op)
            if index < 0:
                continue
            left = self._evaluate_arithmetic(text[:index])
            right = self._evaluate_arithmetic(text[index + len(op):])
            return compare_with(op, left, right)

        return is_truthy(self._evaluate_arithmetic(text))

    # -------------------------------------------------------------------------
    # Arithmetic level
    # -------------------------------------------------------------------------

    def _evaluate_arithmetic(self, text: str) -> Value:
        text = text.strip()
        masked = _mask_quoted(text)

        if "(" in masked:
            return self._evaluate_parenthetical(text, masked)
        if ")" in masked:
            raise ExpressionParseError(f"Unmatched parenthesis in: {text}")

        index = _find_binary(masked, "+")
        if index >= 0:
            left, right = self._operands(text, index)
            return to_number(left) + to_number(right)

        index = _find_binary(masked, "-", last=True)
        if index >= 0:
            left, right = self._operands(text, index)
            return to_number(left) - to_number(right)

        index = _find_binary(masked, "*")
        if index >= 0:
            left, right = self._operands(text, index)
            return to_number(left) * to_number(right)

        index = _find_binary(masked, "/", last=True)
        if index >= 0:
            left, right = self._operands(text, index)
            divisor = to_number(right)
            if divisor == 0:
                raise DivideByZeroError("Division by zero")
            return to_number(left) / divisor

        return self._evaluate_primary(text)

    def _operands(self, text: str, index: int) -> tuple[Value, Value]:
        return (
            self._evaluate_arithmetic(text[:index]),
            self._evaluate_arithmetic(text[index + 1:]),
        )

    def _evaluate_parenthetical(self, text: str, masked: str) -> Value:
        start = masked.rfind("(")
        end = masked.find(")", start)
        if end < 0:
            raise ExpressionParseError(f"Unmatched parenthesis in: {text}")

        inner = self._evaluate_arithmetic(text[start + 1:end])
        try:
            literal = format_literal(inner)
        except ValueError as e:
            raise InvalidExpressionError(f"Cannot substitute grouped value in: {text}") from e

        return self._evaluate_arithmetic(text[:start] + literal + text[end + 1:])

    def _evaluate_primary(self, text: str) -> Value:
        if not text:
            raise InvalidExpressionError("Missing operand")

        found, value = try_parse_literal(text)
        if found:
            return value

        if text[0] in "+-" and len(text) > 1:
            operand = to_number(self._evaluate_arithmetic(text[1:]))
            return -operand if text[0] == "-" else operand

        if text in self.variables:
            return to_value(self.variables[text])

        if IDENTIFIER.match(text):
            raise UnresolvedReferenceError(text)
        raise InvalidExpressionError(f"Cannot evaluate expression: {text}")


def evaluate_condition(text: str | None, scope: MutableMapping[str, Any]) -> bool:
    """Evaluate a boolean expression against a scope."""
    return ExpressionEvaluator(scope).evaluate_condition(text)


def evaluate_expression(text: str | None, scope: MutableMapping[str, Any]) -> Value:
    """Evaluate an expression against a scope, binding on assignment."""
    return ExpressionEvaluator(scope).evaluate_expression(text)
