"""Expression language - value model and evaluator."""

from .values import (
    Value,
    ValueKind,
    kind_of,
    to_value,
    to_number,
    compare,
    compare_with,
    is_truthy,
    try_parse_literal,
    format_literal,
)
from .evaluator import (
    ExpressionEvaluator,
    evaluate_condition,
    evaluate_expression,
)

__all__ = [
    # Values
    "Value",
    "ValueKind",
    "kind_of",
    "to_value",
    "to_number",
    "compare",
    "compare_with",
    "is_truthy",
    "try_parse_literal",
    "format_literal",
    # Evaluator
    "ExpressionEvaluator",
    "evaluate_condition",
    "evaluate_expression",
]
