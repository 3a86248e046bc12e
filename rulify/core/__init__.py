"""Core package - configuration and error taxonomy."""

from .config import Settings, get_settings
from .errors import (
    RulifyError,
    NullArgumentError,
    RuleFileNotFoundError,
    ParseError,
    ExpressionError,
    ExpressionParseError,
    UnresolvedReferenceError,
    DivideByZeroError,
    InvalidExpressionError,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "RulifyError",
    "NullArgumentError",
    "RuleFileNotFoundError",
    "ParseError",
    "ExpressionError",
    "ExpressionParseError",
    "UnresolvedReferenceError",
    "DivideByZeroError",
    "InvalidExpressionError",
]
