"""Rulify - priority-ordered business rules over in-memory fact-sets.

Rules are either written in Python (:class:`DelegateRule`) or loaded from
JSON/YAML documents whose actions use a small expression language.

Example:
    >>> engine = load_engine('{"rules": [{"id": "total", '
    ...     '"actions": [{"type": "compute", "expression": "total = price * qty"}]}]}')
    >>> facts = {"price": 4, "qty": 3}
    >>> [r.success for r in engine.evaluate(facts)], facts["total"]
    ([True], Decimal('12'))
"""

from .core import (
    Settings,
    get_settings,
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
from .expressions import (
    ExpressionEvaluator,
    evaluate_condition,
    evaluate_expression,
)
from .rules import (
    Rule,
    DelegateRule,
    RuleResult,
    RuleDefinition,
    DeclarativeRule,
    ForeachRule,
    compile_rule,
    RuleLoader,
    load_rules,
    load_rules_from_file,
    load_engine,
    load_engine_from_file,
)
from .engine import RuleEngine, RuleEvaluationEvent

__version__ = "0.1.0"

__all__ = [
    # Configuration
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
    # Expressions
    "ExpressionEvaluator",
    "evaluate_condition",
    "evaluate_expression",
    # Rules
    "Rule",
    "DelegateRule",
    "RuleResult",
    "RuleDefinition",
    "DeclarativeRule",
    "ForeachRule",
    "compile_rule",
    "RuleLoader",
    "load_rules",
    "load_rules_from_file",
    "load_engine",
    "load_engine_from_file",
    # Engine
    "RuleEngine",
    "RuleEvaluationEvent",
]
