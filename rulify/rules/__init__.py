"""Rules domain - rule contract, declarative definitions, interpreter and loader."""

from .result import RuleResult
from .base import Rule, DelegateRule
from .schemas import (
    ComparisonOp,
    OPERATOR_ALIASES,
    ConditionItem,
    ConditionGroup,
    ComputeAction,
    ConditionalAction,
    Action,
    RuleDefinition,
    RuleSet,
)
from .matcher import evaluate_item, evaluate_group
from .interpreter import DeclarativeRule, ForeachRule, compile_rule, execute_actions
from .loader import (
    RuleLoader,
    load_rules,
    load_rules_from_file,
    load_engine,
    load_engine_from_file,
)

__all__ = [
    # Contract
    "RuleResult",
    "Rule",
    "DelegateRule",
    # Definitions
    "ComparisonOp",
    "OPERATOR_ALIASES",
    "ConditionItem",
    "ConditionGroup",
    "ComputeAction",
    "ConditionalAction",
    "Action",
    "RuleDefinition",
    "RuleSet",
    # Matching
    "evaluate_item",
    "evaluate_group",
    # Interpreter
    "DeclarativeRule",
    "ForeachRule",
    "compile_rule",
    "execute_actions",
    # Loader
    "RuleLoader",
    "load_rules",
    "load_rules_from_file",
    "load_engine",
    "load_engine_from_file",
]
