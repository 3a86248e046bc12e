"""Engine package - rule registry, dispatch and evaluation events."""

from .engine import RuleEngine
from .events import RuleEvaluationEvent, RuleEvaluationListener

__all__ = [
    "RuleEngine",
    "RuleEvaluationEvent",
    "RuleEvaluationListener",
]
