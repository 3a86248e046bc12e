"""Notifications published around each rule evaluation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from rulify.rules.base import Rule
from rulify.rules.result import RuleResult


@dataclass(frozen=True)
class RuleEvaluationEvent:
    """A rule about to be evaluated (``result`` is None) or just evaluated."""

    rule: Rule
    context: Any
    result: RuleResult | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


RuleEvaluationListener = Callable[[RuleEvaluationEvent], None]
