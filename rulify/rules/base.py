"""
Executable rule contract and the delegate-backed implementation.

Rules are identified by ``rule_id`` and ordered by ``priority`` (higher
runs first). Any object implementing :class:`Rule` can be registered on a
:class:`rulify.engine.RuleEngine`.
"""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Awaitable, Callable

from rulify.core.errors import NullArgumentError
from .result import RuleResult


def elapsed_since(started: float) -> timedelta:
    """Duration since a ``time.perf_counter()`` reading."""
    return timedelta(seconds=time.perf_counter() - started)


class Rule(ABC):
    """Base class for executable rules."""

    def __init__(self, rule_id: str, name: str, description: str = "", priority: int = 0):
        if rule_id is None:
            raise NullArgumentError("rule_id")
        if name is None:
            raise NullArgumentError("name")
        self._rule_id = rule_id
        self._name = name
        self._description = description or ""
        self._priority = priority

    @property
    def rule_id(self) -> str:
        return self._rule_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def priority(self) -> int:
        return self._priority

    @property
    def is_async(self) -> bool:
        """Whether the engine should await ``evaluate_async`` on its async path."""
        return False

    @abstractmethod
    def evaluate(self, context: Any) -> RuleResult:
        """Evaluate the rule against a context."""

    async def evaluate_async(self, context: Any) -> RuleResult:
        """Evaluate asynchronously; by default runs ``evaluate`` in a worker thread."""
        return await asyncio.to_thread(self.evaluate, context)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rule_id={self.rule_id!r}, priority={self.priority})"


class DelegateRule(Rule):
    """A rule whose logic is supplied as callables.

    Example:
        >>> rule = DelegateRule(
        ...     "non-empty", "Non-empty",
        ...     lambda text: RuleResult.ok() if text else RuleResult.fail("empty"),
        ... )
        >>> rule.evaluate("abc").success
        True
    """

    def __init__(
        self,
        rule_id: str,
        name: str,
        evaluator: Callable[[Any], RuleResult],
        async_evaluator: Callable[[Any], Awaitable[RuleResult]] | None = None,
        description: str = "",
        priority: int = 0,
    ):
        super().__init__(rule_id, name, description, priority)
        if evaluator is None:
            raise NullArgumentError("evaluator")
        self._evaluator = evaluator
        self._async_evaluator = async_evaluator

    @property
    def is_async(self) -> bool:
        return self._async_evaluator is not None

    def evaluate(self, context: Any) -> RuleResult:
        started = time.perf_counter()
        try:
            result = self._evaluator(context)
        except Exception as e:
            return RuleResult.fail(f"Rule evaluation failed: {e}", elapsed_since(started))
        return result.with_duration(elapsed_since(started))

    async def evaluate_async(self, context: Any) -> RuleResult:
        if self._async_evaluator is None:
            return await super().evaluate_async(context)

        started = time.perf_counter()
        try:
            result = await self._async_evaluator(context)
        except Exception as e:
            return RuleResult.fail(f"Async rule evaluation failed: {e}", elapsed_since(started))
        return result.with_duration(elapsed_since(started))
