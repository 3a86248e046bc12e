"""
Rule registry and dispatcher.

The engine owns executable rules keyed by id and evaluates them in
descending priority order (ties keep insertion order). Each call works on a
snapshot of the rule list taken when it starts, so a rule removed while an
evaluation is running may still run for that evaluation.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable, Mapping
from typing import Any, Hashable

from rulify.core.errors import NullArgumentError
from rulify.rules.base import Rule, elapsed_since
from rulify.rules.result import RuleResult
from .events import RuleEvaluationEvent, RuleEvaluationListener

logger = logging.getLogger(__name__)


class RuleEngine:
    """Evaluates registered rules against contexts (fact-sets)."""

    def __init__(self):
        self._rules: dict[str, Rule] = {}
        self._lock = threading.Lock()
        self._evaluating_listeners: list[RuleEvaluationListener] = []
        self._evaluated_listeners: list[RuleEvaluationListener] = []

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def add_rule(self, rule: Rule) -> None:
        """Add a rule, replacing any rule with the same id."""
        if rule is None:
            raise NullArgumentError("rule")

        with self._lock:
            replaced = rule.rule_id in self._rules
            self._rules[rule.rule_id] = rule
        logger.debug("%s rule %s", "Replaced" if replaced else "Added", rule.rule_id)

    def remove_rule(self, rule_id: str) -> bool:
        """Remove a rule by id. Returns False if the id is empty or unknown."""
        if not rule_id:
            return False

        with self._lock:
            removed = self._rules.pop(rule_id, None) is not None
        if removed:
            logger.debug("Removed rule %s", rule_id)
        return removed

    def get_rules(self) -> list[Rule]:
        """Snapshot of the rules in evaluation order."""
        with self._lock:
            rules = list(self._rules.values())
        # sorted() is stable, so equal priorities keep insertion order
        return sorted(rules, key=lambda r: r.priority, reverse=True)

    def get_rule(self, rule_id: str) -> Rule | None:
        with self._lock:
            return self._rules.get(rule_id)

    def clear_rules(self) -> None:
        """Remove all rules."""
        with self._lock:
            self._rules.clear()
        logger.debug("Cleared all rules")

    def __len__(self) -> int:
        with self._lock:
            return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        with self._lock:
            return rule_id in self._rules

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def on_evaluating(self, listener: RuleEvaluationListener) -> RuleEvaluationListener:
        """Register a listener called before each rule is evaluated."""
        self._evaluating_listeners.append(listener)
        return listener

    def on_evaluated(self, listener: RuleEvaluationListener) -> RuleEvaluationListener:
        """Register a listener called with each rule's result."""
        self._evaluated_listeners.append(listener)
        return listener

    def remove_listener(self, listener: RuleEvaluationListener) -> bool:
        """Unregister a listener from both notifications."""
        removed = False
        for listeners in (self._evaluating_listeners, self._evaluated_listeners):
            if listener in listeners:
                listeners.remove(listener)
                removed = True
        return removed

    def _notify(self, listeners: list[RuleEvaluationListener], event: RuleEvaluationEvent) -> None:
        for listener in list(listeners):
            listener(event)

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def evaluate(self, context: Any) -> list[RuleResult]:
        """Evaluate all rules against a context, one result per rule in rule order."""
        if context is None:
            raise NullArgumentError("context")

        results = []
        for rule in self.get_rules():
            self._notify(self._evaluating_listeners, RuleEvaluationEvent(rule, context))
            result = self._evaluate_rule(rule, context)
            results.append(result)
            self._notify(self._evaluated_listeners, RuleEvaluationEvent(rule, context, result))
        return results

    async def evaluate_async(self, context: Any) -> list[RuleResult]:
        """Evaluate all rules, awaiting those that are asynchronous.

        Rules still run one at a time in priority order.
        """
        if context is None:
            raise NullArgumentError("context")

        results = []
        for rule in self.get_rules():
            self._notify(self._evaluating_listeners, RuleEvaluationEvent(rule, context))
            if rule.is_async:
                result = await self._evaluate_rule_async(rule, context)
            else:
                result = self._evaluate_rule(rule, context)
            results.append(result)
            self._notify(self._evaluated_listeners, RuleEvaluationEvent(rule, context, result))
        return results

    def evaluate_many(
        self, contexts: Iterable[Any] | Mapping[Hashable, Any]
    ) -> dict[Hashable, list[RuleResult]]:
        """Evaluate each context independently.

        A mapping keeps its keys; any other iterable is keyed by position.
        """
        if contexts is None:
            raise NullArgumentError("contexts")

        return {key: self.evaluate(context) for key, context in _keyed(contexts)}

    async def evaluate_many_async(
        self, contexts: Iterable[Any] | Mapping[Hashable, Any]
    ) -> dict[Hashable, list[RuleResult]]:
        """Asynchronous counterpart of :meth:`evaluate_many`; contexts run in turn."""
        if contexts is None:
            raise NullArgumentError("contexts")

        results = {}
        for key, context in _keyed(contexts):
            results[key] = await self.evaluate_async(context)
        return results

    def _evaluate_rule(self, rule: Rule, context: Any) -> RuleResult:
        started = time.perf_counter()
        try:
            result = rule.evaluate(context)
        except Exception as e:
            result = RuleResult.fail(f"Rule evaluation failed: {e}", elapsed_since(started))
        return self._log_result(rule, result)

    async def _evaluate_rule_async(self, rule: Rule, context: Any) -> RuleResult:
        started = time.perf_counter()
        try:
            result = await rule.evaluate_async(context)
        except Exception as e:
            result = RuleResult.fail(f"Async rule evaluation failed: {e}", elapsed_since(started))
        return self._log_result(rule, result)

    def _log_result(self, rule: Rule, result: RuleResult) -> RuleResult:
        if not result.success:
            logger.warning("Rule %s failed: %s", rule.rule_id, result.error)
        return result


def _keyed(contexts: Iterable[Any] | Mapping[Hashable, Any]) -> Iterable[tuple[Hashable, Any]]:
    if isinstance(contexts, Mapping):
        return contexts.items()
    return enumerate(contexts)
