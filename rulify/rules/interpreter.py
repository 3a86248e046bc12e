"""
Rule interpreter: compiles rule definitions into executable rules.

Two shapes are produced:

- :class:`DeclarativeRule` gates its actions on the condition group and runs
  them once against the fact-set itself, so bindings made by one rule are
  visible to rules evaluated after it.
- :class:`ForeachRule` runs its actions once per element of a named
  collection, each time in a private copy of the fact-set extended with
  ``item`` and ``index``. Its conditions are not consulted.
"""

from __future__ import annotations

import logging
import time
from collections.abc import MutableMapping
from typing import Any

from rulify.core.errors import NullArgumentError
from rulify.expressions.evaluator import ExpressionEvaluator
from rulify.expressions.values import is_collection
from .base import Rule, elapsed_since
from .matcher import evaluate_group
from .result import RuleResult
from .schemas import Action, RuleDefinition

logger = logging.getLogger(__name__)


def execute_actions(actions: list[Action] | None, scope: MutableMapping[str, Any]) -> None:
    """Run actions in declared order against a scope."""
    if not actions:
        return
    evaluator = ExpressionEvaluator(scope)
    for action in actions:
        action.execute(evaluator)


class DeclarativeRule(Rule):
    """Executable form of a non-iterating rule definition."""

    def __init__(self, definition: RuleDefinition):
        super().__init__(
            definition.id, definition.name, definition.description, definition.priority
        )
        self._definition = definition

    @property
    def definition(self) -> RuleDefinition:
        return self._definition

    def evaluate(self, context: MutableMapping[str, Any]) -> RuleResult:
        started = time.perf_counter()
        try:
            result = self._run(context)
        except Exception as e:
            return RuleResult.fail(f"Rule evaluation failed: {e}", elapsed_since(started))
        return result.with_duration(elapsed_since(started))

    def _run(self, context: MutableMapping[str, Any]) -> RuleResult:
        if not evaluate_group(self._definition.conditions, context):
            logger.debug("Rule %s skipped: conditions not met", self.rule_id)
            return RuleResult.ok({"skipped": True})

        execute_actions(self._definition.actions, context)
        return RuleResult.ok()


class ForeachRule(DeclarativeRule):
    """Executable form of a rule that iterates over a collection.

    Iterations run to completion: a failing element is recorded and the loop
    moves on. The rule itself always succeeds, reporting the number of
    per-element outcomes as ``iterations``. A rule whose definition has no
    ``actions`` at all records no outcomes; an empty list records one per
    element.
    """

    @property
    def collection_name(self) -> str:
        return self._definition.foreach.strip()

    def _run(self, context: MutableMapping[str, Any]) -> RuleResult:
        name = self.collection_name
        collection = context.get(name) if name in context else None
        if collection is None or not is_collection(collection):
            logger.debug("Rule %s skipped: no iterable %r in context", self.rule_id, name)
            return RuleResult.ok({"skipped": True})

        outcomes: list[RuleResult] = []
        for index, item in enumerate(collection):
            if self._definition.actions is None:
                continue

            scope = dict(context)
            scope["item"] = item
            scope["index"] = index
            try:
                execute_actions(self._definition.actions, scope)
                outcomes.append(RuleResult.ok({"item": item}))
            except Exception as e:
                logger.debug("Rule %s iteration %d failed: %s", self.rule_id, index, e)
                outcomes.append(RuleResult.fail(f"Foreach iteration failed: {e}"))

        return RuleResult.ok({"iterations": len(outcomes)})


def compile_rule(definition: RuleDefinition) -> DeclarativeRule:
    """Compile a rule definition into its executable form."""
    if definition is None:
        raise NullArgumentError("definition")
    if definition.iterates:
        return ForeachRule(definition)
    return DeclarativeRule(definition)
