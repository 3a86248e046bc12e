"""Condition matching for declarative all/any predicate groups."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rulify.expressions.values import compare_with
from .schemas import ConditionGroup, ConditionItem


def evaluate_item(item: ConditionItem, scope: Mapping[str, Any]) -> bool:
    """Check one predicate. A variable missing from the scope never matches."""
    if item.var not in scope:
        return False
    return compare_with(item.op.value, scope[item.var], item.value)


def evaluate_group(group: ConditionGroup | None, scope: Mapping[str, Any]) -> bool:
    """Check a condition group against a scope.

    Args:
        group: Predicate group; ``None`` or empty matches unconditionally
        scope: Variable bindings to test

    Returns:
        True if every ``all`` item and at least one ``any`` item match
    """
    if group is None or group.is_empty:
        return True

    if group.all:
        for item in group.all:
            if not evaluate_item(item, scope):
                return False

    if group.any:
        for item in group.any:
            if evaluate_item(item, scope):
                return True
        return False

    return True
