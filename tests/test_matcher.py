"""Tests for all/any condition groups."""

from decimal import Decimal

from rulify.rules.matcher import evaluate_group, evaluate_item
from rulify.rules.schemas import ComparisonOp, ConditionGroup, ConditionItem


def item(var, op, value):
    return ConditionItem(var=var, op=op, value=value)


class TestEvaluateItem:
    def test_operators(self):
        scope = {"adults": 3}
        assert evaluate_item(item("adults", ">", 0), scope)
        assert evaluate_item(item("adults", ">=", 3), scope)
        assert evaluate_item(item("adults", "<=", 3), scope)
        assert evaluate_item(item("adults", "<", 4), scope)
        assert evaluate_item(item("adults", "==", 3), scope)
        assert not evaluate_item(item("adults", "!=", 3), scope)

    def test_number_kinds_compare_by_value(self):
        assert evaluate_item(item("rate", "==", 0.5), {"rate": Decimal("0.50")})

    def test_strings_and_booleans(self):
        scope = {"start_day": "Monday", "has_flight": True}
        assert evaluate_item(item("start_day", "==", "Monday"), scope)
        assert evaluate_item(item("has_flight", "==", True), scope)
        assert not evaluate_item(item("has_flight", "==", False), scope)

    def test_missing_variable_never_matches(self):
        assert not evaluate_item(item("age", "<", 10), {})
        assert not evaluate_item(item("age", "!=", 10), {})

    def test_null_binding_is_present(self):
        assert evaluate_item(item("coupon", "==", None), {"coupon": None})

    def test_op_is_enum(self):
        assert item("x", "!=", 1).op is ComparisonOp.NE


class TestEvaluateGroup:
    def test_empty_group_matches(self):
        assert evaluate_group(None, {})
        assert evaluate_group(ConditionGroup(), {})
        assert evaluate_group(ConditionGroup(all=[], any=[]), {})

    def test_all_requires_every_item(self):
        group = ConditionGroup(all=[item("a", ">", 1), item("b", ">", 1)])
        assert evaluate_group(group, {"a": 2, "b": 2})
        assert not evaluate_group(group, {"a": 2, "b": 0})

    def test_any_requires_one_item(self):
        group = ConditionGroup(any=[item("a", ">", 1), item("b", ">", 1)])
        assert evaluate_group(group, {"a": 0, "b": 2})
        assert not evaluate_group(group, {"a": 0, "b": 0})

    def test_all_and_any_combined(self):
        group = ConditionGroup(
            all=[item("stay_days", ">=", 7)],
            any=[item("adults", ">", 4), item("has_flight", "==", True)],
        )
        assert evaluate_group(group, {"stay_days": 7, "adults": 1, "has_flight": True})
        assert not evaluate_group(group, {"stay_days": 7, "adults": 1, "has_flight": False})
        assert not evaluate_group(group, {"stay_days": 6, "adults": 9, "has_flight": True})

    def test_empty_any_is_ignored(self):
        group = ConditionGroup(all=[item("a", "==", 1)], any=[])
        assert evaluate_group(group, {"a": 1})
