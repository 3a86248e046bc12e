"""Tests for RuleResult and DelegateRule."""

import pytest
from datetime import timedelta

from pydantic import ValidationError

from rulify import DelegateRule, NullArgumentError, RuleResult


class TestRuleResult:
    def test_ok(self):
        result = RuleResult.ok({"total": 10})

        assert result.success
        assert result.error is None
        assert result.data == {"total": 10}
        assert result.duration == timedelta()
        assert result.status == "matched"

    def test_fail(self):
        result = RuleResult.fail("boom", timedelta(milliseconds=5))

        assert not result.success
        assert result.error == "boom"
        assert result.duration == timedelta(milliseconds=5)
        assert result.status == "failed"
        assert not result.skipped

    def test_skipped(self):
        result = RuleResult.ok({"skipped": True})
        assert result.skipped
        assert result.status == "skipped"

    def test_with_duration_copies(self):
        result = RuleResult.ok()
        stamped = result.with_duration(timedelta(seconds=1))

        assert stamped.duration == timedelta(seconds=1)
        assert result.duration == timedelta()

    def test_frozen(self):
        result = RuleResult.ok()
        with pytest.raises(ValidationError):
            result.success = False


class TestDelegateRule:
    def test_evaluate(self):
        rule = DelegateRule(
            "non-empty",
            "Non-empty",
            lambda text: RuleResult.ok() if text else RuleResult.fail("empty"),
            priority=2,
        )

        assert rule.evaluate("abc").success
        assert rule.evaluate("").error == "empty"
        assert rule.priority == 2
        assert not rule.is_async

    def test_duration_is_stamped(self):
        rule = DelegateRule("r1", "R1", lambda _: RuleResult.ok())
        assert rule.evaluate(None).duration >= timedelta()

    def test_exception_becomes_failure(self):
        def explode(context):
            raise RuntimeError("bad input")

        result = DelegateRule("r1", "R1", explode).evaluate({})

        assert not result.success
        assert result.error == "Rule evaluation failed: bad input"

    @pytest.mark.parametrize(
        "args,argument",
        [
            ((None, "name", lambda _: RuleResult.ok()), "rule_id"),
            (("id", None, lambda _: RuleResult.ok()), "name"),
            (("id", "name", None), "evaluator"),
        ],
    )
    def test_required_arguments(self, args, argument):
        with pytest.raises(NullArgumentError) as excinfo:
            DelegateRule(*args)
        assert excinfo.value.argument == argument

    def test_repr(self):
        rule = DelegateRule("r1", "R1", lambda _: RuleResult.ok(), priority=4)
        assert repr(rule) == "DelegateRule(rule_id='r1', priority=4)"


class TestDelegateRuleAsync:
    @pytest.mark.asyncio
    async def test_async_evaluator(self):
        async def check(context):
            return RuleResult.ok({"seen": context["value"]})

        rule = DelegateRule("r1", "R1", lambda _: RuleResult.fail("sync"), async_evaluator=check)

        result = await rule.evaluate_async({"value": 3})

        assert rule.is_async
        assert result.success
        assert result.data == {"seen": 3}

    @pytest.mark.asyncio
    async def test_async_exception_becomes_failure(self):
        async def explode(context):
            raise RuntimeError("timeout")

        rule = DelegateRule("r1", "R1", lambda _: RuleResult.ok(), async_evaluator=explode)

        result = await rule.evaluate_async({})

        assert not result.success
        assert result.error == "Async rule evaluation failed: timeout"

    @pytest.mark.asyncio
    async def test_sync_evaluator_on_async_path(self):
        rule = DelegateRule("r1", "R1", lambda _: RuleResult.ok({"path": "sync"}))

        result = await rule.evaluate_async({})

        assert result.data == {"path": "sync"}
