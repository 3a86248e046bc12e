"""Evaluation result returned for every (rule, fact-set) evaluation."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class RuleResult(BaseModel):
    """Outcome of evaluating one rule against one fact-set.

    A skipped rule (non-matching conditions, or a missing collection for an
    iterating rule) is a success carrying ``{"skipped": True}`` in ``data``.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    error: str | None = None
    duration: timedelta = Field(default_factory=timedelta)
    data: dict[str, Any] = Field(default_factory=dict, description="Auxiliary data")

    @classmethod
    def ok(
        cls, data: dict[str, Any] | None = None, duration: timedelta | None = None
    ) -> RuleResult:
        """Create a successful result."""
        return cls(success=True, duration=duration or timedelta(), data=data or {})

    @classmethod
    def fail(
        cls,
        error: str,
        duration: timedelta | None = None,
        data: dict[str, Any] | None = None,
    ) -> RuleResult:
        """Create a failed result."""
        return cls(success=False, error=error, duration=duration or timedelta(), data=data or {})

    def with_duration(self, duration: timedelta) -> RuleResult:
        """Copy of this result stamped with a measured duration."""
        return self.model_copy(update={"duration": duration})

    @property
    def skipped(self) -> bool:
        return self.success and bool(self.data.get("skipped"))

    @property
    def status(self) -> Literal["matched", "skipped", "failed"]:
        if not self.success:
            return "failed"
        return "skipped" if self.skipped else "matched"
