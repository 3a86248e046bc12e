"""Pydantic models for declarative rule definitions."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from rulify.expressions.evaluator import ExpressionEvaluator


# =============================================================================
# Conditions
# =============================================================================


class ComparisonOp(str, Enum):
    """Comparison operators for condition items."""

    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    EQ = "=="
    NE = "!="


# Alternative spellings accepted in documents
OPERATOR_ALIASES = {
    "=": "==",
    "<>": "!=",
}


class ConditionItem(BaseModel):
    """A single predicate: ``var op value``."""

    model_config = ConfigDict(frozen=True)

    var: str = Field(..., description="Fact-set variable to test")
    op: ComparisonOp = Field(..., description="Comparison operator")
    value: Any = Field(None, description="Literal compared against")


class ConditionGroup(BaseModel):
    """Conjunctive and disjunctive predicate lists.

    Both lists must hold when both are present; an empty group always matches.
    """

    model_config = ConfigDict(frozen=True)

    all: list[ConditionItem] | None = Field(None, description="All items must match (AND)")
    any: list[ConditionItem] | None = Field(None, description="At least one item must match (OR)")

    @property
    def is_empty(self) -> bool:
        return not self.all and not self.any


# =============================================================================
# Actions
# =============================================================================


class ComputeAction(BaseModel):
    """Evaluate an expression for its effect on the scope."""

    model_config = ConfigDict(frozen=True)

    type: Literal["compute"] = "compute"
    expression: str

    def execute(self, evaluator: ExpressionEvaluator) -> None:
        evaluator.evaluate_expression(self.expression)


class ConditionalAction(BaseModel):
    """Run ``then`` or ``else`` depending on a condition. Either branch may be absent."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["if"] = "if"
    condition: str
    then: str | None = None
    else_: str | None = Field(None, alias="else")

    def execute(self, evaluator: ExpressionEvaluator) -> None:
        # blank condition: neither branch runs
        if not self.condition.strip():
            return
        if evaluator.evaluate_condition(self.condition):
            if self.then:
                evaluator.evaluate_expression(self.then)
        elif self.else_:
            evaluator.evaluate_expression(self.else_)


Action = Annotated[Union[ComputeAction, ConditionalAction], Field(discriminator="type")]


# =============================================================================
# Rule Definition
# =============================================================================


class RuleDefinition(BaseModel):
    """Declarative description of one rule. Immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique rule identifier")
    name: str = Field(..., description="Display name (defaults to the id)")
    description: str = Field("", description="Human-readable description")
    priority: int = Field(0, description="Higher priority runs first")
    conditions: ConditionGroup | None = Field(None, description="Gate for the actions")
    actions: list[Action] | None = Field(None, description="Ordered actions (None when absent)")
    foreach: str | None = Field(None, description="Collection variable to iterate")

    @model_validator(mode="before")
    @classmethod
    def _fill_identity(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if not data.get("id"):
            data["id"] = str(uuid.uuid4())
        if not data.get("name"):
            data["name"] = data["id"]
        if data.get("description") is None:
            data["description"] = ""
        if data.get("priority") is None:
            data["priority"] = 0
        return data

    @property
    def iterates(self) -> bool:
        return bool(self.foreach and self.foreach.strip())


class RuleSet(BaseModel):
    """Root of a rule-set document."""

    rules: list[RuleDefinition] = Field(default_factory=list)
