"""JSON models for values and operations.

A Value travels as ``{"magnitude": 1, "pending": [...]}`` and each pending
operation as ``{"kind": "add", "operand": {...}}``.  Binary kinds carry an
operand, primitives do not.  This module defines the wire models and the
conversions to and from engine Values -- no evaluation logic.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from operations import (
    Add,
    Decrement,
    Divide,
    Increment,
    Multiply,
    Operation,
    Subtract,
)
from values import Value

# Magnitudes are walked one unit at a time; keep requests small.
MAX_MAGNITUDE = 1_000
MAX_STEPS = 64
MAX_PENDING = 64
# Unit steps a single request may cost, see estimated_work().
MAX_WORK = 100_000


# ---------------------------------------------------------------------------
# Operation
# ---------------------------------------------------------------------------

class OperationKind(str, Enum):
    INCREMENT = "increment"
    DECREMENT = "decrement"
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"

    @property
    def binary(self) -> bool:
        return self not in (OperationKind.INCREMENT, OperationKind.DECREMENT)


class OperationModel(BaseModel):
    """One operation, with its captured operand for binary kinds."""

    kind: OperationKind
    operand: ValueModel | None = None

    @model_validator(mode="after")
    def operand_matches_kind(self) -> OperationModel:
        if self.kind.binary and self.operand is None:
            raise ValueError(f"{self.kind.value!r} needs an operand")
        if not self.kind.binary and self.operand is not None:
            raise ValueError(f"{self.kind.value!r} takes no operand")
        return self


# ---------------------------------------------------------------------------
# Value
# ---------------------------------------------------------------------------

class ValueModel(BaseModel):
    """A magnitude and its pending operations, leftmost first."""

    magnitude: int = Field(..., ge=0)
    pending: list[OperationModel] = Field(default_factory=list)


OperationModel.model_rebuild()


_UNARY = {
    OperationKind.INCREMENT: Increment,
    OperationKind.DECREMENT: Decrement,
}
_BINARY = {
    OperationKind.ADD: Add,
    OperationKind.SUBTRACT: Subtract,
    OperationKind.MULTIPLY: Multiply,
    OperationKind.DIVIDE: Divide,
}
_KINDS = {cls: kind for kind, cls in {**_UNARY, **_BINARY}.items()}


def to_operation(model: OperationModel) -> Operation:
    if model.kind.binary:
        return _BINARY[model.kind](to_value(model.operand))
    return _UNARY[model.kind]()


def to_value(model: ValueModel) -> Value:
    return Value(model.magnitude, tuple(to_operation(op) for op in model.pending))


def from_operation(operation: Operation) -> OperationModel:
    kind = _KINDS[type(operation)]
    if kind.binary:
        return OperationModel(kind=kind, operand=from_value(operation.operand))
    return OperationModel(kind=kind)


def from_value(value: Value) -> ValueModel:
    return ValueModel(
        magnitude=value.magnitude,
        pending=[from_operation(op) for op in value.pending],
    )


def largest_magnitude(model: ValueModel) -> int:
    """The largest magnitude anywhere in the value, operands included."""
    nested = [
        largest_magnitude(op.operand) for op in model.pending if op.operand is not None
    ]
    return max([model.magnitude, *nested])


def longest_pending(model: ValueModel) -> int:
    """The longest pending list anywhere in the value, operands included."""
    nested = [
        longest_pending(op.operand) for op in model.pending if op.operand is not None
    ]
    return max([len(model.pending), *nested])


def size_error(model: ValueModel) -> str | None:
    """Why a posted value is too large to accept, or None."""
    largest = largest_magnitude(model)
    if largest > MAX_MAGNITUDE:
        return f"Magnitude {largest} exceeds the limit of {MAX_MAGNITUDE}"
    longest = longest_pending(model)
    if longest > MAX_PENDING:
        return f"Pending list of {longest} exceeds the limit of {MAX_PENDING}"
    return None


def _estimate(model: ValueModel) -> tuple[int, int]:
    bound = model.magnitude
    work = 0
    for op in model.pending:
        if op.operand is None:
            bound += 1
            work += 1
            continue
        operand_bound, operand_work = _estimate(op.operand)
        work += operand_work
        if op.kind is OperationKind.MULTIPLY:
            bound *= max(operand_bound, 1)
        else:
            bound += operand_bound
        work += bound
    return bound, work


def estimated_work(model: ValueModel) -> int:
    """
    Upper bound on the unit steps needed to drain the value.

    Every magnitude is taken to grow: decrements count as increments and
    subtraction or division as addition, so chained multiplies show up
    as the product they can reach.
    """
    return _estimate(model)[1]


# ---------------------------------------------------------------------------
# Requests / responses
# ---------------------------------------------------------------------------

class EvaluationRequest(BaseModel):
    """A starting value and the operations to apply to it, in order."""

    start: ValueModel
    steps: list[OperationModel] = Field(default_factory=list, max_length=MAX_STEPS)
    max_depth: int | None = Field(
        default=None,
        ge=0,
        le=64,
        description="Override the engine's drain depth limit for this request",
    )

    @model_validator(mode="after")
    def values_within_limits(self) -> EvaluationRequest:
        operands = [step.operand for step in self.steps if step.operand is not None]
        for value in [self.start, *operands]:
            error = size_error(value)
            if error is not None:
                raise ValueError(error)
        return self


class EvaluationResponse(BaseModel):
    result: ValueModel
    rendered: str
    resolved: bool
    trace: list[str] = Field(
        default_factory=list,
        description="Rendering after each step, in order",
    )

    @classmethod
    def for_value(cls, value: Value, trace: list[str] | None = None) -> EvaluationResponse:
        return cls(
            result=from_value(value),
            rendered=value.render(),
            resolved=value.resolved,
            trace=trace or [],
        )
