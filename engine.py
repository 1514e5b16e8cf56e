"""
Evaluation engine.

The engine carries out operations on Values.  Only the two primitives touch
a magnitude directly; Add, Subtract, Multiply and Divide are built from
repeated increments and decrements.  Work that cannot be done is not an
error - it is left on the returned Value's pending queue:

    3 - 5   ->  0[Decrement, Decrement]
    5 / 3   ->  1[Add(2[Divide(3)])]
    5 / 0   ->  0[Add(5[Divide(0)])]

Draining
--------
``apply`` puts the new operation at the head of the receiver's queue and
drains it: each operation runs against the bare current magnitude, and the
first one that leaves pending work stops the drain.  That new pending work
goes in front of whatever was still untried.

Depth
-----
Draining a captured operand can drain *its* operands, and so on.  Every such
re-entry is one level deeper, and the depth is passed down explicitly from
zero at each public call.  At ``limits.max_depth`` the drain stops and hands
back the untried work as pending.  Unit loops inside the derived operations
commit their own increment/decrement before draining anything, so they
always make progress even when the bound cuts a drain short.

Known limits: a chain nested deeper than ``max_depth`` (for example a long
run of remainders being folded back in) resolves less than an unbounded
evaluation would.  Draining is a fixed point only for resolved values and
decrement debts.  An inexact quotient carries ``Add(r[Divide(b)])``, and
draining it runs that Add, which drains the remainder's own Divide on the
way:

    5 / 3           ->  1[Add(2[Divide(3)])]
    (5 / 3).drain() ->  3

The same replay is what lets ``(7 / 2) * 2`` come back to 7.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from limits import DEFAULT_LIMITS, EvaluationLimits
from operations import (
    DECREMENT,
    INCREMENT,
    Add,
    Decrement,
    Divide,
    Increment,
    Multiply,
    Operation,
    Subtract,
)
from values import ZERO, Value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Engine:
    limits: EvaluationLimits = DEFAULT_LIMITS

    # -- public operations --------------------------------------------------

    def apply(self, value: Value, operation: Operation) -> Value:
        """Queue ``operation`` ahead of the value's pending work and drain."""
        return self._drain(Value(value.magnitude, (operation, *value.pending)), 0)

    def drain(self, value: Value) -> Value:
        """Drain the value's own pending work without adding any."""
        return self._drain(value, 0)

    # -- draining -----------------------------------------------------------

    def _drain(self, value: Value, depth: int) -> Value:
        magnitude = value.magnitude
        queue = value.pending
        while queue:
            operation, queue = queue[0], queue[1:]
            if self.limits.exceeded(depth):
                logger.debug(
                    f"Depth limit {self.limits.max_depth} reached, "
                    f"leaving {operation.render()} pending"
                )
                return Value(magnitude, (operation, *queue))
            result = self._evaluate(operation, Value(magnitude), depth + 1)
            magnitude = result.magnitude
            if result.pending:
                return Value(magnitude, result.pending + queue)
        return Value(magnitude)

    def _step(self, value: Value, primitive: Operation, depth: int) -> Value:
        """Commit one primitive on the magnitude, then drain what is owed."""
        stepped = self._evaluate(primitive, Value(value.magnitude), depth)
        if stepped.pending:
            return Value(stepped.magnitude, stepped.pending + value.pending)
        return self._drain(Value(stepped.magnitude, value.pending), depth)

    def _replay(self, a: Value, b: Value, depth: int) -> Value:
        """Fold the right operand's leftover pending work onto ``a``."""
        return self._drain(Value(a.magnitude, b.pending + a.pending), depth)

    # -- dispatch -----------------------------------------------------------

    def _evaluate(self, operation: Operation, value: Value, depth: int) -> Value:
        match operation:
            case Increment():
                return Value(value.magnitude + 1, value.pending)
            case Decrement():
                if value.magnitude > 0:
                    return Value(value.magnitude - 1, value.pending)
                return Value(value.magnitude, value.pending + (DECREMENT,))
            case Add(operand):
                return self._add(value, operand, depth)
            case Subtract(operand):
                return self._subtract(value, operand, depth)
            case Multiply(operand):
                return self._multiply(value, operand, depth)
            case Divide(operand):
                return self._divide(value, operand, depth)
            case _:
                raise TypeError(f"Not an operation: {operation!r}")

    # -- derived operations -------------------------------------------------

    def _add(self, a: Value, b: Value, depth: int) -> Value:
        while b.magnitude > 0:
            a = self._step(a, INCREMENT, depth)
            b = self._step(b, DECREMENT, depth)
        if b.pending:
            return self._replay(a, b, depth)
        return a

    def _subtract(self, a: Value, b: Value, depth: int) -> Value:
        while b.magnitude > 0:
            a = self._step(a, DECREMENT, depth)
            b = self._step(b, DECREMENT, depth)
        if b.pending:
            # b is spent; Add only replays its leftovers
            return self._add(a, b, depth)
        return a

    def _multiply(self, a: Value, b: Value, depth: int) -> Value:
        # Seeded at zero and counted down to zero, so x * 0 == 0 * x == 0.
        total = ZERO()
        counter = b
        while counter.magnitude > 0:
            total = self._evaluate(Add(a), total, depth + 1)
            counter = self._step(counter, DECREMENT, depth)
        return total

    def _divide(self, a: Value, b: Value, depth: int) -> Value:
        quotient = ZERO()
        remainder = a
        while b.magnitude > 0 and remainder.magnitude >= b.magnitude:
            remainder = self._evaluate(Subtract(b), remainder, depth + 1)
            quotient = self._step(quotient, INCREMENT, depth)

        if remainder.magnitude == 0:
            return quotient

        logger.debug(
            f"Deferring remainder {remainder.render()} of division by {b.render()}"
        )
        leftover = Value(remainder.magnitude, remainder.pending + (Divide(b),))
        return Value(quotient.magnitude, quotient.pending + (Add(leftover),))


DEFAULT_ENGINE = Engine()
