"""
Law layer.

A LawSet is the contract an engine must satisfy.  It is purely
declarative - it says WHAT must hold, not HOW the engine achieves it.

Each law is a named predicate with a human-readable description.  The first
argument of every predicate is the engine under test; the remaining
arguments are plain non-negative magnitudes, so the factory can infer the
arity and enumerate inputs from a MagnitudeRange.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from engine import Engine
from operations import Add, Decrement, Divide, Increment, Multiply, Subtract
from values import ZERO, Value, value_from


# ---------------------------------------------------------------------------
# Core law primitives
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Law:
    """
    A single verifiable property of an engine.

    ``subject``, when given, rebuilds the Value the predicate judged so a
    failure can show what the engine actually produced.
    """

    name: str
    description: str
    predicate: Callable[..., bool]
    subject: Callable[..., Value] | None = None

    def check(self, *args: Any) -> bool:
        return self.predicate(*args)

    def observe(self, *args: Any) -> str | None:
        if self.subject is None:
            return None
        return self.subject(*args).render()


@dataclass
class LawSet:
    """An ordered collection of laws that together form a contract."""

    name: str
    laws: list[Law] = field(default_factory=list)

    def add(self, law: Law) -> None:
        self.laws.append(law)

    def __iter__(self):
        return iter(self.laws)

    def __len__(self):
        return len(self.laws)


# ---------------------------------------------------------------------------
# Helpers used inside the predicates
# ---------------------------------------------------------------------------

def _run(engine: Engine, a: int, operation) -> Any:
    return engine.apply(value_from(a), operation)


def _resolves_to(value, magnitude: int) -> bool:
    return value.magnitude == magnitude and value.resolved


def _difference_plus(engine: Engine, a: int, b: int) -> Value:
    return engine.apply(_run(engine, a, Subtract(value_from(b))), Add(value_from(b)))


def _quotient_times(engine: Engine, a: int, b: int) -> Value:
    return engine.apply(_run(engine, a, Divide(value_from(b))), Multiply(value_from(b)))


def _division_holds(engine: Engine, a: int, b: int) -> bool:
    if b == 0:
        return True
    result = _run(engine, a, Divide(value_from(b)))
    q = result.magnitude
    if result.resolved:
        return q * b == a
    remainder = Value(a - q * b, (Divide(value_from(b)),))
    return q * b <= a and result.pending == (Add(remainder),)


# ---------------------------------------------------------------------------
# Law builders
# ---------------------------------------------------------------------------

def primitive_laws() -> LawSet:
    """Increment always resolves; decrement defers only at zero."""
    laws = LawSet(name="primitives")

    laws.add(Law(
        name="increment_successor",
        description="x + 1, nothing pending",
        predicate=lambda engine, a: _resolves_to(_run(engine, a, Increment()), a + 1),
        subject=lambda engine, a: _run(engine, a, Increment()),
    ))

    laws.add(Law(
        name="decrement_predecessor",
        description="x - 1 for x > 0; 0[Decrement] for x == 0",
        predicate=lambda engine, a: (
            _resolves_to(_run(engine, a, Decrement()), a - 1) if a > 0
            else _run(engine, a, Decrement()).pending == (Decrement(),)
        ),
        subject=lambda engine, a: _run(engine, a, Decrement()),
    ))

    laws.add(Law(
        name="drain_fixed_point",
        description="draining a resolved value or a decrement debt changes nothing",
        predicate=lambda engine, a: all(
            engine.drain(v).render() == v.render()
            for v in (value_from(a), _run(engine, 0, Subtract(value_from(a))))
        ),
    ))

    return laws


def addition_laws() -> LawSet:
    laws = LawSet(name="addition")

    laws.add(Law(
        name="sum",
        description="a + b resolves to the sum",
        predicate=lambda engine, a, b: _resolves_to(
            _run(engine, a, Add(value_from(b))), a + b
        ),
        subject=lambda engine, a, b: _run(engine, a, Add(value_from(b))),
    ))

    laws.add(Law(
        name="commutativity",
        description="a + b == b + a",
        predicate=lambda engine, a, b: (
            _run(engine, a, Add(value_from(b))) == _run(engine, b, Add(value_from(a)))
        ),
    ))

    laws.add(Law(
        name="identity",
        description="a + 0 == a",
        predicate=lambda engine, a: _resolves_to(_run(engine, a, Add(ZERO())), a),
        subject=lambda engine, a: _run(engine, a, Add(ZERO())),
    ))

    return laws


def subtraction_laws() -> LawSet:
    laws = LawSet(name="subtraction")

    laws.add(Law(
        name="difference_or_debt",
        description="a - b resolves when a >= b, else 0 owing b - a decrements",
        predicate=lambda engine, a, b: (
            _resolves_to(_run(engine, a, Subtract(value_from(b))), a - b) if a >= b
            else _run(engine, a, Subtract(value_from(b)))
            == Value(0, (Decrement(),) * (b - a))
        ),
        subject=lambda engine, a, b: _run(engine, a, Subtract(value_from(b))),
    ))

    laws.add(Law(
        name="self_inverse",
        description="a - a == 0",
        predicate=lambda engine, a: _resolves_to(
            _run(engine, a, Subtract(value_from(a))), 0
        ),
        subject=lambda engine, a: _run(engine, a, Subtract(value_from(a))),
    ))

    laws.add(Law(
        name="add_duality",
        description="(a - b) + b == a  [a >= b]",
        predicate=lambda engine, a, b: a < b or _resolves_to(
            _difference_plus(engine, a, b), a
        ),
        subject=_difference_plus,
    ))

    return laws


def multiplication_laws() -> LawSet:
    laws = LawSet(name="multiplication")

    laws.add(Law(
        name="product",
        description="a * b resolves to the product",
        predicate=lambda engine, a, b: _resolves_to(
            _run(engine, a, Multiply(value_from(b))), a * b
        ),
        subject=lambda engine, a, b: _run(engine, a, Multiply(value_from(b))),
    ))

    laws.add(Law(
        name="identity",
        description="a * 1 == a",
        predicate=lambda engine, a: _resolves_to(
            _run(engine, a, Multiply(value_from(1))), a
        ),
        subject=lambda engine, a: _run(engine, a, Multiply(value_from(1))),
    ))

    laws.add(Law(
        name="zero",
        description="a * 0 == 0 * a == 0",
        predicate=lambda engine, a: (
            _resolves_to(_run(engine, a, Multiply(ZERO())), 0)
            and _resolves_to(_run(engine, 0, Multiply(value_from(a))), 0)
        ),
    ))

    return laws


def division_laws() -> LawSet:
    laws = LawSet(name="division")

    laws.add(Law(
        name="quotient_and_remainder",
        description="q * b == a when exact, else q * b <= a with remainder a - q * b pending",
        predicate=_division_holds,
        subject=lambda engine, a, b: _run(engine, a, Divide(value_from(b))),
    ))

    laws.add(Law(
        name="by_zero",
        description="a / 0 == 0[Add(a[Divide(0)])]  (a > 0)",
        predicate=lambda engine, a: a == 0 or (
            _run(engine, a, Divide(ZERO())).render() == f"0[Add({a}[Divide(0)])]"
        ),
        subject=lambda engine, a: _run(engine, a, Divide(ZERO())),
    ))

    laws.add(Law(
        name="multiply_cancels",
        description="(a / b) * b == a  (b > 0)",
        predicate=lambda engine, a, b: b == 0 or _resolves_to(
            _quotient_times(engine, a, b), a
        ),
        subject=_quotient_times,
    ))

    return laws


def all_law_sets() -> list[LawSet]:
    return [
        primitive_laws(),
        addition_laws(),
        subtraction_laws(),
        multiplication_laws(),
        division_laws(),
    ]
