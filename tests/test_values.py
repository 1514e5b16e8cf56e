"""Tests for the Value data model and operation rendering."""

from __future__ import annotations

import dataclasses

import pytest

from operations import Add, Decrement, Divide, Increment, Multiply, Subtract
from values import ONE, ZERO, InvariantViolation, Value, value_from


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:

    def test_value_from(self):
        v = value_from(5)
        assert v.magnitude == 5
        assert v.pending == ()

    def test_constants(self):
        assert ZERO() == Value(0)
        assert ONE() == Value(1)

    def test_negative_magnitude_is_invariant_violation(self):
        with pytest.raises(InvariantViolation) as exc_info:
            Value(-1)
        assert exc_info.value.magnitude == -1

    def test_value_from_rejects_negative(self):
        with pytest.raises(InvariantViolation, match=">= 0"):
            value_from(-3)

    def test_pending_list_becomes_tuple(self):
        v = Value(0, [Decrement(), Decrement()])
        assert v.pending == (Decrement(), Decrement())
        assert isinstance(v.pending, tuple)

    def test_arbitrary_precision(self):
        big = 10 ** 40
        assert value_from(big).render() == str(big)


class TestImmutability:

    def test_magnitude_cannot_be_reassigned(self):
        v = value_from(1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            v.magnitude = 2

    def test_values_are_hashable(self):
        v = Value(1, (Add(Value(2, (Divide(value_from(3)),))),))
        assert hash(v) == hash(Value(1, (Add(Value(2, (Divide(value_from(3)),))),)))

    def test_operations_compare_by_value(self):
        assert Increment() == Increment()
        assert Add(value_from(2)) == Add(value_from(2))
        assert Add(value_from(2)) != Subtract(value_from(2))


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestRender:

    def test_resolved_renders_magnitude_only(self):
        assert value_from(42).render() == "42"

    def test_unary_pending(self):
        v = Value(0, (Decrement(), Decrement()))
        assert v.render() == "0[Decrement, Decrement]"

    def test_binary_pending_renders_operand(self):
        v = Value(1, (Add(Value(2, (Divide(value_from(3)),))),))
        assert v.render() == "1[Add(2[Divide(3)])]"

    @pytest.mark.parametrize("op, text", [
        (Increment(), "Increment"),
        (Decrement(), "Decrement"),
        (Add(value_from(1)), "Add(1)"),
        (Subtract(value_from(2)), "Subtract(2)"),
        (Multiply(value_from(3)), "Multiply(3)"),
        (Divide(ZERO()), "Divide(0)"),
    ])
    def test_each_operation(self, op, text):
        assert op.render() == text

    def test_str_is_render(self):
        v = Value(0, (Decrement(),))
        assert str(v) == "0[Decrement]"

    def test_resolved_flag(self):
        assert value_from(3).resolved
        assert not Value(0, (Decrement(),)).resolved
