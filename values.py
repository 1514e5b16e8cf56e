"""
Value layer.

A Value is an immutable pair: the magnitude it currently resolves to, and
the ordered queue of operations that could not yet be applied to it.  There
are no negative numbers; "3 - 5" is the magnitude 0 still owing two
decrements.

Values never change.  ``apply`` and ``drain`` hand the work to the engine
and return a new Value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from operations import Operation


class InvariantViolation(Exception):
    """Raised when a Value would hold a negative magnitude.

    The public operation API never produces one; seeing this means the
    engine itself is broken.
    """

    def __init__(self, magnitude: int) -> None:
        self.magnitude = magnitude
        super().__init__(f"Magnitude must be >= 0, got {magnitude}")


@dataclass(frozen=True)
class Value:
    magnitude: int
    pending: tuple[Operation, ...] = ()

    def __post_init__(self):
        if self.magnitude < 0:
            raise InvariantViolation(self.magnitude)
        if not isinstance(self.pending, tuple):
            object.__setattr__(self, "pending", tuple(self.pending))

    @property
    def resolved(self) -> bool:
        """True when no pending work remains."""
        return not self.pending

    def apply(self, operation: Operation) -> Value:
        """Apply one operation and drain as much pending work as possible."""
        from engine import DEFAULT_ENGINE
        return DEFAULT_ENGINE.apply(self, operation)

    def drain(self) -> Value:
        from engine import DEFAULT_ENGINE
        return DEFAULT_ENGINE.drain(self)

    def render(self) -> str:
        """``"5"`` when resolved, otherwise ``"1[Add(2[Divide(3)])]"``."""
        if not self.pending:
            return str(self.magnitude)
        ops = ", ".join(op.render() for op in self.pending)
        return f"{self.magnitude}[{ops}]"

    def __str__(self) -> str:
        return self.render()


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------

def value_from(magnitude: int) -> Value:
    return Value(magnitude)


def ZERO() -> Value:
    return Value(0)


def ONE() -> Value:
    return Value(1)
