"""
Limits layer for the deferred-arithmetic engine.

Two kinds of limit live here:

  - EvaluationLimits bound how deep the engine may nest while draining
    pending work.  The bound keeps every evaluation step finite even when
    the arithmetic it models never finishes (division by zero, repeating
    remainders).  It is a safety valve, not a mathematical claim: a chain
    nested deeper than ``max_depth`` comes back with more pending work than
    an unbounded evaluation would leave.

  - MagnitudeRange describes the domain of magnitudes over which the
    factory checks the arithmetic laws before releasing an engine.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EvaluationLimits:
    """How far the engine may recurse while draining a pending queue."""

    max_depth: int = 10

    def __post_init__(self):
        if self.max_depth < 0:
            raise ValueError(f"max_depth ({self.max_depth}) must be >= 0")

    def exceeded(self, depth: int) -> bool:
        return depth >= self.max_depth


@dataclass(frozen=True)
class MagnitudeRange:
    """
    An inclusive domain [lo, hi] of non-negative magnitudes.

    Magnitudes are never negative, so neither end of the range may be.
    """

    lo: int
    hi: int

    def __post_init__(self):
        if self.lo < 0:
            raise ValueError(f"lo ({self.lo}) must be >= 0")
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")

    @property
    def width(self) -> int:
        """Total number of magnitudes in the range."""
        return self.hi - self.lo + 1

    def contains(self, magnitude: int) -> bool:
        return self.lo <= magnitude <= self.hi

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

DEFAULT_LIMITS = EvaluationLimits()
SHALLOW = EvaluationLimits(max_depth=3)

# Small ranges useful for exhaustive law checking
TINY = MagnitudeRange(lo=0, hi=7)
SMALL = MagnitudeRange(lo=0, hi=31)
