"""
The verifying factory.

The factory does NOT just construct engines - it *verifies* them against
the arithmetic laws before releasing them.

Flow:
  1. Caller requests an engine for some EvaluationLimits.
  2. Factory builds the engine.
  3. Factory checks every law over a MagnitudeRange.
  4. If every law holds  -> return the engine.
     If any law breaks   -> raise, never hand out a broken instance.

A limit that is too shallow for the range is caught here: its engine
leaves work pending where the laws demand a resolved value.
"""

from __future__ import annotations

import inspect
import itertools
import logging
import random
from dataclasses import dataclass, field

from engine import Engine
from laws import Law, LawSet, all_law_sets
from limits import DEFAULT_LIMITS, TINY, EvaluationLimits, MagnitudeRange

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Outcome of checking one law against an engine."""

    law_name: str
    passed: bool
    counterexample: tuple[int, ...] | None = None
    observed: str | None = None
    tests_run: int = 0

    def describe_failure(self) -> str:
        names = "abcdefgh"
        args = ", ".join(f"{names[i]}={m}" for i, m in enumerate(self.counterexample))
        if self.observed is None:
            return args
        return f"{args} gave {self.observed}"

    def __repr__(self) -> str:
        if self.passed:
            return f"[PASS] {self.law_name} ({self.tests_run} tests)"
        return (
            f"[FAIL] {self.law_name} after {self.tests_run} tests: "
            f"{self.describe_failure()}"
        )


@dataclass
class VerificationReport:
    """Every law of one law set, checked for one engine over one range."""

    law_set_name: str
    limits: EvaluationLimits = DEFAULT_LIMITS
    domain: MagnitudeRange = TINY
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failures(self) -> list[VerificationResult]:
        return [r for r in self.results if not r.passed]

    def summary(self) -> str:
        header = (
            f"{self.law_set_name} laws, max_depth={self.limits.max_depth}, "
            f"magnitudes {self.domain.lo}..{self.domain.hi}"
        )
        lines = [header, *(f"  {r!r}" for r in self.results)]
        lines.append("  ALL PASSED" if self.passed else f"  FAILED ({len(self.failures)})")
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised instead of handing out an engine that breaks a law."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(f"Engine rejected: {report.summary()}")


# ---------------------------------------------------------------------------
# The factory
# ---------------------------------------------------------------------------

class EngineFactory:
    """
    Produces Engine instances whose laws hold over a magnitude range.

    Small ranges are checked exhaustively; larger ones are sampled,
    edge values first.
    """

    EXHAUSTIVE_THRESHOLD = 16  # max width for brute-force check
    SAMPLE_COUNT = 500

    @classmethod
    def create(
        cls,
        limits: EvaluationLimits = DEFAULT_LIMITS,
        domain: MagnitudeRange = TINY,
    ) -> Engine:
        """Build, verify, and return an Engine."""
        engine = Engine(limits=limits)
        cls._verify_all(engine, domain)
        logger.debug(
            f"Engine with max_depth={limits.max_depth} verified over "
            f"[{domain.lo}, {domain.hi}]"
        )
        return engine

    # -- internal ---------------------------------------------------------

    @classmethod
    def _verify_all(cls, engine: Engine, domain: MagnitudeRange) -> None:
        for law_set in all_law_sets():
            report = cls._verify_law_set(law_set, engine, domain)
            if not report.passed:
                logger.debug(report.summary())
                raise VerificationError(report)

    @classmethod
    def _verify_law_set(
        cls, law_set: LawSet, engine: Engine, domain: MagnitudeRange
    ) -> VerificationReport:
        report = VerificationReport(
            law_set_name=law_set.name, limits=engine.limits, domain=domain
        )
        for law in law_set:
            report.results.append(cls._verify_law(law, engine, domain))
        return report

    @classmethod
    def _verify_law(
        cls, law: Law, engine: Engine, domain: MagnitudeRange
    ) -> VerificationResult:
        arity = _predicate_arity(law)
        if domain.width <= cls.EXHAUSTIVE_THRESHOLD:
            combos = itertools.product(domain.all_values(), repeat=arity)
        else:
            combos = _generate_samples(domain, arity, count=cls.SAMPLE_COUNT)

        tests_run = 0
        for combo in combos:
            tests_run += 1
            if not law.check(engine, *combo):
                return VerificationResult(
                    law_name=law.name,
                    passed=False,
                    counterexample=tuple(combo),
                    observed=law.observe(engine, *combo),
                    tests_run=tests_run,
                )

        return VerificationResult(law_name=law.name, passed=True, tests_run=tests_run)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _predicate_arity(law: Law) -> int:
    """
    How many magnitudes a law's predicate expects (excluding the engine,
    which is always the first argument).
    """
    sig = inspect.signature(law.predicate)
    return len(sig.parameters) - 1


def _generate_samples(
    domain: MagnitudeRange, arity: int, count: int
) -> list[tuple[int, ...]]:
    """Edge-case combinations first, then random fill."""
    edge_values = [domain.lo, domain.lo + 1, domain.hi - 1, domain.hi]
    edge_values = sorted({v for v in edge_values if domain.contains(v)})

    samples: list[tuple[int, ...]] = list(itertools.product(edge_values, repeat=arity))

    while len(samples) < count:
        samples.append(tuple(random.randint(domain.lo, domain.hi) for _ in range(arity)))

    return samples
