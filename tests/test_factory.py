"""
Law conformance tests.

These test the factory's end-to-end verification:
  - A sound engine passes verification.
  - An engine whose depth limit is too shallow is rejected.
  - Exhaustive verification actually checks all combinations.
"""

from __future__ import annotations

import pytest

from engine import Engine
from factory import EngineFactory, VerificationError, _generate_samples, _predicate_arity
from laws import Law, LawSet, addition_laws, all_law_sets, primitive_laws
from limits import DEFAULT_LIMITS, SHALLOW, SMALL, TINY, EvaluationLimits, MagnitudeRange
from operations import Add
from values import value_from


# ---------------------------------------------------------------------------
# Factory produces verified engines
# ---------------------------------------------------------------------------

class TestFactoryProducesVerified:

    def test_default(self):
        engine = EngineFactory.create()
        assert isinstance(engine, Engine)
        assert engine.limits == DEFAULT_LIMITS

    def test_narrow_domain(self):
        engine = EngineFactory.create(domain=MagnitudeRange(lo=0, hi=3))
        assert engine.limits.max_depth == 10

    def test_shallow_limit_fine_for_small_remainders(self):
        """Divisors up to 2 leave remainders of at most 1."""
        engine = EngineFactory.create(SHALLOW, domain=MagnitudeRange(lo=0, hi=2))
        assert engine.limits == SHALLOW


# ---------------------------------------------------------------------------
# Factory rejects broken engines
# ---------------------------------------------------------------------------

class TestFactoryRejectsBroken:

    def test_shallow_limit_rejected(self):
        with pytest.raises(VerificationError) as exc_info:
            EngineFactory.create(SHALLOW, domain=TINY)
        report = exc_info.value.report
        assert report.law_set_name == "division"
        failed = [r for r in report.results if not r.passed]
        assert [r.law_name for r in failed] == ["multiply_cancels"]
        assert failed[0].counterexample == (3, 4)
        assert failed[0].observed == "3[Divide(4)]"
        assert "a=3, b=4 gave 3[Divide(4)]" in str(exc_info.value)

    def test_zero_depth_rejected_at_primitives(self):
        with pytest.raises(VerificationError) as exc_info:
            EngineFactory.create(EvaluationLimits(max_depth=0))
        assert exc_info.value.report.law_set_name == "primitives"
        first = exc_info.value.report.failures[0]
        assert first.law_name == "increment_successor"
        assert first.counterexample == (0,)
        assert first.observed == "0[Increment]"

    def test_error_message_carries_summary(self):
        with pytest.raises(VerificationError, match="FAILED"):
            EngineFactory.create(EvaluationLimits(max_depth=0))

    def test_false_law_has_counterexample(self):
        """A law claiming every sum is zero must be caught."""
        bad = LawSet(name="bad_addition")
        bad.add(Law(
            name="always_zero",
            description="a + b == 0",
            predicate=lambda engine, a, b: (
                engine.apply(value_from(a), Add(value_from(b))).magnitude == 0
            ),
        ))
        report = EngineFactory._verify_law_set(bad, Engine(), TINY)
        assert not report.passed
        assert report.results[0].counterexample == (0, 1)
        assert report.results[0].observed is None
        assert "[FAIL] always_zero" in report.summary()
        assert report.summary().startswith("bad_addition laws, max_depth=10, magnitudes 0..7")


# ---------------------------------------------------------------------------
# Exhaustive and sampled coverage
# ---------------------------------------------------------------------------

class TestCoverage:

    def test_binary_law_checks_all_pairs(self):
        sum_law = addition_laws().laws[0]
        assert sum_law.name == "sum"
        result = EngineFactory._verify_law(sum_law, Engine(), TINY)
        assert result.passed
        assert result.tests_run == TINY.width ** 2  # 8^2 = 64

    def test_unary_law_checks_all_singles(self):
        identity = addition_laws().laws[2]
        assert identity.name == "identity"
        result = EngineFactory._verify_law(identity, Engine(), TINY)
        assert result.passed
        assert result.tests_run == TINY.width

    def test_wide_domain_is_sampled(self):
        sum_law = addition_laws().laws[0]
        result = EngineFactory._verify_law(sum_law, Engine(), SMALL)
        assert result.passed
        assert result.tests_run == EngineFactory.SAMPLE_COUNT

    def test_samples_start_with_edges(self):
        samples = _generate_samples(SMALL, 2, count=50)
        assert len(samples) == 50
        assert samples[0] == (0, 0)
        assert (31, 31) in samples[:16]
        assert all(SMALL.contains(a) and SMALL.contains(b) for a, b in samples)

    def test_arity_excludes_engine(self):
        arities = {law.name: _predicate_arity(law) for law in primitive_laws()}
        assert arities == {
            "increment_successor": 1,
            "decrement_predecessor": 1,
            "drain_fixed_point": 1,
        }

    def test_every_law_set_is_named_and_non_empty(self):
        names = [s.name for s in all_law_sets()]
        assert names == [
            "primitives", "addition", "subtraction", "multiplication", "division",
        ]
        assert all(len(s) > 0 for s in all_law_sets())
