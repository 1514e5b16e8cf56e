"""Shared fixtures for engine and API tests."""

from __future__ import annotations

import pytest

from engine import Engine
from limits import SHALLOW, EvaluationLimits


@pytest.fixture
def engine() -> Engine:
    return Engine()


@pytest.fixture
def shallow_engine() -> Engine:
    return Engine(limits=SHALLOW)


@pytest.fixture
def stopped_engine() -> Engine:
    """An engine that may not drain anything at all."""
    return Engine(limits=EvaluationLimits(max_depth=0))


@pytest.fixture
def divide_payload() -> dict:
    """5 / 3 as an evaluation request."""
    return {
        "start": {"magnitude": 5},
        "steps": [{"kind": "divide", "operand": {"magnitude": 3}}],
    }
