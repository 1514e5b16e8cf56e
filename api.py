"""FastAPI endpoints for evaluating deferred arithmetic.

Routes
------
POST   /evaluations          Apply a list of operations to a starting value
POST   /evaluations/drain    Drain a value's own pending work
POST   /evaluations/render   Render a value as text
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from engine import Engine
from limits import EvaluationLimits
from models import (
    MAX_WORK,
    EvaluationRequest,
    EvaluationResponse,
    ValueModel,
    estimated_work,
    from_value,
    size_error,
    to_operation,
    to_value,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/evaluations", tags=["evaluations"])

# The engine instance is injected by the app factory (see app.py).
_engine: Engine | None = None


def set_engine(engine: Engine) -> None:
    """Inject the engine instance. Called once at app startup."""
    global _engine
    _engine = engine


def get_engine() -> Engine:
    assert _engine is not None, "Engine not initialized"
    return _engine


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

class RenderResponse(BaseModel):
    rendered: str


def _reject_oversized(payload: ValueModel) -> None:
    error = size_error(payload)
    if error is not None:
        raise HTTPException(status_code=422, detail=error)


def _over_budget(cost: int, spent: int) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail=(
            f"Evaluation needs about {spent + cost} unit steps, "
            f"over the limit of {MAX_WORK}"
        ),
    )


def _engine_for(request: EvaluationRequest) -> Engine:
    if request.max_depth is None:
        return get_engine()
    return Engine(limits=EvaluationLimits(max_depth=request.max_depth))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=EvaluationResponse)
def evaluate(request: EvaluationRequest) -> EvaluationResponse:
    """
    Apply each step in order, recording the rendering after every step.

    Results may outgrow the posted magnitudes, so each step is costed
    against the running value before it runs and the request is refused
    once the whole evaluation would go over MAX_WORK.
    """
    engine = _engine_for(request)
    value = to_value(request.start)
    trace: list[str] = []
    spent = 0
    for step in request.steps:
        current = from_value(value)
        cost = estimated_work(
            ValueModel.model_construct(
                magnitude=current.magnitude, pending=[step, *current.pending]
            )
        )
        if spent + cost > MAX_WORK:
            logger.debug(f"Refusing step {len(trace)} on {value.render()}")
            raise _over_budget(cost, spent)
        spent += cost
        value = engine.apply(value, to_operation(step))
        trace.append(value.render())
    logger.debug(f"Evaluated {len(request.steps)} steps to {value.render()}")
    return EvaluationResponse.for_value(value, trace)


@router.post("/drain", response_model=EvaluationResponse)
def drain(payload: ValueModel) -> EvaluationResponse:
    """Drain a value without applying anything new."""
    _reject_oversized(payload)
    cost = estimated_work(payload)
    if cost > MAX_WORK:
        raise _over_budget(cost, 0)
    value = get_engine().drain(to_value(payload))
    return EvaluationResponse.for_value(value, [value.render()])


@router.post("/render", response_model=RenderResponse)
def render(payload: ValueModel) -> RenderResponse:
    """Render a value exactly as posted, without evaluating anything."""
    _reject_oversized(payload)
    return RenderResponse(rendered=to_value(payload).render())
