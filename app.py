"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI

from api import router, set_engine
from engine import Engine
from factory import EngineFactory


def create_app(engine: Engine | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional engine for testing; otherwise the factory builds
    and verifies one with the default limits.
    """
    if engine is None:
        engine = EngineFactory.create()

    set_engine(engine)

    app = FastAPI(
        title="Deferred Arithmetic API",
        description=(
            "Evaluates arithmetic as an inspectable process. Results that "
            "cannot be completed - subtraction past zero, division with a "
            "remainder or by zero - come back with their pending operations "
            "instead of an error."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
