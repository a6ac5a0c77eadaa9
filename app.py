"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI

from api import ApiSettings, router, set_settings


def create_app(settings: ApiSettings | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts optional settings for testing; uses the defaults if omitted.
    """
    if settings is None:
        settings = ApiSettings()

    set_settings(settings)

    app = FastAPI(
        title="Number Theory API",
        description=(
            "Congruence modulus and multiples of a set of factors below a "
            "bound, over unbounded or fixed-width integers. Fixed-width "
            "requests use checked arithmetic with a selectable overflow "
            "strategy."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
