"""FastAPI REST endpoints for the number-theory operations.

Routes
------
GET    /integer-types       List the supported fixed-width integer types
POST   /modulus             truncrem(a, b) + b
POST   /congruence          Whether a and b are congruent modulo m
POST   /multiples           Multiples of the factors below the bound
POST   /sum-of-multiples    Sum of those multiples
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import APIRouter, HTTPException

from integers import INTEGER_TYPES
from models import (
    CongruenceRequest,
    CongruenceResponse,
    IntegerTypeInfo,
    ModulusRequest,
    MultiplesRequest,
    MultiplesResponse,
    ValueResponse,
)
from modulus import is_congruent, modulus
from multiples import multiples, sum_of_multiples

log = logging.getLogger(__name__)

router = APIRouter(tags=["number-theory"])


@dataclass(frozen=True)
class ApiSettings:
    """Limits applied to incoming requests.

    ``max_work`` caps the multiplier steps of a multiples request, summed
    over its distinct factors (``bound // factor`` each).
    """

    max_bound: int = 1_000_000
    max_factors: int = 64
    max_work: int = 4_000_000


# The settings instance is injected by the app factory (see app.py).
_settings: ApiSettings | None = None


def set_settings(settings: ApiSettings) -> None:
    """Inject the settings. Called once at app startup."""
    global _settings
    _settings = settings


def get_settings() -> ApiSettings:
    assert _settings is not None, "Settings not initialized"
    return _settings


# ---------------------------------------------------------------------------
# Error helpers
# ---------------------------------------------------------------------------

def _arithmetic_error(e: ArithmeticError | ValueError) -> HTTPException:
    log.debug("rejected request: %s: %s", type(e).__name__, e)
    return HTTPException(status_code=422, detail=str(e))


def _check_limits(payload: MultiplesRequest) -> None:
    settings = get_settings()
    if len(payload.factors) > settings.max_factors:
        raise HTTPException(
            status_code=422,
            detail=f"At most {settings.max_factors} factors allowed",
        )
    if payload.bound > settings.max_bound:
        raise HTTPException(
            status_code=422,
            detail=f"Bound {payload.bound} exceeds limit {settings.max_bound}",
        )
    # Factors are positive here (see MultiplesRequest).
    bound = max(payload.bound, 0)
    work = sum(bound // f for f in set(payload.factors))
    if work > settings.max_work:
        raise HTTPException(
            status_code=422,
            detail=f"Request needs {work} steps, exceeds work limit {settings.max_work}",
        )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/integer-types", response_model=list[IntegerTypeInfo])
def list_integer_types() -> list[IntegerTypeInfo]:
    """List the fixed-width integer types requests may name."""
    return [IntegerTypeInfo.from_type(t) for t in INTEGER_TYPES.values()]


@router.post("/modulus", response_model=ValueResponse)
def compute_modulus(payload: ModulusRequest) -> ValueResponse:
    try:
        value = modulus(payload.a, payload.b, payload.resolve_type())
    except (ArithmeticError, ValueError) as e:
        raise _arithmetic_error(e) from e
    return ValueResponse(value=value)


@router.post("/congruence", response_model=CongruenceResponse)
def compute_congruence(payload: CongruenceRequest) -> CongruenceResponse:
    try:
        congruent = is_congruent(payload.a, payload.b, payload.m, payload.resolve_type())
    except (ArithmeticError, ValueError) as e:
        raise _arithmetic_error(e) from e
    return CongruenceResponse(congruent=congruent)


@router.post("/multiples", response_model=MultiplesResponse)
def compute_multiples(payload: MultiplesRequest) -> MultiplesResponse:
    """Ascending, duplicate-free multiples below the bound."""
    _check_limits(payload)
    try:
        values = multiples(payload.factors, payload.bound, payload.resolve_type())
    except (ArithmeticError, ValueError) as e:
        raise _arithmetic_error(e) from e
    return MultiplesResponse(values=values, count=len(values))


@router.post("/sum-of-multiples", response_model=ValueResponse)
def compute_sum_of_multiples(payload: MultiplesRequest) -> ValueResponse:
    _check_limits(payload)
    try:
        value = sum_of_multiples(payload.factors, payload.bound, payload.resolve_type())
    except (ArithmeticError, ValueError) as e:
        raise _arithmetic_error(e) from e
    return ValueResponse(value=value)
