"""Request and response models for the number-theory HTTP API.

Requests optionally name a fixed-width integer type; without one the
operations run on unbounded Python integers.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from integers import INTEGER_TYPES, IntegerType, OverflowStrategy


# ---------------------------------------------------------------------------
# Integer type selection
# ---------------------------------------------------------------------------

IntegerTypeName = Enum(  # type: ignore[misc]
    "IntegerTypeName", {name.upper(): name for name in INTEGER_TYPES}, type=str
)


class OverflowName(str, Enum):
    ERROR = "error"
    WRAP = "wrap"
    CLAMP = "clamp"


class TypedRequest(BaseModel):
    """Common integer type selection shared by every operation request."""

    integer_type: IntegerTypeName | None = Field(
        default=None,
        description="Fixed-width integer type, e.g. 'u8' or 'i64'. "
        "Omit for unbounded integers.",
    )
    overflow: OverflowName = OverflowName.ERROR

    def resolve_type(self) -> IntegerType | None:
        if self.integer_type is None:
            return None
        itype = INTEGER_TYPES[self.integer_type.value]
        return itype.with_overflow(OverflowStrategy[self.overflow.name])


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class ModulusRequest(TypedRequest):
    a: int
    b: int


class CongruenceRequest(TypedRequest):
    a: int
    b: int
    m: int


class MultiplesRequest(TypedRequest):
    factors: list[int] = Field(default_factory=list)
    bound: int

    @field_validator("factors")
    @classmethod
    def factors_positive(cls, factors: list[int]) -> list[int]:
        for f in factors:
            if f <= 0:
                raise ValueError(f"Factors must be positive, got {f}")
        return factors


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class ValueResponse(BaseModel):
    value: int


class CongruenceResponse(BaseModel):
    congruent: bool


class MultiplesResponse(BaseModel):
    values: list[int]
    count: int


class IntegerTypeInfo(BaseModel):
    name: str
    lo: int
    hi: int
    signed: bool

    @classmethod
    def from_type(cls, itype: IntegerType) -> IntegerTypeInfo:
        return cls(name=itype.name, lo=itype.lo, hi=itype.hi, signed=itype.is_signed)
