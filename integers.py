"""
Integer capability layer.

Every operation in this package is written against a small capability
set: zero, one, ordering, ``+``, ``-``, ``*`` and ``divmod``.  Plain
Python ``int`` satisfies it out of the box and is unbounded.

To reason about fixed-width integers (``u8``, ``i32``, ...) the caller
passes an ``IntegerType``: an inclusive range [lo, hi] together with an
overflow strategy.  Arithmetic routed through an ``IntegerType`` is
*checked* - a result that escapes the range is raised, wrapped or
saturated depending on the strategy.

Division and remainder here truncate toward zero (the remainder takes
the sign of the dividend), unlike Python's ``//`` and ``%`` which floor.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Protocol, TypeVar


class Integer(Protocol):
    """Protocol for integer-like values the operations accept.

    The identities are not methods of the value: typed calls take them
    from ``IntegerType.zero`` / ``IntegerType.one``, untyped calls use the
    int literals ``0`` and ``1``.
    """

    def __add__(self, other): ...
    def __sub__(self, other): ...
    def __mul__(self, other): ...
    def __divmod__(self, other): ...
    def __lt__(self, other) -> bool: ...
    def __le__(self, other) -> bool: ...


T = TypeVar("T", bound=Integer)


class OverflowStrategy(Enum):
    """What to do when a result would leave the type's range."""

    ERROR = auto()       # Raise OverflowError (checked arithmetic)
    WRAP = auto()        # Two's-complement style wrap-around
    CLAMP = auto()       # Saturate at lo/hi


# ---------------------------------------------------------------------------
# Truncating division helpers
# ---------------------------------------------------------------------------

def truncdiv(a: T, b: T) -> T:
    """Integer division truncating toward zero (not floor division).

    Raises ZeroDivisionError when ``b`` is zero.
    """
    q, r = divmod(a, b)
    # divmod rounds toward -inf; step back toward zero when the signs
    # differ and the division is inexact.
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def truncrem(a: T, b: T) -> T:
    """Remainder matching ``truncdiv``: sign follows the dividend."""
    return a - b * truncdiv(a, b)


# ---------------------------------------------------------------------------
# Fixed-width integer types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IntegerType:
    """
    A fixed-width integer type: the inclusive range [lo, hi] plus the
    overflow semantics of its checked arithmetic.
    """

    name: str
    lo: int
    hi: int
    overflow: OverflowStrategy = OverflowStrategy.ERROR

    def __post_init__(self):
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")
        if not (self.lo <= 0 and self.hi >= 1):
            raise ValueError(
                f"{self.name} range [{self.lo}, {self.hi}] must contain 0 and 1"
            )

    @classmethod
    def signed(cls, bits: int, name: str | None = None) -> IntegerType:
        return cls(name or f"i{bits}", -(2 ** (bits - 1)), 2 ** (bits - 1) - 1)

    @classmethod
    def unsigned(cls, bits: int, name: str | None = None) -> IntegerType:
        return cls(name or f"u{bits}", 0, 2 ** bits - 1)

    # -- identities and range queries ---------------------------------------

    @property
    def zero(self) -> int:
        return 0

    @property
    def one(self) -> int:
        return 1

    @property
    def is_signed(self) -> bool:
        return self.lo < 0

    @property
    def width(self) -> int:
        """Total number of representable values."""
        return self.hi - self.lo + 1

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)

    def with_overflow(self, overflow: OverflowStrategy) -> IntegerType:
        return replace(self, overflow=overflow)

    # -- checking -----------------------------------------------------------

    def validate(self, *values: int) -> None:
        """Reject inputs that are not representable in this type."""
        for v in values:
            if not self.contains(v):
                raise ValueError(
                    f"{v} is outside {self.name} range [{self.lo}, {self.hi}]"
                )

    def apply(self, raw: int, op: str = "compute") -> int:
        """Apply the overflow strategy to bring a raw result into range."""
        if self.lo <= raw <= self.hi:
            return raw

        if self.overflow == OverflowStrategy.CLAMP:
            return max(self.lo, min(self.hi, raw))

        if self.overflow == OverflowStrategy.WRAP:
            return self.lo + (raw - self.lo) % self.width

        raise OverflowError(
            f"attempt to {op} with overflow: {raw} is outside "
            f"{self.name} range [{self.lo}, {self.hi}]"
        )

    # -- checked arithmetic -------------------------------------------------

    def add(self, a: int, b: int) -> int:
        return self.apply(a + b, "add")

    def sub(self, a: int, b: int) -> int:
        return self.apply(a - b, "subtract")

    def mul(self, a: int, b: int) -> int:
        return self.apply(a * b, "multiply")

    def div(self, a: int, b: int) -> int:
        return self.apply(truncdiv(a, b), "divide")

    def rem(self, a: int, b: int) -> int:
        """Truncating remainder.

        The remainder itself always fits, but like a hardware ``idiv`` it
        is only defined when the quotient fits too (``i8: -128 rem -1``).
        """
        q = truncdiv(a, b)
        if not self.contains(q) and self.overflow == OverflowStrategy.ERROR:
            raise OverflowError(
                f"attempt to calculate the remainder with overflow: "
                f"{a} rem {b} in {self.name}"
            )
        return a - b * q


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

I8 = IntegerType.signed(8)
I16 = IntegerType.signed(16)
I32 = IntegerType.signed(32)
I64 = IntegerType.signed(64)
ISIZE = IntegerType.signed(64, name="isize")
U8 = IntegerType.unsigned(8)
U16 = IntegerType.unsigned(16)
U32 = IntegerType.unsigned(32)
U64 = IntegerType.unsigned(64)
USIZE = IntegerType.unsigned(64, name="usize")

# Small types useful for exhaustive verification
TINY = IntegerType("tiny", -8, 7)
NIBBLE = IntegerType.unsigned(4, name="nibble")

INTEGER_TYPES: dict[str, IntegerType] = {
    t.name: t
    for t in (I8, I16, I32, I64, ISIZE, U8, U16, U32, U64, USIZE, TINY, NIBBLE)
}
