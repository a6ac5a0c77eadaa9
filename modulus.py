"""
Congruence modulus.

The ``%`` family of operators gives a remainder, not a member of a
congruence class.  ``modulus`` shifts the truncating remainder by the
divisor once:

    modulus(a, b) == truncrem(a, b) + b

The result is congruent to ``a`` modulo ``b`` but is deliberately *not*
re-reduced into [0, b): non-negative dividends land in [b, 2b), so
``modulus(38, 12) == 14``.  Negative dividends happen to land in (0, b].
"""

from __future__ import annotations

from integers import IntegerType, T, truncrem


def modulus(a: T, b: T, itype: IntegerType | None = None) -> T:
    """Return ``truncrem(a, b) + b``.

    Raises ZeroDivisionError when ``b`` is zero.  With ``itype`` the
    inputs must fit the type and the arithmetic is checked.
    """
    if itype is None:
        return truncrem(a, b) + b
    itype.validate(a, b)
    return itype.add(itype.rem(a, b), b)


def is_congruent(a: T, b: T, m: T, itype: IntegerType | None = None) -> bool:
    """True when ``a`` and ``b`` are congruent modulo ``m``."""
    if itype is not None:
        itype.validate(a, b, m)
    ra = truncrem(a, m)
    rb = truncrem(b, m)
    # Both remainders lie in (-|m|, |m|), so same class means equal or
    # exactly one period apart.
    return ra == rb or abs(ra - rb) == abs(m)
