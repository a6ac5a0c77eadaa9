"""
Multiples of a set of factors below an exclusive bound.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from integers import IntegerType, T, truncdiv


def iter_multiples(
    factor: T, bound: T, itype: IntegerType | None = None
) -> Iterator[T]:
    """Yield ``factor * i`` for ``i = 1, 2, ...`` while below ``bound``.

    The multiplier runs up to ``truncdiv(bound, factor)``; the last
    product can equal ``bound`` and is filtered out.
    """
    limit = truncdiv(bound, factor)
    i = 1 if itype is None else itype.one
    while i <= limit:
        current = factor * i if itype is None else itype.mul(factor, i)
        if current < bound:
            yield current
        i += 1


def multiples(
    factors: Iterable[T], bound: T, itype: IntegerType | None = None
) -> list[T]:
    """Ascending, duplicate-free multiples of ``factors`` below ``bound``.

    Factors are expected to be positive.  A zero factor raises
    ZeroDivisionError; negative factors contribute nothing for a
    positive bound.
    """
    factors = list(factors)
    if itype is not None:
        itype.validate(bound, *factors)

    found: list[T] = []
    # Repeated factors add nothing new; enumerate each one once.
    for factor in dict.fromkeys(factors):
        found.extend(iter_multiples(factor, bound, itype))
    return sorted(set(found))


def sum_of_multiples(
    factors: Iterable[T], bound: T, itype: IntegerType | None = None
) -> T:
    """Sum of ``multiples(factors, bound)``, accumulated in ascending order."""
    total = 0 if itype is None else itype.zero
    for multiple in multiples(factors, bound, itype):
        total = total + multiple if itype is None else itype.add(total, multiple)
    return total
