"""
Typed toolkit.

``NumberTheory`` binds the number-theory operations to one
``IntegerType`` so callers can hold a single object per integer width,
the way a calculator is bound to its bounds.  Instances handed out by
``factory.DarkFactory`` have been verified against their contracts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from integers import IntegerType
from modulus import is_congruent, modulus
from multiples import multiples, sum_of_multiples


@dataclass(frozen=True)
class NumberTheory:
    """The number-theory operations over a fixed integer type."""

    itype: IntegerType

    def modulus(self, a: int, b: int) -> int:
        return modulus(a, b, self.itype)

    def is_congruent(self, a: int, b: int, m: int) -> bool:
        return is_congruent(a, b, m, self.itype)

    def multiples(self, factors: Iterable[int], bound: int) -> list[int]:
        return multiples(factors, bound, self.itype)

    def sum_of_multiples(self, factors: Iterable[int], bound: int) -> int:
        return sum_of_multiples(factors, bound, self.itype)
