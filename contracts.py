"""Formal contracts for the number-theory toolkit.

Each operation is described as a collection of:
- preconditions: what inputs must satisfy before the operation
- postconditions: what the output must satisfy given valid inputs
- error conditions: what inputs must cause specific exceptions
- algebraic properties: relationships that must hold between calls

The contracts are machine-readable.  The factory and the validation
tools iterate over them to verify implementations and search for
counterexamples.

Inputs are typed by *kind* rather than by position alone, because the
operations draw from very different domains: a modulus operand may be
any value of the integer type, but a multiples bound has to stay small
enough to enumerate.

Layers
------
Domains            finite input domains per kind for an IntegerType
OperationContract  per-operation contract (pre/post/error/properties)
Branch             every decision point white-box tests must cover
ToolkitContract    the full contract for one IntegerType
build_contract()   constructs a ToolkitContract for an IntegerType
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Callable, Sequence

from integers import IntegerType, OverflowStrategy, truncdiv, truncrem


# ---------------------------------------------------------------------------
# Input domains
# ---------------------------------------------------------------------------

VALUE = "value"          # any value of the type
OPERAND = "operand"      # small values around zero
DIVISOR = "divisor"      # small values around zero, used as a modulus
FACTOR = "factor"        # small positive factors
BOUND = "bound"          # small bounds, including non-positive ones
FACTORS = "factors"      # collections of FACTOR values

OPERAND_LIMIT = 16
DIVISOR_LIMIT = 12
FACTOR_LIMIT = 12
BOUND_LIMIT = 64
NEGATIVE_BOUND_LIMIT = 8
MAX_FACTOR_SET = 2


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Precondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    kinds: tuple[str, ...]      # domain of each free input the check needs
    check: Callable[..., bool]

    @property
    def arity(self) -> int:
        return len(self.kinds)


@dataclass(frozen=True)
class OperationContract:
    name: str
    kinds: tuple[str, ...]
    preconditions: list[Precondition]
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]

    def expected_error(self, *inputs) -> ErrorCondition | None:
        """The first error condition these inputs trigger, if any."""
        for ec in self.error_conditions:
            if ec.trigger(*inputs):
                return ec
        return None


@dataclass(frozen=True)
class Branch:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class ToolkitContract:
    """Complete contract for the toolkit over one integer type."""

    itype: IntegerType
    operations: dict[str, OperationContract]
    branches: list[Branch]

    def domain(self, kind: str) -> range:
        """Finite range of candidate inputs of the given kind."""
        t = self.itype
        if kind == VALUE:
            return t.all_values()
        if kind == OPERAND:
            return range(max(t.lo, -OPERAND_LIMIT), min(t.hi, OPERAND_LIMIT) + 1)
        if kind == DIVISOR:
            return range(max(t.lo, -DIVISOR_LIMIT), min(t.hi, DIVISOR_LIMIT) + 1)
        if kind == FACTOR:
            return range(1, min(t.hi, FACTOR_LIMIT) + 1)
        if kind == BOUND:
            return range(max(t.lo, -NEGATIVE_BOUND_LIMIT), min(t.hi, BOUND_LIMIT) + 1)
        raise KeyError(f"unknown input kind: {kind!r}")

    def factor_sets(self) -> list[tuple[int, ...]]:
        """Empty, single and paired factor collections (repeats allowed)."""
        factors = self.domain(FACTOR)
        sets: list[tuple[int, ...]] = [()]
        for size in range(1, MAX_FACTOR_SET + 1):
            sets.extend(itertools.combinations_with_replacement(factors, size))
        return sets

    def candidates(self, kind: str) -> Sequence:
        if kind == FACTORS:
            return self.factor_sets()
        return self.domain(kind)

    def is_enumerable(self, kinds: Sequence[str], limit: int = 256) -> bool:
        """True when every domain in ``kinds`` has at most ``limit`` values."""
        for kind in kinds:
            if kind == FACTORS:
                continue
            r = self.domain(kind)
            if r.stop - r.start > limit:
                return False
        return True

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out


# ---------------------------------------------------------------------------
# Helpers used inside the contract predicates
# ---------------------------------------------------------------------------

def reference_multiples(factors: Sequence[int], bound: int) -> list[int]:
    """Brute-force multiples: every n in [1, bound) divisible by a factor."""
    return [n for n in range(1, bound) if any(n % f == 0 for f in factors)]


def _is_strictly_ascending(values: Sequence[int]) -> bool:
    return all(x < y for x, y in zip(values, values[1:]))


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract(itype: IntegerType) -> ToolkitContract:
    """Construct the full toolkit contract for an integer type."""
    t = itype
    checked = t.overflow == OverflowStrategy.ERROR

    # -- overflow helper used in postconditions --
    def _apply(raw: int) -> int:
        if t.contains(raw):
            return raw
        if t.overflow == OverflowStrategy.CLAMP:
            return max(t.lo, min(t.hi, raw))
        if t.overflow == OverflowStrategy.WRAP:
            return t.lo + (raw - t.lo) % t.width
        return raw  # ERROR mode: the error condition covers it

    def _raw_modulus(a: int, b: int) -> int:
        return truncrem(a, b) + b

    # -------------------------------------------------------------- modulus
    modulus_contract = OperationContract(
        name="modulus",
        kinds=(VALUE, VALUE),
        preconditions=[
            Precondition(
                "inputs_in_range",
                "Both inputs representable in the type",
                lambda a, b: t.contains(a) and t.contains(b),
            ),
            Precondition(
                "nonzero_divisor",
                "Divisor is not zero",
                lambda a, b: b != 0,
            ),
        ],
        postconditions=[
            Postcondition(
                "result_in_range",
                "Result is representable in the type",
                lambda a, b, result: t.contains(result),
            ),
            Postcondition(
                "result_correct",
                "Result equals overflow-adjusted truncrem(a, b) + b",
                lambda a, b, result: result == _apply(_raw_modulus(a, b)),
            ),
            Postcondition(
                "congruent_to_dividend",
                "Result is congruent to a modulo b (when not adjusted)",
                lambda a, b, result: (
                    not t.contains(_raw_modulus(a, b))
                    or (result - a) % b == 0
                ),
            ),
            Postcondition(
                "offset_window",
                "For b > 0: result in [b, 2b) when a >= 0, in (0, b] when a < 0",
                lambda a, b, result: (
                    b < 0
                    or not t.contains(_raw_modulus(a, b))
                    or (b <= result < 2 * b if a >= 0 else 0 < result <= b)
                ),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "zero_divisor",
                "ZeroDivisionError when the divisor is zero",
                lambda a, b: b == 0,
                ZeroDivisionError,
            ),
            ErrorCondition(
                "overflow_error",
                "OverflowError when the quotient or the shifted remainder "
                "is unrepresentable in ERROR mode",
                lambda a, b: (
                    checked
                    and b != 0
                    and (
                        not t.contains(truncdiv(a, b))
                        or not t.contains(_raw_modulus(a, b))
                    )
                ),
                OverflowError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "unit_divisor", "modulus(a, 1) == 1", (VALUE,),
                lambda nt, a: nt.modulus(a, 1) == 1,
            ),
            AlgebraicProperty(
                "self_divisor", "modulus(a, a) == a for a != 0", (VALUE,),
                lambda nt, a: a == 0 or nt.modulus(a, a) == a,
            ),
            AlgebraicProperty(
                "canonical_class",
                "modulus(a, b) has the same least non-negative residue as a",
                (VALUE, VALUE),
                lambda nt, a, b: (
                    b <= 0
                    or not t.contains(_raw_modulus(a, b))
                    or nt.modulus(a, b) % b == a % b
                ),
            ),
        ],
    )

    # --------------------------------------------------------- is_congruent
    congruence_contract = OperationContract(
        name="is_congruent",
        kinds=(OPERAND, OPERAND, DIVISOR),
        preconditions=[
            Precondition(
                "inputs_in_range",
                "All inputs representable in the type",
                lambda a, b, m: t.contains(a) and t.contains(b) and t.contains(m),
            ),
            Precondition(
                "nonzero_modulus",
                "Modulus is not zero",
                lambda a, b, m: m != 0,
            ),
        ],
        postconditions=[
            Postcondition(
                "result_correct",
                "True exactly when m divides a - b",
                lambda a, b, m, result: result == ((a - b) % m == 0),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "zero_modulus",
                "ZeroDivisionError when the modulus is zero",
                lambda a, b, m: m == 0,
                ZeroDivisionError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "reflexive", "is_congruent(a, a, m)", (OPERAND, DIVISOR),
                lambda nt, a, m: m == 0 or nt.is_congruent(a, a, m),
            ),
            AlgebraicProperty(
                "symmetric",
                "is_congruent(a, b, m) == is_congruent(b, a, m)",
                (OPERAND, OPERAND, DIVISOR),
                lambda nt, a, b, m: (
                    m == 0 or nt.is_congruent(a, b, m) == nt.is_congruent(b, a, m)
                ),
            ),
            AlgebraicProperty(
                "modulus_in_class",
                "modulus(a, m) is congruent to a modulo m",
                (OPERAND, DIVISOR),
                lambda nt, a, m: (
                    m == 0
                    or not t.contains(_raw_modulus(a, m))
                    or nt.is_congruent(a, nt.modulus(a, m), m)
                ),
            ),
        ],
    )

    # ------------------------------------------------------------ multiples
    multiples_contract = OperationContract(
        name="multiples",
        kinds=(FACTORS, BOUND),
        preconditions=[
            Precondition(
                "inputs_in_range",
                "Bound and every factor representable in the type",
                lambda factors, bound: (
                    t.contains(bound) and all(t.contains(f) for f in factors)
                ),
            ),
            Precondition(
                "positive_factors",
                "Every factor is strictly positive",
                lambda factors, bound: all(f > 0 for f in factors),
            ),
        ],
        postconditions=[
            Postcondition(
                "strictly_ascending",
                "Result is strictly ascending (sorted, no duplicates)",
                lambda factors, bound, result: _is_strictly_ascending(result),
            ),
            Postcondition(
                "below_bound",
                "Every element is < bound",
                lambda factors, bound, result: all(v < bound for v in result),
            ),
            Postcondition(
                "divisible",
                "Every element is divisible by at least one factor",
                lambda factors, bound, result: all(
                    any(v % f == 0 for f in factors) for v in result
                ),
            ),
            Postcondition(
                "complete",
                "Result equals the brute-force enumeration",
                lambda factors, bound, result: (
                    list(result) == reference_multiples(factors, bound)
                ),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "zero_factor",
                "ZeroDivisionError when a factor is zero",
                lambda factors, bound: any(f == 0 for f in factors),
                ZeroDivisionError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "order_independent",
                "multiples([f, g], n) == multiples([g, f], n)",
                (FACTOR, FACTOR, BOUND),
                lambda nt, f, g, n: nt.multiples([f, g], n) == nt.multiples([g, f], n),
            ),
            AlgebraicProperty(
                "duplicates_ignored",
                "multiples([f, f], n) == multiples([f], n)",
                (FACTOR, BOUND),
                lambda nt, f, n: nt.multiples([f, f], n) == nt.multiples([f], n),
            ),
            AlgebraicProperty(
                "single_factor_count",
                "multiples([f], n) has (n - 1) / f elements for n > 0",
                (FACTOR, BOUND),
                lambda nt, f, n: (
                    len(nt.multiples([f], n)) == (truncdiv(n - 1, f) if n > 0 else 0)
                ),
            ),
            AlgebraicProperty(
                "unit_factor",
                "multiples([1], n) == [1, 2, ..., n - 1]",
                (BOUND,),
                lambda nt, n: nt.multiples([1], n) == list(range(1, n)),
            ),
        ],
    )

    # ----------------------------------------------------- sum_of_multiples
    sum_contract = OperationContract(
        name="sum_of_multiples",
        kinds=(FACTORS, BOUND),
        preconditions=multiples_contract.preconditions,
        postconditions=[
            Postcondition(
                "result_in_range",
                "Result is representable in the type",
                lambda factors, bound, result: t.contains(result),
            ),
            Postcondition(
                "result_correct",
                "Result equals the overflow-adjusted brute-force sum",
                lambda factors, bound, result: (
                    result == _apply(sum(reference_multiples(factors, bound)))
                ),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "zero_factor",
                "ZeroDivisionError when a factor is zero",
                lambda factors, bound: any(f == 0 for f in factors),
                ZeroDivisionError,
            ),
            ErrorCondition(
                "overflow_error",
                "OverflowError when the sum is unrepresentable in ERROR mode",
                lambda factors, bound: (
                    checked
                    and not t.contains(sum(reference_multiples(factors, bound)))
                ),
                OverflowError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "matches_multiples",
                "sum_of_multiples(fs, n) == sum(multiples(fs, n))",
                (FACTOR, FACTOR, BOUND),
                lambda nt, f, g, n: (
                    nt.sum_of_multiples([f, g], n)
                    == _apply(sum(nt.multiples([f, g], n)))
                ),
            ),
            AlgebraicProperty(
                "empty_is_zero",
                "sum_of_multiples([], n) == 0",
                (BOUND,),
                lambda nt, n: nt.sum_of_multiples([], n) == 0,
            ),
        ],
    )

    # -------------------------------------------------------------- branches
    branches = [
        # Truncating division (truncdiv / truncrem)
        Branch(
            "TRUNC-ADJUST",
            "Truncation differs from floor division",
            "a % b != 0 and signs differ",
            "truncdiv",
        ),
        Branch(
            "TRUNC-AGREE",
            "Truncation and floor division agree",
            "a % b == 0 or signs agree",
            "truncdiv",
        ),
        # Overflow handling (IntegerType.apply)
        Branch(
            "OVF-IN-RANGE",
            "Result within range, no adjustment",
            "lo <= raw <= hi",
            "overflow",
        ),
        Branch(
            "OVF-CLAMP",
            "Result saturated at lo or hi",
            "raw out of range and overflow == CLAMP",
            "overflow",
        ),
        Branch(
            "OVF-WRAP",
            "Result wrapped around the range",
            "raw out of range and overflow == WRAP",
            "overflow",
        ),
        Branch(
            "OVF-ERROR",
            "OverflowError raised",
            "raw out of range and overflow == ERROR",
            "overflow",
        ),
        Branch(
            "REM-QUOTIENT-OVERFLOW",
            "Quotient of a typed remainder is unrepresentable",
            "not contains(truncdiv(a, b))",
            "rem",
        ),
        # Input validation (IntegerType.validate)
        Branch(
            "INPUT-VALID",
            "Every input representable",
            "all(contains(v) for v in values)",
            "validation",
        ),
        Branch(
            "INPUT-INVALID",
            "Some input out of range",
            "any(not contains(v) for v in values)",
            "validation",
        ),
        # Modulus
        Branch(
            "MOD-NONNEGATIVE-DIVIDEND",
            "Remainder >= 0, result lands in [b, 2b)",
            "a >= 0 and b > 0",
            "modulus",
        ),
        Branch(
            "MOD-NEGATIVE-DIVIDEND",
            "Remainder <= 0, result lands in (0, b]",
            "a < 0 and b > 0",
            "modulus",
        ),
        Branch(
            "CONG-ONE-PERIOD-APART",
            "Remainders of opposite sign one period apart",
            "ra != rb and abs(ra - rb) == abs(m)",
            "is_congruent",
        ),
        # Multiples
        Branch(
            "MUL-PRODUCT-AT-BOUND",
            "Last product equals the bound and is filtered out",
            "bound % factor == 0",
            "multiples",
        ),
        Branch(
            "MUL-EMPTY-RANGE",
            "Multiplier range empty (bound < factor or non-positive)",
            "truncdiv(bound, factor) < 1",
            "multiples",
        ),
        Branch(
            "MUL-DEDUP",
            "Shared multiples of two factors collapse",
            "some n < bound divisible by two factors",
            "multiples",
        ),
        Branch(
            "SUM-EMPTY",
            "No multiples, sum is the additive identity",
            "multiples(factors, bound) == []",
            "sum_of_multiples",
        ),
    ]

    return ToolkitContract(
        itype=itype,
        operations={
            "modulus": modulus_contract,
            "is_congruent": congruence_contract,
            "multiples": multiples_contract,
            "sum_of_multiples": sum_contract,
        },
        branches=branches,
    )
