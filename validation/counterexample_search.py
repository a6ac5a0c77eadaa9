"""Counterexample search - discovers gaps in implementation or tests.

This module runs independently of the test suite.  It systematically
searches, over the contract's input domains, for:

1. Postcondition violations: inputs where the toolkit doesn't match the
   contract's expected output.
2. Error condition violations: inputs that should raise but don't (or
   raise the wrong exception).
3. Property violations: algebraic relationships that fail for some
   input combination.
4. Range violations: out-of-range inputs the toolkit accepts.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import itertools
import sys
from dataclasses import dataclass, field

sys.path.insert(0, ".")

from contracts import FACTORS, ToolkitContract, build_contract
from integers import (
    I8,
    NIBBLE,
    TINY,
    U8,
    IntegerType,
    OverflowStrategy,
)
from toolkit import NumberTheory


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found - all checks passed.")
        return "\n".join(lines)


def _combos(contract: ToolkitContract, kinds) -> itertools.product:
    return itertools.product(*(contract.candidates(k) for k in kinds))


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_postcondition_violations(
    nt: NumberTheory,
    contract: ToolkitContract,
) -> tuple[list[Counterexample], int]:
    """Exhaustively verify postconditions for every input combination."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_contract in contract.operations.items():
        op = getattr(nt, op_name)
        for combo in _combos(contract, op_contract.kinds):
            checks += 1
            # Skip inputs that are supposed to error
            if op_contract.expected_error(*combo) is not None:
                continue

            try:
                result = op(*combo)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=op_name,
                    inputs=combo,
                    expected="no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="Operation raised an unexpected exception",
                ))
                continue

            for post in op_contract.postconditions:
                if not post.check(*combo, result):
                    cxs.append(Counterexample(
                        category="postcondition_violation",
                        operation=op_name,
                        inputs=combo,
                        expected=post.description,
                        actual=f"result={result}",
                        description=f"Postcondition '{post.name}' violated",
                    ))

    return cxs, checks


def search_error_condition_violations(
    nt: NumberTheory,
    contract: ToolkitContract,
) -> tuple[list[Counterexample], int]:
    """Verify every error condition triggers the right exception.

    The zero-divisor conditions are only reachable with zero inputs, so
    for the multiples operations the factor sets are extended with a
    zero factor.
    """
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_contract in contract.operations.items():
        op = getattr(nt, op_name)
        combos = list(_combos(contract, op_contract.kinds))
        if FACTORS in op_contract.kinds:
            combos += [((0,), b) for b in contract.domain("bound")]
            combos += [((0, 3), b) for b in contract.domain("bound")]

        for combo in combos:
            ec = op_contract.expected_error(*combo)
            if ec is None:
                continue
            checks += 1
            try:
                result = op(*combo)
                cxs.append(Counterexample(
                    category="missing_error",
                    operation=op_name,
                    inputs=combo,
                    expected=f"{ec.exception.__name__}",
                    actual=f"result={result}",
                    description=(
                        f"Error condition '{ec.name}' should have "
                        f"triggered but didn't"
                    ),
                ))
            except ec.exception:
                pass  # expected
            except Exception as e:
                cxs.append(Counterexample(
                    category="wrong_error",
                    operation=op_name,
                    inputs=combo,
                    expected=f"{ec.exception.__name__}",
                    actual=f"{type(e).__name__}: {e}",
                    description=f"Wrong exception type for '{ec.name}'",
                ))

    return cxs, checks


def search_property_violations(
    nt: NumberTheory,
    contract: ToolkitContract,
) -> tuple[list[Counterexample], int]:
    """Exhaustively check every algebraic property."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, prop in contract.all_properties:
        for combo in _combos(contract, prop.kinds):
            checks += 1
            try:
                if not prop.check(nt, *combo):
                    cxs.append(Counterexample(
                        category="property_violation",
                        operation=op_name,
                        inputs=combo,
                        expected=prop.description,
                        actual="property does not hold",
                        description=f"Property '{prop.name}' violated",
                    ))
            except (ZeroDivisionError, OverflowError, ValueError):
                pass

    return cxs, checks


def search_range_violations(
    nt: NumberTheory,
    contract: ToolkitContract,
) -> tuple[list[Counterexample], int]:
    """Inputs just outside the type's range must raise ValueError."""
    cxs: list[Counterexample] = []
    checks = 0
    t = contract.itype
    outside = (t.lo - 1, t.hi + 1)

    calls = []
    for v in outside:
        calls.append(("modulus", (v, 1)))
        calls.append(("modulus", (1, v)))
        calls.append(("is_congruent", (v, 1, 1)))
        calls.append(("multiples", ((1,), v)))
        calls.append(("multiples", ((v,), 1)))
        calls.append(("sum_of_multiples", ((1,), v)))

    for op_name, combo in calls:
        checks += 1
        try:
            result = getattr(nt, op_name)(*combo)
        except ValueError:
            continue
        except Exception as e:
            result = f"{type(e).__name__}: {e}"
        cxs.append(Counterexample(
            category="range_violation",
            operation=op_name,
            inputs=combo,
            expected="ValueError",
            actual=f"result={result}",
            description=f"Out-of-range input accepted by {t.name}",
        ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(itype: IntegerType) -> SearchReport:
    """Run complete counterexample search for one integer type."""
    nt = NumberTheory(itype)
    contract = build_contract(itype)
    report = SearchReport()

    for search_fn in (
        search_postcondition_violations,
        search_error_condition_violations,
        search_property_violations,
        search_range_violations,
    ):
        cxs, checks = search_fn(nt, contract)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


CONFIGURATIONS = [
    ("tiny   / ERROR", TINY),
    ("tiny   / WRAP", TINY.with_overflow(OverflowStrategy.WRAP)),
    ("tiny   / CLAMP", TINY.with_overflow(OverflowStrategy.CLAMP)),
    ("nibble / ERROR", NIBBLE),
    ("i8     / ERROR", I8),
    ("u8     / ERROR", U8),
]


def main() -> None:
    """Run counterexample search across several configurations."""
    all_passed = True
    for name, itype in CONFIGURATIONS:
        print(f"\n--- Configuration: {name} ---")
        report = run_search(itype)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL CONFIGURATIONS PASSED")
    else:
        print("SOME CONFIGURATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
