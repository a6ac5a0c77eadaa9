"""
The Dark Factory.

The factory does NOT just construct toolkits - it *verifies* them
against their contracts before releasing them.

Flow:
  1. Caller requests a toolkit for a given IntegerType.
  2. Factory builds the NumberTheory instance.
  3. Factory checks every postcondition and algebraic property of the
     contract against the instance.
  4. If verification passes  -> return the toolkit.
     If verification fails   -> raise, never hand out a broken instance.

"Dark" because the consumer never sees the verification step.
They receive an object that is *already checked* for the declared
integer type.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from contracts import (
    FACTORS,
    AlgebraicProperty,
    OperationContract,
    ToolkitContract,
    build_contract,
)
from integers import IntegerType
from toolkit import NumberTheory


log = logging.getLogger(__name__)

# Exceptions an operation may legitimately raise on an edge input.
EXPECTED_ERRORS = (ZeroDivisionError, OverflowError, ValueError)


@dataclass
class VerificationResult:
    """Outcome of verifying one postcondition or property."""

    property_name: str
    passed: bool
    counterexample: tuple | None = None
    tests_run: int = 0

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        ce = f"  counterexample={self.counterexample}" if self.counterexample else ""
        return f"[{status}] {self.property_name} ({self.tests_run} tests){ce}"


@dataclass
class VerificationReport:
    """Aggregate result of verifying one operation contract."""

    contract_name: str
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def tests_run(self) -> int:
        return sum(r.tests_run for r in self.results)

    def summary(self) -> str:
        lines = [f"--- {self.contract_name} ---"]
        for r in self.results:
            lines.append(f"  {r}")
        status = "ALL PASSED" if self.passed else "FAILED"
        lines.append(f"  => {status}")
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised when a toolkit fails its contract."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(f"Verification failed:\n{report.summary()}")


# ---------------------------------------------------------------------------
# The factory
# ---------------------------------------------------------------------------

class DarkFactory:
    """
    Produces NumberTheory toolkits that are checked against their
    contracts.

    Inputs drawn from small domains are checked *exhaustively*.  When a
    domain is wider than the threshold the factory falls back to edge
    values plus a seeded random sample (which the test layer extends
    with hypothesis).
    """

    EXHAUSTIVE_THRESHOLD = 256   # max domain width for brute-force check
    SAMPLE_COUNT = 2_000
    SEED = 0

    @classmethod
    def create(
        cls, itype: IntegerType, contract: ToolkitContract | None = None
    ) -> NumberTheory:
        """Build, verify, and return a NumberTheory toolkit."""
        toolkit = NumberTheory(itype=itype)
        if contract is None:
            contract = build_contract(itype)
        for report in cls.verify(toolkit, contract):
            if not report.passed:
                log.warning("toolkit for %s rejected:\n%s", itype.name, report.summary())
                raise VerificationError(report)
        log.info("released verified toolkit for %s", itype.name)
        return toolkit

    @classmethod
    def verify(
        cls, toolkit: Any, contract: ToolkitContract
    ) -> list[VerificationReport]:
        """Verify every operation contract; one report per operation."""
        reports = []
        for name, op_contract in contract.operations.items():
            report = VerificationReport(contract_name=f"{contract.itype.name}.{name}")
            op = getattr(toolkit, name)
            report.results.extend(
                cls._verify_postconditions(op_contract, op, contract)
            )
            for prop in op_contract.properties:
                report.results.append(
                    cls._verify_property(prop, toolkit, contract)
                )
            for result in report.results:
                log.debug("%s %r", report.contract_name, result)
            reports.append(report)
        return reports

    # -- internal ---------------------------------------------------------

    @classmethod
    def _inputs(
        cls, contract: ToolkitContract, kinds: Sequence[str]
    ) -> Iterable[tuple]:
        if contract.is_enumerable(kinds, cls.EXHAUSTIVE_THRESHOLD):
            return itertools.product(*(contract.candidates(k) for k in kinds))
        return _generate_samples(contract, kinds, cls.SAMPLE_COUNT, cls.SEED)

    @classmethod
    def _verify_postconditions(
        cls, op_contract: OperationContract, op: Any, contract: ToolkitContract
    ) -> list[VerificationResult]:
        results = {
            post.name: VerificationResult(property_name=post.name, passed=True)
            for post in op_contract.postconditions
        }
        raised = VerificationResult(property_name="no_unexpected_error", passed=True)

        for combo in cls._inputs(contract, op_contract.kinds):
            if op_contract.expected_error(*combo) is not None:
                continue
            raised.tests_run += 1
            try:
                result = op(*combo)
            except EXPECTED_ERRORS:
                if raised.passed:
                    raised.passed = False
                    raised.counterexample = combo
                continue

            for post in op_contract.postconditions:
                outcome = results[post.name]
                outcome.tests_run += 1
                if outcome.passed and not post.check(*combo, result):
                    outcome.passed = False
                    outcome.counterexample = combo

        return [raised, *results.values()]

    @classmethod
    def _verify_property(
        cls, prop: AlgebraicProperty, toolkit: Any, contract: ToolkitContract
    ) -> VerificationResult:
        tests_run = 0
        for combo in cls._inputs(contract, prop.kinds):
            tests_run += 1
            try:
                if not prop.check(toolkit, *combo):
                    return VerificationResult(
                        property_name=prop.name,
                        passed=False,
                        counterexample=combo,
                        tests_run=tests_run,
                    )
            except EXPECTED_ERRORS:
                # Edge inputs (zero divisors, overflow) are covered by
                # the error conditions, not by the properties.
                pass

        return VerificationResult(
            property_name=prop.name,
            passed=True,
            tests_run=tests_run,
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _edge_values(r: range) -> list[int]:
    lo, hi = r.start, r.stop - 1
    candidates = [lo, lo + 1, -1, 0, 1, hi - 1, hi]
    return sorted({v for v in candidates if lo <= v <= hi})


def _generate_samples(
    contract: ToolkitContract, kinds: Sequence[str], count: int, seed: int
) -> list[tuple]:
    """Generate edge-case + random samples for the given input kinds."""
    rng = random.Random(seed)

    edges = []
    for kind in kinds:
        if kind == FACTORS:
            edges.append(contract.factor_sets())
        else:
            edges.append(_edge_values(contract.domain(kind)))

    samples: list[tuple] = list(itertools.product(*edges))

    while len(samples) < count:
        combo = []
        for kind in kinds:
            if kind == FACTORS:
                combo.append(rng.choice(contract.factor_sets()))
            else:
                r = contract.domain(kind)
                combo.append(rng.randint(r.start, r.stop - 1))
        samples.append(tuple(combo))

    return samples
