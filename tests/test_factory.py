"""
Factory verification tests.

These test the factory's end-to-end verification:
  - A correct toolkit passes verification.
  - A broken toolkit or a false contract is rejected.
  - Exhaustive verification actually checks all combinations.
"""

import logging
from dataclasses import replace

import pytest

from contracts import (
    BOUND,
    FACTOR,
    VALUE,
    AlgebraicProperty,
    Postcondition,
    build_contract,
)
from factory import DarkFactory, VerificationError, VerificationReport
from integers import I8, I32, NIBBLE, TINY, U8, U64, IntegerType, OverflowStrategy, truncrem
from toolkit import NumberTheory


# ---------------------------------------------------------------------------
# Broken toolkits
# ---------------------------------------------------------------------------

class CanonicalModulus(NumberTheory):
    """'Fixes' modulus into [0, b) - not what the contract promises."""

    def modulus(self, a, b):
        return a % b


class LeakyMultiples(NumberTheory):
    """Keeps the product that equals the bound."""

    def multiples(self, factors, bound):
        out = set()
        for f in factors:
            out.update(f * i for i in range(1, bound // f + 1))
        return sorted(out)


class UnsortedMultiples(NumberTheory):
    def multiples(self, factors, bound):
        return list(reversed(super().multiples(factors, bound)))


# ---------------------------------------------------------------------------
# Factory produces verified toolkits
# ---------------------------------------------------------------------------

class TestFactoryProducesVerified:
    def test_tiny(self):
        """Exhaustive verification on TINY should pass."""
        nt = DarkFactory.create(TINY)
        assert isinstance(nt, NumberTheory)
        assert nt.itype == TINY

    def test_nibble(self):
        nt = DarkFactory.create(NIBBLE)
        assert nt.modulus(2, 5) == 7

    def test_i8(self):
        nt = DarkFactory.create(I8)
        assert nt.modulus(38, 12) == 14
        assert nt.multiples([3, 5], 10) == [3, 5, 6, 9]

    def test_u8(self):
        nt = DarkFactory.create(U8)
        assert nt.sum_of_multiples([2, 5], 20) == 110

    @pytest.mark.parametrize("overflow", [OverflowStrategy.WRAP, OverflowStrategy.CLAMP])
    def test_other_overflow_strategies(self, overflow):
        nt = DarkFactory.create(TINY.with_overflow(overflow))
        assert nt.itype.overflow == overflow

    def test_sampled_wide_type(self):
        """I32 is too wide for brute force; the factory samples instead."""
        nt = DarkFactory.create(I32)
        assert nt.modulus(-7, 5) == 3

    def test_sampled_unsigned_wide_type(self):
        nt = DarkFactory.create(U64)
        assert nt.sum_of_multiples([3, 5], 10) == 23

    def test_custom_type(self):
        nt = DarkFactory.create(IntegerType("small", -20, 30))
        assert nt.itype.hi == 30

    def test_logs_release(self, caplog):
        with caplog.at_level(logging.INFO, logger="factory"):
            DarkFactory.create(NIBBLE)
        assert "released verified toolkit for nibble" in caplog.text


# ---------------------------------------------------------------------------
# Factory rejects broken toolkits
# ---------------------------------------------------------------------------

class TestFactoryRejectsBroken:
    def test_canonical_modulus_rejected(self):
        reports = DarkFactory.verify(CanonicalModulus(TINY), build_contract(TINY))
        failed = {r.property_name for rep in reports for r in rep.results if not r.passed}
        assert "result_correct" in failed
        assert "self_divisor" in failed

    def test_leaky_multiples_rejected(self):
        reports = DarkFactory.verify(LeakyMultiples(TINY), build_contract(TINY))
        multiples_report = next(r for r in reports if r.contract_name == "tiny.multiples")
        assert not multiples_report.passed
        failed = {r.property_name for r in multiples_report.results if not r.passed}
        assert "below_bound" in failed

    def test_unsorted_multiples_rejected(self):
        reports = DarkFactory.verify(UnsortedMultiples(TINY), build_contract(TINY))
        multiples_report = next(r for r in reports if r.contract_name == "tiny.multiples")
        failed = {r.property_name for r in multiples_report.results if not r.passed}
        assert failed == {"strictly_ascending", "complete", "unit_factor"}

    def test_false_property_raises_verification_error(self):
        """Inject a property that should fail and check the factory catches it."""
        contract = build_contract(TINY)
        bad_prop = AlgebraicProperty(
            name="always_zero",
            description="modulus(a, b) == 0",
            kinds=(VALUE, VALUE),
            check=lambda nt, a, b: b == 0 or nt.modulus(a, b) == 0,
        )
        op = contract.operations["modulus"]
        broken = replace(op, properties=[*op.properties, bad_prop])
        contract = replace(contract, operations={**contract.operations, "modulus": broken})

        with pytest.raises(VerificationError) as exc_info:
            DarkFactory.create(TINY, contract)

        report = exc_info.value.report
        assert isinstance(report, VerificationReport)
        assert not report.passed
        failed = [r for r in report.results if not r.passed]
        assert [r.property_name for r in failed] == ["always_zero"]
        assert failed[0].counterexample is not None

    def test_false_postcondition_reports_counterexample(self):
        contract = build_contract(TINY)
        bad_post = Postcondition(
            "canonical",
            "result in [0, b)",
            lambda a, b, result: b < 0 or 0 <= result < b,
        )
        op = contract.operations["modulus"]
        broken = replace(op, postconditions=[*op.postconditions, bad_post])
        contract = replace(contract, operations={**contract.operations, "modulus": broken})

        reports = DarkFactory.verify(NumberTheory(TINY), contract)
        result = next(r for r in reports[0].results if r.property_name == "canonical")
        assert not result.passed
        a, b = result.counterexample
        assert truncrem(a, b) >= 0

    def test_rejection_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="factory"):
            with pytest.raises(VerificationError):
                contract = build_contract(TINY)
                bad = AlgebraicProperty(
                    "never", "never holds", (BOUND,), lambda nt, n: False,
                )
                op = contract.operations["sum_of_multiples"]
                contract = replace(contract, operations={
                    **contract.operations,
                    "sum_of_multiples": replace(op, properties=[bad]),
                })
                DarkFactory.create(TINY, contract)
        assert "rejected" in caplog.text


# ---------------------------------------------------------------------------
# Exhaustive vs sampled
# ---------------------------------------------------------------------------

class TestExhaustiveVerification:
    def test_tiny_modulus_checks_all_pairs(self):
        reports = DarkFactory.verify(NumberTheory(TINY), build_contract(TINY))
        modulus_report = reports[0]
        assert modulus_report.contract_name == "tiny.modulus"
        canonical = next(r for r in modulus_report.results if r.property_name == "canonical_class")
        assert canonical.tests_run == 16 * 16

    def test_unary_property_checks_every_value(self):
        reports = DarkFactory.verify(NumberTheory(NIBBLE), build_contract(NIBBLE))
        unit = next(r for r in reports[0].results if r.property_name == "unit_divisor")
        assert unit.tests_run == 16

    def test_factor_property_is_exhaustive(self):
        contract = build_contract(TINY)
        reports = DarkFactory.verify(NumberTheory(TINY), contract)
        multiples_report = next(r for r in reports if r.contract_name == "tiny.multiples")
        dup = next(r for r in multiples_report.results if r.property_name == "duplicates_ignored")
        assert dup.tests_run == len(contract.domain(FACTOR)) * len(contract.domain(BOUND))

    def test_wide_type_uses_sample_count(self):
        reports = DarkFactory.verify(NumberTheory(I32), build_contract(I32))
        canonical = next(r for r in reports[0].results if r.property_name == "canonical_class")
        assert canonical.tests_run == DarkFactory.SAMPLE_COUNT

    def test_summary_format(self):
        reports = DarkFactory.verify(NumberTheory(TINY), build_contract(TINY))
        summary = reports[0].summary()
        assert summary.startswith("--- tiny.modulus ---")
        assert "[PASS] result_correct" in summary
        assert summary.endswith("=> ALL PASSED")
