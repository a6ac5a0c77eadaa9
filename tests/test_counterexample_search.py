"""Tests for the standalone counterexample search."""

from __future__ import annotations

import pytest

from contracts import build_contract
from integers import NIBBLE, TINY, OverflowStrategy
from toolkit import NumberTheory
from validation.counterexample_search import (
    CONFIGURATIONS,
    run_search,
    search_error_condition_violations,
    search_range_violations,
)


class SilentZeroDivisor(NumberTheory):
    """Returns a sentinel instead of faulting on a zero divisor."""

    def modulus(self, a, b):
        if b == 0:
            return 0
        return super().modulus(a, b)


class UncheckedRange(NumberTheory):
    def modulus(self, a, b):
        return super().modulus(a, b) if self.itype.contains(a) else a


@pytest.mark.parametrize("name, itype", CONFIGURATIONS[:4], ids=[c[0] for c in CONFIGURATIONS[:4]])
def test_configurations_pass(name, itype):
    report = run_search(itype)
    assert report.passed, report.summary()
    assert report.checks_run > 0


def test_summary_reports_clean_run():
    report = run_search(NIBBLE)
    assert "Counterexamples found: 0" in report.summary()


def test_missing_error_detected():
    cxs, checks = search_error_condition_violations(
        SilentZeroDivisor(TINY), build_contract(TINY)
    )
    assert checks > 0
    assert cxs
    assert {cx.category for cx in cxs} == {"missing_error"}
    assert all(cx.inputs[1] == 0 for cx in cxs)


def test_range_violation_detected():
    cxs, _ = search_range_violations(UncheckedRange(TINY), build_contract(TINY))
    assert cxs
    assert all(cx.operation == "modulus" for cx in cxs)


def test_wrap_configuration_has_no_overflow_checks():
    wrapping = TINY.with_overflow(OverflowStrategy.WRAP)
    report = run_search(wrapping)
    assert report.passed, report.summary()
