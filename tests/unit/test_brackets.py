from decimal import Decimal as D

import hypothesis.strategies as st
import pytest
from hypothesis import given

from nesthunt.core.brackets import (
    BracketConfigError,
    TaxBracket,
    bracket,
    compute_bracket_tax,
    validate_brackets,
)
from nesthunt.core.jurisdictions.bc2025 import BC_BRACKETS_2025
from nesthunt.core.jurisdictions.federal2025 import FEDERAL_BRACKETS_2025

_incomes = st.integers(min_value=0, max_value=1_000_000).map(D)


def test_zero_income_pays_nothing():
    assert compute_bracket_tax(D("0"), FEDERAL_BRACKETS_2025) == D("0")
    assert compute_bracket_tax(D("0"), BC_BRACKETS_2025) == D("0")


def test_federal_gross_for_75000_spans_two_brackets():
    tax = compute_bracket_tax(D("75000"), FEDERAL_BRACKETS_2025)
    assert tax == D("57375") * D("0.15") + D("17625") * D("0.205")
    assert tax == D("12219.375")


def test_income_in_unbounded_bracket_accumulates_every_bracket():
    tax = compute_bracket_tax(D("300000"), FEDERAL_BRACKETS_2025)
    expected = (
        D("57375") * D("0.15")
        + (D("114750") - D("57375")) * D("0.205")
        + (D("158468") - D("114750")) * D("0.26")
        + (D("220000") - D("158468")) * D("0.29")
        + (D("300000") - D("220000")) * D("0.33")
    )
    assert tax == expected


@pytest.mark.parametrize("boundary", [b.upper for b in FEDERAL_BRACKETS_2025 if b.upper is not None])
def test_federal_boundary_has_no_jump(boundary):
    at_boundary = compute_bracket_tax(boundary, FEDERAL_BRACKETS_2025)
    lower_sum = sum(
        ((b.upper - b.lower) * b.rate for b in FEDERAL_BRACKETS_2025 if b.upper is not None and b.upper <= boundary),
        D("0"),
    )
    assert at_boundary == lower_sum
    # the next dollar is taxed at the next bracket's rate only
    following = next(b for b in FEDERAL_BRACKETS_2025 if b.lower == boundary)
    assert compute_bracket_tax(boundary + 1, FEDERAL_BRACKETS_2025) - at_boundary == following.rate


def test_bc_first_bracket_edge():
    first = compute_bracket_tax(D("47937"), BC_BRACKETS_2025)
    assert first == D("47937") * D("0.0506")
    assert compute_bracket_tax(D("47938"), BC_BRACKETS_2025) == first + D("0.077")


def test_negative_income_floors_at_zero():
    assert compute_bracket_tax(D("-100"), BC_BRACKETS_2025) == D("0")


@given(_incomes, _incomes)
def test_bracket_tax_is_monotonic(a, b):
    low, high = sorted((a, b))
    assert compute_bracket_tax(low, FEDERAL_BRACKETS_2025) <= compute_bracket_tax(high, FEDERAL_BRACKETS_2025)
    assert compute_bracket_tax(low, BC_BRACKETS_2025) <= compute_bracket_tax(high, BC_BRACKETS_2025)


@given(_incomes)
def test_bracket_tax_is_repeatable(income):
    assert compute_bracket_tax(income, BC_BRACKETS_2025) == compute_bracket_tax(income, BC_BRACKETS_2025)


def test_validate_accepts_reference_tables():
    assert validate_brackets(list(FEDERAL_BRACKETS_2025)) == FEDERAL_BRACKETS_2025


@pytest.mark.parametrize(
    "table, message",
    [
        ((), "empty"),
        ((bracket(100, None, "0.1"),), "start at 0"),
        ((bracket(0, 100, "0.1"), bracket(120, None, "0.2")), "expected 100"),
        ((bracket(0, 100, "0.1"), bracket(90, None, "0.2")), "expected 100"),
        ((bracket(0, None, "0.1"), bracket(100, None, "0.2")), "Only the last"),
        ((bracket(0, 100, "0.1"),), "must be unbounded"),
        ((bracket(0, 100, "-0.1"), bracket(100, None, "0.2")), "negative rate"),
        ((TaxBracket(D("0"), D("0"), D("0.1")), bracket(0, None, "0.2")), "must exceed"),
    ],
)
def test_validate_rejects_malformed_tables(table, message):
    with pytest.raises(BracketConfigError, match=message):
        validate_brackets(table)
