from decimal import Decimal as D

import pytest

from nesthunt.core.brackets import BracketConfigError, bracket
from nesthunt.core.jurisdictions import (
    DEFAULT_JURISDICTION,
    JurisdictionConfig,
    TaxLevel,
    UnknownJurisdictionError,
    get_jurisdiction,
    list_jurisdictions,
    register_jurisdiction,
)
from nesthunt.core.takehome import compute_take_home


def test_registered_codes():
    assert list_jurisdictions() == ["BC", "ON"]
    assert DEFAULT_JURISDICTION == "BC"


def test_lookup_is_case_insensitive_and_defaults():
    assert get_jurisdiction("bc") is get_jurisdiction("BC")
    assert get_jurisdiction(None) is get_jurisdiction("BC")


def test_unknown_jurisdiction_raises():
    with pytest.raises(UnknownJurisdictionError, match="ZZ"):
        get_jurisdiction("ZZ")


def test_reference_configs_are_frozen_tuples():
    bc = get_jurisdiction("BC")
    assert isinstance(bc.federal.brackets, tuple)
    assert isinstance(bc.provincial.brackets, tuple)
    assert bc.provincial.credit_rate is None
    assert bc.provincial.effective_credit_rate == D("0.0506")
    with pytest.raises(AttributeError):
        bc.provincial.basic_personal_amount = D("0")


def test_ontario_differs_from_bc():
    assert compute_take_home(75_000, get_jurisdiction("ON")) != compute_take_home(75_000, get_jurisdiction("BC"))
    assert get_jurisdiction("ON").federal is get_jurisdiction("BC").federal


def test_level_validates_brackets_on_construction():
    with pytest.raises(BracketConfigError):
        TaxLevel(
            name="Broken",
            brackets=(bracket(0, 100, "0.1"), bracket(150, None, "0.2")),
            basic_personal_amount=D("0"),
        )
    with pytest.raises(BracketConfigError, match="basic personal amount"):
        TaxLevel(name="Broken", brackets=(bracket(0, None, "0.1"),), basic_personal_amount=D("-1"))


def test_register_replaces_whole_config():
    original = get_jurisdiction("ON")
    replacement = JurisdictionConfig(
        code="on",
        name="Ontario (revised)",
        tax_year=2026,
        federal=original.federal,
        provincial=original.provincial,
    )
    try:
        register_jurisdiction(replacement)
        assert get_jurisdiction("ON") is replacement
        assert list_jurisdictions() == ["BC", "ON"]
    finally:
        register_jurisdiction(original)
    assert get_jurisdiction("ON") is original
