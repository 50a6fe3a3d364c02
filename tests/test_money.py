"""Tests for money helpers"""
from decimal import Decimal

import pytest

from storefront.services.money import format_money, parse_decimal, round_money, to_decimal


def test_to_decimal_is_lenient():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(None) == Decimal("0")
    assert to_decimal("abc") == Decimal("0")


@pytest.mark.parametrize("value", [None, "abc", True, "NaN", "Infinity", [1]])
def test_parse_decimal_is_strict(value):
    with pytest.raises(ValueError):
        parse_decimal(value)


def test_round_and_format():
    assert round_money("2.345") == Decimal("2.35")
    assert format_money(Decimal("1250")) == "Q1,250.00"
    assert format_money(25, "$") == "$25.00"
