"""Tests for combined bulk tier pricing"""
from decimal import Decimal

import pytest

from storefront.cart import BulkPricing, bulk_tier_price
from tests.conftest import BULK_A, BULK_B, OTHER


@pytest.mark.parametrize("combined, expected", [
    (1, "35.00"),
    (2, "30.00"),
    (4, "30.00"),
    (5, "25.00"),
    (10, "25.00"),
])
def test_tier_thresholds(combined, expected):
    """Each combined quantity lands on its tier price"""
    assert bulk_tier_price(combined) == Decimal(expected)


@pytest.mark.parametrize("quantity, expected", [
    (1, "35.00"),
    (2, "30.00"),
    (4, "30.00"),
    (5, "25.00"),
    (10, "25.00"),
])
def test_single_bulk_line_uses_tier(engine, make_line, quantity, expected):
    """A lone bulk line ignores its catalog price"""
    engine.add_item(make_line("a", category_code=BULK_A, quantity=quantity, unit_price="99.00"))

    line = engine.lines[0]
    assert engine.effective_unit_price(line) == Decimal(expected)


def test_tier_is_shared_across_bulk_categories(engine, make_line):
    """Adding one unit of the other bulk category reprices the existing line"""
    engine.add_item(make_line("a", category_code=BULK_A, quantity=4))
    bulk_a = engine.lines[0]
    assert engine.effective_unit_price(bulk_a) == Decimal("30.00")

    engine.add_item(make_line("b", category_code=BULK_B, quantity=1))

    assert engine.bulk_quantity() == 5
    for line in engine.lines:
        assert engine.effective_unit_price(line) == Decimal("25.00")


def test_tier_drops_after_removal(engine, make_line):
    """Removing bulk units recomputes the tier from what is left"""
    engine.add_item(make_line("a", category_code=BULK_A, quantity=4))
    engine.add_item(make_line("b", category_code=BULK_B, quantity=1))

    engine.remove_item("b")

    assert engine.effective_unit_price(engine.lines[0]) == Decimal("30.00")

    engine.update_quantity("a", 1)

    assert engine.effective_unit_price(engine.lines[0]) == Decimal("35.00")


@pytest.mark.parametrize("quantity", [1, 3, 50])
def test_other_categories_keep_catalog_price(engine, make_line, quantity):
    """Non-bulk lines are never discounted"""
    engine.add_item(make_line("a", category_code=BULK_A, quantity=6))
    engine.add_item(make_line("c", category_code=OTHER, quantity=quantity, unit_price="12.40"))

    other = next(line for line in engine.lines if line.product_id == "c")
    assert engine.effective_unit_price(other) == Decimal("12.40")


def test_other_categories_do_not_count_toward_tier(engine, make_line):
    engine.add_item(make_line("a", category_code=BULK_A, quantity=1))
    engine.add_item(make_line("c", category_code=OTHER, quantity=20))

    assert engine.bulk_quantity() == 1
    assert engine.effective_unit_price(engine.lines[0]) == Decimal("35.00")


def test_custom_tiers_are_sorted():
    pricing = BulkPricing([BULK_A], tiers=[(1, Decimal("9")), (3, Decimal("7"))])

    assert pricing.tiers[0] == (3, Decimal("7"))


def test_empty_tiers_rejected():
    with pytest.raises(ValueError):
        BulkPricing([BULK_A], tiers=[])
