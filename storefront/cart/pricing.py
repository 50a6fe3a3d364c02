"""
Combined bulk tier pricing.

Lines in the bulk categories share one tier, selected by the sum of their
quantities. Every bulk line is charged the tier price per unit, whatever
its own quantity or catalog price. Other lines keep their catalog price.

Example with 4 units of one bulk category and 1 of the other:
    T = 5 -> every bulk unit costs 25.00
"""
from decimal import Decimal
from typing import Iterable, Sequence, Tuple

from .models import CartLine

# (minimum combined quantity, unit price), highest threshold first
BULK_TIERS: Tuple[Tuple[int, Decimal], ...] = (
    (5, Decimal("25.00")),
    (2, Decimal("30.00")),
    (1, Decimal("35.00")),
)


def bulk_tier_price(combined_quantity: int, tiers: Sequence[Tuple[int, Decimal]] = BULK_TIERS) -> Decimal:
    """Unit price for the tier reached by combined_quantity."""
    for min_quantity, unit_price in tiers:
        if combined_quantity >= min_quantity:
            return unit_price
    return tiers[-1][1]


class BulkPricing:
    """Prices cart lines against the combined bulk tier."""

    def __init__(self, bulk_categories: Iterable[str], tiers: Sequence[Tuple[int, Decimal]] = BULK_TIERS):
        self.bulk_categories = frozenset(bulk_categories)
        self.tiers = tuple(sorted(tiers, key=lambda t: t[0], reverse=True))
        if not self.tiers:
            raise ValueError("at least one price tier is required")

    def is_bulk(self, line: CartLine) -> bool:
        return line.category_code in self.bulk_categories

    def combined_quantity(self, lines: Iterable[CartLine]) -> int:
        """Sum of quantities over all bulk lines (the tier driver)."""
        return sum(line.quantity for line in lines if self.is_bulk(line))

    def unit_price(self, line: CartLine, lines: Iterable[CartLine]) -> Decimal:
        """Effective unit price of line given every line currently in the cart."""
        if not self.is_bulk(line):
            return line.unit_price
        return bulk_tier_price(self.combined_quantity(lines), self.tiers)
