"""Cart line model with Decimal-based pricing."""
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from storefront.errors import ERROR_INVALID_QUANTITY
from storefront.services.money import parse_decimal


@dataclass
class CartLine:
    """Single product line in the cart."""
    product_id: str
    display_name: str
    category_code: str
    unit_price: Decimal  # Catalog price at add-time, before bulk tiers
    quantity: int = 1
    subcategory_label: str = ""
    primary_category_label: str = ""
    image_ref: str = ""
    warehouse_label: Optional[str] = None

    def __post_init__(self):
        if not self.product_id or not isinstance(self.product_id, str):
            raise ValueError("product_id must be a non-empty string")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError(ERROR_INVALID_QUANTITY)
        self.unit_price = parse_decimal(self.unit_price)

    @property
    def label(self) -> str:
        """Name used in order messages."""
        return self.warehouse_label or self.display_name

    def copy(self, **changes) -> "CartLine":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert to the persisted record (camelCase keys)."""
        return {
            "productId": self.product_id,
            "displayName": self.display_name,
            "categoryCode": self.category_code,
            "subcategoryLabel": self.subcategory_label,
            "primaryCategoryLabel": self.primary_category_label,
            "unitPrice": str(self.unit_price),
            "imageRef": self.image_ref,
            "warehouseLabel": self.warehouse_label,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """
        Create from a persisted record.

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed
        """
        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"quantity must be an integer, got {quantity!r}")
        return cls(
            product_id=data["productId"],
            display_name=data.get("displayName") or "",
            category_code=data.get("categoryCode") or "",
            unit_price=parse_decimal(data["unitPrice"]),
            quantity=quantity,
            subcategory_label=data.get("subcategoryLabel") or "",
            primary_category_label=data.get("primaryCategoryLabel") or "",
            image_ref=data.get("imageRef") or "",
            warehouse_label=data.get("warehouseLabel") or None,
        )
