"""Catalog Models - Pydantic models for hosted catalog records."""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.cart.models import CartLine
from storefront.services.money import parse_decimal


class CatalogImage(BaseModel):
    """One image in a category gallery."""
    key: str
    url: str


class Category(BaseModel):
    """Category node with its image gallery."""
    code: str
    images: List[CatalogImage] = Field(default_factory=list)

    @property
    def title(self) -> str:
        return self.code.upper()

    @property
    def image_urls(self) -> List[str]:
        return [image.url for image in self.images]


class Product(BaseModel):
    """Product record."""
    model_config = ConfigDict(extra="ignore")  # Ignore fields the admin tool adds

    id: str
    name: str
    category_code: str
    price: Decimal
    subcategory: str = ""
    category: str = ""
    image_url: str = ""
    warehouse_label: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        # ValueError surfaces as ValidationError, so unpriced records are skipped
        return parse_decimal(v)

    def to_cart_line(self, quantity: int = 1) -> CartLine:
        """Line for this product at its current catalog price."""
        return CartLine(
            product_id=self.id,
            display_name=self.name,
            category_code=self.category_code,
            unit_price=self.price,
            quantity=quantity,
            subcategory_label=self.subcategory,
            primary_category_label=self.category,
            image_ref=self.image_url,
            warehouse_label=self.warehouse_label,
        )
