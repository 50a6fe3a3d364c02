"""Pytest configuration and fixtures"""
import os
from decimal import Decimal
from unittest.mock import Mock

import pytest

# Set test environment variables before storefront.config is imported
os.environ.setdefault("CART_STORAGE", "memory")
os.environ.setdefault("BULK_CATEGORY_CODES", "cuadros,rotulos")
os.environ.setdefault("FIREBASE_DATABASE_URL", "https://xepi-test.firebaseio.com")
os.environ.setdefault("ORDER_PHONE", "+502 5555-0100")
os.environ.setdefault("CURRENCY_SYMBOL", "Q")

from storefront.cart import BulkPricing, CartEngine, CartLine, MemoryStorage  # noqa: E402
from storefront.errors import CartStorageError  # noqa: E402

BULK_A = "cuadros"
BULK_B = "rotulos"
OTHER = "juguetes"


@pytest.fixture
def memory_storage():
    """Empty in-memory storage"""
    return MemoryStorage()


@pytest.fixture
def engine(memory_storage):
    """Cart engine over in-memory storage with the two bulk categories"""
    return CartEngine(memory_storage, pricing=BulkPricing([BULK_A, BULK_B]))


@pytest.fixture
def failing_storage():
    """Storage whose every call fails"""
    storage = Mock()
    storage.get.side_effect = CartStorageError("get", "cart:items", "connection refused")
    storage.set.side_effect = CartStorageError("set", "cart:items", "connection refused")
    storage.delete.side_effect = CartStorageError("delete", "cart:items", "connection refused")
    return storage


@pytest.fixture
def make_line():
    """Factory for cart lines with sensible defaults"""
    def _make(product_id="prod-1", category_code=OTHER, quantity=1, unit_price="10.00", **kwargs):
        return CartLine(
            product_id=product_id,
            display_name=kwargs.pop("display_name", f"Product {product_id}"),
            category_code=category_code,
            unit_price=Decimal(unit_price),
            quantity=quantity,
            **kwargs,
        )
    return _make


@pytest.fixture
def sample_product():
    """Sample product record as stored in the catalog"""
    return {
        "name": "Atardecer en el lago",
        "price": 40,
        "subcategory": "Cuadros 20x30",
        "category": "Cuadros",
        "image_url": "https://example.com/atardecer.jpg",
        "warehouse_label": "CU-014",
    }
