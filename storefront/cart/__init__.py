"""Cart package: models, pricing, storage, and engine."""
from .models import CartLine
from .pricing import BULK_TIERS, BulkPricing, bulk_tier_price
from .service import CartEngine, build_cart_engine, create_storage
from .storage import CartStorage, JsonFileStorage, MemoryStorage, RedisStorage, StorageKeys

__all__ = [
    "CartLine",
    "BULK_TIERS",
    "BulkPricing",
    "bulk_tier_price",
    "CartEngine",
    "build_cart_engine",
    "create_storage",
    "CartStorage",
    "JsonFileStorage",
    "MemoryStorage",
    "RedisStorage",
    "StorageKeys",
]
