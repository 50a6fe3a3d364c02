"""
Xepi Storefront Core

- cart: cart engine with bulk tier pricing and key-value persistence
- services.catalog: hosted catalog reads
- services.orders: order message and WhatsApp link
- db: Redis and HTTP clients

Note: Imports are lazy so that importing a submodule does not pull in
every backend.
"""

__all__ = [
    "CartEngine",
    "CartLine",
    "build_cart_engine",
    "CatalogService",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name in ("CartEngine", "CartLine", "build_cart_engine"):
        from storefront import cart
        return getattr(cart, name)
    elif name == "CatalogService":
        from storefront.services.catalog import CatalogService
        return CatalogService
    raise AttributeError(f"module 'storefront' has no attribute '{name}'")
