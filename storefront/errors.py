"""
Storefront errors.

Message constants are shared between log lines and exceptions so the
same failure reads the same everywhere.
"""

# Cart errors
ERROR_CART_EMPTY = "Cart is empty"
ERROR_CART_CORRUPTED = "Corrupted cart data"
ERROR_CART_STORAGE = "Cart storage unavailable"
ERROR_INVALID_QUANTITY = "Quantity must be a positive integer"

# Catalog errors
ERROR_CATALOG_UNAVAILABLE = "Catalog unavailable"
ERROR_CATALOG_NOT_CONFIGURED = "FIREBASE_DATABASE_URL must be set"

# Configuration errors
ERROR_REDIS_NOT_CONFIGURED = "UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set"
ERROR_ORDER_PHONE_NOT_CONFIGURED = "ORDER_PHONE must be set"


class StorefrontError(Exception):
    """
    Base exception for storefront errors.

    Attributes:
        message: Human-readable error message
        details: Optional dict with additional context
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class ConfigurationError(StorefrontError):
    """Raised when a required setting is missing."""
    pass


class CartStorageError(StorefrontError):
    """Raised by storage backends when a read or write fails."""

    def __init__(self, operation: str, key: str, reason: str):
        super().__init__(
            f"{ERROR_CART_STORAGE}: {operation} {key!r} failed: {reason}",
            details={"operation": operation, "key": key},
        )
        self.operation = operation
        self.key = key


class CatalogError(StorefrontError):
    """Raised when the hosted catalog cannot be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"{ERROR_CATALOG_UNAVAILABLE}: {path}: {reason}",
            details={"path": path},
        )
        self.path = path


class EmptyCartError(StorefrontError):
    """Raised when trying to submit an order for an empty cart."""

    def __init__(self):
        super().__init__(ERROR_CART_EMPTY)
