"""Cart engine: in-memory lines mirrored to key-value storage."""
import json
from collections import deque
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from storefront import config
from storefront.errors import CartStorageError, ERROR_CART_CORRUPTED, ERROR_INVALID_QUANTITY
from storefront.logging import get_logger, sanitize_for_logging
from storefront.services.money import round_money

from .models import CartLine
from .pricing import BulkPricing
from .storage import CartStorage, JsonFileStorage, MemoryStorage, RedisStorage, StorageKeys

logger = get_logger(__name__)

CartListener = Callable[["CartEngine"], None]


class CartEngine:
    """
    Owns the shopper's cart.

    Features:
    - One line per product; adding an existing product increases its quantity
    - Combined bulk tier pricing, recomputed on every read
    - Full state written to storage after every mutation
    - Listeners called once per mutation, after the write attempt

    Storage failures never propagate: the cart keeps working in memory
    and the next mutation rewrites the whole state.
    """

    def __init__(
        self,
        storage: CartStorage,
        pricing: Optional[BulkPricing] = None,
        storage_key: str = StorageKeys.CART,
    ):
        self.storage = storage
        self.pricing = pricing or BulkPricing(config.BULK_CATEGORY_CODES)
        self.storage_key = storage_key
        self._lines: Dict[str, CartLine] = {}
        self._listeners: List[CartListener] = []
        self._pending_notifications: deque = deque()
        self._notifying = False
        self._synced = True

    # ==================== PERSISTENCE ====================

    def load(self) -> None:
        """Replace in-memory state with the persisted cart. Never raises."""
        try:
            payload = self.storage.get(self.storage_key)
        except CartStorageError as e:
            logger.error(f"Failed to read cart: {e}")
            self._lines = {}
            return

        if not payload:
            self._lines = {}
            return

        try:
            self._lines = self._decode(payload)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"{ERROR_CART_CORRUPTED}, starting empty: {e} "
                f"(payload={sanitize_for_logging(payload)})"
            )
            self._lines = {}

    @staticmethod
    def _decode(payload: str) -> Dict[str, CartLine]:
        records = json.loads(payload)
        if not isinstance(records, list):
            raise TypeError(f"expected a list of cart lines, got {type(records).__name__}")

        lines: Dict[str, CartLine] = {}
        for record in records:
            if not isinstance(record, dict):
                raise TypeError(f"expected a cart line object, got {type(record).__name__}")
            quantity = record.get("quantity")
            if isinstance(quantity, int) and not isinstance(quantity, bool) and quantity <= 0:
                logger.warning(
                    f"Dropping persisted line {sanitize_for_logging(record.get('productId'), 8)} "
                    f"with quantity {quantity}"
                )
                continue
            line = CartLine.from_dict(record)
            existing = lines.get(line.product_id)
            if existing:
                existing.quantity += line.quantity
            else:
                lines[line.product_id] = line
        return lines

    def _encode(self) -> str:
        return json.dumps([line.to_dict() for line in self._lines.values()], ensure_ascii=False)

    def persist(self) -> bool:
        """Write the full cart to storage. Returns False if the write failed."""
        try:
            self.storage.set(self.storage_key, self._encode())
        except CartStorageError as e:
            logger.error(f"Failed to save cart, keeping it in memory: {e}")
            self._synced = False
            return False
        self._synced = True
        return True

    @property
    def is_synced(self) -> bool:
        """Whether the last write reached storage."""
        return self._synced

    def _commit(self) -> None:
        """Persist, then notify listeners."""
        self.persist()
        self._notify()

    # ==================== MUTATIONS ====================

    def add_item(self, line: CartLine) -> None:
        """Add a line, or increase the quantity of the product already in the cart."""
        _check_quantity(line.quantity, minimum=1)
        existing = self._lines.get(line.product_id)
        if existing:
            existing.quantity += line.quantity
        else:
            self._lines[line.product_id] = line.copy()
        self._commit()

    def update_quantity(self, product_id: str, new_quantity: int) -> None:
        """
        Set a line's quantity; zero or less removes the line.

        Raises:
            ValueError: If new_quantity is not an integer (state untouched)
        """
        _check_quantity(new_quantity)
        if new_quantity <= 0:
            self._lines.pop(product_id, None)
        elif product_id in self._lines:
            self._lines[product_id].quantity = new_quantity
        self._commit()

    def remove_item(self, product_id: str) -> None:
        self._lines.pop(product_id, None)
        self._commit()

    def clear(self) -> None:
        self._lines = {}
        self._commit()

    # ==================== QUERIES ====================

    @property
    def lines(self) -> List[CartLine]:
        """Lines in insertion order (copies; edit through the engine)."""
        return [line.copy() for line in self._lines.values()]

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def item_count(self) -> int:
        """Total number of units in the cart."""
        return sum(line.quantity for line in self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def is_in_cart(self, product_id: str) -> bool:
        return product_id in self._lines

    def quantity_of(self, product_id: str) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    def bulk_quantity(self) -> int:
        """Combined quantity of the bulk categories."""
        return self.pricing.combined_quantity(self._lines.values())

    def effective_unit_price(self, line: CartLine) -> Decimal:
        """Price charged per unit for line, after the bulk tier."""
        return self.pricing.unit_price(line, self._lines.values())

    def line_total(self, line: CartLine) -> Decimal:
        return round_money(self.effective_unit_price(line) * line.quantity)

    def total(self) -> Decimal:
        return round_money(sum(
            (self.effective_unit_price(line) * line.quantity for line in self._lines.values()),
            Decimal("0"),
        ))

    # ==================== LISTENERS ====================

    def subscribe(self, callback: CartListener) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unsubscribe(self, callback: CartListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        """
        Queue one notification round and drain the queue.

        A mutation made by a listener is applied at once, but its round
        runs after the current one finishes.
        """
        self._pending_notifications.append(None)
        if self._notifying:
            return

        self._notifying = True
        try:
            while self._pending_notifications:
                self._pending_notifications.popleft()
                for callback in list(self._listeners):
                    try:
                        callback(self)
                    except Exception as e:
                        logger.error(f"Cart listener {callback!r} failed: {e}", exc_info=True)
        finally:
            self._notifying = False


def _check_quantity(quantity, minimum: Optional[int] = None) -> None:
    """Reject anything but a plain integer, before the cart is touched."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValueError(f"{ERROR_INVALID_QUANTITY}, got {quantity!r}")
    if minimum is not None and quantity < minimum:
        raise ValueError(f"{ERROR_INVALID_QUANTITY}, got {quantity!r}")


def create_storage(kind: Optional[str] = None) -> CartStorage:
    """Storage backend named by CART_STORAGE (memory, file or redis)."""
    kind = (kind or config.CART_STORAGE).lower()
    if kind == "memory":
        return MemoryStorage()
    if kind == "file":
        return JsonFileStorage(config.CART_FILE_PATH)
    if kind == "redis":
        return RedisStorage()
    raise ValueError(f"Unknown cart storage: {kind}")


def build_cart_engine(
    storage: Optional[CartStorage] = None,
    bulk_categories: Optional[Iterable[str]] = None,
) -> CartEngine:
    """
    Create an engine and restore the persisted cart.

    Call once per session from the application's entry point and pass the
    engine to whatever needs it.
    """
    pricing = BulkPricing(config.BULK_CATEGORY_CODES if bulk_categories is None else bulk_categories)
    engine = CartEngine(storage or create_storage(), pricing=pricing)
    engine.load()
    logger.info(f"Cart restored with {engine.line_count} line(s)")
    return engine
