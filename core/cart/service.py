"""Cart store: line items, quantity arithmetic, totals and persistence."""
import json
from decimal import Decimal
from typing import Any, Callable, List, Mapping, Optional

from core import config
from core.events import Subscribers
from core.exceptions import InvalidQuantityError, StorageError
from core.logging import get_logger, safe_id, safe_text
from core.services.money import round_money, sum_money
from core.storage import KeyValueStorage
from .models import CartLineItem

logger = get_logger(__name__)


def _validate_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantityError(quantity)
    return quantity


class CartStore:
    """
    Authoritative, order-preserving cart for one session.

    The collection is read from storage once, on construction, and the whole
    collection is written back after every mutation. clear() deletes the key
    instead of writing an empty list.

    Consumers get copies from `items`/`get_item` and change the cart only
    through the methods below. Listeners registered with subscribe() receive
    the new item snapshot after each mutation.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = config.CART_STORAGE_KEY,
        placeholder_image: str = config.PLACEHOLDER_IMAGE_URL,
    ):
        self.storage = storage
        self.key = key
        self.placeholder_image = placeholder_image
        self._items: List[CartLineItem] = self._load()
        self._subscribers = Subscribers()

    # ==================== PERSISTENCE ====================

    def _load(self) -> List[CartLineItem]:
        """Hydrate from storage; anything unreadable means an empty cart."""
        try:
            raw = self.storage.get(self.key)
        except StorageError as e:
            logger.error(f"Failed to read cart {safe_text(self.key)}: {e}", exc_info=True)
            return []

        if not raw:
            return []

        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise TypeError(f"expected a list, got {type(records).__name__}")
            items = [CartLineItem.from_dict(record) for record in records]
        except (ValueError, TypeError, AttributeError) as e:
            # Covers JSONDecodeError and InvalidProductError
            logger.warning(f"Corrupted cart data under {safe_text(self.key)}, starting empty: {e}")
            return []

        # Merge duplicate ids left by older writers
        merged: List[CartLineItem] = []
        for item in items:
            existing = next((m for m in merged if m.id == item.id), None)
            if existing:
                existing.quantity += item.quantity
            else:
                merged.append(item)
        return merged

    def _persist(self) -> None:
        try:
            self.storage.set(self.key, json.dumps(self.to_list(), default=str))
        except StorageError as e:
            # Keep the in-memory cart usable; the next mutation retries
            logger.error(f"Failed to persist cart {safe_text(self.key)}: {e}", exc_info=True)

    def _commit(self) -> None:
        self._persist()
        self._subscribers.notify(self.items)

    def _find(self, item_id: Any) -> Optional[CartLineItem]:
        item_id = str(item_id)
        return next((item for item in self._items if item.id == item_id), None)

    # ==================== COMMANDS ====================

    def add_item(self, product: Mapping[str, Any], quantity: int = 1) -> CartLineItem:
        """
        Add a product, merging into the existing line item if present.

        Args:
            product: Catalog product data with an `id` or `_id`
            quantity: Units to add (positive integer)

        Returns:
            Snapshot of the resulting line item

        Raises:
            InvalidProductError: product has no identifier
            InvalidQuantityError: quantity is not a positive integer
        """
        quantity = _validate_quantity(quantity)
        new_item = CartLineItem.from_product(product, quantity, self.placeholder_image)

        existing = self._find(new_item.id)
        if existing:
            existing.quantity = (existing.quantity or 1) + quantity
            result = existing
        else:
            self._items.append(new_item)
            result = new_item

        logger.debug(f"Added {quantity} x {safe_id(result.id)} to {safe_text(self.key)}")
        self._commit()
        return result.copy()

    def remove_item(self, item_id: Any) -> None:
        """Remove a line item; unknown ids are ignored."""
        item_id = str(item_id)
        self._items = [item for item in self._items if item.id != item_id]
        self._commit()

    def set_quantity(self, item_id: Any, quantity: int) -> None:
        """Set an item's quantity; zero or less removes it."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidQuantityError(quantity, expected="an integer")
        if quantity <= 0:
            self.remove_item(item_id)
            return

        item = self._find(item_id)
        if item:
            item.quantity = int(quantity)
        self._commit()

    def increment_quantity(self, item_id: Any) -> None:
        item = self._find(item_id)
        if item:
            item.quantity = (item.quantity or 1) + 1
        self._commit()

    def decrement_quantity(self, item_id: Any) -> None:
        """Decrease by one; an item reaching zero is dropped."""
        item = self._find(item_id)
        if item:
            item.quantity = (item.quantity or 1) - 1
            if item.quantity <= 0:
                self._items = [i for i in self._items if i is not item]
        self._commit()

    def clear(self) -> None:
        """Empty the cart and delete its persisted representation."""
        self._items = []
        try:
            self.storage.delete(self.key)
        except StorageError as e:
            logger.error(f"Failed to delete cart {safe_text(self.key)}: {e}", exc_info=True)
        self._subscribers.notify(self.items)

    # ==================== QUERIES ====================

    @property
    def items(self) -> List[CartLineItem]:
        """Snapshot of the line items in insertion order."""
        return [item.copy() for item in self._items]

    def get_item(self, item_id: Any) -> Optional[CartLineItem]:
        item = self._find(item_id)
        return item.copy() if item else None

    def get_total(self) -> Decimal:
        """Sum of price x quantity, rounded to cents. Never raises."""
        return round_money(sum_money(item.line_total for item in self._items))

    def get_item_count(self) -> int:
        """Total number of units (navbar badge)."""
        return sum(item.quantity or 1 for item in self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def to_list(self) -> List[dict]:
        """Serialized form, as written to storage."""
        return [item.to_dict() for item in self._items]

    def subscribe(self, listener: Callable[[List[CartLineItem]], None]) -> Callable[[], None]:
        """Register a change listener; returns the unsubscribe callable."""
        return self._subscribers.subscribe(listener)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: Any) -> bool:
        return self._find(item_id) is not None

    def __iter__(self):
        return iter(self.items)
