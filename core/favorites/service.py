"""Favorites store: products a shopper has hearted, persisted per session."""
import json
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional

from core import config
from core.cart.models import resolve_image, resolve_product_id
from core.events import Subscribers
from core.exceptions import StorageError
from core.logging import get_logger, safe_id, safe_text
from core.storage import KeyValueStorage

logger = get_logger(__name__)


@dataclass
class FavoriteItem:
    """Display fields kept for a favorited product."""
    id: str
    name: str = ""
    price: Any = None
    image: str = ""
    category: Optional[str] = None
    brand: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "_id": self.id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "category": self.category,
            "brand": self.brand,
        }

    @classmethod
    def from_product(cls, product: Mapping[str, Any], placeholder: str) -> "FavoriteItem":
        return cls(
            id=resolve_product_id(product),
            name=product.get("name") or "",
            price=product.get("price"),
            image=resolve_image(product, placeholder),
            category=product.get("category"),
            brand=product.get("brand"),
        )


class FavoritesStore:
    """
    Ordered set of favorite products.

    Same persistence contract as the cart store: read once, rewritten after
    every change, listeners notified with the new snapshot.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = config.FAVORITES_STORAGE_KEY,
        placeholder_image: str = config.PLACEHOLDER_IMAGE_URL,
    ):
        self.storage = storage
        self.key = key
        self.placeholder_image = placeholder_image
        self._items: List[FavoriteItem] = self._load()
        self._subscribers = Subscribers()

    def _load(self) -> List[FavoriteItem]:
        try:
            raw = self.storage.get(self.key)
        except StorageError as e:
            logger.error(f"Failed to read favorites {safe_text(self.key)}: {e}", exc_info=True)
            return []
        if not raw:
            return []

        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise TypeError(f"expected a list, got {type(records).__name__}")
            items = [FavoriteItem.from_product(record, self.placeholder_image) for record in records]
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Corrupted favorites data under {safe_text(self.key)}, starting empty: {e}")
            return []

        unique: List[FavoriteItem] = []
        for item in items:
            if all(existing.id != item.id for existing in unique):
                unique.append(item)
        return unique

    def _commit(self) -> None:
        try:
            self.storage.set(self.key, json.dumps([item.to_dict() for item in self._items], default=str))
        except StorageError as e:
            logger.error(f"Failed to persist favorites {safe_text(self.key)}: {e}", exc_info=True)
        self._subscribers.notify(self.items)

    def add(self, product: Mapping[str, Any]) -> FavoriteItem:
        """Add a product; already-favorited products are left as they are."""
        item = FavoriteItem.from_product(product, self.placeholder_image)
        if not self.contains(item.id):
            self._items.append(item)
            logger.debug(f"Favorited {safe_id(item.id)} in {safe_text(self.key)}")
        self._commit()
        return item

    def remove(self, item_id: Any) -> None:
        item_id = str(item_id)
        self._items = [item for item in self._items if item.id != item_id]
        self._commit()

    def toggle(self, product: Mapping[str, Any]) -> bool:
        """Flip favorite state; returns True when the product is now a favorite."""
        item_id = resolve_product_id(product)
        if self.contains(item_id):
            self.remove(item_id)
            return False
        self.add(product)
        return True

    def contains(self, item_id: Any) -> bool:
        item_id = str(item_id)
        return any(item.id == item_id for item in self._items)

    def clear(self) -> None:
        self._items = []
        try:
            self.storage.delete(self.key)
        except StorageError as e:
            logger.error(f"Failed to delete favorites {safe_text(self.key)}: {e}", exc_info=True)
        self._subscribers.notify(self.items)

    @property
    def items(self) -> List[FavoriteItem]:
        return [FavoriteItem(**vars(item)) for item in self._items]

    @property
    def count(self) -> int:
        return len(self._items)

    def subscribe(self, listener: Callable[[List[FavoriteItem]], None]) -> Callable[[], None]:
        return self._subscribers.subscribe(listener)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: Any) -> bool:
        return self.contains(item_id)
