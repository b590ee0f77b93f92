"""Cart line item model."""
import copy
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from core.exceptions import InvalidProductError
from core.services.money import parse_price, multiply

# Source catalogs use either field for the product identifier
ID_FIELDS = ("id", "_id")

# Fields owned by the line item itself; everything else is passed through
LINE_ITEM_FIELDS = ("id", "_id", "name", "price", "image", "quantity")


def resolve_product_id(product: Mapping[str, Any]) -> str:
    """Return the canonical identifier: `id` if set, else `_id`."""
    for id_field in ID_FIELDS:
        value = product.get(id_field)
        if value is not None and str(value).strip():
            return str(value)
    raise InvalidProductError()


def resolve_image(product: Mapping[str, Any], placeholder: str) -> str:
    """First entry of `images`, then `image`, then the placeholder."""
    images = product.get("images")
    if isinstance(images, (list, tuple)) and images and images[0]:
        return images[0]
    image = product.get("image")
    if image:
        return image
    return placeholder


@dataclass
class CartLineItem:
    """One distinct product in the cart."""
    id: str
    name: str = ""
    price: Any = None  # number or display string such as "$10.00"
    image: str = ""
    quantity: int = 1
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.id = str(self.id)

    @property
    def unit_price(self) -> Optional[Decimal]:
        """Numeric price, or None when the stored price is unreadable."""
        return parse_price(self.price)

    @property
    def line_total(self) -> Decimal:
        """Price times quantity; unreadable prices count as zero."""
        unit_price = self.unit_price
        if unit_price is None:
            return Decimal("0")
        return multiply(unit_price, self.quantity or 1)

    def copy(self) -> "CartLineItem":
        return CartLineItem(
            id=self.id,
            name=self.name,
            price=self.price,
            image=self.image,
            quantity=self.quantity,
            extra=copy.deepcopy(self.extra),
        )

    def to_dict(self) -> dict:
        """Serialize with the identifier written to both `id` and `_id`."""
        data = dict(self.extra)
        data.update({
            "id": self.id,
            "_id": self.id,
            "name": self.name,
            "price": str(self.price) if isinstance(self.price, Decimal) else self.price,
            "image": self.image,
            "quantity": self.quantity,
        })
        return data

    @classmethod
    def from_product(cls, product: Mapping[str, Any], quantity: int, placeholder: str) -> "CartLineItem":
        """Create a new line item from catalog product data."""
        return cls(
            id=resolve_product_id(product),
            name=product.get("name") or "",
            price=product.get("price"),
            image=resolve_image(product, placeholder),
            quantity=quantity,
            extra={k: copy.deepcopy(v) for k, v in product.items() if k not in LINE_ITEM_FIELDS},
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartLineItem":
        """
        Create from a persisted record.

        Raises ValueError/TypeError on records that cannot be a line item.
        """
        quantity = data.get("quantity")
        if quantity is None:
            quantity = 1
        elif isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"stored quantity must be an integer, got {quantity!r}")
        if quantity < 1:
            raise ValueError(f"stored quantity must be positive, got {quantity}")
        return cls(
            id=resolve_product_id(data),
            name=data.get("name") or "",
            price=data.get("price"),
            image=data.get("image") or "",
            quantity=quantity,
            extra={k: v for k, v in data.items() if k not in LINE_ITEM_FIELDS},
        )
