"""Checkout: turn the cart into an order payload and clear it on success."""
from enum import Enum
from typing import Any, Callable, Dict, List, TypeVar

from pydantic import BaseModel, Field, field_validator

from core.cart import CartStore
from core.exceptions import EmptyCartError
from core.logging import get_logger, safe_text
from core.services.money import to_float, to_json_number

logger = get_logger(__name__)

T = TypeVar("T")


class ShippingMethod(str, Enum):
    """Shipping options offered at checkout."""
    STANDARD = "standard"
    EXPRESS = "express"


class CheckoutForm(BaseModel):
    """Shopper details collected on the checkout page."""
    email: str = Field(..., min_length=3, max_length=254)
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=200)
    postal_code: str | None = None
    country: str | None = None
    shipping: ShippingMethod = ShippingMethod.STANDARD
    payment_method: str = "Credit Card"

    @field_validator("email", "name", "address", "city", mode="before")
    @classmethod
    def strip_required(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("email must look like name@example.com")
        return v


def build_order_items(store: CartStore) -> List[Dict[str, Any]]:
    """Order line entries in the shape the orders API stores."""
    items = []
    for item in store.items:
        unit_price = item.unit_price
        items.append({
            "product": item.id,
            "name": item.name,
            "qty": item.quantity,
            "image": item.image,
            "price": to_float(unit_price) if unit_price is not None else 0.0,
        })
    return items


def build_order_payload(store: CartStore, form: CheckoutForm) -> Dict[str, Any]:
    """
    Build the order submission payload from the current cart.

    Args:
        store: Cart to check out
        form: Validated checkout form

    Returns:
        Payload dict for the orders API

    Raises:
        EmptyCartError: cart has no items
    """
    if store.is_empty:
        raise EmptyCartError()

    return {
        "orderItems": build_order_items(store),
        "shippingAddress": {
            "address": form.address,
            "city": form.city,
            "postalCode": form.postal_code,
            "country": form.country,
        },
        "shippingMethod": form.shipping.value,
        "paymentMethod": form.payment_method,
        "customer": {"name": form.name, "email": form.email},
        "itemCount": store.get_item_count(),
        "totalPrice": to_json_number(store.get_total()),
    }


def place_order(store: CartStore, form: CheckoutForm, submit: Callable[[Dict[str, Any]], T]) -> T:
    """
    Submit the cart as an order and clear it once submission succeeds.

    Errors raised by `submit` propagate and leave the cart untouched.
    """
    payload = build_order_payload(store, form)
    result = submit(payload)
    store.clear()
    logger.info(
        f"Order placed for cart {safe_text(store.key)}: "
        f"{payload['itemCount']} items, total {payload['totalPrice']}"
    )
    return result
