"""Checkout package."""
from .service import (
    CheckoutForm,
    ShippingMethod,
    build_order_items,
    build_order_payload,
    place_order,
)

__all__ = [
    "CheckoutForm",
    "ShippingMethod",
    "build_order_items",
    "build_order_payload",
    "place_order",
]
