"""Cart package: line item model and the persisted cart store."""
from .models import CartLineItem, resolve_product_id, resolve_image
from .service import CartStore

__all__ = [
    "CartLineItem",
    "CartStore",
    "resolve_product_id",
    "resolve_image",
]
