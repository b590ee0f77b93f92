"""
Storefront Cart Router

Every endpoint answers with the full cart so the SPA can re-render the cart
page and the navbar badge from one response.
"""
from fastapi import APIRouter, Depends, HTTPException

from core.cart import CartStore
from core.errors import ERROR_ITEM_NOT_IN_CART
from core.logging import get_logger, safe_id, safe_text
from core.routers.deps import get_cart_store
from core.services.money import format_price, to_json_number
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["storefront-cart"])


def format_cart_response(store: CartStore) -> dict:
    """Build cart response: raw line items plus numeric and display totals."""
    items = []
    for item in store.items:
        unit_price = item.unit_price
        items.append({
            **item.to_dict(),
            "unit_price": to_json_number(unit_price) if unit_price is not None else None,
            "line_total": to_json_number(item.line_total),
            "display_price": format_price(item.price),
        })

    total = store.get_total()
    return {
        "items": items,
        "item_count": store.get_item_count(),
        "total": to_json_number(total),
        "display_total": format_price(total),
    }


@router.get("/cart")
def get_cart(store: CartStore = Depends(get_cart_store)):
    """Get the session's cart."""
    return format_cart_response(store)


@router.post("/cart/items")
def add_to_cart(request: AddToCartRequest, store: CartStore = Depends(get_cart_store)):
    """Add a product to the cart (merges with an existing line)."""
    try:
        store.add_item(request.product, request.quantity)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    return format_cart_response(store)


@router.patch("/cart/items/{item_id}")
def update_cart_item(item_id: str, request: UpdateCartItemRequest, store: CartStore = Depends(get_cart_store)):
    """Set item quantity (0 = remove)."""
    if item_id not in store:
        raise HTTPException(status_code=404, detail=ERROR_ITEM_NOT_IN_CART)
    store.set_quantity(item_id, request.quantity)
    return format_cart_response(store)


@router.post("/cart/items/{item_id}/increment")
def increment_cart_item(item_id: str, store: CartStore = Depends(get_cart_store)):
    if item_id not in store:
        raise HTTPException(status_code=404, detail=ERROR_ITEM_NOT_IN_CART)
    store.increment_quantity(item_id)
    return format_cart_response(store)


@router.post("/cart/items/{item_id}/decrement")
def decrement_cart_item(item_id: str, store: CartStore = Depends(get_cart_store)):
    if item_id not in store:
        raise HTTPException(status_code=404, detail=ERROR_ITEM_NOT_IN_CART)
    store.decrement_quantity(item_id)
    return format_cart_response(store)


@router.delete("/cart/items/{item_id}")
def remove_cart_item(item_id: str, store: CartStore = Depends(get_cart_store)):
    """Remove item from cart; unknown ids are ignored."""
    store.remove_item(item_id)
    logger.debug(f"Removed {safe_id(item_id)} from {safe_text(store.key)}")
    return format_cart_response(store)


@router.delete("/cart")
def clear_cart(store: CartStore = Depends(get_cart_store)):
    store.clear()
    return format_cart_response(store)
