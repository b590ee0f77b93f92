"""
Storefront Checkout Router

Order placement itself belongs to the orders service; this endpoint builds
the payload from the cart, hands it to the submitter and clears the cart.
"""
from fastapi import APIRouter, Depends, HTTPException

from core.cart import CartStore
from core.checkout import CheckoutForm, place_order
from core.errors import ERROR_ORDER_SUBMIT_FAILED
from core.exceptions import EmptyCartError
from core.logging import get_logger
from core.routers.deps import OrderSubmitter, get_cart_store, get_order_submitter

logger = get_logger(__name__)

router = APIRouter(tags=["storefront-checkout"])


@router.post("/checkout")
def checkout(
    form: CheckoutForm,
    store: CartStore = Depends(get_cart_store),
    submit: OrderSubmitter = Depends(get_order_submitter),
):
    """Place an order for everything in the cart."""
    try:
        return place_order(store, form, submit)
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to place order: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail=ERROR_ORDER_SUBMIT_FAILED)
