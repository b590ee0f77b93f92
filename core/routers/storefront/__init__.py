"""Storefront API Router.

Combines the cart, favorites and checkout sub-routers under /api/storefront.
"""

from fastapi import APIRouter

from .cart import router as cart_router
from .checkout import router as checkout_router
from .favorites import router as favorites_router

router = APIRouter(prefix="/api/storefront", tags=["storefront"])

router.include_router(cart_router)
router.include_router(favorites_router)
router.include_router(checkout_router)

__all__ = ["router"]
