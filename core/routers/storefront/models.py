"""
Storefront API Pydantic Models

Request models for cart, favorites and checkout endpoints.
"""
from typing import Any, Dict

from pydantic import BaseModel


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    product: Dict[str, Any]
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    quantity: int  # 0 or less removes the item


# ==================== FAVORITES MODELS ====================

class ToggleFavoriteRequest(BaseModel):
    product: Dict[str, Any]
