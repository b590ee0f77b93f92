"""Storefront Favorites Router"""
from fastapi import APIRouter, Depends, HTTPException

from core.favorites import FavoritesStore
from core.routers.deps import get_favorites_store
from .models import ToggleFavoriteRequest

router = APIRouter(tags=["storefront-favorites"])


def format_favorites_response(store: FavoritesStore) -> dict:
    return {
        "items": [item.to_dict() for item in store.items],
        "count": store.count,
    }


@router.get("/favorites")
def get_favorites(store: FavoritesStore = Depends(get_favorites_store)):
    return format_favorites_response(store)


@router.post("/favorites/toggle")
def toggle_favorite(request: ToggleFavoriteRequest, store: FavoritesStore = Depends(get_favorites_store)):
    """Add or remove a product from favorites."""
    try:
        is_favorite = store.toggle(request.product)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    return {**format_favorites_response(store), "is_favorite": is_favorite}


@router.delete("/favorites/{item_id}")
def remove_favorite(item_id: str, store: FavoritesStore = Depends(get_favorites_store)):
    store.remove(item_id)
    return format_favorites_response(store)
