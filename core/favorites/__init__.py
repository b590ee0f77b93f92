"""Favorites package."""
from .service import FavoriteItem, FavoritesStore

__all__ = ["FavoriteItem", "FavoritesStore"]
