"""
Storefront Core Module

This package contains the storefront state and infrastructure:
- cart: persisted cart store
- favorites: persisted favorites store
- checkout: order payload building
- storage: key/value persistence backends
- routers: FastAPI endpoints

Note: Imports are lazy so that importing a submodule does not pull in
FastAPI or the Redis client.
"""

__all__ = [
    "CartStore",
    "FavoritesStore",
    "get_storage",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "CartStore":
        from core.cart import CartStore
        return CartStore
    elif name == "FavoritesStore":
        from core.favorites import FavoritesStore
        return FavoritesStore
    elif name == "get_storage":
        from core.storage import get_storage
        return get_storage
    raise AttributeError(f"module 'core' has no attribute '{name}'")
