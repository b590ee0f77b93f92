"""
FastAPI Routers Package

All routers are included in api/index.py.
"""

from core.routers.storefront import router as storefront_router

__all__ = [
    "storefront_router",
]
