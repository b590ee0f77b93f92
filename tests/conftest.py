"""Pytest configuration and fixtures"""
import os
import pytest

# Set test environment variables before core.config is imported
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("PLACEHOLDER_IMAGE_URL", "https://example.com/placeholder.png")
os.environ.setdefault("DEFAULT_CURRENCY", "USD")

from core.cart import CartStore  # noqa: E402
from core.favorites import FavoritesStore  # noqa: E402
from core.storage import InMemoryStorage  # noqa: E402


@pytest.fixture
def memory_storage():
    """Empty in-memory storage"""
    return InMemoryStorage()


@pytest.fixture
def cart_store(memory_storage):
    """Cart store on empty in-memory storage"""
    return CartStore(memory_storage, key="cart")


@pytest.fixture
def favorites_store(memory_storage):
    """Favorites store on empty in-memory storage"""
    return FavoritesStore(memory_storage, key="favorites")


@pytest.fixture
def sample_product():
    """Sample catalog product as served by the products API"""
    return {
        "_id": "665f1c2ab7e4a1d9c0a1b2c3",
        "name": "Hydrating Face Serum",
        "price": "$29.99",
        "images": [
            "https://res.cloudinary.com/demo/image/upload/serum-front.jpg",
            "https://res.cloudinary.com/demo/image/upload/serum-back.jpg",
        ],
        "category": "Skincare",
        "brand": "Glow Lab",
        "countInStock": 12,
    }


@pytest.fixture
def second_product():
    """Product with a numeric price and a single image"""
    return {
        "id": "sunscreen-50",
        "name": "Mineral Sunscreen SPF 50",
        "price": 18.5,
        "image": "https://res.cloudinary.com/demo/image/upload/sunscreen.jpg",
        "category": "Suncare",
    }


@pytest.fixture
def checkout_form_data():
    """Valid checkout form submission"""
    return {
        "email": "jamie@example.com",
        "name": "Jamie Rivera",
        "address": "123 Beauty Street",
        "city": "Cosmetic City",
        "postal_code": "12345",
        "country": "United States",
        "shipping": "express",
    }
