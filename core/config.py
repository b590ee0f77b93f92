"""Storefront configuration read from environment variables."""
import os
from typing import List


def _get_int(name: str, default: int) -> int:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    return int(value)


def _get_list(name: str, default: str) -> List[str]:
    value = os.environ.get(name, default)
    return [part.strip() for part in value.split(",") if part.strip()]


# Storage keys (a session suffix is appended by the API layer)
CART_STORAGE_KEY = os.environ.get("CART_STORAGE_KEY", "cart")
FAVORITES_STORAGE_KEY = os.environ.get("FAVORITES_STORAGE_KEY", "favorites")

# Shown for products that come without any image
PLACEHOLDER_IMAGE_URL = os.environ.get(
    "PLACEHOLDER_IMAGE_URL",
    "https://via.placeholder.com/300x200?text=No+Image",
)

DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "USD")

# Persistence backend: memory | file | redis
STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "memory").strip().lower()
STORAGE_FILE_PATH = os.environ.get("STORAGE_FILE_PATH", os.path.join("data", "storage.json"))

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

CART_TTL_SECONDS = _get_int("CART_TTL_SECONDS", 2592000)  # 30 days

CORS_ORIGINS = _get_list("CORS_ORIGINS", "*")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
PRODUCTION = os.environ.get("PRODUCTION") == "1"
