"""
Redis Client - Upstash REST

Provides the singleton sync Upstash Redis client used by the Redis storage
backend, plus key builders and TTL constants.
"""

from typing import Optional

from upstash_redis import Redis

from core import config


_redis_client: Optional[Redis] = None


def get_redis_sync() -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=config.UPSTASH_REDIS_REST_URL, token=config.UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class StorageKeys:
    """Key builders for per-session storage."""

    @staticmethod
    def cart_key(session_id: str) -> str:
        return f"{config.CART_STORAGE_KEY}:{session_id}"

    @staticmethod
    def favorites_key(session_id: str) -> str:
        return f"{config.FAVORITES_STORAGE_KEY}:{session_id}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    CART = config.CART_TTL_SECONDS
