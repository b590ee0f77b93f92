"""
Shared Dependencies for Routers

Every request gets fresh store instances bound to its session; the storage
backend behind them is a process-wide singleton.
"""

import re
import uuid
from typing import Any, Callable, Dict

from fastapi import Depends, Header, HTTPException

from core.cart import CartStore
from core.db import StorageKeys
from core.errors import ERROR_INVALID_SESSION
from core.favorites import FavoritesStore
from core.logging import get_logger, safe_id
from core.storage import KeyValueStorage, get_storage

logger = get_logger(__name__)

DEFAULT_SESSION_ID = "anonymous"
_SESSION_ID_RE = re.compile(r"[A-Za-z0-9_-]{1,64}")

OrderSubmitter = Callable[[Dict[str, Any]], Dict[str, Any]]


def get_session_id(x_session_id: str | None = Header(default=None)) -> str:
    """Session id from the X-Session-Id header."""
    if not x_session_id:
        return DEFAULT_SESSION_ID
    if not _SESSION_ID_RE.fullmatch(x_session_id):
        raise HTTPException(status_code=400, detail=ERROR_INVALID_SESSION)
    return x_session_id


def get_storage_dep() -> KeyValueStorage:
    return get_storage()


def get_cart_store(
    session_id: str = Depends(get_session_id),
    storage: KeyValueStorage = Depends(get_storage_dep),
) -> CartStore:
    return CartStore(storage, key=StorageKeys.cart_key(session_id))


def get_favorites_store(
    session_id: str = Depends(get_session_id),
    storage: KeyValueStorage = Depends(get_storage_dep),
) -> FavoritesStore:
    return FavoritesStore(storage, key=StorageKeys.favorites_key(session_id))


def _record_order(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Default order collaborator: acknowledges the order without payment."""
    order_id = uuid.uuid4().hex
    logger.info(f"Order {safe_id(order_id)} received: total {payload.get('totalPrice')}")
    return {"order_id": order_id, "status": "received", "order": payload}


def get_order_submitter() -> OrderSubmitter:
    """Order submission collaborator (overridden in tests or deployments)."""
    return _record_order
