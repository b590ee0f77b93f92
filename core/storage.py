"""
Key/value persistence for carts and favorites.

Stores hold a single key each and rewrite it wholesale on every mutation,
so a backend only has to get, set and delete whole string values.
"""
import json
import os
import tempfile
from typing import Dict, Optional, Protocol, runtime_checkable

from core import config
from core.exceptions import StorageError
from core.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    """Persistence port used by the stores."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryStorage:
    """Process-local storage. Used in tests and for ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileStorage:
    """
    Storage backed by one JSON object on disk.

    The whole file is re-read on get and rewritten (via a temp file and
    atomic replace) on every set/delete.
    """

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            logger.warning(f"Storage file {self.path} is corrupted, starting empty: {e}")
            return {}
        except OSError as e:
            raise StorageError("read", self.path, e) from e

        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} does not hold an object, starting empty")
            return {}
        return data

    def _dump(self, data: Dict[str, str], key: str, operation: str) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(operation, key, e) from e

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data, key, "set")

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data, key, "delete")


class RedisStorage:
    """Storage on an Upstash Redis client; every write refreshes the TTL."""

    def __init__(self, client, ttl: Optional[int] = None):
        self.client = client
        self.ttl = ttl

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(key)
        except Exception as e:
            raise StorageError("get", key, e) from e

    def set(self, key: str, value: str) -> None:
        try:
            if self.ttl:
                self.client.set(key, value, ex=self.ttl)
            else:
                self.client.set(key, value)
        except Exception as e:
            raise StorageError("set", key, e) from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except Exception as e:
            raise StorageError("delete", key, e) from e


# Singleton instance
_storage: Optional[KeyValueStorage] = None


def create_storage(backend: str) -> KeyValueStorage:
    """Build a storage backend by name (memory, file, redis)."""
    if backend == "memory":
        return InMemoryStorage()
    if backend == "file":
        return JsonFileStorage(config.STORAGE_FILE_PATH)
    if backend == "redis":
        from core.db import get_redis_sync, TTL
        return RedisStorage(get_redis_sync(), ttl=TTL.CART)
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")


def get_storage() -> KeyValueStorage:
    """Get the configured storage backend singleton."""
    global _storage
    if _storage is None:
        _storage = create_storage(config.STORAGE_BACKEND)
        logger.info(f"Storage backend initialized: {config.STORAGE_BACKEND}")
    return _storage
