"""Key-value backends the cart is mirrored to."""
import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from storefront.db import StorageKeys, get_redis_sync
from storefront.errors import CartStorageError

__all__ = [
    "CartStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "RedisStorage",
    "StorageKeys",
]


class CartStorage(Protocol):
    """
    Minimal key-value contract.

    Implementations raise CartStorageError for any backend failure.
    """

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage, for tests and previews."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStorage:
    """
    Local key-value file, the device-side store for the cart.

    The whole file is one JSON object of string values. Writes go to a
    temporary file that replaces the original, so a crash mid-write leaves
    the previous contents intact.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise CartStorageError("read", str(self.path), str(e)) from e

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CartStorageError("read", str(self.path), f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CartStorageError("read", str(self.path), "expected a JSON object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".cart-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise CartStorageError("write", str(self.path), str(e)) from e

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except CartStorageError:
            # Unreadable file is overwritten
            data = {}
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class RedisStorage:
    """Upstash Redis backend, for carts shared between a shopper's devices."""

    def __init__(self, redis=None, ttl_seconds: Optional[int] = None):
        self._redis = redis  # Lazy initialization
        self.ttl_seconds = ttl_seconds

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis_sync()
        return self._redis

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(key)
        except Exception as e:
            raise CartStorageError("get", key, str(e)) from e
        if value is None:
            return None
        # upstash-redis may hand back an already decoded JSON value
        return value if isinstance(value, str) else json.dumps(value)

    def set(self, key: str, value: str) -> None:
        try:
            if self.ttl_seconds:
                self.redis.set(key, value, ex=self.ttl_seconds)
            else:
                self.redis.set(key, value)
        except Exception as e:
            raise CartStorageError("set", key, str(e)) from e

    def delete(self, key: str) -> None:
        try:
            self.redis.delete(key)
        except Exception as e:
            raise CartStorageError("delete", key, str(e)) from e
