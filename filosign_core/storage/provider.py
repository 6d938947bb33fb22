# filosign_core/storage/provider.py
from __future__ import annotations
from typing import Optional


class StorageError(Exception):
    """Raised by providers when the backing store is unavailable."""


class StorageProvider:
    """
    Minimal key/value contract used by the key discovery cache.

    Each value is an opaque string (the cache stores one JSON document under
    a single fixed key). Providers raise StorageError, or let the backend's
    own exception propagate, when the store cannot be reached.
    """
    name: str = "base"

    def read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def write(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        return
