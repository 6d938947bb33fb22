# filosign_core/storage/__init__.py

from .models import CachedKeyEntry
from .provider import StorageProvider, StorageError
from .providers.memory_provider import InMemoryStorage
from .providers.sqlite_provider import SQLiteStorage
from filosign_core.constants import DEFAULT_STORAGE_PROVIDER, DEFAULT_DB_PATH
import os


def load_storage_provider(config: dict | None = None) -> StorageProvider:
    """
    Factory resolver for selecting the local key store backend.

        - sqlite (default): persisted across restarts
        - memory: process-local, used by tests and throwaway sessions
    """
    config = config or {}
    provider = config.get("provider") or os.getenv("FILOSIGN_STORAGE_PROVIDER", DEFAULT_STORAGE_PROVIDER)

    if provider == "memory":
        return InMemoryStorage()

    if provider == "sqlite":
        db_path = config.get("sqlite_path") or os.getenv("FILOSIGN_DB_PATH", DEFAULT_DB_PATH)
        return SQLiteStorage(db_path)

    raise ValueError(f"Unknown storage provider: {provider}")


__all__ = [
    "CachedKeyEntry",
    "StorageProvider",
    "StorageError",
    "InMemoryStorage",
    "SQLiteStorage",
    "load_storage_provider",
]
