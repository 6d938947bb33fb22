"""
filosign_core.key_cache
-----------------------
Address-scoped cache of discovered public keys.

The whole cache is one JSON mapping stored under a single key of the
storage provider::

    { "<lowercased address>": {"publicKey": str, "timestamp": int, "verified": bool} }

Entries are only served while they are verified and younger than the TTL.
Stale or unverified entries are purged when read; nothing sweeps them
proactively.
"""

from __future__ import annotations
import json
from typing import Callable, Dict, Optional

from .constants import CACHE_TTL_MS, PUBLIC_KEY_STORAGE_KEY
from .errors import CacheError, InvalidAddressError
from .logger import get_logger
from .storage.models import CachedKeyEntry
from .storage.provider import StorageProvider
from .utils import canonical_json, format_address, now_ms

log = get_logger("filosign.key_cache")


def _cache_key(address) -> str:
    if not isinstance(address, str) or not address:
        raise InvalidAddressError(address)
    return address.lower()


class KeyDiscoveryCache:
    def __init__(
        self,
        storage: StorageProvider,
        ttl_ms: int = CACHE_TTL_MS,
        clock: Callable[[], int] = now_ms,
        storage_key: str = PUBLIC_KEY_STORAGE_KEY,
    ):
        self.storage = storage
        self.ttl_ms = ttl_ms
        self.clock = clock
        self.storage_key = storage_key

    # ---------------------------
    # Raw mapping access
    # ---------------------------
    def _load(self) -> Dict[str, dict]:
        raw = self.storage.read(self.storage_key)
        if not raw:
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("key cache is not a JSON object")
        return data

    def _save(self, data: Dict[str, dict]) -> None:
        self.storage.write(self.storage_key, canonical_json(data))

    def entries(self) -> Dict[str, CachedKeyEntry]:
        """Every persisted entry as stored, without TTL or trust filtering."""
        return {addr: CachedKeyEntry.from_dict(d) for addr, d in self._load().items()}

    # ---------------------------
    # Public contract
    # ---------------------------
    def get(self, address: str) -> Optional[str]:
        if not isinstance(address, str):
            return None
        key = address.lower()
        try:
            data = self._load()
            raw = data.get(key)
            if raw is None:
                return None

            entry = CachedKeyEntry.from_dict(raw)
            if entry.verified and not entry.is_expired(self.clock(), self.ttl_ms):
                return entry.public_key

            reason = "unverified" if not entry.verified else "expired"
            log.info(f"Evicting {reason} key", extra={"ctx": format_address(key)})
            del data[key]
            self._save(data)
        except Exception as e:
            # read failures degrade to a cache miss
            log.warning(f"Key cache read failed: {e}", extra={"ctx": format_address(key)})
        return None

    def put(self, address: str, public_key: str) -> None:
        key = _cache_key(address)
        entry = CachedKeyEntry(public_key=public_key, timestamp=self.clock(), verified=True)
        try:
            data = self._load()
            data[key] = entry.to_dict()
            self._save(data)
        except Exception as e:
            raise CacheError(f"Failed to cache public key for {key}: {e}") from e

    def remove(self, address: str) -> None:
        key = _cache_key(address)
        try:
            data = self._load()
            if key not in data:
                return
            del data[key]
            self._save(data)
        except Exception as e:
            raise CacheError(f"Failed to remove cached key for {key}: {e}") from e

    def clear(self) -> None:
        try:
            self.storage.delete(self.storage_key)
        except Exception as e:
            raise CacheError(f"Failed to clear key cache: {e}") from e
