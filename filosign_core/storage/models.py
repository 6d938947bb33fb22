# filosign_core/storage/models.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class CachedKeyEntry:
    """
    Storage-level representation of a discovered public key.

    The persisted JSON shape uses the camelCase field names shared with the
    browser client: ``{"publicKey": ..., "timestamp": ..., "verified": ...}``.
    ``timestamp`` is milliseconds since the epoch at discovery time.
    """
    public_key: str
    timestamp: int
    verified: bool = True

    def is_expired(self, now_ms: int, ttl_ms: int) -> bool:
        return now_ms - self.timestamp >= ttl_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "publicKey": self.public_key,
            "timestamp": self.timestamp,
            "verified": self.verified,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CachedKeyEntry":
        return cls(
            public_key=data["publicKey"],
            timestamp=int(data["timestamp"]),
            verified=bool(data.get("verified", False)),
        )
