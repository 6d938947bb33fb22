"""
filosign_core.utils
-------------------
Lightweight helpers for timestamps, base64/hex conversion and canonical JSON.
"""

from __future__ import annotations
import base64, json, time
from typing import Any, Dict


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"), validate=True)

def now_ms() -> int:
    # Unix epoch, millisecond precision (matches the persisted cache layout)
    return int(time.time() * 1000)

def strip_0x(value: str) -> str:
    return value[2:] if value[:2].lower() == "0x" else value

def hex_to_bytes(value: str) -> bytes:
    return bytes.fromhex(strip_0x(value))

def bytes_to_hex(value: bytes) -> str:
    return "0x" + value.hex()

def canonical_json(obj: Dict[str, Any]) -> str:
    # Deterministic, minimal JSON for the persisted mapping
    return json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False)

def format_address(address: str) -> str:
    """Shorten a wallet address for display, e.g. ``0x1234...7890``."""
    if len(address) < 10:
        return address
    return f"{address[:6]}...{address[-4:]}"
