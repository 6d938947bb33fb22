"""
filosign_core.public_key_service
--------------------------------
Discovers a wallet's public key from a signature and caches it.

Discovery protocol:
    1. serve a valid cached key without signing
    2. ask the caller's signer to sign a fresh canonical message
    3. recover the public key from the EIP-191 hash and signature
    4. recover the signing address independently and require it to match
    5. cache the verified key

The signer is supplied per call and never stored on the service.
"""

from __future__ import annotations
import secrets
from typing import Callable, Optional

from .constants import DISCOVERY_MESSAGE_TAG
from .errors import (
    CacheError,
    DiscoveryError,
    InvalidAddressError,
    InvalidPublicKeyError,
    SignatureValidationError,
)
from .key_cache import KeyDiscoveryCache
from .keys import (
    Signature,
    hash_message,
    public_key_to_address,
    recover_address,
    recover_public_key,
    validate_address_format,
    validate_public_key_format,
)
from .logger import get_logger
from .storage import StorageProvider, load_storage_provider
from .utils import format_address, now_ms

log = get_logger("filosign.public_keys")

Signer = Callable[[str], Signature]


class PublicKeyService:
    def __init__(self, cache: Optional[KeyDiscoveryCache] = None, storage: Optional[StorageProvider] = None):
        if cache is None:
            cache = KeyDiscoveryCache(storage or load_storage_provider())
        self.cache = cache

    # ---------------------------
    # Cache management
    # ---------------------------
    def get_public_key(self, address: str) -> Optional[str]:
        return self.cache.get(address)

    def cache_public_key(self, address: str, public_key: str) -> None:
        if not validate_address_format(address):
            raise InvalidAddressError(address)
        if not validate_public_key_format(public_key):
            raise InvalidPublicKeyError(public_key)
        self.cache.put(address, public_key)

    def remove_cached_key(self, address: str) -> None:
        self.cache.remove(address)

    def clear_all_cached_keys(self) -> None:
        self.cache.clear()

    # ---------------------------
    # Discovery
    # ---------------------------
    def discover_public_key(self, address: str, signer: Signer) -> str:
        if not validate_address_format(address):
            raise InvalidAddressError(address)

        cached = self.cache.get(address)
        if cached:
            log.info("Using cached public key", extra={"ctx": format_address(address)})
            return cached

        message = self.generate_standard_message(address)
        log.info("Requesting discovery signature", extra={"ctx": format_address(address)})
        try:
            signature = signer(message)
        except Exception as e:
            raise DiscoveryError(f"Public key discovery failed: {e}") from e

        try:
            message_hash = hash_message(message)
            public_key = recover_public_key(message_hash, signature)
            signer_address = recover_address(message, signature)
        except Exception as e:
            raise DiscoveryError(f"Public key discovery failed: {e}") from e

        if signer_address.lower() != address.lower():
            log.warning(
                f"Signature was produced by {format_address(signer_address)}",
                extra={"ctx": format_address(address)},
            )
            raise SignatureValidationError(
                "Signature validation failed: signature was not produced by the requested wallet"
            )

        if not validate_public_key_format(public_key):
            raise DiscoveryError("Public key discovery failed: recovered key is malformed")
        if public_key_to_address(public_key).lower() != address.lower():
            raise SignatureValidationError(
                "Signature validation failed: recovered public key does not belong to the requested wallet"
            )

        try:
            self.cache.put(address, public_key)
        except CacheError as e:
            # key is verified; only persistence failed
            log.warning(f"Discovered key not cached: {e}", extra={"ctx": format_address(address)})

        log.info("Public key discovered", extra={"ctx": format_address(address)})
        return public_key

    @staticmethod
    def generate_standard_message(address: str) -> str:
        return (
            f"{DISCOVERY_MESSAGE_TAG}\n\n"
            "Sign this message to share your public key for encrypted documents.\n"
            "This request does not trigger a blockchain transaction or cost any fees.\n\n"
            f"Address: {address}\n"
            f"timestamp: {now_ms()}\n"
            f"nonce: {secrets.token_hex(8)}"
        )
