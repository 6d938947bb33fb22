"""
FiloSign Core Package
=====================
Key discovery and document encryption shared by the FiloSign clients.

Provides:
- Public key discovery from wallet signatures, with an address-scoped cache
- Dual-access document encryption (two public keys, no stored identities)
- Pluggable local storage interface (SQLite default)
"""

from .document import EncryptedDocument
from .encryption import DualAccessEncryption, encrypt_document, decrypt_document
from .errors import (
    FiloSignError,
    ValidationError,
    InvalidAddressError,
    InvalidPublicKeyError,
    DiscoveryError,
    SignatureValidationError,
    CacheError,
    EncryptionError,
)
from .key_cache import KeyDiscoveryCache
from .public_key_service import PublicKeyService

__all__ = [
    "EncryptedDocument",
    "DualAccessEncryption",
    "encrypt_document",
    "decrypt_document",
    "FiloSignError",
    "ValidationError",
    "InvalidAddressError",
    "InvalidPublicKeyError",
    "DiscoveryError",
    "SignatureValidationError",
    "CacheError",
    "EncryptionError",
    "KeyDiscoveryCache",
    "PublicKeyService",
]
