"""
filosign_core.encryption
------------------------
Dual-access document encryption:

- a fresh AES-256-GCM content key encrypts the document body
- the content key is wrapped once per authorized public key
  (secp256k1 ECDH + HKDF + AES-GCM with a synthetic nonce)
- either wrapped slot can be opened by its public key; nothing in the
  document says which slot belongs to whom

Wrapping is deterministic for a given (content key, public key) pair.
Since the content key is fresh per document, wrapped slots never repeat
across documents for the same recipient.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, Tuple, Union
import hashlib, hmac, os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .constants import CONTENT_KEY_SIZE, ENCRYPTION_METHOD, NONCE_SIZE, WRAP_INFO
from .document import EncryptedDocument
from .errors import EncryptionError
from .keys import load_public_key
from .logger import get_logger
from .utils import b64d, b64e, hex_to_bytes

log = get_logger("filosign.encryption")

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
AAD = ENCRYPTION_METHOD.encode("utf-8")


class DocumentSlot(Enum):
    PARTY_A = "encrypted_key_for_party_a"
    PARTY_B = "encrypted_key_for_party_b"


# --------- AES-GCM (content) ----------
def aead_encrypt(key: bytes, plaintext: bytes, nonce: Optional[bytes] = None) -> bytes:
    nonce = nonce or os.urandom(NONCE_SIZE)
    return nonce + AESGCM(key).encrypt(nonce, plaintext, AAD)

def aead_decrypt(key: bytes, blob: bytes) -> bytes:
    if len(blob) < NONCE_SIZE + 16:
        raise ValueError("ciphertext too short")
    return AESGCM(key).decrypt(blob[:NONCE_SIZE], blob[NONCE_SIZE:], AAD)


# --------- Key wrapping (per public key) ----------
def derive_slot_key(public_key: str) -> bytes:
    """Run ECDH against ``public_key`` with a scalar bound to that key, then HKDF."""
    peer = load_public_key(public_key)
    digest = hashlib.sha256(WRAP_INFO + hex_to_bytes(public_key)).digest()
    scalar = int.from_bytes(digest, "big") % (SECP256K1_ORDER - 1) + 1
    agreement = ec.derive_private_key(scalar, ec.SECP256K1())
    shared = agreement.exchange(ec.ECDH(), peer)
    hkdf = HKDF(algorithm=hashes.SHA256(), length=CONTENT_KEY_SIZE, salt=AAD, info=WRAP_INFO)
    return hkdf.derive(shared)

def _synthetic_nonce(slot_key: bytes, content_key: bytes) -> bytes:
    return hmac.new(slot_key, content_key, hashlib.sha256).digest()[:NONCE_SIZE]

def wrap_content_key(content_key: bytes, public_key: str) -> str:
    slot_key = derive_slot_key(public_key)
    return b64e(aead_encrypt(slot_key, content_key, nonce=_synthetic_nonce(slot_key, content_key)))

def unwrap_content_key(wrapped: str, public_key: str) -> Optional[bytes]:
    """Return the content key if ``public_key`` opens this slot, else None."""
    if not wrapped:
        return None
    try:
        slot_key = derive_slot_key(public_key)
        blob = b64d(wrapped)
        content_key = aead_decrypt(slot_key, blob)
    except (InvalidTag, ValueError, TypeError, AttributeError):
        return None
    if len(content_key) != CONTENT_KEY_SIZE:
        return None
    if not hmac.compare_digest(blob[:NONCE_SIZE], _synthetic_nonce(slot_key, content_key)):
        return None
    return content_key


class DualAccessEncryption:
    """Seal a document so that exactly two public keys can open it."""

    method = ENCRYPTION_METHOD

    def generate_content_key(self) -> bytes:
        return AESGCM.generate_key(bit_length=CONTENT_KEY_SIZE * 8)

    def encrypt_document(
        self,
        plaintext: Union[str, bytes],
        public_key_a: str,
        public_key_b: str,
    ) -> EncryptedDocument:
        log.info("Starting encryption process...")
        try:
            for public_key in (public_key_a, public_key_b):
                if not public_key:
                    raise ValueError("public key is required")
                load_public_key(public_key)

            data = plaintext.encode("utf-8") if isinstance(plaintext, str) else bytes(plaintext)
            content_key = self.generate_content_key()
            doc = EncryptedDocument(
                encrypted_data=b64e(aead_encrypt(content_key, data)),
                encrypted_key_for_party_a=wrap_content_key(content_key, public_key_a),
                encrypted_key_for_party_b=wrap_content_key(content_key, public_key_b),
                encryption_method=self.method,
            )
        except Exception as e:
            log.error(f"Encryption failed: {e}")
            raise EncryptionError(f"Failed to encrypt document: {e}") from e

        log.info("Encryption complete!")
        return doc

    def decrypt_document(
        self,
        doc: Union[EncryptedDocument, dict],
        holder_public_key: str,
        as_bytes: bool = False,
    ) -> Optional[Union[str, bytes]]:
        log.info("Privacy-preserving decryption attempt")
        if isinstance(doc, dict):
            doc = EncryptedDocument.from_dict(doc)
        if doc.encryption_method != self.method:
            log.info(f"Unsupported encryption method: {doc.encryption_method!r}")
            return None

        opened = self._open_slot(doc, holder_public_key)
        if opened is None:
            return None
        slot, content_key = opened

        try:
            data = aead_decrypt(content_key, b64d(doc.encrypted_data))
            result = data if as_bytes else data.decode("utf-8")
        except (InvalidTag, ValueError, TypeError, AttributeError):
            log.info("Document could not be decrypted")
            return None

        log.info(f"Document opened via {slot.name}")
        return result

    def _open_slot(self, doc: EncryptedDocument, public_key: str) -> Optional[Tuple[DocumentSlot, bytes]]:
        for slot in DocumentSlot:
            content_key = unwrap_content_key(getattr(doc, slot.value), public_key)
            if content_key is not None:
                return slot, content_key
        log.info("No key slot opened for the holder key")
        return None


_default = DualAccessEncryption()


def encrypt_document(plaintext: Union[str, bytes], public_key_a: str, public_key_b: str) -> EncryptedDocument:
    return _default.encrypt_document(plaintext, public_key_a, public_key_b)


def decrypt_document(doc: EncryptedDocument, holder_public_key: str, as_bytes: bool = False):
    return _default.decrypt_document(doc, holder_public_key, as_bytes=as_bytes)
