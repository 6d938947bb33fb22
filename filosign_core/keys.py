"""
filosign_core.keys
------------------
secp256k1 wallet key primitives used by public key discovery:

- EIP-191 personal message hashing
- public key recovery from (hash, signature)
- address recovery from a signed message
- address derivation and format validation

Public keys travel as 0x-prefixed hex of the 65-byte uncompressed point
(``0x04`` marker followed by the X and Y coordinates).
"""

from __future__ import annotations
import re
from typing import Union

from cryptography.hazmat.primitives.asymmetric import ec
from eth_account import Account
from eth_account.messages import defunct_hash_message, encode_defunct
from eth_keys import keys

from .errors import InvalidPublicKeyError
from .utils import bytes_to_hex, hex_to_bytes

Signature = Union[bytes, str]

PUBLIC_KEY_RE = re.compile(r"^0x04[0-9a-fA-F]{128}$")
ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

SIGNATURE_SIZE = 65


def validate_public_key_format(public_key) -> bool:
    return isinstance(public_key, str) and bool(PUBLIC_KEY_RE.match(public_key))


def validate_address_format(address) -> bool:
    return isinstance(address, str) and bool(ADDRESS_RE.match(address))


def hash_message(message: str) -> bytes:
    """Keccak-256 of the EIP-191 ``personal_sign`` envelope of ``message``."""
    return bytes(defunct_hash_message(text=message))


def _signature_bytes(signature: Signature) -> bytes:
    raw = hex_to_bytes(signature) if isinstance(signature, str) else bytes(signature)
    if len(raw) != SIGNATURE_SIZE:
        raise ValueError(f"Signature must be {SIGNATURE_SIZE} bytes, got {len(raw)}")
    return raw


def recover_public_key(message_hash: bytes, signature: Signature) -> str:
    raw = _signature_bytes(signature)
    v = raw[64]
    if v >= 27:
        v -= 27
    sig = keys.Signature(signature_bytes=raw[:64] + bytes([v]))
    pub = sig.recover_public_key_from_msg_hash(message_hash)
    # eth_keys drops the 0x04 marker
    return bytes_to_hex(b"\x04" + pub.to_bytes())


def recover_address(message: str, signature: Signature) -> str:
    """Checksummed address that signed ``message`` under EIP-191."""
    return Account.recover_message(encode_defunct(text=message), signature=_signature_bytes(signature))


def public_key_to_address(public_key: str) -> str:
    if not validate_public_key_format(public_key):
        raise InvalidPublicKeyError(public_key)
    return keys.PublicKey(hex_to_bytes(public_key)[1:]).to_checksum_address()


def load_public_key(public_key: str) -> ec.EllipticCurvePublicKey:
    """Parse a hex public key into a point on secp256k1, rejecting malformed input."""
    if not validate_public_key_format(public_key):
        raise InvalidPublicKeyError(public_key)
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), hex_to_bytes(public_key))
    except ValueError as e:
        raise InvalidPublicKeyError(public_key) from e
