"""
filosign_core.document
----------------------
Defines EncryptedDocument, the artifact produced by dual-access encryption.

The document carries no address and no party identifier: the two wrapped
content keys are told apart only by their position.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict
import json

from .constants import ENCRYPTION_METHOD


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class EncryptedDocument:
    encrypted_data: str                 # base64(nonce || AES-GCM ciphertext)
    encrypted_key_for_party_a: str      # content key wrapped for the first public key
    encrypted_key_for_party_b: str      # content key wrapped for the second public key
    encryption_method: str = ENCRYPTION_METHOD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "encryptedData": self.encrypted_data,
            "encryptedKeyForPartyA": self.encrypted_key_for_party_a,
            "encryptedKeyForPartyB": self.encrypted_key_for_party_b,
            "encryptionMethod": self.encryption_method,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EncryptedDocument":
        """Rebuild a document from its serialized form.

        Missing or non-string fields become empty strings so that decryption
        of an incomplete or mangled document simply fails to open.
        """
        return cls(
            encrypted_data=_text(data.get("encryptedData")),
            encrypted_key_for_party_a=_text(data.get("encryptedKeyForPartyA")),
            encrypted_key_for_party_b=_text(data.get("encryptedKeyForPartyB")),
            encryption_method=_text(data.get("encryptionMethod")),
        )

    @classmethod
    def from_json(cls, raw: str) -> "EncryptedDocument":
        return cls.from_dict(json.loads(raw))
