# tests/test_public_key_service.py

import json
import pytest

from filosign_core.constants import DISCOVERY_MESSAGE_TAG, PUBLIC_KEY_STORAGE_KEY
from filosign_core.errors import (
    CacheError,
    DiscoveryError,
    InvalidAddressError,
    InvalidPublicKeyError,
    SignatureValidationError,
)
from filosign_core.key_cache import KeyDiscoveryCache
from filosign_core.keys import (
    hash_message,
    public_key_to_address,
    recover_address,
    recover_public_key,
    validate_address_format,
    validate_public_key_format,
)
from filosign_core.public_key_service import PublicKeyService
from filosign_core.utils import now_ms
from conftest import BrokenStorage


class RecordingSigner:
    def __init__(self, wallet):
        self.wallet = wallet
        self.messages = []

    def __call__(self, message):
        self.messages.append(message)
        return self.wallet.sign(message)


def never_sign(message):
    raise AssertionError("signer must not be called")


def test_discovers_and_caches_key(service, storage, alice):
    signer = RecordingSigner(alice)

    result = service.discover_public_key(alice.address, signer)

    assert result == alice.public_key
    assert len(signer.messages) == 1
    assert DISCOVERY_MESSAGE_TAG in signer.messages[0]

    cached = json.loads(storage.read(PUBLIC_KEY_STORAGE_KEY))
    assert cached[alice.address.lower()]["publicKey"] == alice.public_key
    assert cached[alice.address.lower()]["verified"] is True


def test_cached_key_skips_signing(service, storage, alice):
    storage.write(PUBLIC_KEY_STORAGE_KEY, json.dumps({
        alice.address.lower(): {"publicKey": alice.public_key, "timestamp": now_ms(), "verified": True},
    }))

    assert service.discover_public_key(alice.address, never_sign) == alice.public_key


def test_second_discovery_does_not_sign_again(service, alice):
    signer = RecordingSigner(alice)

    first = service.discover_public_key(alice.address, signer)
    second = service.discover_public_key(alice.address, signer)

    assert first == second == alice.public_key
    assert len(signer.messages) == 1


def test_lowercase_address_is_accepted(service, alice):
    assert service.discover_public_key(alice.address.lower(), alice.sign) == alice.public_key


def test_hex_string_signature_is_accepted(service, alice):
    result = service.discover_public_key(alice.address, lambda m: "0x" + alice.sign(m).hex())
    assert result == alice.public_key


def test_signature_from_other_wallet_is_rejected(service, cache, alice, bob):
    with pytest.raises(SignatureValidationError, match="Signature validation failed"):
        service.discover_public_key(alice.address, bob.sign)

    # Nothing may be cached for the claimed address
    assert cache.entries() == {}


def test_signature_validation_error_is_distinct():
    assert issubclass(SignatureValidationError, DiscoveryError)
    assert not issubclass(DiscoveryError, SignatureValidationError)


def test_signer_failure_is_wrapped(service, alice):
    def reject(message):
        raise RuntimeError("User rejected signing")

    with pytest.raises(DiscoveryError, match="Public key discovery failed: User rejected signing") as exc:
        service.discover_public_key(alice.address, reject)
    assert isinstance(exc.value.__cause__, RuntimeError)


def test_malformed_signature_fails_discovery(service, cache, alice):
    with pytest.raises(DiscoveryError, match="Public key discovery failed"):
        service.discover_public_key(alice.address, lambda m: b"\x00" * 10)
    assert cache.entries() == {}


def test_invalid_address_fails_before_signing(service):
    with pytest.raises(InvalidAddressError):
        service.discover_public_key("invalid", never_sign)
    with pytest.raises(InvalidAddressError):
        service.discover_public_key("0xinvalidaddress", never_sign)


def test_cache_write_failure_still_returns_key(alice, caplog):
    service = PublicKeyService(cache=KeyDiscoveryCache(BrokenStorage(fail_write=True)))

    assert service.discover_public_key(alice.address, alice.sign) == alice.public_key
    assert "Discovered key not cached" in caplog.text


def test_get_public_key_is_pass_through(service, alice):
    assert service.get_public_key(alice.address) is None
    service.cache_public_key(alice.address, alice.public_key)
    assert service.get_public_key(alice.address) == alice.public_key


def test_cache_public_key_validates_input(service, alice):
    with pytest.raises(InvalidAddressError):
        service.cache_public_key("0x1234", alice.public_key)
    with pytest.raises(InvalidPublicKeyError):
        service.cache_public_key(alice.address, "0x04oldkey")


def test_cache_public_key_propagates_storage_failure(alice):
    service = PublicKeyService(cache=KeyDiscoveryCache(BrokenStorage(fail_write=True)))
    with pytest.raises(CacheError):
        service.cache_public_key(alice.address, alice.public_key)


def test_get_public_key_survives_storage_failure(alice):
    service = PublicKeyService(cache=KeyDiscoveryCache(BrokenStorage(fail_read=True)))
    assert service.get_public_key(alice.address) is None


def test_remove_and_clear(service, alice, bob):
    service.cache_public_key(alice.address, alice.public_key)
    service.cache_public_key(bob.address, bob.public_key)

    service.remove_cached_key(alice.address)
    assert service.get_public_key(alice.address) is None
    assert service.get_public_key(bob.address) == bob.public_key

    service.clear_all_cached_keys()
    assert service.get_public_key(bob.address) is None


def test_standard_message_format():
    addr = "0x1234567890123456789012345678901234567890"
    other = "0x9876543210987654321098765432109876543210"

    message = PublicKeyService.generate_standard_message(addr)
    assert DISCOVERY_MESSAGE_TAG in message
    assert addr in message
    assert "timestamp" in message

    assert message != PublicKeyService.generate_standard_message(other)
    assert message != PublicKeyService.generate_standard_message(addr)


def test_format_validators(alice):
    assert validate_public_key_format(alice.public_key)
    assert not validate_public_key_format("0xinvalidkey")
    assert not validate_public_key_format("0x02" + "ab" * 64)
    assert not validate_public_key_format(None)

    assert validate_address_format(alice.address)
    assert not validate_address_format("0xinvalidaddress")
    assert not validate_address_format("1234567890123456789012345678901234567890")


def test_key_primitives_agree(alice):
    message = "hello"
    sig = alice.sign(message)

    assert recover_public_key(hash_message(message), sig) == alice.public_key
    assert recover_address(message, sig) == alice.address
    assert public_key_to_address(alice.public_key) == alice.address


def test_non_string_address_handling(service):
    assert service.get_public_key(None) is None
    with pytest.raises(InvalidAddressError):
        service.remove_cached_key(None)
    with pytest.raises(InvalidAddressError):
        service.discover_public_key(None, never_sign)


def test_hash_matches_signed_message_path(alice):
    message = "FiloSign Public Key Discovery\n\nAddress: " + alice.address
    sig = alice.sign(message)
    digest = hash_message(message)

    assert len(digest) == 32
    assert digest != hash_message(message + " ")
    # the hash fed to key recovery must be the one eth-account signs
    assert public_key_to_address(recover_public_key(digest, sig)) == recover_address(message, sig)
