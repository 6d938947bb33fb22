from dataclasses import dataclass

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys import keys

from filosign_core.key_cache import KeyDiscoveryCache
from filosign_core.public_key_service import PublicKeyService
from filosign_core.storage import InMemoryStorage, StorageError


@dataclass
class Wallet:
    address: str
    private_key: bytes
    public_key: str

    def sign(self, message: str) -> bytes:
        return Account.sign_message(encode_defunct(text=message), private_key=self.private_key).signature


def new_wallet() -> Wallet:
    acct = Account.create()
    pub = keys.PrivateKey(bytes(acct.key)).public_key.to_bytes()
    return Wallet(address=acct.address, private_key=bytes(acct.key), public_key="0x04" + pub.hex())


class BrokenStorage(InMemoryStorage):
    """In-memory store that can be told to fail reads and/or writes."""

    def __init__(self, fail_read=False, fail_write=False):
        super().__init__()
        self.fail_read = fail_read
        self.fail_write = fail_write

    def read(self, key):
        if self.fail_read:
            raise StorageError("Storage error")
        return super().read(key)

    def write(self, key, value):
        if self.fail_write:
            raise StorageError("Storage unavailable")
        super().write(key, value)

    def delete(self, key):
        if self.fail_write:
            raise StorageError("Storage unavailable")
        super().delete(key)


@pytest.fixture
def alice():
    return new_wallet()


@pytest.fixture
def bob():
    return new_wallet()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def cache(storage):
    return KeyDiscoveryCache(storage)


@pytest.fixture
def service(cache):
    return PublicKeyService(cache=cache)
