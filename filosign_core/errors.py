# filosign_core/errors.py

class FiloSignError(Exception):
    """Base class for every error raised by filosign_core."""


class ValidationError(FiloSignError, ValueError):
    pass


class InvalidAddressError(ValidationError):
    def __init__(self, address):
        super().__init__(f"Invalid wallet address: {address!r}")
        self.address = address


class InvalidPublicKeyError(ValidationError):
    def __init__(self, public_key):
        super().__init__("Invalid public key: expected 0x04-prefixed uncompressed secp256k1 point")
        self.public_key = public_key


class DiscoveryError(FiloSignError):
    """Signer or key recovery failure during public key discovery."""


class SignatureValidationError(DiscoveryError):
    """The signature was not produced by the claimed address."""


class CacheError(FiloSignError):
    """The underlying key store could not be written."""


class EncryptionError(FiloSignError):
    pass
