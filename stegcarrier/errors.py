"""
Stegcarrier error taxonomy.

Every failure the codecs, the crypto layer or the envelope can report is a
subclass of :class:`StegCarrierError`. Each error carries a human readable
message, a stable numeric code and an optional ``details`` mapping so that
an outer transport layer can turn it into a response without string parsing.

Code ranges:
    1xxx  carrier / codec errors
    2xxx  framing errors
    3xxx  key derivation and cipher errors
    4xxx  secret (de)serialization errors
"""

from typing import Any, Dict, Optional


class StegCarrierError(Exception):
    """Base exception for all stegcarrier errors."""

    default_code: int = 1000

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details = details or {}

    def __str__(self) -> str:
        base = f"{type(self).__name__}: {self.message}"
        if self.code:
            base += f" (Code: {self.code})"
        return base


class InvalidCarrier(StegCarrierError):
    """The carrier could not be read or decoded (bad image, missing WAV chunks)."""

    default_code = 1001


class InsufficientCapacity(StegCarrierError):
    """The framed payload does not fit into the carrier."""

    default_code = 1002

    @property
    def required(self) -> Optional[int]:
        return self.details.get("required")

    @property
    def capacity(self) -> Optional[int]:
        return self.details.get("capacity")


class NoEmbeddedData(StegCarrierError):
    """Extraction did not find a valid header followed by a complete payload."""

    default_code = 1003


class PayloadTooLarge(StegCarrierError):
    """The payload exceeds the configured maximum payload size."""

    default_code = 2001


class CryptoError(StegCarrierError):
    """Base exception for key derivation and cipher failures."""

    default_code = 3000


class KeyDerivationError(CryptoError):
    """Key derivation was given unusable input (e.g. a salt of the wrong size)."""

    default_code = 3001


class CipherInitError(CryptoError):
    """The AEAD cipher could not be constructed, usually a wrong key length."""

    default_code = 3002


class MalformedCiphertext(CryptoError):
    """The ciphertext blob is too short to contain a nonce and a tag."""

    default_code = 3003


class AuthenticationFailed(CryptoError):
    """The AEAD tag did not verify.

    The message is fixed so callers cannot distinguish a wrong passphrase
    from tampered data.
    """

    default_code = 3004
    MESSAGE = "wrong passphrase or corrupted data"

    def __init__(self, message: str = MESSAGE, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class MalformedSecret(StegCarrierError):
    """The decrypted payload is not a valid serialized secret."""

    default_code = 4001
