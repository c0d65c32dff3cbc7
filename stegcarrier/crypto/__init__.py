"""
Stegcarrier cryptographic layer.

Modules:
    kdf: PBKDF2 key derivation from passphrase and salt
    engine: AES-256-GCM authenticated encryption with nonce-prefixed output

Usage:
    >>> from stegcarrier.crypto import AuthenticatedCipher, derive_key
    >>> key = derive_key("passphrase", salt)
    >>> blob = AuthenticatedCipher().encrypt(b"Hello, World!", key)
"""

from .engine import (
    AuthenticatedCipher,
    EncryptionResult,
    KEY_SIZE,
    MIN_CIPHERTEXT_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
)
from .kdf import KdfResult, KdfType, PBKDF2Hasher, SALT_SIZE, derive_key

__all__ = [
    # Authenticated encryption
    "AuthenticatedCipher",
    "EncryptionResult",
    "KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "MIN_CIPHERTEXT_SIZE",
    # Key derivation
    "PBKDF2Hasher",
    "KdfType",
    "KdfResult",
    "SALT_SIZE",
    "derive_key",
]
