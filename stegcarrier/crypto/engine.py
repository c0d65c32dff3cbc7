"""
Stegcarrier Authenticated Cipher.

AES-256-GCM wrapper producing the self-contained blob that goes inside the
frame::

    nonce (12 bytes) || ciphertext || tag (16 bytes)

A fresh random nonce is drawn for every encryption from the injected random
source. Keys are only ever derived per embed from a fresh salt, so a
(key, nonce) pair is never reused. No associated data is authenticated.

Example Usage:
    >>> from stegcarrier.crypto import AuthenticatedCipher
    >>> cipher = AuthenticatedCipher()
    >>> blob = cipher.encrypt(b"Secret message", key)
    >>> cipher.decrypt(blob, key)
    b'Secret message'
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..errors import AuthenticationFailed, CipherInitError, MalformedCiphertext

logger = logging.getLogger(__name__)

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16
# Smallest valid blob: nonce and tag around an empty plaintext.
MIN_CIPHERTEXT_SIZE = NONCE_SIZE + TAG_SIZE

RandomSource = Callable[[int], bytes]


@dataclass
class EncryptionResult:
    """
    Result of an encryption operation.

    Attributes:
        ciphertext: The encrypted data
        tag: GCM authentication tag
        nonce: The nonce used
    """

    ciphertext: bytes
    tag: bytes
    nonce: bytes

    def to_bytes(self) -> bytes:
        """Serialize as ``nonce || ciphertext || tag``."""
        return self.nonce + self.ciphertext + self.tag

    @classmethod
    def from_bytes(cls, blob: bytes) -> "EncryptionResult":
        """
        Split a ``nonce || ciphertext || tag`` blob.

        Raises:
            MalformedCiphertext: If the blob cannot hold a nonce and a tag
        """
        if len(blob) < NONCE_SIZE:
            raise MalformedCiphertext(
                f"Ciphertext of {len(blob)} bytes is shorter than the {NONCE_SIZE}-byte nonce",
                details={"size": len(blob)},
            )
        if len(blob) < MIN_CIPHERTEXT_SIZE:
            raise MalformedCiphertext(
                f"Ciphertext of {len(blob)} bytes has no room for the {TAG_SIZE}-byte tag",
                details={"size": len(blob)},
            )
        return cls(
            ciphertext=bytes(blob[NONCE_SIZE:-TAG_SIZE]),
            tag=bytes(blob[-TAG_SIZE:]),
            nonce=bytes(blob[:NONCE_SIZE]),
        )


class AuthenticatedCipher:
    """
    AES-256-GCM encryption with nonce-prefixed output.

    Instances hold no key material and can be shared between threads; the
    only shared resource is the random source, which must itself be safe for
    concurrent use (``os.urandom`` is).

    Attributes:
        random_bytes: Callable returning N cryptographically secure bytes
    """

    def __init__(self, random_bytes: Optional[RandomSource] = None):
        self._random_bytes = random_bytes or os.urandom

    def generate_nonce(self) -> bytes:
        """Draw a fresh 96-bit GCM nonce."""
        nonce = self._random_bytes(NONCE_SIZE)
        if len(nonce) != NONCE_SIZE:
            raise CipherInitError(f"Random source returned {len(nonce)} bytes, expected {NONCE_SIZE}")
        return nonce

    def _check_key(self, key: bytes) -> None:
        if key is None or len(key) != KEY_SIZE:
            size = None if key is None else len(key)
            raise CipherInitError(
                f"Key must be {KEY_SIZE} bytes for AES-256, got {size}",
                details={"key_size": size},
            )

    def encrypt(self, plaintext: bytes, key: bytes) -> bytes:
        """
        Encrypt ``plaintext`` under ``key``.

        Returns:
            ``nonce || ciphertext || tag``

        Raises:
            CipherInitError: If the key is not 32 bytes
        """
        self._check_key(key)
        nonce = self.generate_nonce()

        encryptor = Cipher(algorithms.AES(bytes(key)), modes.GCM(nonce)).encryptor()
        ciphertext = encryptor.update(bytes(plaintext)) + encryptor.finalize()

        result = EncryptionResult(ciphertext=ciphertext, tag=encryptor.tag, nonce=nonce)
        logger.debug(f"Encrypted {len(plaintext)} bytes with AES-256-GCM")
        return result.to_bytes()

    def decrypt(self, blob: bytes, key: bytes) -> bytes:
        """
        Verify and decrypt a ``nonce || ciphertext || tag`` blob.

        Raises:
            CipherInitError: If the key is not 32 bytes
            MalformedCiphertext: If the blob is too short
            AuthenticationFailed: If the tag does not verify
        """
        self._check_key(key)
        parts = EncryptionResult.from_bytes(blob)

        decryptor = Cipher(algorithms.AES(bytes(key)), modes.GCM(parts.nonce, parts.tag)).decryptor()
        try:
            plaintext = decryptor.update(parts.ciphertext) + decryptor.finalize()
        except InvalidTag:
            logger.info("AES-GCM tag verification failed")
            raise AuthenticationFailed() from None

        logger.debug(f"Decrypted {len(plaintext)} bytes with AES-256-GCM")
        return plaintext
