"""
Stegcarrier Key Derivation Module

Derives the 32-byte AES-256 key that protects an embedded secret from the
shared passphrase and the random per-embed salt stored in front of the
ciphertext.

Key Derivation Features:
- PBKDF2-HMAC with SHA-256 (default) or SHA-512 as the PRF
- Fixed, documented iteration count (100,000 by default, 10,000 minimum)
- Deterministic: the same passphrase and salt always give the same key

Salt Policy:
The salt must be exactly 16 bytes. Shorter or longer salts are rejected with
KeyDerivationError; they are never padded or truncated, because a key derived
from a silently modified salt could never be reproduced by the extractor.

Example Usage:
    >>> from stegcarrier.crypto.kdf import derive_key
    >>> key = derive_key("correct horse", os.urandom(16))
    >>> len(key)
    32

Dependencies:
- cryptography: PBKDF2HMAC implementation (OpenSSL backed)
"""

import logging
from dataclasses import dataclass
from enum import Enum

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..config import DEFAULT_KDF_ITERATIONS, MIN_KDF_ITERATIONS
from ..errors import KeyDerivationError

logger = logging.getLogger(__name__)

SALT_SIZE = 16
KEY_SIZE = 32


class KdfType(Enum):
    """
    Supported PBKDF2 variants.

    Enum Values:
        PBKDF2_SHA256: PBKDF2 with HMAC-SHA-256 (default)
        PBKDF2_SHA512: PBKDF2 with HMAC-SHA-512
    """
    PBKDF2_SHA256 = "sha256"
    PBKDF2_SHA512 = "sha512"


@dataclass
class KdfResult:
    """
    Result of one key derivation.

    Attributes:
        derived_key: 32 bytes of key material
        salt: The 16-byte salt used
        algorithm: The PBKDF2 variant used
        iterations: Number of PBKDF2 iterations performed
    """
    derived_key: bytes
    salt: bytes
    algorithm: KdfType
    iterations: int

    def __repr__(self) -> str:
        # Keep key material out of logs and tracebacks.
        return (
            f"KdfResult(derived_key=<{len(self.derived_key)} bytes>, salt=<{len(self.salt)} bytes>, "
            f"algorithm={self.algorithm}, iterations={self.iterations})"
        )


class PBKDF2Hasher:
    """
    PBKDF2 key derivation as defined in NIST SP 800-132 / RFC 8018.

    PBKDF2 applies HMAC to the passphrase and salt, repeating the process
    ``iterations`` times. The iteration count is the only tunable cost and
    must be identical on the embedding and the extracting side, since it is
    not recorded inside the carrier.

    Usage:
        >>> hasher = PBKDF2Hasher(algorithm="sha256", iterations=100000)
        >>> result = hasher.hash("passphrase", salt)
        >>> result.derived_key  # 32 bytes
    """

    DEFAULT_ITERATIONS = DEFAULT_KDF_ITERATIONS
    MIN_ITERATIONS = MIN_KDF_ITERATIONS

    _HASHES = {
        KdfType.PBKDF2_SHA256: hashes.SHA256,
        KdfType.PBKDF2_SHA512: hashes.SHA512,
    }

    def __init__(
        self,
        algorithm: str = "sha256",
        iterations: int = DEFAULT_ITERATIONS
    ):
        """
        Initialize the hasher.

        Args:
            algorithm: HMAC hash, "sha256" or "sha512"
            iterations: Number of PBKDF2 iterations (at least MIN_ITERATIONS)

        Raises:
            ValueError: If algorithm is unsupported or iterations are too low
        """
        try:
            self._algorithm = KdfType(algorithm)
        except ValueError:
            raise ValueError(
                f"Unsupported algorithm: {algorithm}. Must be 'sha256' or 'sha512'"
            ) from None

        if iterations < self.MIN_ITERATIONS:
            raise ValueError(
                f"Iterations must be at least {self.MIN_ITERATIONS}, got {iterations}"
            )
        self._iterations = iterations

    @property
    def algorithm(self) -> KdfType:
        return self._algorithm

    @property
    def iterations(self) -> int:
        return self._iterations

    def hash(self, passphrase: str, salt: bytes, key_length: int = KEY_SIZE) -> KdfResult:
        """
        Derive a key from ``passphrase`` and ``salt``.

        Args:
            passphrase: Shared passphrase (encoded as UTF-8)
            salt: Exactly 16 random bytes
            key_length: Length of derived key in bytes

        Returns:
            KdfResult holding the derived key and the parameters used

        Raises:
            KeyDerivationError: If the salt is not 16 bytes
        """
        if salt is None or len(salt) != SALT_SIZE:
            size = None if salt is None else len(salt)
            raise KeyDerivationError(
                f"Salt must be exactly {SALT_SIZE} bytes, got {size}",
                details={"salt_size": size, "expected": SALT_SIZE},
            )

        kdf = PBKDF2HMAC(
            algorithm=self._HASHES[self._algorithm](),
            length=key_length,
            salt=bytes(salt),
            iterations=self._iterations,
        )
        derived_key = kdf.derive(passphrase.encode("utf-8"))
        logger.debug(f"Derived {key_length}-byte key with PBKDF2-{self._algorithm.value} x{self._iterations}")

        return KdfResult(
            derived_key=derived_key,
            salt=bytes(salt),
            algorithm=self._algorithm,
            iterations=self._iterations,
        )


def derive_key(
    passphrase: str,
    salt: bytes,
    iterations: int = DEFAULT_KDF_ITERATIONS,
    algorithm: str = "sha256",
) -> bytes:
    """Derive the 32-byte carrier key; see :class:`PBKDF2Hasher`."""
    return PBKDF2Hasher(algorithm=algorithm, iterations=iterations).hash(passphrase, salt).derived_key
