"""
Secret envelope: serialization, encryption and embedding in one call.

Embedded blob layout (inside the codec frame)::

    [16-byte salt][12-byte nonce][AES-GCM ciphertext][16-byte tag]

The salt is fresh for every embed, so the same secret and passphrase never
produce the same carrier twice. The extractor reads the salt back from the
blob and derives the same key, provided it uses the same KDF settings.

Example:
    >>> envelope = SecretEnvelope()
    >>> png = envelope.embed(TextSecret.from_text("hello"), "correct horse", carrier, "image")
    >>> envelope.extract(png, "image", "correct horse").text
    'hello'
"""

import logging
import os
from enum import Enum
from typing import Optional, Union

from .config import DEFAULT_SETTINGS, StegoSettings
from .crypto import MIN_CIPHERTEXT_SIZE, NONCE_SIZE, SALT_SIZE, TAG_SIZE, AuthenticatedCipher, derive_key
from .crypto.engine import RandomSource
from .errors import InvalidCarrier, NoEmbeddedData
from .secret import Secret
from .stego import AudioStego, ImageStego, VideoStego, data_chunk_region

logger = logging.getLogger(__name__)


class CarrierKind(Enum):
    """Kinds of carrier media a secret can be hidden in."""

    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"

    @classmethod
    def parse(cls, value: Union["CarrierKind", str]) -> "CarrierKind":
        """
        Accept a ``CarrierKind`` or its name ("image", "audio", "video").

        Raises:
            InvalidCarrier: If the value names no carrier kind
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidCarrier(
                f"Unsupported carrier type: {value}. Must be one of image, audio, video",
                details={"carrier_kind": value},
            ) from None


class SecretEnvelope:
    """
    Orchestrates key derivation, authenticated encryption and the codecs.

    Each call is independent: no state is kept between embed and extract
    apart from the immutable settings and the random source.
    """

    def __init__(
        self,
        settings: Optional[StegoSettings] = None,
        random_bytes: Optional[RandomSource] = None,
        kdf_iterations: Optional[int] = None,
    ):
        """
        Initialize the envelope.

        Args:
            settings: Shared settings; defaults to DEFAULT_SETTINGS
            random_bytes: Source of salt and nonce bytes; defaults to os.urandom
            kdf_iterations: Shortcut override of ``settings.kdf_iterations``
        """
        self._settings = (settings or DEFAULT_SETTINGS).with_overrides(kdf_iterations=kdf_iterations)
        self._random_bytes = random_bytes or os.urandom
        self._cipher = AuthenticatedCipher(random_bytes=self._random_bytes)
        self._image = ImageStego(self._settings)
        self._audio = AudioStego(self._settings)
        self._video = VideoStego(self._settings)

    @property
    def settings(self) -> StegoSettings:
        return self._settings

    @staticmethod
    def overhead() -> int:
        """Bytes the salt, nonce and tag add on top of the serialized secret."""
        return SALT_SIZE + NONCE_SIZE + TAG_SIZE

    def _derive(self, passphrase: str, salt: bytes) -> bytes:
        if not passphrase:
            raise ValueError("Passphrase is required")
        return derive_key(
            passphrase,
            salt,
            iterations=self._settings.kdf_iterations,
            algorithm=self._settings.kdf_algorithm,
        )

    def capacity(self, carrier_bytes: bytes, carrier_kind: Union[CarrierKind, str]) -> int:
        """
        Payload bytes the carrier can hold after the frame header.

        Subtract :meth:`overhead` to get the room left for the serialized secret.

        Raises:
            InvalidCarrier: If the carrier cannot be parsed as ``carrier_kind``
        """
        kind = CarrierKind.parse(carrier_kind)
        if kind is CarrierKind.IMAGE:
            width, height = ImageStego.load(carrier_bytes).size
            return ImageStego.usable_capacity(width, height)
        if kind is CarrierKind.AUDIO:
            return AudioStego.usable_capacity(data_chunk_region(carrier_bytes)[1])
        return self._video.usable_capacity(len(carrier_bytes))

    def embed(
        self,
        secret: Secret,
        passphrase: str,
        carrier_bytes: bytes,
        carrier_kind: Union[CarrierKind, str],
    ) -> bytes:
        """
        Encrypt ``secret`` under ``passphrase`` and hide it in the carrier.

        Returns:
            The new carrier: PNG bytes for images, WAV bytes for audio and the
            original container with the frame appended for video.

        Raises:
            ValueError: If the passphrase is empty
            InvalidCarrier: If the carrier cannot be decoded
            PayloadTooLarge: If the encrypted blob exceeds the payload limit
            InsufficientCapacity: If the framed blob does not fit the carrier
        """
        kind = CarrierKind.parse(carrier_kind)
        serialized = secret.to_bytes()

        salt = self._random_bytes(SALT_SIZE)
        key = self._derive(passphrase, salt)
        blob = salt + self._cipher.encrypt(serialized, key)

        logger.info(
            f"Embedding {secret.kind.value} secret ({len(serialized)} serialized bytes, "
            f"{len(blob)} blob bytes) into {kind.value} carrier of {len(carrier_bytes)} bytes"
        )

        if kind is CarrierKind.IMAGE:
            return self._image.embed(ImageStego.load(carrier_bytes), blob)
        if kind is CarrierKind.AUDIO:
            return self._audio.embed(carrier_bytes, blob)
        return self._video.embed(carrier_bytes, blob)

    def _extract_blob(self, carrier_bytes: bytes, kind: CarrierKind) -> bytes:
        if kind is CarrierKind.IMAGE:
            return self._image.extract(ImageStego.load(carrier_bytes))
        if kind is CarrierKind.AUDIO:
            return self._audio.extract(carrier_bytes)
        return self._video.extract(carrier_bytes)

    def extract(
        self,
        carrier_bytes: bytes,
        carrier_kind: Union[CarrierKind, str],
        passphrase: str,
    ) -> Secret:
        """
        Recover and decrypt the secret hidden in ``carrier_bytes``.

        Raises:
            ValueError: If the passphrase is empty
            InvalidCarrier: If the carrier cannot be decoded
            NoEmbeddedData: If no frame, or one too short to hold a salt and ciphertext, is found
            AuthenticationFailed: On a wrong passphrase or tampered data
            MalformedSecret: If the decrypted record is not a valid secret
        """
        kind = CarrierKind.parse(carrier_kind)
        if not passphrase:
            raise ValueError("Passphrase is required")

        blob = self._extract_blob(carrier_bytes, kind)
        if len(blob) < SALT_SIZE + MIN_CIPHERTEXT_SIZE:
            raise NoEmbeddedData(
                "Extracted data too short to contain encrypted content",
                details={"size": len(blob), "minimum": SALT_SIZE + MIN_CIPHERTEXT_SIZE},
            )

        salt, ciphertext = blob[:SALT_SIZE], blob[SALT_SIZE:]
        plaintext = self._cipher.decrypt(ciphertext, self._derive(passphrase, salt))
        secret = Secret.from_bytes(plaintext)

        logger.info(f"Extracted {secret.kind.value} secret ({len(secret.content)} bytes) from {kind.value} carrier")
        return secret
