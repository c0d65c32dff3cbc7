"""
Image Steganography Module.

Hides a framed payload in the least significant bit of the red, green and
blue channels of every pixel, walking pixels in row-major order. The alpha
channel is preserved but never carries payload bits.

Capacity:
    One bit per colour channel, three channels per pixel, so a W x H image
    holds ``floor(W * H * 3 / 8)`` framed bytes (8 of which are the header).

Output is always PNG. Lossy formats (JPEG, lossy WebP) would destroy the
embedded bits, so the carrier may be read from any format Pillow decodes but
is written back losslessly.
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..config import DEFAULT_SETTINGS, StegoSettings
from ..errors import InsufficientCapacity, InvalidCarrier
from .bits import bytes_to_bits, iter_lsb_bytes, write_lsb
from .framing import HEADER_SIZE, check_payload_size, frame, read_frame

logger = logging.getLogger(__name__)

CHANNELS_USED = 3  # R, G, B
CARRIER_MODE = "RGBA"


@dataclass
class EmbeddingResult:
    """
    Result of an image embedding operation.

    Attributes:
        image: New RGBA image carrying the frame
        capacity_used: Number of framed bytes embedded
        capacity_total: Framed capacity of the carrier
    """

    image: Image.Image
    capacity_used: int
    capacity_total: int


class ImageStego:
    """
    LSB image codec.

    Example:
        >>> codec = ImageStego()
        >>> png_bytes = codec.embed(carrier_image, blob)
        >>> codec.extract(Image.open(io.BytesIO(png_bytes))) == blob
        True
    """

    def __init__(self, settings: Optional[StegoSettings] = None):
        self._settings = settings or DEFAULT_SETTINGS

    @staticmethod
    def capacity(width: int, height: int) -> int:
        """Framed bytes a ``width`` x ``height`` image can hold."""
        if width <= 0 or height <= 0:
            return 0
        return (width * height * CHANNELS_USED) // 8

    @classmethod
    def usable_capacity(cls, width: int, height: int) -> int:
        """Payload bytes left after the 8-byte frame header."""
        return max(0, cls.capacity(width, height) - HEADER_SIZE)

    def calculate_capacity(self, image: Image.Image) -> int:
        """Framed capacity of a decoded image."""
        width, height = image.size
        return self.capacity(width, height)

    @staticmethod
    def load(data: bytes) -> Image.Image:
        """
        Decode carrier bytes with Pillow.

        Raises:
            InvalidCarrier: If the bytes are not a decodable image
        """
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except Image.DecompressionBombError as e:
            raise InvalidCarrier(f"Image too large to decode: {e}") from e
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise InvalidCarrier(f"Invalid image format: {e}") from e
        return image

    def _pixels(self, image: Image.Image) -> np.ndarray:
        if image is None:
            raise InvalidCarrier("Image cannot be None")
        width, height = image.size
        if width <= 0 or height <= 0:
            raise InvalidCarrier(f"Invalid image dimensions: {width}x{height}")
        return np.array(image.convert(CARRIER_MODE), dtype=np.uint8)

    def embed_image(self, image: Image.Image, blob: bytes) -> EmbeddingResult:
        """
        Frame ``blob`` and write it into a copy of ``image``.

        Raises:
            InvalidCarrier: If the image has no pixels
            ValueError: If ``blob`` is empty
            PayloadTooLarge: If ``blob`` is above the payload limit
            InsufficientCapacity: If the framed blob does not fit
        """
        check_payload_size(blob, self._settings.max_payload_size)
        pixels = self._pixels(image)
        height, width = pixels.shape[:2]

        framed = frame(blob, self._settings.max_payload_size)
        capacity = self.capacity(width, height)
        if len(framed) > capacity:
            raise InsufficientCapacity(
                f"Image too small to embed data: need {len(framed)} bytes, have {capacity} bytes capacity",
                details={"required": len(framed), "capacity": capacity},
            )

        logger.info(f"Embedding {len(framed)} framed bytes into {width}x{height} image, capacity={capacity}")

        # Row-major R, G, B order; bits past the payload leave pixels untouched.
        channels = pixels[:, :, :CHANNELS_USED].reshape(-1)
        pixels[:, :, :CHANNELS_USED] = write_lsb(channels, bytes_to_bits(framed)).reshape(
            height, width, CHANNELS_USED
        )

        return EmbeddingResult(
            image=Image.fromarray(pixels),
            capacity_used=len(framed),
            capacity_total=capacity,
        )

    def encode(self, image: Image.Image) -> bytes:
        """Encode an image losslessly as PNG."""
        buffer = io.BytesIO()
        image.save(buffer, format="PNG", compress_level=self._settings.png_compress_level)
        return buffer.getvalue()

    def embed(self, image: Image.Image, blob: bytes) -> bytes:
        """Embed ``blob`` and return the new carrier as PNG bytes."""
        return self.encode(self.embed_image(image, blob).image)

    def extract(self, image: Image.Image) -> bytes:
        """
        Recover the framed payload from ``image``.

        Raises:
            InvalidCarrier: If the image has no pixels
            NoEmbeddedData: If no valid frame is present
        """
        pixels = self._pixels(image)
        height, width = pixels.shape[:2]
        logger.info(f"Extracting from {width}x{height} image")

        channels = pixels[:, :, :CHANNELS_USED].reshape(-1)
        return read_frame(
            iter_lsb_bytes(channels),
            available=self.capacity(width, height),
            max_payload_size=self._settings.max_payload_size,
        )
