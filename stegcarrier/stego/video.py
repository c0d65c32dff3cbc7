"""
Video Steganography Module.

Video containers are treated as opaque byte strings: the frame is appended
after the last byte of the carrier. Most players ignore trailing bytes, so
playback is unaffected, but the payload is not perceptually hidden.

Extraction scans backwards from the end of the file for the magic number and
accepts the first header whose declared length fits in the bytes after it.
The scan never looks further back than the largest legal frame.
"""

import logging
from typing import Optional

from ..config import DEFAULT_SETTINGS, StegoSettings
from ..errors import InsufficientCapacity, InvalidCarrier, NoEmbeddedData
from .framing import HEADER_SIZE, MAGIC_BYTES, check_payload_size, frame, is_valid_length, parse_header

logger = logging.getLogger(__name__)


class VideoStego:
    """
    Append-based codec for arbitrary container bytes.

    Example:
        >>> codec = VideoStego()
        >>> stego_mp4 = codec.embed(mp4_bytes, blob)
        >>> codec.extract(stego_mp4) == blob
        True
    """

    def __init__(self, settings: Optional[StegoSettings] = None):
        self._settings = settings or DEFAULT_SETTINGS

    def capacity(self, carrier_length: int) -> int:
        """Largest framed blob accepted for a carrier of this size."""
        return max(0, carrier_length) // self._settings.video_size_divisor

    def usable_capacity(self, carrier_length: int) -> int:
        return max(0, self.capacity(carrier_length) - HEADER_SIZE)

    def embed(self, data: bytes, blob: bytes) -> bytes:
        """
        Return ``data || frame(blob)``.

        Raises:
            InvalidCarrier: If ``data`` is empty
            PayloadTooLarge: If ``blob`` is above the payload limit
            InsufficientCapacity: If the frame would bloat the carrier implausibly
        """
        if not data:
            raise InvalidCarrier("Video data cannot be empty")
        check_payload_size(blob, self._settings.max_payload_size)

        framed = frame(blob, self._settings.max_payload_size)
        capacity = self.capacity(len(data))
        if len(framed) > capacity:
            raise InsufficientCapacity(
                f"Data too large relative to video file size: need {len(framed)} bytes, "
                f"have {capacity} bytes capacity",
                details={"required": len(framed), "capacity": capacity},
            )

        logger.info(f"Appending {len(framed)} framed bytes to {len(data)}-byte video carrier")
        return bytes(data) + framed

    def extract(self, data: bytes) -> bytes:
        """
        Find the last valid frame within the search window at the end of ``data``.

        Raises:
            NoEmbeddedData: If no valid frame is found
        """
        if len(data) < HEADER_SIZE:
            raise NoEmbeddedData("Video file too small to contain embedded data")

        max_payload_size = self._settings.max_payload_size
        search_start = max(0, len(data) - max_payload_size - HEADER_SIZE)
        logger.info(f"Scanning {len(data) - search_start} trailing bytes of video for embedded data")

        # rfind only reports matches lying entirely inside [search_start, end).
        end = len(data)
        while True:
            position = data.rfind(MAGIC_BYTES, search_start, end)
            if position < 0:
                break
            if position + HEADER_SIZE <= len(data):
                _, length = parse_header(data[position:position + HEADER_SIZE])
                if is_valid_length(length, max_payload_size) and position + HEADER_SIZE + length <= len(data):
                    logger.debug(f"Found frame header at offset {position} declaring {length} bytes")
                    return bytes(data[position + HEADER_SIZE:position + HEADER_SIZE + length])
            end = position + len(MAGIC_BYTES) - 1

        raise NoEmbeddedData(
            "No embedded data found in video",
            details={"searched": len(data) - search_start},
        )
