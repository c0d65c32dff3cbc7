"""
Audio Steganography Module.

Hides a framed payload in the least significant bit of every byte of the
sample data of a RIFF/WAVE file. The sample region is located by walking the
RIFF chunk list; everything outside it (headers, trailing chunks) is copied
unchanged.

Capacity:
    One bit per sample byte, so a sample region of N bytes holds
    ``floor(N / 8)`` framed bytes.

Extraction is best-effort on damaged or non-WAV input: if the data chunk
cannot be found, sample bytes are assumed to start at the canonical 44-byte
header offset. The scan is bounded by the payload size limit, so hostile
inputs cannot cause unbounded work.
"""

import logging
import struct
from typing import Optional, Tuple

import numpy as np

from ..config import DEFAULT_SETTINGS, StegoSettings
from ..errors import InsufficientCapacity, InvalidCarrier, NoEmbeddedData
from .bits import bytes_to_bits, iter_lsb_bytes, write_lsb
from .framing import HEADER_SIZE, check_payload_size, frame, read_frame

logger = logging.getLogger(__name__)

RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
DATA_ID = b"data"
RIFF_HEADER_SIZE = 12
CHUNK_HEADER = struct.Struct("<4sI")
MIN_WAV_SIZE = 44


def _check_riff(data: bytes) -> None:
    if len(data) < RIFF_HEADER_SIZE or data[:4] != RIFF_ID or data[8:12] != WAVE_ID:
        raise InvalidCarrier(
            "Unsupported audio format - only RIFF/WAVE files are supported for LSB embedding"
        )


def data_chunk_region(data: bytes) -> Tuple[int, int]:
    """
    Find the sample bytes of a WAV file.

    Chunks are walked from offset 12; each chunk body is skipped along with
    its pad byte when the declared size is odd.

    Returns:
        ``(offset, length)`` of the sample region. A declared size of zero or
        one running past the end of the file (streamed WAVs) is replaced by
        the number of bytes actually present.

    Raises:
        InvalidCarrier: If the RIFF/WAVE markers or the data chunk are missing
    """
    _check_riff(data)

    offset = RIFF_HEADER_SIZE
    while offset + CHUNK_HEADER.size <= len(data):
        chunk_id, chunk_size = CHUNK_HEADER.unpack_from(data, offset)
        body = offset + CHUNK_HEADER.size
        if chunk_id == DATA_ID:
            remaining = len(data) - body
            if chunk_size == 0 or chunk_size > remaining:
                chunk_size = remaining
            logger.debug(f"WAV data chunk at offset {body}, {chunk_size} sample bytes")
            return body, chunk_size
        offset = body + chunk_size + (chunk_size & 1)

    raise InvalidCarrier("Invalid WAV file - no data chunk found")


def locate_data_chunk(data: bytes) -> int:
    """Offset of the first sample byte; see :func:`data_chunk_region`."""
    return data_chunk_region(data)[0]


class AudioStego:
    """
    LSB codec for WAV carriers.

    Example:
        >>> codec = AudioStego()
        >>> stego_wav = codec.embed(wav_bytes, blob)
        >>> codec.extract(stego_wav) == blob
        True
    """

    def __init__(self, settings: Optional[StegoSettings] = None):
        self._settings = settings or DEFAULT_SETTINGS

    @staticmethod
    def capacity(sample_region_length: int) -> int:
        """Framed bytes a sample region of this many bytes can hold."""
        return max(0, sample_region_length) // 8

    @classmethod
    def usable_capacity(cls, sample_region_length: int) -> int:
        """Payload bytes left after the 8-byte frame header."""
        return max(0, cls.capacity(sample_region_length) - HEADER_SIZE)

    def calculate_capacity(self, data: bytes) -> int:
        """Framed capacity of a WAV file."""
        return self.capacity(data_chunk_region(data)[1])

    def embed(self, data: bytes, blob: bytes) -> bytes:
        """
        Frame ``blob`` and write it into the sample LSBs of a copy of ``data``.

        Raises:
            InvalidCarrier: If ``data`` is not a WAV file with a data chunk
            PayloadTooLarge: If ``blob`` is above the payload limit
            InsufficientCapacity: If the framed blob does not fit
        """
        if not data:
            raise InvalidCarrier("Audio data cannot be empty")
        if len(data) < MIN_WAV_SIZE:
            raise InvalidCarrier("Audio file too small or invalid format")
        check_payload_size(blob, self._settings.max_payload_size)

        offset, length = data_chunk_region(data)
        framed = frame(blob, self._settings.max_payload_size)
        capacity = self.capacity(length)
        if len(framed) > capacity:
            raise InsufficientCapacity(
                f"Audio file too small to embed data: need {len(framed)} bytes, have {capacity} bytes capacity",
                details={"required": len(framed), "capacity": capacity},
            )

        logger.info(f"Embedding {len(framed)} framed bytes into WAV samples at offset {offset}, capacity={capacity}")

        samples = np.frombuffer(data, dtype=np.uint8, count=length, offset=offset)
        stego_samples = write_lsb(samples, bytes_to_bits(framed))
        return bytes(data[:offset]) + stego_samples.tobytes() + bytes(data[offset + length:])

    def _sample_region(self, data: bytes) -> Tuple[int, int]:
        try:
            return data_chunk_region(data)
        except InvalidCarrier as e:
            offset = self._settings.audio_fallback_offset
            logger.warning(f"{e.message}; falling back to sample offset {offset}")
            return offset, len(data) - offset

    def extract(self, data: bytes) -> bytes:
        """
        Recover the framed payload from WAV sample LSBs.

        Raises:
            InvalidCarrier: If ``data`` is too small to be audio
            NoEmbeddedData: If no valid frame is present
        """
        if len(data) < MIN_WAV_SIZE:
            raise InvalidCarrier("Audio file too small or invalid")

        offset, length = self._sample_region(data)
        if length <= 0:
            raise NoEmbeddedData("Audio file has no sample data")
        if length < HEADER_SIZE * 8:
            raise NoEmbeddedData("Audio file too small to contain embedded data")

        # Never scan more units than the largest legal frame needs.
        ceiling = (HEADER_SIZE + self._settings.max_payload_size) * 8
        length = min(length, ceiling)

        logger.info(f"Extracting from WAV samples at offset {offset}, scanning up to {length} bytes")
        samples = np.frombuffer(data, dtype=np.uint8, count=length, offset=offset)
        return read_frame(
            iter_lsb_bytes(samples),
            available=self.capacity(length),
            max_payload_size=self._settings.max_payload_size,
        )

