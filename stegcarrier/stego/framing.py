"""
Payload framing.

Every codec embeds the same self-describing frame::

    offset  size    field
    0       4       magic   0xDEADBEEF, little-endian
    4       4       length  payload length, little-endian, 0 < length <= max
    8       length  payload

Writing is a single call (:func:`frame`). Reading is a streaming protocol
(:class:`FrameReader`): codecs feed carrier units as they extract them and
the reader reports the payload as soon as the header and ``length`` payload
bytes are available, never looking past the extractable region.
"""

import logging
import struct
from typing import Iterable, Optional, Tuple

from ..config import MAX_PAYLOAD_SIZE
from ..errors import NoEmbeddedData, PayloadTooLarge

logger = logging.getLogger(__name__)

MAGIC_NUMBER = 0xDEADBEEF
HEADER_FORMAT = "<II"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
MAGIC_BYTES = struct.pack("<I", MAGIC_NUMBER)


def frame(payload: bytes, max_payload_size: int = MAX_PAYLOAD_SIZE) -> bytes:
    """
    Prefix ``payload`` with the magic/length header.

    Payloads longer than ``max_payload_size`` are truncated to that size.
    This is lossy; callers on the embed path use :func:`check_payload_size`
    first so truncation never happens silently.
    """
    if len(payload) > max_payload_size:
        logger.warning(
            f"Payload of {len(payload)} bytes truncated to {max_payload_size} bytes while framing"
        )
        payload = payload[:max_payload_size]
    return struct.pack(HEADER_FORMAT, MAGIC_NUMBER, len(payload)) + bytes(payload)


def framed_size(payload_length: int) -> int:
    """Number of bytes :func:`frame` produces for a payload of this length."""
    return HEADER_SIZE + payload_length


def check_payload_size(payload: bytes, max_payload_size: int = MAX_PAYLOAD_SIZE) -> None:
    """
    Reject payloads that :func:`frame` would have to truncate.

    Raises:
        ValueError: If the payload is empty (a zero length never validates)
        PayloadTooLarge: If the payload exceeds the limit
    """
    if len(payload) == 0:
        raise ValueError("Payload cannot be empty")
    if len(payload) > max_payload_size:
        raise PayloadTooLarge(
            f"Payload of {len(payload)} bytes exceeds maximum of {max_payload_size} bytes",
            details={"size": len(payload), "max_size": max_payload_size},
        )


def parse_header(header: bytes) -> Tuple[int, int]:
    """Decode an 8-byte header into ``(magic, length)``."""
    if len(header) < HEADER_SIZE:
        raise ValueError(f"header needs {HEADER_SIZE} bytes, got {len(header)}")
    return struct.unpack(HEADER_FORMAT, bytes(header[:HEADER_SIZE]))


def is_valid_length(length: int, max_payload_size: int = MAX_PAYLOAD_SIZE) -> bool:
    return 0 < length <= max_payload_size


class FrameReader:
    """
    Incremental frame detector.

    Codecs feed extracted bytes in chunks whose sizes are multiples of the
    header size. The header always sits at the very start of the stream, so
    once the first eight bytes are known the reader either commits to a
    payload length or rejects the stream; further input cannot change a
    rejection and the codec may stop scanning.

    Args:
        available: Total number of whole bytes the carrier can yield
        max_payload_size: Largest acceptable declared length
    """

    def __init__(self, available: int, max_payload_size: int = MAX_PAYLOAD_SIZE):
        self._available = max(0, available)
        self._max_payload_size = max_payload_size
        self._buffer = bytearray()
        self._length: Optional[int] = None
        self._payload: Optional[bytes] = None
        self._reason: Optional[str] = None

    @property
    def done(self) -> bool:
        """True once the reader has either a payload or a final rejection."""
        return self._payload is not None or self._reason is not None

    @property
    def consumed(self) -> int:
        return len(self._buffer)

    def feed(self, chunk: bytes) -> Optional[bytes]:
        """
        Append extracted bytes and return the payload once it is complete.

        Bytes beyond the carrier's available region are ignored.
        """
        if self.done:
            return self._payload

        room = self._available - len(self._buffer)
        if self._length is not None:
            room = min(room, HEADER_SIZE + self._length - len(self._buffer))
        if room > 0:
            self._buffer.extend(chunk[:room])

        if self._length is None and len(self._buffer) >= HEADER_SIZE:
            self._check_header()

        if self._length is not None and len(self._buffer) >= HEADER_SIZE + self._length:
            self._payload = bytes(self._buffer[HEADER_SIZE:HEADER_SIZE + self._length])
            logger.debug(f"Frame complete: {self._length} payload bytes")
        return self._payload

    def _check_header(self) -> None:
        magic, length = parse_header(self._buffer)
        if magic != MAGIC_NUMBER:
            self._reason = "no embedded data header found"
        elif not is_valid_length(length, self._max_payload_size):
            self._reason = f"embedded header declares invalid length {length}"
        elif HEADER_SIZE + length > self._available:
            self._reason = (
                f"embedded header declares {length} bytes but carrier only holds "
                f"{max(0, self._available - HEADER_SIZE)}"
            )
        else:
            self._length = length
            logger.debug(f"Found frame header declaring {length} bytes")

    def finish(self) -> bytes:
        """
        Return the payload, or raise if the stream ended without one.

        Raises:
            NoEmbeddedData: If no complete frame was found
        """
        if self._payload is not None:
            return self._payload
        reason = self._reason or "carrier exhausted before a complete frame was found"
        raise NoEmbeddedData(
            reason[0].upper() + reason[1:],
            details={"consumed": len(self._buffer), "available": self._available},
        )


def read_frame(
    chunks: Iterable[bytes],
    available: int,
    max_payload_size: int = MAX_PAYLOAD_SIZE,
) -> bytes:
    """
    Drive a :class:`FrameReader` over lazily extracted chunks.

    Stops pulling chunks as soon as the reader is done.
    """
    reader = FrameReader(available, max_payload_size)
    for chunk in chunks:
        reader.feed(chunk)
        if reader.done:
            break
    return reader.finish()
