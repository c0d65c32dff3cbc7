"""
Bit packing helpers shared by the LSB codecs.

Bits are always ordered least-significant first within each byte, so the
byte ``0b00000110`` expands to ``[0, 1, 1, 0, 0, 0, 0, 0]``. All functions
are pure and work on fully buffered inputs.
"""

from typing import Iterator, Sequence, Union

import numpy as np

# Chunk size used when streaming LSBs out of a carrier. Must stay a multiple
# of 64 so that every chunk ends on a header boundary.
LSB_CHUNK_BITS = 64 * 4096

LSB_MASK = 0xFE
EXTRACT_MASK = 0x01

BitsLike = Union[np.ndarray, Sequence[int]]


def bytes_to_bits(data: bytes) -> np.ndarray:
    """
    Expand bytes into a uint8 array of single bits, LSB first.

    Args:
        data: Bytes to expand

    Returns:
        Array of length ``8 * len(data)`` holding only 0 and 1
    """
    raw = np.frombuffer(bytes(data), dtype=np.uint8)
    return np.unpackbits(raw, bitorder="little")


def bits_to_bytes(bits: BitsLike) -> bytes:
    """
    Group single bits (LSB first) back into bytes.

    A trailing group shorter than eight bits is padded with zero bits.

    Raises:
        ValueError: If any element is not 0 or 1
    """
    array = np.asarray(bits, dtype=np.int64).ravel()
    if array.size == 0:
        return b""
    if array.min() < 0 or array.max() > 1:
        raise ValueError("bits must only contain 0 and 1")
    return np.packbits(array.astype(np.uint8), bitorder="little").tobytes()


def write_lsb(values: np.ndarray, bits: np.ndarray) -> np.ndarray:
    """
    Return a copy of ``values`` whose first ``len(bits)`` LSBs carry ``bits``.

    Elements past the end of ``bits`` are copied unchanged.
    """
    if bits.size > values.size:
        raise ValueError(f"cannot write {bits.size} bits into {values.size} carrier units")
    result = values.copy()
    count = bits.size
    result[:count] = (result[:count] & LSB_MASK) | bits.astype(result.dtype)
    return result


def iter_lsb_bytes(values: np.ndarray, chunk_bits: int = LSB_CHUNK_BITS) -> Iterator[bytes]:
    """
    Stream the LSBs of ``values`` as packed bytes, one chunk at a time.

    Each yielded chunk covers ``chunk_bits`` carrier units (the final one may
    be shorter and is zero padded to a whole byte).
    """
    if chunk_bits <= 0 or chunk_bits % 64:
        raise ValueError(f"chunk_bits must be a positive multiple of 64, got {chunk_bits}")
    flat = values.ravel()
    for start in range(0, flat.size, chunk_bits):
        lsbs = flat[start:start + chunk_bits] & EXTRACT_MASK
        yield np.packbits(lsbs, bitorder="little").tobytes()
