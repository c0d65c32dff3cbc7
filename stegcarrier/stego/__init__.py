"""
Stegcarrier Steganography Module - Hidden Data Transmission.

This module hides an already encrypted blob inside carrier media. Every
codec embeds the same frame (magic number + length + payload) so that
extraction can tell real data from carrier noise.

Modules:
    bits: LSB-first bit packing helpers
    framing: Frame header writer and streaming frame detector
    image: LSB embedding in the RGB channels of images (PNG output)
    audio: LSB embedding in the sample bytes of WAV files
    video: Append-based hiding after the last byte of any container

Usage:
    >>> from stegcarrier.stego import ImageStego
    >>> codec = ImageStego()
    >>> png_bytes = codec.embed(carrier_image, blob)
    >>> blob = codec.extract(Image.open(io.BytesIO(png_bytes)))
"""

from .audio import AudioStego, data_chunk_region, locate_data_chunk
from .bits import bits_to_bytes, bytes_to_bits
from .framing import (
    HEADER_SIZE,
    MAGIC_NUMBER,
    FrameReader,
    check_payload_size,
    frame,
    parse_header,
    read_frame,
)
from .image import EmbeddingResult, ImageStego
from .video import VideoStego

__all__ = [
    # Codecs
    "ImageStego",
    "AudioStego",
    "VideoStego",
    "EmbeddingResult",
    # WAV parsing
    "data_chunk_region",
    "locate_data_chunk",
    # Framing
    "MAGIC_NUMBER",
    "HEADER_SIZE",
    "FrameReader",
    "frame",
    "check_payload_size",
    "parse_header",
    "read_frame",
    # Bit packing
    "bytes_to_bits",
    "bits_to_bytes",
]
