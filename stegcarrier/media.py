"""
Filename helpers for carrier and secret files.

Carrier kind detection, extension validation and the suggested name and
content type of an output file are decided from file extensions only; the
codecs themselves never look at filenames.
"""

import mimetypes
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from .envelope import CarrierKind

# Extensions accepted as carriers, per kind. Audio embedding needs RIFF/WAVE.
CARRIER_EXTENSIONS: Dict[CarrierKind, Tuple[str, ...]] = {
    CarrierKind.IMAGE: (".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".tif", ".webp"),
    CarrierKind.AUDIO: (".wav",),
    CarrierKind.VIDEO: (".mp4", ".avi", ".mkv", ".mov", ".wmv", ".flv"),
}

SUPPORTED_FORMATS = {
    "carrier": {
        "image": ["PNG", "JPG", "JPEG", "BMP", "GIF", "TIFF", "WEBP"],
        "audio": ["WAV"],
        "video": ["MP4", "AVI", "MKV", "MOV", "WMV", "FLV"],
    },
    "secret": {
        "text": "Plain text messages",
        "image": ["PNG", "JPG", "JPEG", "BMP", "GIF", "TIFF"],
        "audio": ["WAV", "MP3", "FLAC", "AAC", "OGG", "M4A"],
        "video": ["MP4", "AVI", "MKV", "MOV", "WMV", "FLV", "WEBM"],
    },
}

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _extension(filename: Union[str, Path]) -> str:
    return Path(filename).suffix.lower()


def detect_carrier_kind(filename: Union[str, Path]) -> Optional[CarrierKind]:
    """
    Guess the carrier kind from the file extension.

    Returns:
        The matching CarrierKind, or None for unknown extensions.

    Example:
        >>> detect_carrier_kind("holiday.JPG")
        <CarrierKind.IMAGE: 'image'>
    """
    suffix = _extension(filename)
    for kind, extensions in CARRIER_EXTENSIONS.items():
        if suffix in extensions:
            return kind
    return None


def is_supported_carrier(filename: Union[str, Path], carrier_kind: Union[CarrierKind, str]) -> bool:
    """Whether ``filename`` has an extension accepted for ``carrier_kind``."""
    kind = CarrierKind.parse(carrier_kind)
    return _extension(filename) in CARRIER_EXTENSIONS[kind]


def suggest_output(carrier_kind: Union[CarrierKind, str], filename: Union[str, Path]) -> Tuple[str, str]:
    """
    Name and content type for an embedded carrier.

    Image carriers are always re-encoded as PNG, so their name gets a
    ``.png`` extension. Audio and video carriers keep their extension.

    Returns:
        ``(filename, content_type)``
    """
    kind = CarrierKind.parse(carrier_kind)
    path = Path(filename)
    stem = path.stem or "carrier"

    if kind is CarrierKind.IMAGE:
        return f"embedded_{stem}.png", "image/png"

    name = f"embedded_{stem}{path.suffix}"
    content_type, _ = mimetypes.guess_type(name)
    if content_type is None:
        content_type = "audio/wav" if kind is CarrierKind.AUDIO else DEFAULT_CONTENT_TYPE
    return name, content_type
