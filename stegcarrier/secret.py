"""
Secret payload model.

A secret is one of four variants (text, audio, image, video), all carrying
raw ``content`` bytes plus optional ``size`` and ``timestamp`` metadata.
Before encryption a secret is serialized to a compact JSON record::

    {"type": "text", "content": "hello"}
    {"type": "image", "content": "<base64>", "size": 1024, "timestamp": 1700000000}

Text content travels as the string itself; binary content as standard
base64. Deserialization validates every field and reports problems as
:class:`~stegcarrier.errors.MalformedSecret`.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Type

from .errors import MalformedSecret


class SecretKind(Enum):
    """Kinds of secret payload."""

    TEXT = "text"
    AUDIO = "audio"
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class Secret:
    """
    Base class of the secret variants.

    Attributes:
        content: Raw payload bytes
        size: Optional original size reported by the sender
        timestamp: Optional Unix timestamp reported by the sender
    """

    content: bytes
    size: Optional[int] = None
    timestamp: Optional[int] = None

    kind: ClassVar[SecretKind]
    default_filename: ClassVar[str]

    def __post_init__(self) -> None:
        if type(self) is Secret:
            raise TypeError("Secret is abstract; use a variant or Secret.create()")

    def _content_to_wire(self) -> str:
        return base64.b64encode(self.content).decode("ascii")

    @classmethod
    def _content_from_wire(cls, value: str) -> bytes:
        try:
            return base64.b64decode(value.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise MalformedSecret(f"Failed to decode {cls.kind.value} content: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {"type": self.kind.value, "content": self._content_to_wire()}
        if self.size is not None:
            record["size"] = self.size
        if self.timestamp is not None:
            record["timestamp"] = self.timestamp
        return record

    def to_bytes(self) -> bytes:
        """Serialize to the compact JSON wire form."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    def suggested_filename(self) -> str:
        return self.default_filename

    @staticmethod
    def create(
        kind: "SecretKind | str",
        content: bytes,
        size: Optional[int] = None,
        timestamp: Optional[int] = None,
    ) -> "Secret":
        """Build the variant matching ``kind``."""
        variant = _variant_for(kind)
        return variant(content=bytes(content), size=size, timestamp=timestamp)

    @classmethod
    def from_dict(cls, record: Any) -> "Secret":
        """
        Rebuild a secret from a decoded record.

        Raises:
            MalformedSecret: If required fields are absent or of the wrong type
        """
        if not isinstance(record, dict):
            raise MalformedSecret("Invalid message format - expected an object")

        kind = record.get("type")
        if not isinstance(kind, str):
            raise MalformedSecret("Invalid message format - missing or invalid type")
        content = record.get("content")
        if not isinstance(content, str):
            raise MalformedSecret("Invalid message format - missing or invalid content")

        try:
            variant = _variant_for(kind)
        except ValueError:
            raise MalformedSecret(f"Unknown message type: {kind}") from None

        return variant(
            content=variant._content_from_wire(content),
            size=_optional_int(record, "size"),
            timestamp=_optional_int(record, "timestamp"),
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Secret":
        """
        Deserialize the JSON wire form.

        Raises:
            MalformedSecret: If the bytes are not a valid serialized secret
        """
        try:
            record = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise MalformedSecret(f"Corrupted message data - invalid JSON format: {e}") from e
        return cls.from_dict(record)


@dataclass(frozen=True)
class TextSecret(Secret):
    """A UTF-8 text message."""

    kind = SecretKind.TEXT
    default_filename = "extracted_text.txt"

    def __post_init__(self) -> None:
        super().__post_init__()
        try:
            self.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(f"Text secret content must be valid UTF-8: {e}") from e

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    @classmethod
    def from_text(cls, text: str, size: Optional[int] = None, timestamp: Optional[int] = None) -> "TextSecret":
        return cls(content=text.encode("utf-8"), size=size, timestamp=timestamp)

    def _content_to_wire(self) -> str:
        return self.text

    @classmethod
    def _content_from_wire(cls, value: str) -> bytes:
        try:
            return value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise MalformedSecret(f"Text content is not valid Unicode: {e}") from e


@dataclass(frozen=True)
class AudioSecret(Secret):
    kind = SecretKind.AUDIO
    default_filename = "extracted_audio.wav"


@dataclass(frozen=True)
class ImageSecret(Secret):
    kind = SecretKind.IMAGE
    default_filename = "extracted_image.png"


@dataclass(frozen=True)
class VideoSecret(Secret):
    kind = SecretKind.VIDEO
    default_filename = "extracted_video.mp4"


_VARIANTS: Dict[SecretKind, Type[Secret]] = {
    variant.kind: variant for variant in (TextSecret, AudioSecret, ImageSecret, VideoSecret)
}


def _variant_for(kind: "SecretKind | str") -> Type[Secret]:
    return _VARIANTS[SecretKind(kind)]


def _optional_int(record: Dict[str, Any], field: str) -> Optional[int]:
    value = record.get(field)
    if value is None:
        return None
    # JSON numbers may arrive as integral floats.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedSecret(f"Invalid message format - {field} must be an integer")
    return value
