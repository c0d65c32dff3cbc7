"""
Runtime settings shared by the codecs, the crypto layer and the envelope.

All values have secure defaults; callers override individual fields when
constructing :class:`StegoSettings`. Values are validated eagerly so that a
misconfiguration fails at startup rather than half-way through an embed.
"""

from dataclasses import dataclass, replace
from typing import Any

# Matches the carrier-independent 10 MiB ceiling of the binary header.
MAX_PAYLOAD_SIZE = 10 * 1024 * 1024

DEFAULT_KDF_ITERATIONS = 100_000
MIN_KDF_ITERATIONS = 10_000
SUPPORTED_KDF_ALGORITHMS = ("sha256", "sha512")

# Canonical RIFF/WAVE header length, used when chunk parsing fails.
DEFAULT_AUDIO_OFFSET = 44

# Appended video payload may be at most 1% of the carrier size.
DEFAULT_VIDEO_SIZE_DIVISOR = 100


@dataclass(frozen=True)
class StegoSettings:
    """
    Settings for one embed/extract configuration.

    Attributes:
        kdf_iterations: PBKDF2 iteration count (must match between embed and extract)
        kdf_algorithm: PBKDF2 PRF hash, "sha256" or "sha512"
        max_payload_size: Largest payload (bytes) accepted inside a frame
        video_size_divisor: Framed blob may be at most len(carrier) // divisor bytes
        audio_fallback_offset: Sample offset used when the WAV data chunk is not found
        png_compress_level: zlib level for the lossless PNG output (0-9)
    """

    kdf_iterations: int = DEFAULT_KDF_ITERATIONS
    kdf_algorithm: str = "sha256"
    max_payload_size: int = MAX_PAYLOAD_SIZE
    video_size_divisor: int = DEFAULT_VIDEO_SIZE_DIVISOR
    audio_fallback_offset: int = DEFAULT_AUDIO_OFFSET
    png_compress_level: int = 9

    def __post_init__(self) -> None:
        if self.kdf_iterations < MIN_KDF_ITERATIONS:
            raise ValueError(
                f"kdf_iterations must be at least {MIN_KDF_ITERATIONS}, got {self.kdf_iterations}"
            )
        if self.kdf_algorithm not in SUPPORTED_KDF_ALGORITHMS:
            raise ValueError(
                f"Unsupported kdf_algorithm: {self.kdf_algorithm}. "
                f"Must be one of {', '.join(SUPPORTED_KDF_ALGORITHMS)}"
            )
        if not 0 < self.max_payload_size <= MAX_PAYLOAD_SIZE:
            raise ValueError(
                f"max_payload_size must be in (0, {MAX_PAYLOAD_SIZE}], got {self.max_payload_size}"
            )
        if self.video_size_divisor < 1:
            raise ValueError(f"video_size_divisor must be positive, got {self.video_size_divisor}")
        if self.audio_fallback_offset < 0:
            raise ValueError(f"audio_fallback_offset must be non-negative, got {self.audio_fallback_offset}")
        if not 0 <= self.png_compress_level <= 9:
            raise ValueError(f"png_compress_level must be in [0, 9], got {self.png_compress_level}")

    def with_overrides(self, **overrides: Any) -> "StegoSettings":
        """Return a copy with the given non-None fields replaced."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


DEFAULT_SETTINGS = StegoSettings()
