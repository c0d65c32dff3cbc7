# Stegcarrier Test Configuration
# Shared fixtures: in-memory carriers and fast settings

import io
import os
import sys
import wave

import numpy as np
import pytest
from PIL import Image

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from stegcarrier.config import MIN_KDF_ITERATIONS, StegoSettings

TEST_ITERATIONS = MIN_KDF_ITERATIONS


def make_image(width=100, height=100, mode="RGB", seed=0):
    """Build a noisy test image so LSB changes are not all from zero."""
    rng = np.random.default_rng(seed)
    channels = len(mode)
    pixels = rng.integers(0, 256, size=(height, width, channels), dtype=np.uint8)
    if channels == 1:
        pixels = pixels[:, :, 0]
    return Image.fromarray(pixels).convert(mode)


def image_bytes(image, format="PNG"):
    buffer = io.BytesIO()
    image.save(buffer, format=format)
    return buffer.getvalue()


def make_wav(frames=8000, channels=1, sample_width=2, framerate=8000, seed=0):
    """Build a WAV file of random samples with the stdlib wave writer."""
    rng = np.random.default_rng(seed)
    samples = rng.integers(0, 256, size=frames * channels * sample_width, dtype=np.uint8)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(sample_width)
        writer.setframerate(framerate)
        writer.writeframes(samples.tobytes())
    return buffer.getvalue()


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return os.path.dirname(os.path.dirname(__file__))


@pytest.fixture
def fast_settings():
    """Settings with the lowest accepted PBKDF2 cost."""
    return StegoSettings(kdf_iterations=TEST_ITERATIONS)


@pytest.fixture
def rgb_image():
    """100x100 RGB carrier (3750 bytes of framed capacity)."""
    return make_image(100, 100, "RGB")


@pytest.fixture
def rgba_image():
    """100x100 RGBA carrier with partial transparency."""
    image = make_image(100, 100, "RGBA", seed=1)
    return image


@pytest.fixture
def rgb_png_bytes(rgb_image):
    return image_bytes(rgb_image)


@pytest.fixture
def wav_bytes():
    """One second of 16-bit mono noise: 16000 sample bytes, 2000 bytes capacity."""
    return make_wav()


@pytest.fixture
def video_bytes():
    """Opaque 1,000,000-byte container standing in for a video file."""
    rng = np.random.default_rng(7)
    return b"\x00\x00\x00\x18ftypmp42" + rng.integers(0, 256, size=1_000_000 - 12, dtype=np.uint8).tobytes()


@pytest.fixture
def image_factory():
    """Factory fixture: image_factory(width, height, mode, seed)."""
    return make_image


@pytest.fixture
def wav_factory():
    """Factory fixture: wav_factory(frames, channels, sample_width, framerate, seed)."""
    return make_wav


@pytest.fixture
def encode_image():
    """Encode a PIL image to bytes (PNG by default)."""
    return image_bytes
