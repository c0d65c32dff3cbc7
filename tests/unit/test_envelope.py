"""
Unit Tests for SecretEnvelope and the media helpers.
"""

import pytest
from PIL import Image

from stegcarrier.crypto import MIN_CIPHERTEXT_SIZE, SALT_SIZE
from stegcarrier.envelope import CarrierKind, SecretEnvelope
from stegcarrier.errors import InvalidCarrier, NoEmbeddedData, PayloadTooLarge
from stegcarrier.media import (
    SUPPORTED_FORMATS,
    detect_carrier_kind,
    is_supported_carrier,
    suggest_output,
)
from stegcarrier.secret import ImageSecret, TextSecret
from stegcarrier.stego import VideoStego
from stegcarrier.stego.framing import frame


class TestCarrierKind:

    @pytest.mark.parametrize("value,expected", [
        ("image", CarrierKind.IMAGE),
        (" Audio ", CarrierKind.AUDIO),
        (CarrierKind.VIDEO, CarrierKind.VIDEO),
    ])
    def test_parse(self, value, expected):
        assert CarrierKind.parse(value) is expected

    def test_unknown_kind(self):
        with pytest.raises(InvalidCarrier, match="Unsupported carrier type"):
            CarrierKind.parse("pdf")


class TestSecretEnvelope:
    """Test cases for the embed/extract orchestration."""

    @pytest.fixture
    def envelope(self, fast_settings):
        return SecretEnvelope(settings=fast_settings)

    def test_overhead(self):
        assert SecretEnvelope.overhead() == 44

    def test_iteration_override(self, fast_settings):
        envelope = SecretEnvelope(kdf_iterations=20_000)
        assert envelope.settings.kdf_iterations == 20_000
        assert SecretEnvelope(settings=fast_settings).settings is fast_settings

    def test_capacity(self, envelope, rgb_png_bytes, wav_bytes, video_bytes):
        assert envelope.capacity(rgb_png_bytes, "image") == 3742
        assert envelope.capacity(wav_bytes, "audio") == 1992
        assert envelope.capacity(video_bytes, CarrierKind.VIDEO) == 9992

    def test_capacity_of_invalid_carrier(self, envelope):
        with pytest.raises(InvalidCarrier):
            envelope.capacity(b"garbage", "image")
        with pytest.raises(InvalidCarrier):
            envelope.capacity(b"garbage" * 10, "audio")

    def test_oversized_image_carrier(self, envelope, monkeypatch, rgb_png_bytes):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 2_000)
        with pytest.raises(InvalidCarrier):
            envelope.embed(TextSecret.from_text("hi"), "p", rgb_png_bytes, "image")
        with pytest.raises(InvalidCarrier):
            envelope.capacity(rgb_png_bytes, "image")

    def test_blob_layout(self, fast_settings, video_bytes):
        """The embedded blob is salt followed by nonce, ciphertext and tag."""
        draws = []

        def random_bytes(n):
            draws.append(n)
            return bytes([len(draws)]) * n

        envelope = SecretEnvelope(settings=fast_settings, random_bytes=random_bytes)
        secret = TextSecret.from_text("hello")
        stego_video = envelope.embed(secret, "correct horse", video_bytes, "video")

        blob = VideoStego().extract(stego_video)
        assert draws == [16, 12]
        assert blob[:16] == b"\x01" * 16
        assert blob[16:28] == b"\x02" * 12
        assert len(blob) == len(secret.to_bytes()) + SecretEnvelope.overhead()

    def test_fresh_salt_each_embed(self, envelope, video_bytes):
        secret = TextSecret.from_text("hello")
        first = envelope.embed(secret, "pass", video_bytes, "video")
        second = envelope.embed(secret, "pass", video_bytes, "video")
        assert first != second

    def test_empty_passphrase(self, envelope, video_bytes):
        with pytest.raises(ValueError):
            envelope.embed(TextSecret.from_text("x"), "", video_bytes, "video")
        with pytest.raises(ValueError):
            envelope.extract(video_bytes, "video", "")

    def test_blob_too_short(self, envelope, video_bytes):
        """A valid frame too short for salt and ciphertext is not our data."""
        carrier = video_bytes + frame(b"\x00" * (SALT_SIZE + MIN_CIPHERTEXT_SIZE - 1))
        with pytest.raises(NoEmbeddedData, match="too short"):
            envelope.extract(carrier, "video", "pass")

    def test_payload_limit(self, fast_settings, video_bytes):
        envelope = SecretEnvelope(settings=fast_settings.with_overrides(max_payload_size=64))
        with pytest.raises(PayloadTooLarge):
            envelope.embed(ImageSecret(content=b"x" * 64), "pass", video_bytes, "video")

    def test_unknown_carrier_kind(self, envelope, video_bytes):
        with pytest.raises(InvalidCarrier):
            envelope.embed(TextSecret.from_text("x"), "pass", video_bytes, "pdf")


class TestMediaHelpers:
    """Test cases for filename based helpers."""

    @pytest.mark.parametrize("filename,expected", [
        ("photo.PNG", CarrierKind.IMAGE),
        ("scan.tif", CarrierKind.IMAGE),
        ("/tmp/song.wav", CarrierKind.AUDIO),
        ("clip.mkv", CarrierKind.VIDEO),
        ("notes.txt", None),
        ("no_extension", None),
    ])
    def test_detect_carrier_kind(self, filename, expected):
        assert detect_carrier_kind(filename) is expected

    def test_is_supported_carrier(self):
        assert is_supported_carrier("a.jpeg", "image")
        assert is_supported_carrier("a.mov", CarrierKind.VIDEO)
        assert not is_supported_carrier("a.mp3", "audio")
        assert not is_supported_carrier("a.png", "video")

    def test_suggest_output_image_is_png(self):
        assert suggest_output("image", "holiday.jpg") == ("embedded_holiday.png", "image/png")

    def test_suggest_output_keeps_extension(self):
        name, content_type = suggest_output("audio", "/music/song.wav")
        assert name == "embedded_song.wav"
        assert content_type in ("audio/wav", "audio/x-wav")

        name, content_type = suggest_output(CarrierKind.VIDEO, "clip.mp4")
        assert (name, content_type) == ("embedded_clip.mp4", "video/mp4")

    def test_suggest_output_unknown_type(self):
        assert suggest_output("video", "clip.xyz123") == ("embedded_clip.xyz123", "application/octet-stream")

    def test_supported_formats_table(self):
        assert set(SUPPORTED_FORMATS["carrier"]) == {"image", "audio", "video"}
        assert set(SUPPORTED_FORMATS["secret"]) == {"text", "image", "audio", "video"}
