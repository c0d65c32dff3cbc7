"""
Integration Tests for the Complete Stegcarrier Workflow

These tests run secrets through serialization, key derivation, encryption
and every carrier codec, then back again.
"""

import pytest

from stegcarrier import (
    AudioSecret,
    AuthenticationFailed,
    CarrierKind,
    ImageSecret,
    InsufficientCapacity,
    MalformedSecret,
    NoEmbeddedData,
    SecretEnvelope,
    TextSecret,
    VideoSecret,
)
from stegcarrier.crypto import AuthenticatedCipher, derive_key
from stegcarrier.stego import ImageStego, VideoStego


@pytest.fixture
def envelope(fast_settings):
    return SecretEnvelope(settings=fast_settings)


@pytest.fixture
def carriers(rgb_png_bytes, wav_bytes, video_bytes):
    return {
        CarrierKind.IMAGE: rgb_png_bytes,
        CarrierKind.AUDIO: wav_bytes,
        CarrierKind.VIDEO: video_bytes,
    }


SECRETS = [
    TextSecret.from_text("hello"),
    TextSecret.from_text("Unicode ✓ مرحبا 日本語", size=25, timestamp=1700000000),
    AudioSecret(content=b"RIFF\x24\x00\x00\x00WAVEfmt ", size=16),
    ImageSecret(content=bytes(range(256)) * 2),
    VideoSecret(content=b"\x00\x00\x00\x18ftypmp42", timestamp=1700000001),
]


class TestEnvelopeRoundTrip:
    """Round trips across every carrier kind."""

    @pytest.mark.parametrize("kind", list(CarrierKind))
    @pytest.mark.parametrize("secret", SECRETS, ids=lambda s: s.kind.value)
    def test_roundtrip(self, envelope, carriers, kind, secret):
        stego = envelope.embed(secret, "correct horse", carriers[kind], kind)
        assert envelope.extract(stego, kind, "correct horse") == secret

    @pytest.mark.parametrize("kind", list(CarrierKind))
    def test_wrong_passphrase(self, envelope, carriers, kind):
        stego = envelope.embed(TextSecret.from_text("hello"), "correct horse", carriers[kind], kind)
        with pytest.raises(AuthenticationFailed):
            envelope.extract(stego, kind, "wrong horse")

    @pytest.mark.parametrize("kind", list(CarrierKind))
    def test_clean_carrier_has_nothing(self, envelope, carriers, kind):
        with pytest.raises(NoEmbeddedData):
            envelope.extract(carriers[kind], kind, "correct horse")

    def test_iteration_mismatch_fails_authentication(self, fast_settings, video_bytes):
        stego = SecretEnvelope(settings=fast_settings).embed(
            TextSecret.from_text("hello"), "pass", video_bytes, "video"
        )
        other = SecretEnvelope(settings=fast_settings.with_overrides(kdf_iterations=20_000))
        with pytest.raises(AuthenticationFailed):
            other.extract(stego, "video", "pass")


class TestConcreteScenarios:
    """Known-answer scenarios for the hundred pixel image and the video guard."""

    def test_hello_in_hundred_pixel_image(self, envelope, image_factory, encode_image):
        carrier = encode_image(image_factory(100, 100, "RGB", seed=3))
        assert envelope.capacity(carrier, "image") == 3742

        stego_png = envelope.embed(TextSecret.from_text("hello"), "correct horse", carrier, "image")
        secret = envelope.extract(stego_png, "image", "correct horse")

        assert isinstance(secret, TextSecret)
        assert secret.text == "hello"
        with pytest.raises(AuthenticationFailed, match="wrong passphrase or corrupted data"):
            envelope.extract(stego_png, "image", "wrong horse")

    def test_secret_filling_image_exactly(self, envelope, rgb_png_bytes):
        """Largest text secret whose framed blob is exactly 3750 bytes fits; one more byte does not."""
        room = 3742 - SecretEnvelope.overhead()
        wrapper = len(TextSecret.from_text("").to_bytes())
        fits = TextSecret.from_text("a" * (room - wrapper))
        assert len(fits.to_bytes()) == room

        stego_png = envelope.embed(fits, "pass", rgb_png_bytes, "image")
        assert envelope.extract(stego_png, "image", "pass") == fits

        with pytest.raises(InsufficientCapacity) as exc_info:
            envelope.embed(TextSecret.from_text("a" * (room - wrapper + 1)), "pass", rgb_png_bytes, "image")
        assert exc_info.value.required == 3751
        assert exc_info.value.capacity == 3750

    def test_video_append_guard(self, envelope):
        blob_secret = ImageSecret(content=b"\x01" * 30)

        large = bytes(1_000_000)
        stego = envelope.embed(blob_secret, "pass", large, "video")
        assert stego[:1_000_000] == large
        assert envelope.extract(stego, "video", "pass") == blob_secret

        with pytest.raises(InsufficientCapacity):
            envelope.embed(blob_secret, "pass", bytes(5_000), "video")

    def test_hundred_byte_blob_in_video(self):
        """Codec level: 100 bytes into 1,000,000 succeeds and into 5,000 fails."""
        codec = VideoStego()
        assert codec.extract(codec.embed(bytes(1_000_000), b"s" * 100)) == b"s" * 100
        with pytest.raises(InsufficientCapacity):
            codec.embed(bytes(5_000), b"s" * 100)


class TestTampering:
    """Damaged carriers surface typed errors, never crashes."""

    def test_flipped_ciphertext_bit_in_video(self, envelope, video_bytes):
        stego = bytearray(envelope.embed(TextSecret.from_text("hello"), "pass", video_bytes, "video"))
        stego[-1] ^= 0x01

        with pytest.raises(AuthenticationFailed):
            envelope.extract(bytes(stego), "video", "pass")

    def test_valid_ciphertext_of_non_secret(self, envelope, rgb_image, fast_settings):
        """Authenticated plaintext that is not a secret record is MalformedSecret."""
        salt = bytes(16)
        key = derive_key("pass", salt, iterations=fast_settings.kdf_iterations)
        blob = salt + AuthenticatedCipher().encrypt(b"not a json record", key)
        stego_png = ImageStego().embed(rgb_image, blob)

        with pytest.raises(MalformedSecret):
            envelope.extract(stego_png, "image", "pass")

    def test_reencoded_image_loses_payload(self, envelope, rgb_png_bytes, encode_image):
        stego_png = envelope.embed(TextSecret.from_text("hello"), "pass", rgb_png_bytes, "image")
        jpeg = encode_image(ImageStego.load(stego_png).convert("RGB"), format="JPEG")

        with pytest.raises((NoEmbeddedData, AuthenticationFailed)):
            envelope.extract(jpeg, "image", "pass")
