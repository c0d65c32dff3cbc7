# Stegcarrier
# Passphrase-protected steganography for images, audio and video
#
# This package provides:
# - LSB embedding in image pixels and WAV samples, append-based hiding in video (stego)
# - PBKDF2 key derivation and AES-256-GCM encryption (crypto)
# - The secret model and its JSON wire form (secret)
# - One-call embed / extract orchestration (envelope)
# - Filename based carrier detection and output naming (media)
#
# Version: 1.0.0

__version__ = "1.0.0"

from .config import DEFAULT_SETTINGS, MAX_PAYLOAD_SIZE, StegoSettings
from .envelope import CarrierKind, SecretEnvelope
from .errors import (
    AuthenticationFailed,
    CipherInitError,
    CryptoError,
    InsufficientCapacity,
    InvalidCarrier,
    KeyDerivationError,
    MalformedCiphertext,
    MalformedSecret,
    NoEmbeddedData,
    PayloadTooLarge,
    StegCarrierError,
)
from .media import detect_carrier_kind, is_supported_carrier, suggest_output
from .secret import AudioSecret, ImageSecret, Secret, SecretKind, TextSecret, VideoSecret

__all__ = [
    # Orchestration
    'SecretEnvelope',
    'CarrierKind',
    # Secrets
    'Secret',
    'SecretKind',
    'TextSecret',
    'AudioSecret',
    'ImageSecret',
    'VideoSecret',
    # Settings
    'StegoSettings',
    'DEFAULT_SETTINGS',
    'MAX_PAYLOAD_SIZE',
    # Media helpers
    'detect_carrier_kind',
    'is_supported_carrier',
    'suggest_output',
    # Errors
    'StegCarrierError',
    'InvalidCarrier',
    'InsufficientCapacity',
    'NoEmbeddedData',
    'PayloadTooLarge',
    'CryptoError',
    'KeyDerivationError',
    'CipherInitError',
    'MalformedCiphertext',
    'AuthenticationFailed',
    'MalformedSecret',
]
