"""Payload normalization for fetched audio objects."""

from .normalizer import MIN_AUDIO_BYTES, PayloadNormalizer, WrapperRule
from .types import ConversionResult, DecodedAudio, WrapperKind

__all__ = [
    "MIN_AUDIO_BYTES",
    "PayloadNormalizer",
    "WrapperRule",
    "ConversionResult",
    "DecodedAudio",
    "WrapperKind",
]
