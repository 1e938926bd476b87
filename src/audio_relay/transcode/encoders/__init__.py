"""Encoder implementations."""

from .base import Encoder
from .ffmpeg import FFmpegEncoder
from .mock import MockEncoder

__all__ = [
    "Encoder",
    "FFmpegEncoder",
    "MockEncoder",
]
