"""Encoder invocation for normalized audio."""

from .service import TranscodeService
from .staging import StagedFile, StagingArea
from .types import DEFAULT_PROFILE, MAX_CAPTURED_OUTPUT_BYTES, TRANSCODE_TIMEOUT_SECONDS, EncodingProfile

__all__ = [
    "TranscodeService",
    "StagedFile",
    "StagingArea",
    "DEFAULT_PROFILE",
    "MAX_CAPTURED_OUTPUT_BYTES",
    "TRANSCODE_TIMEOUT_SECONDS",
    "EncodingProfile",
]
