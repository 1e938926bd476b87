from __future__ import annotations

from dataclasses import dataclass

TRANSCODE_TIMEOUT_SECONDS = 25.0
MAX_CAPTURED_OUTPUT_BYTES = 50 * 1024 * 1024


@dataclass(slots=True, frozen=True)
class EncodingProfile:
    codec: str
    quality: str
    output_suffix: str
    content_type: str


# libmp3lame VBR quality 2 (~190 kbps)
DEFAULT_PROFILE = EncodingProfile(
    codec="libmp3lame",
    quality="2",
    output_suffix=".mp3",
    content_type="audio/mpeg",
)
