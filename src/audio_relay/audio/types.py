from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict


class WrapperKind(str, enum.Enum):
    """Serialization envelope found around fetched audio bytes."""

    RAW_BINARY = "raw_binary"
    JSON_ENCODED_BUFFER = "json_encoded_buffer"
    BASE64_TEXT = "base64_text"


@dataclass(slots=True, frozen=True)
class DecodedAudio:
    """Literal audio container bytes, ready for the encoder."""

    data: bytes
    wrapper: WrapperKind
    raw_size: int


@dataclass(slots=True, frozen=True)
class ConversionResult:
    """Outcome of one successful fetch-normalize-transcode-upload cycle."""

    original_size: int
    converted_size: int
    wrapper: WrapperKind

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "originalSize": self.original_size,
            "convertedSize": self.converted_size,
            "wrapper": self.wrapper.value,
        }
