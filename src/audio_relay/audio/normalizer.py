"""Content sniffing for payloads returned by the upstream automation system.

The same logical audio object may arrive as raw bytes, as a JSON-serialized
``{"type": "Buffer", "data": [...]}`` structure, or as base64 text, and the
declared content type cannot be trusted. Wrappers are recognised from a bounded
prefix in a fixed priority order: the JSON check runs before the base64 check
because JSON text is itself printable ASCII.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..errors import MalformedPayloadError, PayloadTooSmallError
from .types import DecodedAudio, WrapperKind

logger = logging.getLogger(__name__)

MIN_AUDIO_BYTES = 1000
SNIFF_PREFIX_BYTES = 30
BASE64_SAMPLE_BYTES = 100

_BUFFER_MARKER = re.compile(rb'\s*\{\s*"type"\s*:\s*"Buffer"')
_BASE64_SAMPLE = re.compile(rb"[A-Za-z0-9+/=\s]+")
_WHITESPACE = re.compile(rb"\s+")


class WrapperMismatch(Exception):
    """Raised by a decoder when the payload is not its wrapper after all."""


@dataclass(frozen=True)
class WrapperRule:
    kind: WrapperKind
    matches: Callable[[bytes], bool]
    decode: Callable[[bytes], bytes]


def looks_like_json_buffer(raw: bytes) -> bool:
    return _BUFFER_MARKER.match(raw[:SNIFF_PREFIX_BYTES]) is not None


def looks_like_base64(raw: bytes) -> bool:
    sample = raw[:BASE64_SAMPLE_BYTES]
    if not sample.strip() or b"\x00" in sample:
        return False
    return _BASE64_SAMPLE.fullmatch(sample) is not None


def decode_json_buffer(raw: bytes) -> bytes:
    try:
        document = json.loads(raw)
    except ValueError as exc:
        raise MalformedPayloadError("Invalid JSON Buffer payload") from exc

    if not isinstance(document, dict) or document.get("type") != "Buffer":
        raise MalformedPayloadError("JSON payload is not a Buffer structure")
    values = document.get("data")
    if not isinstance(values, list):
        raise MalformedPayloadError("Buffer payload has no data array")
    if any(isinstance(value, bool) for value in values):
        raise MalformedPayloadError("Buffer data element is not a number: boolean")

    try:
        return bytes(values)
    except (TypeError, ValueError):
        # out-of-range or non-integer elements; mask each to 8 bits
        return bytes(_to_byte(value) for value in values)


def _to_byte(value: object) -> int:
    if isinstance(value, bool):
        raise MalformedPayloadError(f"Buffer data element is not a number: {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise MalformedPayloadError(f"Buffer data element is not finite: {value!r}")
        return int(value) & 0xFF
    if isinstance(value, int):
        return value & 0xFF
    raise MalformedPayloadError(f"Buffer data element is not a number: {value!r}")


def decode_base64_text(raw: bytes) -> bytes:
    compact = _WHITESPACE.sub(b"", raw)
    compact += b"=" * (-len(compact) % 4)
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise WrapperMismatch(f"base64 decode failed: {exc}") from exc


def passthrough(raw: bytes) -> bytes:
    return bytes(raw)


DEFAULT_RULES: Sequence[WrapperRule] = (
    WrapperRule(WrapperKind.JSON_ENCODED_BUFFER, looks_like_json_buffer, decode_json_buffer),
    WrapperRule(WrapperKind.BASE64_TEXT, looks_like_base64, decode_base64_text),
    WrapperRule(WrapperKind.RAW_BINARY, lambda raw: True, passthrough),
)


class PayloadNormalizer:
    """Turns a fetched byte blob of unknown wrapping into plain audio bytes."""

    def __init__(
        self,
        *,
        min_bytes: int = MIN_AUDIO_BYTES,
        rules: Optional[Sequence[WrapperRule]] = None,
    ) -> None:
        self._min_bytes = min_bytes
        self._rules = tuple(rules or DEFAULT_RULES)

    def classify(self, raw: bytes) -> WrapperKind:
        """Return the first wrapper whose prefix check accepts ``raw``."""

        for rule in self._rules:
            if rule.matches(raw):
                return rule.kind
        return WrapperKind.RAW_BINARY

    def normalize(self, raw: bytes) -> DecodedAudio:
        kind = WrapperKind.RAW_BINARY
        data = bytes(raw)
        for rule in self._rules:
            if not rule.matches(raw):
                continue
            try:
                data = rule.decode(raw)
            except WrapperMismatch as exc:
                logger.warning(
                    "relay.normalize.fallthrough",
                    extra={"wrapper": rule.kind.value, "reason": str(exc)},
                )
                continue
            kind = rule.kind
            break

        logger.info(
            "relay.normalize.classified",
            extra={"wrapper": kind.value, "raw_size": len(raw), "decoded_size": len(data)},
        )
        if len(data) < self._min_bytes:
            raise PayloadTooSmallError(len(data), self._min_bytes)
        return DecodedAudio(data=data, wrapper=kind, raw_size=len(raw))


__all__ = [
    "MIN_AUDIO_BYTES",
    "SNIFF_PREFIX_BYTES",
    "BASE64_SAMPLE_BYTES",
    "DEFAULT_RULES",
    "PayloadNormalizer",
    "WrapperMismatch",
    "WrapperRule",
    "decode_base64_text",
    "decode_json_buffer",
    "looks_like_base64",
    "looks_like_json_buffer",
]
