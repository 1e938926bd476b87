from __future__ import annotations

import hashlib
from pathlib import Path

from ..types import EncodingProfile
from .base import Encoder


class MockEncoder(Encoder):
    """Writes a deterministic stand-in for encoded audio."""

    name = "mock"

    def __init__(self) -> None:
        self.calls: list[tuple[Path, Path, EncodingProfile]] = []

    async def invoke(self, input_path: Path, output_path: Path, profile: EncodingProfile) -> None:
        self.calls.append((input_path, output_path, profile))
        source = input_path.read_bytes()
        digest = hashlib.sha256(source).digest()
        # roughly half the input, like a lossy re-encode
        body = (digest * (len(source) // (2 * len(digest)) + 1))[: max(len(source) // 2, 1)]
        output_path.write_bytes(b"ID3" + body)
