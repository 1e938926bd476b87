from __future__ import annotations

import abc
from pathlib import Path
from typing import Optional

from ..types import EncodingProfile


class Encoder(abc.ABC):
    """Interface for external audio encoders."""

    name: str

    @property
    def binary(self) -> Optional[str]:
        return None

    def is_available(self) -> bool:
        return True

    @abc.abstractmethod
    async def invoke(self, input_path: Path, output_path: Path, profile: EncodingProfile) -> None:
        """Encode ``input_path`` into ``output_path`` or raise a TranscodeError."""
        raise NotImplementedError
