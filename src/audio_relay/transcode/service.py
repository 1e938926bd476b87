from __future__ import annotations

import logging
from typing import Optional

from ..audio import DecodedAudio
from ..errors import TranscodeFailedError
from ..settings import EncoderSettings
from .encoders.base import Encoder
from .encoders.ffmpeg import FFmpegEncoder
from .encoders.mock import MockEncoder
from .staging import StagingArea
from .types import DEFAULT_PROFILE, EncodingProfile

logger = logging.getLogger(__name__)


class TranscodeService:
    """Stages decoded audio, runs the encoder and reads back its output."""

    def __init__(self, *, encoder: Optional[Encoder] = None) -> None:
        self._encoder = encoder or FFmpegEncoder()

    @classmethod
    def from_settings(cls, cfg: EncoderSettings | None) -> "TranscodeService":
        encoder: Optional[Encoder] = None
        if cfg is not None:
            provider_name = (cfg.provider or "ffmpeg").strip().lower()
            if provider_name in {"mock", "fake"}:
                encoder = MockEncoder()
            elif provider_name == "ffmpeg":
                encoder = FFmpegEncoder(binary=cfg.binary)
            else:
                raise RuntimeError(f"unsupported encoder provider: {cfg.provider}")
        return cls(encoder=encoder)

    @property
    def encoder(self) -> Encoder:
        return self._encoder

    async def transcode(
        self,
        audio: DecodedAudio,
        profile: EncodingProfile = DEFAULT_PROFILE,
        *,
        staging: StagingArea,
    ) -> bytes:
        staged = staging.allocate(profile.output_suffix)
        staged.input_path.write_bytes(audio.data)

        await self._encoder.invoke(staged.input_path, staged.output_path, profile)

        try:
            encoded = staged.output_path.read_bytes()
        except FileNotFoundError as exc:
            raise TranscodeFailedError(0, "encoder produced no output file") from exc

        logger.info(
            "relay.transcode.done",
            extra={"encoder": self._encoder.name, "input_size": len(audio.data), "output_size": len(encoded)},
        )
        return encoded
