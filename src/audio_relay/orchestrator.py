"""Fetch, normalize, transcode and upload one remote audio object."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from .audio import ConversionResult, PayloadNormalizer
from .errors import MissingFieldError
from .schemas import ConversionRequest
from .settings import Settings, settings as runtime_settings
from .transcode import DEFAULT_PROFILE, EncodingProfile, StagingArea, TranscodeService
from .transfer_client import RemoteObjectClient

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("sourceUrl", "uploadUrl", "supabaseKey")


class TransferOrchestrator:
    """Runs the conversion cycle for a single request.

    Every failure propagates as a ``ConversionError`` subclass. Staged files
    live in a per-request ``StagingArea`` whose exit deletes them, so cleanup
    happens before the caller ever sees the result or the error.
    """

    def __init__(
        self,
        *,
        client: RemoteObjectClient,
        normalizer: PayloadNormalizer,
        transcoder: TranscodeService,
        staging_dir: str | Path,
        profile: EncodingProfile = DEFAULT_PROFILE,
        staging_factory: Optional[Callable[[Path], StagingArea]] = None,
    ) -> None:
        self._client = client
        self._normalizer = normalizer
        self._transcoder = transcoder
        self._staging_dir = Path(staging_dir)
        self._profile = profile
        self._staging_factory = staging_factory or StagingArea

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "TransferOrchestrator":
        cfg = cfg or runtime_settings
        return cls(
            client=RemoteObjectClient.from_settings(cfg.transfer),
            normalizer=PayloadNormalizer(),
            transcoder=TranscodeService.from_settings(cfg.encoder),
            staging_dir=cfg.staging.directory,
        )

    @property
    def transcoder(self) -> TranscodeService:
        return self._transcoder

    async def handle(self, request: ConversionRequest) -> ConversionResult:
        self._validate(request)
        started = time.perf_counter()

        raw = await self._client.fetch(request.source_url, credential=request.source_key)
        audio = self._normalizer.normalize(raw)

        with self._staging_factory(self._staging_dir) as staging:
            encoded = await self._transcoder.transcode(audio, self._profile, staging=staging)
            await self._client.upload(
                request.upload_url,
                encoded,
                credential=request.upload_key,
                content_type=self._profile.content_type,
            )

        result = ConversionResult(
            original_size=len(audio.data),
            converted_size=len(encoded),
            wrapper=audio.wrapper,
        )
        logger.info(
            "relay.convert.done",
            extra={
                "original_size": result.original_size,
                "converted_size": result.converted_size,
                "wrapper": result.wrapper.value,
                "latency_ms": round((time.perf_counter() - started) * 1000.0, 1),
            },
        )
        return result

    @staticmethod
    def _validate(request: ConversionRequest) -> None:
        values = {
            "sourceUrl": request.source_url,
            "uploadUrl": request.upload_url,
            "supabaseKey": request.upload_key,
        }
        missing = [name for name, value in values.items() if not value]
        if missing:
            raise MissingFieldError(missing, required=REQUIRED_FIELDS)


__all__ = ["TransferOrchestrator", "REQUIRED_FIELDS"]
