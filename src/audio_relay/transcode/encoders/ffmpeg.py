from __future__ import annotations

import asyncio
import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from ...errors import (
    EncoderUnavailableError,
    TranscodeFailedError,
    TranscodeOverflowError,
    TranscodeTimeoutError,
)
from ..types import MAX_CAPTURED_OUTPUT_BYTES, TRANSCODE_TIMEOUT_SECONDS, EncodingProfile
from .base import Encoder

logger = logging.getLogger(__name__)

_READ_CHUNK = 64 * 1024
_STDERR_EXCERPT_CHARS = 500


class FFmpegEncoder(Encoder):
    """Encoder backed by an ffmpeg executable run as a subprocess."""

    name = "ffmpeg"

    def __init__(
        self,
        *,
        binary: str = "ffmpeg",
        timeout_seconds: float = TRANSCODE_TIMEOUT_SECONDS,
        max_output_bytes: int = MAX_CAPTURED_OUTPUT_BYTES,
    ) -> None:
        self._binary = binary
        self._timeout_seconds = timeout_seconds
        self._max_output_bytes = max_output_bytes

    @property
    def binary(self) -> Optional[str]:
        return self._binary

    def is_available(self) -> bool:
        if os.path.isfile(self._binary):
            return True
        return shutil.which(self._binary) is not None

    def build_command(self, input_path: Path, output_path: Path, profile: EncodingProfile) -> list[str]:
        return [
            self._binary,
            "-i", str(input_path),
            "-codec:a", profile.codec,
            "-q:a", profile.quality,
            "-y",
            str(output_path),
        ]

    async def invoke(self, input_path: Path, output_path: Path, profile: EncodingProfile) -> None:
        command = self.build_command(input_path, output_path, profile)
        logger.info("relay.encoder.start", extra={"command": " ".join(command)})

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise EncoderUnavailableError(self._binary) from exc

        try:
            stderr = await asyncio.wait_for(self._communicate(process), timeout=self._timeout_seconds)
        except asyncio.TimeoutError as exc:
            await _terminate(process)
            logger.error("relay.encoder.timeout", extra={"timeout_seconds": self._timeout_seconds})
            raise TranscodeTimeoutError(self._timeout_seconds) from exc
        except TranscodeOverflowError:
            await _terminate(process)
            logger.error("relay.encoder.overflow", extra={"limit_bytes": self._max_output_bytes})
            raise

        if process.returncode != 0:
            excerpt = stderr.decode("utf-8", errors="replace").strip()[-_STDERR_EXCERPT_CHARS:]
            logger.error("relay.encoder.failed", extra={"exit_code": process.returncode, "stderr": excerpt})
            raise TranscodeFailedError(process.returncode, excerpt)

    async def _communicate(self, process: asyncio.subprocess.Process) -> bytes:
        """Drain stdout and stderr under a combined size cap; return stderr."""

        captured = {"stdout": bytearray(), "stderr": bytearray()}

        async def drain(name: str, stream: asyncio.StreamReader) -> None:
            sink = captured[name]
            while True:
                chunk = await stream.read(_READ_CHUNK)
                if not chunk:
                    return
                sink.extend(chunk)
                if len(captured["stdout"]) + len(captured["stderr"]) > self._max_output_bytes:
                    raise TranscodeOverflowError(self._max_output_bytes)

        assert process.stdout is not None and process.stderr is not None
        tasks = [
            asyncio.ensure_future(drain("stdout", process.stdout)),
            asyncio.ensure_future(drain("stderr", process.stderr)),
        ]
        try:
            await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                task.cancel()
            # retrieve every outcome so a second overflow is not left unobserved
            await asyncio.gather(*tasks, return_exceptions=True)
        await process.wait()
        return bytes(captured["stderr"])


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()
