"""Exception hierarchy for a single conversion request.

Every failure a request can hit is a ``ConversionError``. Components raise the
specific subclass; only the HTTP layer turns them into responses, using
``http_status`` and ``message``.
"""

from __future__ import annotations

from typing import Iterable, Optional


class ConversionError(Exception):
    """Base class for all request-terminating failures."""

    http_status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def code(self) -> str:
        return type(self).__name__


class InvalidRequestError(ConversionError):
    http_status = 400


class MissingFieldError(InvalidRequestError):
    def __init__(self, missing: Iterable[str], *, required: Iterable[str]) -> None:
        self.missing = list(missing)
        super().__init__("Required fields: " + ", ".join(required))


class FetchFailedError(ConversionError):
    http_status = 502

    def __init__(self, status_code: Optional[int], *, detail: Optional[str] = None) -> None:
        self.status_code = status_code
        if status_code is not None:
            message = f"Download failed: {status_code}"
        else:
            message = f"Download failed: {detail or 'connection error'}"
        super().__init__(message)


class UploadFailedError(ConversionError):
    http_status = 502

    def __init__(self, status_code: Optional[int], body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        prefix = str(status_code) if status_code is not None else "connection error"
        message = f"Upload failed: {prefix} {body}".rstrip()
        super().__init__(message)


class NormalizationError(ConversionError):
    """Payload shape unrecognized or decoded content implausible."""

    http_status = 422


class MalformedPayloadError(NormalizationError):
    pass


class PayloadTooSmallError(NormalizationError):
    def __init__(self, size: int, minimum: int) -> None:
        self.size = size
        self.minimum = minimum
        super().__init__(f"Decoded audio too small: {size} bytes (minimum {minimum})")


class TranscodeError(ConversionError):
    http_status = 500


class EncoderUnavailableError(TranscodeError):
    def __init__(self, binary: str) -> None:
        self.binary = binary
        super().__init__(f"Encoder not available: {binary}")


class TranscodeFailedError(TranscodeError):
    def __init__(self, exit_code: Optional[int], stderr_excerpt: str = "") -> None:
        self.exit_code = exit_code
        self.stderr_excerpt = stderr_excerpt
        message = f"Transcode failed with exit code {exit_code}"
        if stderr_excerpt:
            message = f"{message}: {stderr_excerpt}"
        super().__init__(message)


class TranscodeTimeoutError(TranscodeError):
    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Transcode exceeded {timeout_seconds:g}s time limit")


class TranscodeOverflowError(TranscodeError):
    def __init__(self, limit_bytes: int) -> None:
        self.limit_bytes = limit_bytes
        super().__init__(f"Encoder output exceeded {limit_bytes} byte capture limit")


__all__ = [
    "ConversionError",
    "InvalidRequestError",
    "MissingFieldError",
    "FetchFailedError",
    "UploadFailedError",
    "NormalizationError",
    "MalformedPayloadError",
    "PayloadTooSmallError",
    "TranscodeError",
    "EncoderUnavailableError",
    "TranscodeFailedError",
    "TranscodeTimeoutError",
    "TranscodeOverflowError",
]
