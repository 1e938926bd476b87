"""Runtime configuration helpers for audio-relay."""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass

_BOOL_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _BOOL_TRUTHY


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class EncoderSettings:
    provider: str
    binary: str


@dataclass(frozen=True)
class StagingSettings:
    directory: str


@dataclass(frozen=True)
class TransferSettings:
    timeout: float
    connect_timeout: float


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    format: str


@dataclass(frozen=True)
class Settings:
    service_name: str
    version: str
    port: int
    reload: bool
    encoder: EncoderSettings
    staging: StagingSettings
    transfer: TransferSettings
    logging: LoggingSettings


def load_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""

    encoder_settings = EncoderSettings(
        provider=os.getenv("ENCODER_PROVIDER", "ffmpeg"),
        binary=os.getenv("FFMPEG_BINARY_PATH") or shutil.which("ffmpeg") or "ffmpeg",
    )

    staging_settings = StagingSettings(
        directory=os.getenv("STAGING_DIR") or tempfile.gettempdir(),
    )

    transfer_settings = TransferSettings(
        timeout=_env_float("HTTP_TIMEOUT_SECONDS", 60.0),
        connect_timeout=_env_float("HTTP_CONNECT_TIMEOUT_SECONDS", 5.0),
    )

    logging_settings = LoggingSettings(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
    )

    return Settings(
        service_name="audio-relay",
        version=os.getenv("SERVICE_VERSION", "2.0.0-url-based"),
        port=_env_int("PORT", 8100),
        reload=_env_bool("RELOAD", False),
        encoder=encoder_settings,
        staging=staging_settings,
        transfer=transfer_settings,
        logging=logging_settings,
    )


settings = load_settings()

__all__ = [
    "Settings",
    "EncoderSettings",
    "StagingSettings",
    "TransferSettings",
    "LoggingSettings",
    "settings",
    "load_settings",
]
