from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ConversionRequest(BaseModel):
    """Inbound conversion request.

    Presence of the required fields is checked by the orchestrator, not here,
    so a partially filled request still parses and yields a ``MissingFieldError``.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    source_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("sourceUrl", "sourceLocation", "source_url"),
    )
    upload_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("uploadUrl", "destinationLocation", "upload_url"),
    )
    upload_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("supabaseKey", "destinationCredential", "upload_key"),
    )
    source_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("sourceKey", "sourceCredential", "source_key"),
    )

    @field_validator("source_url", "upload_url", "upload_key", "source_key", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            value = str(value)
        value = value.strip()
        return value or None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: Optional[str] = None


__all__ = ["ConversionRequest", "ErrorResponse"]
