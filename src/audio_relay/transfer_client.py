"""Byte transfer against the remote object store."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from .errors import FetchFailedError, UploadFailedError
from .settings import TransferSettings

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = httpx.Timeout(60.0, connect=5.0)
_ERROR_BODY_CHARS = 500


def _loggable(url: str) -> str:
    return url.split("?", 1)[0]


def _auth_headers(credential: Optional[str]) -> Dict[str, str]:
    if not credential:
        return {}
    return {"Authorization": f"Bearer {credential}"}


class RemoteObjectClient:
    """Generic authenticated GET/POST of whole objects."""

    def __init__(
        self,
        *,
        timeout: httpx.Timeout = HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, cfg: TransferSettings) -> "RemoteObjectClient":
        return cls(timeout=httpx.Timeout(cfg.timeout, connect=cfg.connect_timeout))

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport, follow_redirects=True)

    async def fetch(self, url: str, *, credential: Optional[str] = None) -> bytes:
        logger.info("relay.fetch.start", extra={"url": _loggable(url)})
        try:
            async with self._client() as client:
                response = await client.get(url, headers=_auth_headers(credential))
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("relay.fetch.failed", extra={"url": _loggable(url), "status": status})
            raise FetchFailedError(status) from exc
        except httpx.HTTPError as exc:
            logger.warning("relay.fetch.error", extra={"url": _loggable(url), "error": repr(exc)})
            raise FetchFailedError(None, detail=str(exc) or type(exc).__name__) from exc

        data = response.content
        logger.info("relay.fetch.done", extra={"url": _loggable(url), "size": len(data)})
        return data

    async def upload(
        self,
        url: str,
        data: bytes,
        *,
        credential: str,
        content_type: str,
    ) -> None:
        headers = _auth_headers(credential)
        headers["Content-Type"] = content_type
        logger.info("relay.upload.start", extra={"url": _loggable(url), "size": len(data)})
        try:
            async with self._client() as client:
                response = await client.post(url, content=data, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            body = (exc.response.text or "")[:_ERROR_BODY_CHARS]
            logger.warning("relay.upload.failed", extra={"url": _loggable(url), "status": status})
            raise UploadFailedError(status, body) from exc
        except httpx.HTTPError as exc:
            logger.warning("relay.upload.error", extra={"url": _loggable(url), "error": repr(exc)})
            raise UploadFailedError(None, str(exc) or type(exc).__name__) from exc

        logger.info("relay.upload.done", extra={"url": _loggable(url), "status": response.status_code})


__all__ = ["RemoteObjectClient", "HTTP_TIMEOUT"]
