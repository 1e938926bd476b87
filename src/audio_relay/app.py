"""HTTP surface of audio-relay.

Run with:
    uvicorn audio_relay.app:app --port 8100
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from .errors import ConversionError
from .logging_setup import configure_logging
from .orchestrator import TransferOrchestrator
from .schemas import ConversionRequest, ErrorResponse
from .settings import settings as runtime_settings

configure_logging(runtime_settings.logging)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

app = FastAPI(title="audio-relay", version=runtime_settings.version)
orchestrator = TransferOrchestrator.from_settings(runtime_settings)


@app.middleware("http")
async def _cors_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


def _error_response(status_code: int, message: str, *, code: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=message, code=code).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@app.api_route("/api/convert", methods=_ALL_METHODS)
async def convert(request: Request) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=200)
    if request.method != "POST":
        return _error_response(405, "POST only")

    try:
        body = await request.json()
    except ValueError:
        return _error_response(400, "invalid json")
    if not isinstance(body, dict):
        return _error_response(400, "invalid json")

    try:
        conversion_request = ConversionRequest.model_validate(body)
    except ValidationError:
        return _error_response(400, "invalid request")

    try:
        result = await orchestrator.handle(conversion_request)
    except ConversionError as exc:
        logger.error("relay.convert.failed", extra={"code": exc.code, "error": exc.message})
        return _error_response(exc.http_status, exc.message, code=exc.code)
    except Exception:
        logger.exception("relay.convert.unexpected")
        return _error_response(500, "An unexpected error occurred during conversion")

    return JSONResponse(result.to_response())


@app.get("/api/health")
@app.get("/health")
async def health() -> Dict[str, Any]:
    encoder = orchestrator.transcoder.encoder
    return {
        "status": "ok",
        "service": runtime_settings.service_name,
        "version": runtime_settings.version,
        "message": "Audio relay (URL mode)",
        "encoderProvider": encoder.name,
        "encoderPath": encoder.binary,
        "encoderExists": encoder.is_available(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "audio_relay.app:app",
        host="0.0.0.0",
        port=runtime_settings.port,
        reload=runtime_settings.reload,
    )
