import pytest
from fastapi.testclient import TestClient

from audio_relay import app as relay_app
from audio_relay.audio import ConversionResult, WrapperKind
from audio_relay.errors import FetchFailedError, PayloadTooSmallError, TranscodeTimeoutError

VALID_BODY = {"sourceUrl": "https://x/in.bin", "uploadUrl": "https://x/out.bin", "supabaseKey": "tok"}


@pytest.fixture
def client():
    return TestClient(relay_app.app)


def _assert_cors(resp) -> None:  # noqa: ANN001
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert resp.headers["access-control-allow-headers"] == "Content-Type"


def test_convert_returns_sizes(monkeypatch, client):
    captured = []

    async def fake_handle(request):  # noqa: ANN001
        captured.append(request)
        return ConversionResult(original_size=9000, converted_size=4321, wrapper=WrapperKind.RAW_BINARY)

    monkeypatch.setattr(relay_app.orchestrator, "handle", fake_handle)

    resp = client.post("/api/convert", json=VALID_BODY)

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "originalSize": 9000,
        "convertedSize": 4321,
        "wrapper": "raw_binary",
    }
    assert captured[0].source_url == "https://x/in.bin"
    assert captured[0].upload_key == "tok"
    _assert_cors(resp)


def test_convert_accepts_descriptive_field_names(monkeypatch, client):
    captured = []

    async def fake_handle(request):  # noqa: ANN001
        captured.append(request)
        return ConversionResult(original_size=1, converted_size=1, wrapper=WrapperKind.BASE64_TEXT)

    monkeypatch.setattr(relay_app.orchestrator, "handle", fake_handle)

    resp = client.post(
        "/api/convert",
        json={
            "sourceLocation": "https://x/in.bin",
            "destinationLocation": "https://x/out.bin",
            "destinationCredential": "tok",
        },
    )

    assert resp.status_code == 200
    assert captured[0].upload_url == "https://x/out.bin"
    assert captured[0].upload_key == "tok"


def test_convert_rejects_missing_fields(client):
    resp = client.post("/api/convert", json={"sourceUrl": "https://x/in.bin"})

    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "error": "Required fields: sourceUrl, uploadUrl, supabaseKey",
        "code": "MissingFieldError",
    }
    _assert_cors(resp)


@pytest.mark.parametrize("method", ["get", "put", "delete", "patch"])
def test_convert_rejects_other_methods(client, method):
    resp = client.request(method.upper(), "/api/convert")

    assert resp.status_code == 405
    assert resp.json() == {"success": False, "error": "POST only"}
    _assert_cors(resp)


def test_convert_answers_preflight(client):
    resp = client.options("/api/convert")

    assert resp.status_code == 200
    assert resp.content == b""
    _assert_cors(resp)


def test_convert_rejects_invalid_json(client):
    resp = client.post("/api/convert", content=b"not json", headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid json"


def test_convert_rejects_non_object_json(client):
    resp = client.post("/api/convert", json=["https://x/in.bin"])

    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.parametrize(
    ("error", "status", "message"),
    [
        (FetchFailedError(404), 502, "Download failed: 404"),
        (PayloadTooSmallError(300, 1000), 422, "Decoded audio too small: 300 bytes (minimum 1000)"),
        (TranscodeTimeoutError(25.0), 500, "Transcode exceeded 25s time limit"),
    ],
)
def test_convert_maps_conversion_errors(monkeypatch, client, error, status, message):
    async def fake_handle(request):  # noqa: ANN001
        raise error

    monkeypatch.setattr(relay_app.orchestrator, "handle", fake_handle)

    resp = client.post("/api/convert", json=VALID_BODY)

    assert resp.status_code == status
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == message
    assert body["code"] == type(error).__name__
    _assert_cors(resp)


def test_convert_hides_unexpected_errors(monkeypatch, client):
    async def fake_handle(request):  # noqa: ANN001
        raise RuntimeError("secret internals")

    monkeypatch.setattr(relay_app.orchestrator, "handle", fake_handle)

    resp = client.post("/api/convert", json=VALID_BODY)

    assert resp.status_code == 500
    assert "secret" not in resp.json()["error"]


@pytest.mark.parametrize("path", ["/api/health", "/health"])
def test_health_reports_encoder(client, path):
    resp = client.get(path)

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["service"] == "audio-relay"
    assert body["version"]
    assert body["encoderProvider"] in {"ffmpeg", "mock"}
    assert isinstance(body["encoderExists"], bool)
    assert "timestamp" in body
    _assert_cors(resp)
