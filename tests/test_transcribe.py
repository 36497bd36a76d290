"""Tests for the /api/transcribe relay endpoint."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from extension_relay.core.config import DEFAULT_TRANSCRIBE_URL
from extension_relay.core.exceptions import UpstreamUnreachableError

FORWARD = "extension_relay.core.operations.forward_inference"
AUDIO = "UklGRiQAAABXQVZFZm10IBAAAAABAAEAQB8AAEAfAAABAAgAZGF0YQAAAAA="


@pytest.fixture
def client():
    return TestClient(create_app(Settings(hf_api_key="hf_test", log_level="WARNING")))


@patch(FORWARD, new_callable=AsyncMock)
def test_transcribe_returns_trimmed_transcript(mock_forward, client):
    mock_forward.return_value = httpx.Response(200, json={"text": " This is the transcript. "})

    response = client.post("/api/transcribe", json={"audioBase64": AUDIO})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"transcript": "This is the transcript."}

    body, url, _ = mock_forward.call_args[0]
    assert body == {"inputs": AUDIO}
    assert url == DEFAULT_TRANSCRIBE_URL


@patch(FORWARD, new_callable=AsyncMock)
def test_transcribe_custom_endpoint(mock_forward):
    settings = Settings(
        hf_api_key="hf_test",
        transcribe_url="https://router.huggingface.co/hf-inference/models/openai/whisper-small",
        log_level="WARNING",
    )
    client = TestClient(create_app(settings))
    mock_forward.return_value = httpx.Response(200, json={"text": "small"})

    client.post("/api/transcribe", json={"audioBase64": AUDIO})

    assert mock_forward.call_args[0][1] == "https://router.huggingface.co/hf-inference/models/openai/whisper-small"


@patch(FORWARD, new_callable=AsyncMock)
def test_transcribe_empty_result_is_not_an_error(mock_forward, client):
    mock_forward.return_value = httpx.Response(200, json={"text": "   "})

    response = client.post("/api/transcribe", json={"audioBase64": AUDIO})

    assert response.status_code == 200
    assert response.json() == {"transcript": ""}


@pytest.mark.parametrize("payload", [{}, {"audioBase64": None}, {"audioBase64": ""}, {"audioBase64": 1}])
@patch(FORWARD, new_callable=AsyncMock)
def test_transcribe_missing_audio_is_400(mock_forward, payload, client):
    response = client.post("/api/transcribe", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "No audio provided."}
    assert mock_forward.call_count == 0


@patch(FORWARD, new_callable=AsyncMock)
def test_transcribe_without_credential_is_500(mock_forward):
    client = TestClient(create_app(Settings(hf_api_key=None, log_level="WARNING")))

    response = client.post("/api/transcribe", json={"audioBase64": AUDIO})

    assert response.status_code == 500
    assert response.json() == {"error": "HF_API_KEY not configured on server."}
    assert mock_forward.call_count == 0


@patch(FORWARD, new_callable=AsyncMock)
def test_transcribe_upstream_status_forwarded(mock_forward, client):
    mock_forward.return_value = httpx.Response(503, text="Model openai/whisper-large-v3 is currently loading")

    response = client.post("/api/transcribe", json={"audioBase64": AUDIO})

    assert response.status_code == 503
    assert response.json() == {"error": "Model openai/whisper-large-v3 is currently loading"}


@patch(FORWARD, new_callable=AsyncMock)
def test_transcribe_transport_error_is_500(mock_forward, client):
    mock_forward.side_effect = UpstreamUnreachableError("Connection to upstream failed: reset", DEFAULT_TRANSCRIBE_URL)

    response = client.post("/api/transcribe", json={"audioBase64": AUDIO})

    assert response.status_code == 500
    assert response.json() == {"error": "Connection to upstream failed: reset"}


@patch(FORWARD, new_callable=AsyncMock)
def test_transcribe_invalid_json_body_is_400(mock_forward, client):
    response = client.post("/api/transcribe", content="{", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON in request body."}
    assert mock_forward.call_count == 0


@patch(FORWARD, new_callable=AsyncMock)
def test_transcribe_non_json_content_type_is_400(mock_forward, client):
    response = client.post(
        "/api/transcribe",
        content='{"audioBase64":"UklGRg=="}',
        headers={"Content-Type": "text/plain"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "No audio provided."}
    assert mock_forward.call_count == 0
