"""Tests for the health check endpoint."""

from fastapi.testclient import TestClient

from salesnote.main import app

client = TestClient(app)


def test_health_endpoint():
    """Test that the health endpoint returns correct response."""
    response = client.get("/health")

    # Assert status code is 200
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "salesnote-engine"
    assert data["version"] == "0.1.0"


def test_health_endpoint_reports_backends(monkeypatch):
    """Test the configured storage backend and models are reported."""
    from salesnote.core.config import settings

    monkeypatch.setattr(settings, "STORAGE_BACKEND", "gcs")
    monkeypatch.setattr(settings, "TRANSCRIPTION_MODEL", "gpt-4o-transcribe")
    monkeypatch.setattr(settings, "LLM_ENABLED", False)

    data = client.get("/health").json()

    assert data["storage_backend"] == "gcs"
    assert data["transcription_model"] == "gpt-4o-transcribe"
    assert data["minutes_enabled"] is False


def test_health_endpoint_sets_request_id():
    """Test the request id header is echoed or generated."""
    response = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"

    response = client.get("/health")
    assert len(response.headers["X-Request-ID"]) == 32
