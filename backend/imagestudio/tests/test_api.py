"""Tests for the HTTP API (FastAPI TestClient, generation mocked)."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from imagestudio.api import routes
from imagestudio.core.config import settings
from imagestudio.core.errors import (
    ConfigurationError,
    FailureKind,
    GenerationFailure,
    ServiceError,
)
from imagestudio.gemini.models import GenerationResult
from imagestudio.main import app


@pytest.fixture
def test_client(monkeypatch):
    """Fixture providing a TestClient with rate limiting disabled."""
    monkeypatch.setattr(routes.limiter, "enabled", False)
    with TestClient(app) as client:
        yield client


class TestCreateImage:
    """Tests for POST /api/images."""

    @pytest.mark.parametrize("body", [{"prompt": ""}, {"prompt": "   "}, {}, {"prompt": "x", "aspectRatio": "4:3"}])
    def test_invalid_body_rejected_before_generation(self, test_client, body):
        with patch("imagestudio.api.routes.generate") as mock_generate:
            resp = test_client.post("/api/images", json=body)

        assert resp.status_code == 400
        assert "Invalid request body" in resp.json()["detail"]
        mock_generate.assert_not_called()

    def test_non_json_body_rejected(self, test_client):
        resp = test_client.post("/api/images", content=b"not json", headers={"content-type": "application/json"})
        assert resp.status_code == 400

    def test_success(self, test_client):
        result = GenerationResult(image_url="data:image/png;base64,AAA=")
        with patch("imagestudio.api.routes.generate", return_value=result) as mock_generate:
            resp = test_client.post("/api/images", json={"prompt": "a red fox", "aspectRatio": "16:9"})

        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "imageUrl": "data:image/png;base64,AAA="}
        request = mock_generate.call_args[0][0]
        assert request.prompt == "a red fox"
        assert request.aspect_ratio == "16:9"

    def test_save_writes_file(self, test_client, png_data_uri):
        result = GenerationResult(image_url=png_data_uri)
        with patch("imagestudio.api.routes.generate", return_value=result):
            resp = test_client.post("/api/images", json={"prompt": "a red fox", "save": True})

        assert resp.status_code == 200
        file_url = resp.json()["file"]
        assert file_url.startswith("/media/generated/img_")
        assert file_url.endswith(".png")

        download = test_client.get(file_url)
        assert download.status_code == 200
        assert download.content.startswith(b"\x89PNG")

    @pytest.mark.parametrize("save", ["false", "0", 1, None])
    def test_save_flag_must_be_boolean(self, test_client, save):
        with patch("imagestudio.api.routes.generate") as mock_generate:
            resp = test_client.post("/api/images", json={"prompt": "a red fox", "save": save})

        assert resp.status_code == 400
        mock_generate.assert_not_called()

    def test_save_false_skips_file(self, test_client):
        result = GenerationResult(image_url="data:image/png;base64,AAA=")
        with patch("imagestudio.api.routes.generate", return_value=result):
            resp = test_client.post("/api/images", json={"prompt": "a red fox", "save": False})

        assert resp.status_code == 200
        assert "file" not in resp.json()

    def test_save_filesystem_error_reported(self, test_client, png_data_uri):
        result = GenerationResult(image_url=png_data_uri)
        with patch("imagestudio.api.routes.generate", return_value=result), patch(
            "imagestudio.api.routes.save_data_uri", side_effect=PermissionError("read-only")
        ):
            resp = test_client.post("/api/images", json={"prompt": "a red fox", "save": True})

        assert resp.status_code == 502
        assert "could not be saved" in resp.json()["detail"]

    @pytest.mark.parametrize(
        "error, status, category",
        [
            (ConfigurationError("GOOGLE_API_KEY is missing.", variable="GOOGLE_API_KEY"), 503, "configuration"),
            (GenerationFailure(FailureKind.CONTENT_BLOCKED, "blocked by safety"), 422, "generation"),
            (ServiceError("connection reset. Check server logs for more details."), 502, "service"),
        ],
    )
    def test_error_categories(self, test_client, error, status, category):
        with patch("imagestudio.api.routes.generate", side_effect=error):
            resp = test_client.post("/api/images", json={"prompt": "a red fox"})

        assert resp.status_code == status
        detail = resp.json()["detail"]
        assert detail["category"] == category
        assert detail["error"] == str(error)

    def test_generation_failure_kind_exposed(self, test_client):
        error = GenerationFailure(FailureKind.CANDIDATES_FILTERED, "all filtered")
        with patch("imagestudio.api.routes.generate", side_effect=error):
            resp = test_client.post("/api/images", json={"prompt": "a red fox"})

        assert resp.json()["detail"]["kind"] == "candidates_filtered"


class TestObservability:
    """Tests for health and log endpoints."""

    def test_healthz_never_leaks_key(self, test_client, configured):
        resp = test_client.get("/api/healthz")
        assert resp.status_code == 200
        data = resp.json()
        assert data["provider"]["status"] == "configured"
        assert "test-key" not in resp.text

    def test_healthz_reports_missing_key(self, test_client, unconfigured):
        assert test_client.get("/api/healthz").json()["provider"]["status"] == "key_missing"

    def test_logs_tail_disabled_by_default(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "expose_logs", False)
        resp = test_client.get("/api/logs/tail?lines=5")
        assert resp.status_code == 404
        assert "logs" not in resp.json()

    def test_logs_tail(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "expose_logs", True)
        resp = test_client.get("/api/logs/tail?lines=5")
        assert resp.status_code == 200
        data = resp.json()
        assert data["ok"] is True
        assert len(data["logs"]) <= 5

    def test_security_headers(self, test_client):
        resp = test_client.get("/")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.json()["endpoints"]["images"] == "/api/images"
