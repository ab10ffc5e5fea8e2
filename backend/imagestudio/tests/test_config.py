"""Tests for settings and provider selection."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from imagestudio.clients.provider_selector import ensure_configured, image_client
from imagestudio.core import logging as log_sink
from imagestudio.core.config import Settings
from imagestudio.core.errors import ConfigurationError
from imagestudio.gemini import GeminiImageClient


def test_defaults(monkeypatch):
    for var in ("GOOGLE_API_KEY", "GEMINI_IMAGE_MODEL", "SAFETY_THRESHOLD", "IMAGE_PROVIDER", "EXPOSE_LOGS"):
        monkeypatch.delenv(var, raising=False)

    s = Settings(_env_file=None)
    assert s.google_api_key is None
    assert s.image_provider == "gemini"
    assert s.gemini_image_model == "gemini-2.0-flash-exp"
    assert s.safety_threshold == "BLOCK_NONE"
    assert s.expose_logs is False


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
    monkeypatch.setenv("SAFETY_THRESHOLD", "BLOCK_MEDIUM_AND_ABOVE")

    s = Settings(_env_file=None)
    assert s.google_api_key == "from-env"
    assert s.safety_threshold == "BLOCK_MEDIUM_AND_ABOVE"


def test_invalid_threshold_fails_loud(monkeypatch):
    monkeypatch.setenv("SAFETY_THRESHOLD", "BLOCK_EVERYTHING")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_ensure_configured(configured, monkeypatch):
    ensure_configured()

    monkeypatch.setattr(configured, "google_api_key", "")
    with pytest.raises(ConfigurationError, match="GOOGLE_API_KEY is missing"):
        ensure_configured()


def test_image_client_builds_gemini(configured):
    with image_client() as client:
        assert isinstance(client, GeminiImageClient)
        assert client.config.model == configured.gemini_image_model


def test_unknown_provider(configured, monkeypatch):
    monkeypatch.setattr(configured, "image_provider", "dalle")
    with pytest.raises(ConfigurationError, match="Unknown image provider: dalle") as exc_info:
        image_client()
    assert exc_info.value.variable == "IMAGE_PROVIDER"


def test_tail_log_file(tmp_path, monkeypatch):
    log_file = tmp_path / "logs.txt"
    log_file.write_text("".join(f"line {i}\n" for i in range(5)), encoding="utf-8")
    monkeypatch.setattr(log_sink, "LOG_FILE", log_file)

    assert log_sink.tail_log_file(2) == (["line 3", "line 4"], 5)


def test_tail_log_file_missing(tmp_path, monkeypatch):
    monkeypatch.setattr(log_sink, "LOG_FILE", tmp_path / "absent.txt")
    assert log_sink.tail_log_file(10) == ([], 0)


def test_truncate_log_file(tmp_path, monkeypatch):
    log_file = tmp_path / "logs.txt"
    log_file.write_text("".join(f"line {i}\n" for i in range(6)), encoding="utf-8")
    monkeypatch.setattr(log_sink, "LOG_FILE", log_file)
    monkeypatch.setattr(log_sink, "TRUNCATE_THRESHOLD", 4)
    monkeypatch.setattr(log_sink, "MAX_LOG_LINES", 2)

    log_sink.truncate_log_file()

    assert log_file.read_text(encoding="utf-8") == "line 4\nline 5\n"
