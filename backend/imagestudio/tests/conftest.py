from __future__ import annotations

import base64
import io
import os
import tempfile
from unittest.mock import MagicMock

import pytest

# Keep logs and saved images out of the working tree (must precede package imports)
os.environ.setdefault("IMAGESTUDIO_DATA_DIR", tempfile.mkdtemp(prefix="imagestudio-tests-"))

from PIL import Image  # noqa: E402

from imagestudio.clients.image_interface import ImageModelClient  # noqa: E402
from imagestudio.core.config import settings  # noqa: E402
from imagestudio.gemini.models import ModelResponse  # noqa: E402


@pytest.fixture
def configured(monkeypatch):
    """Fixture providing a present API key and default generation policy."""
    monkeypatch.setattr(settings, "google_api_key", "test-key")
    monkeypatch.setattr(settings, "image_provider", "gemini")
    monkeypatch.setattr(settings, "gemini_image_model", "gemini-2.0-flash-exp")
    monkeypatch.setattr(settings, "safety_threshold", "BLOCK_NONE")
    return settings


@pytest.fixture
def unconfigured(monkeypatch):
    """Fixture simulating a missing GOOGLE_API_KEY."""
    monkeypatch.setattr(settings, "google_api_key", None)
    return settings


@pytest.fixture
def png_data_uri() -> str:
    """Fixture providing a real (tiny) PNG as a data URI."""
    buf = io.BytesIO()
    Image.new("RGB", (2, 2), color=(200, 40, 40)).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def fake_client():
    """Fixture returning a factory for mocked image model clients."""

    def _make(response: ModelResponse | None = None, side_effect=None) -> MagicMock:
        client = MagicMock(spec=ImageModelClient)
        client.invoke.return_value = response
        client.invoke.side_effect = side_effect
        return client

    return _make
