"""Gemini image generation client.

Sends one ``generateContent`` request with joint TEXT+IMAGE output and
normalises whatever comes back into a ``ModelResponse`` envelope. No
validation happens here beyond reshaping: a missing or odd field stays
missing or odd so the validator and classifier can reason about it.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

from imagestudio.clients.image_interface import ImageModelClient
from imagestudio.core.logging import log

from .models import ModelRequest, ModelResponse
from .transport import GeminiTransport
from .utils import get_field


@dataclass(frozen=True)
class GeminiConfig:
    """Configuration constants for the Gemini API."""

    model: str = "gemini-2.0-flash-exp"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_s: float = 120.0
    timeout_connect_s: float = 10.0


def build_payload(model_request: ModelRequest) -> dict[str, Any]:
    """Build the REST ``generateContent`` body for a model request."""
    return {
        "contents": [
            {
                "role": "user",
                "parts": [{"text": model_request.prompt}],
            }
        ],
        "generationConfig": {
            "responseModalities": list(model_request.response_modalities),
        },
        "safetySettings": [
            {"category": s.category, "threshold": s.threshold}
            for s in model_request.safety_settings
        ],
    }


def _media_from_part(part: Any) -> dict[str, Any] | None:
    """Extract a media object from a content part, if it carries one."""
    inline = get_field(part, "inlineData") or get_field(part, "inline_data")
    if inline is not None:
        mime_type = get_field(inline, "mimeType") or get_field(inline, "mime_type")
        data = get_field(inline, "data")
        if isinstance(mime_type, str) and isinstance(data, str):
            return {"url": f"data:{mime_type};base64,{data}", "contentType": mime_type}
        # Keep the odd value so the classifier can report it
        return {"url": data, "contentType": mime_type}

    file_data = get_field(part, "fileData") or get_field(part, "file_data")
    if file_data is not None:
        return {
            "url": get_field(file_data, "fileUri") or get_field(file_data, "file_uri"),
            "contentType": get_field(file_data, "mimeType"),
        }

    return None


def envelope_from_payload(payload: Any) -> ModelResponse:
    """
    Normalise a raw Gemini response into a ModelResponse envelope.

    The first inline image (or file reference) across all candidates becomes
    ``media``; text parts are joined into ``text``. ``candidates``, ``error``
    and ``promptFeedback`` pass through untouched.

    Args:
        payload: Parsed JSON body from the provider (any shape)

    Returns:
        ModelResponse with ``raw`` set to the original payload
    """
    if not isinstance(payload, dict):
        return ModelResponse(raw=payload)

    candidates = payload.get("candidates")
    media = None
    texts: list[str] = []

    if isinstance(candidates, list):
        for candidate in candidates:
            parts = get_field(get_field(candidate, "content"), "parts")
            if not isinstance(parts, list):
                continue
            for part in parts:
                text = get_field(part, "text")
                if isinstance(text, str) and text.strip():
                    texts.append(text.strip())
                if media is None:
                    media = _media_from_part(part)

    return ModelResponse(
        media=media,
        candidates=candidates,
        error=payload.get("error"),
        text="\n".join(texts) or None,
        prompt_feedback=payload.get("promptFeedback"),
        raw=payload,
    )


class GeminiImageClient(ImageModelClient):
    """Gemini client for joint TEXT+IMAGE generation."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash-exp",
        config: GeminiConfig | None = None,
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Google API key
            model: Model ID (must support image output)
            config: Optional custom configuration (uses defaults if not provided)
        """
        if not api_key:
            raise ValueError("Gemini API key cannot be empty")

        self.config = config or GeminiConfig(model=model)
        self.transport = GeminiTransport(
            api_key=api_key,
            base_url=self.config.base_url,
            timeout_s=self.config.timeout_s,
            timeout_connect_s=self.config.timeout_connect_s,
        )

    def invoke(self, model_request: ModelRequest) -> ModelResponse:
        """
        Issue one generateContent call.

        Args:
            model_request: Model id, composed prompt, modalities, safety settings

        Returns:
            ModelResponse envelope (may carry a provider error)

        Raises:
            RuntimeError: On transport failures
        """
        payload = build_payload(model_request)

        log.info(
            f"GEMINI_API_CALL model={model_request.model} "
            f"modalities={','.join(model_request.response_modalities)} "
            f"prompt_chars={len(model_request.prompt)}"
        )

        start_time = time.time()
        body = self.transport.post_json(f"models/{model_request.model}:generateContent", payload)
        elapsed = time.time() - start_time

        envelope = envelope_from_payload(body)
        candidates = envelope.candidates
        log.info(
            f"GEMINI_API_RESPONSE model={model_request.model} elapsed_s={round(elapsed, 2)} "
            f"candidates={len(candidates) if isinstance(candidates, list) else 'missing'} "
            f"media={'yes' if envelope.media is not None else 'no'} "
            f"error={'yes' if envelope.error is not None else 'no'}"
        )
        return envelope

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.transport.close()
