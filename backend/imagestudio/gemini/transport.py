"""HTTP transport layer for the Gemini REST API.

Handles:
- Session management with httpx.Client
- API key and User-Agent headers
- Returning provider error envelopes instead of raising on them

No retries: each generation is exactly one round trip.
"""

from __future__ import annotations

from typing import Any

import httpx

from imagestudio.core.logging import log

from .utils import redact


class GeminiTransport:
    """Single-shot HTTP transport for the Gemini generateContent API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_s: float = 120.0,
        timeout_connect_s: float = 10.0,
    ):
        """
        Initialize transport layer.

        Args:
            api_key: Google API key
            base_url: API base URL
            timeout_s: Read/write timeout in seconds (image generation is slow)
            timeout_connect_s: Connection timeout in seconds
        """
        if not api_key:
            raise ValueError("API key cannot be empty")

        self.base_url = base_url.rstrip("/")

        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_s, connect=timeout_connect_s),
            headers={
                "x-goog-api-key": api_key,
                "Content-Type": "application/json",
                "User-Agent": "imagestudio/1.0",
            },
        )

    def post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        POST JSON to API endpoint once.

        Error responses whose JSON body carries an ``error`` object are
        returned as-is so the caller can classify the provider's own
        diagnosis (quota, billing, invalid key).

        Args:
            path: API path (e.g., "models/gemini-2.0-flash-exp:generateContent")
            payload: JSON payload dict

        Returns:
            Response JSON dict (success body or provider error envelope)

        Raises:
            RuntimeError: On network failure, non-JSON body, or HTTP errors
                without a provider error object
        """
        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            log.debug(f"TRANSPORT: POST {path}")
            response = self.client.post(url, json=payload)
        except httpx.TransportError as e:
            log.debug(f"TRANSPORT: Network error on {path}: {type(e).__name__}: {e}")
            raise RuntimeError(f"Network error on {path}: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            if isinstance(body, dict) and body.get("error") is not None:
                log.debug(f"TRANSPORT: Provider error envelope HTTP {response.status_code} on {path}")
                return body

            body_preview = redact(response.text, 500) if response.text else "(no body)"
            log.debug(f"TRANSPORT: HTTP {response.status_code} on {path}: {body_preview}")
            raise RuntimeError(f"HTTP {response.status_code} on {path}: {body_preview}")

        if not isinstance(body, dict):
            body_preview = redact(response.text, 200) if response.text else "(no body)"
            raise RuntimeError(f"Non-JSON response on {path}: {body_preview}")

        return body

    def close(self) -> None:
        """Close the HTTP client session."""
        self.client.close()

    def __enter__(self) -> GeminiTransport:
        """Context manager entry."""
        return self

    def __exit__(self, *args) -> None:
        """Context manager exit."""
        self.close()
