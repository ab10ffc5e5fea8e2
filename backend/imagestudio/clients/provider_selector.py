"""Image provider selection (provider-agnostic).

Only Gemini is wired today; IMAGE_PROVIDER selects it explicitly.
"""

from __future__ import annotations

from imagestudio.clients.image_interface import ImageModelClient
from imagestudio.core.config import settings
from imagestudio.core.errors import ConfigurationError
from imagestudio.core.logging import log
from imagestudio.gemini import GeminiConfig, GeminiImageClient


def ensure_configured() -> None:
    """Validates that the provider credential is present.

    Must run before any client is built or any network call is attempted.

    Raises:
        ConfigurationError: If GOOGLE_API_KEY is missing
    """
    if not settings.google_api_key:
        log.error(
            "CONFIG_MISSING variable=GOOGLE_API_KEY "
            "reason=required for AI image generation"
        )
        raise ConfigurationError(
            "GOOGLE_API_KEY is missing. Set GOOGLE_API_KEY in .env (or the process "
            "environment) and restart the server.",
            variable="GOOGLE_API_KEY",
        )


def image_client() -> ImageModelClient:
    """Returns configured image model client.

    Provider selection based on IMAGE_PROVIDER env var (default: gemini).

    Returns:
        ImageModelClient implementation for selected provider

    Raises:
        ConfigurationError: If API key missing or provider unknown
    """
    provider = settings.image_provider.lower()

    if provider == "gemini":
        ensure_configured()
        return GeminiImageClient(
            api_key=settings.google_api_key,
            config=GeminiConfig(
                model=settings.gemini_image_model,
                base_url=settings.gemini_base_url,
                timeout_s=settings.gemini_timeout_s,
            ),
        )

    log.error(f"CONFIG_INVALID variable=IMAGE_PROVIDER value={provider}")
    raise ConfigurationError(
        f"Unknown image provider: {provider}. Supported providers: gemini (default).",
        variable="IMAGE_PROVIDER",
    )
