"""Image Studio configuration (provider credentials + generation policy)."""

from __future__ import annotations

from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from imagestudio.core.paths import PROJECT_ROOT

# Load .env file into environment variables
env_path = PROJECT_ROOT / ".env"
load_dotenv(env_path)

SafetyThreshold = Literal[
    "BLOCK_NONE",
    "BLOCK_ONLY_HIGH",
    "BLOCK_MEDIUM_AND_ABOVE",
    "BLOCK_LOW_AND_ABOVE",
]


class Settings(BaseSettings):
    """Image Studio configuration with fail-loud validation.

    The API key is optional here so the app can boot and report readiness;
    it is enforced right before any model call.
    """

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

    # Image provider selection
    image_provider: str = Field(default="gemini")

    # Google Gemini (joint TEXT+IMAGE output model)
    google_api_key: str | None = Field(default=None)
    gemini_image_model: str = Field(default="gemini-2.0-flash-exp")
    gemini_base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    gemini_timeout_s: float = Field(default=120.0, gt=0)

    # Applied to every harm category; deployment policy, not per-request
    safety_threshold: SafetyThreshold = Field(default="BLOCK_NONE")

    # Operator log viewer; logs hold raw provider responses and user prompts
    expose_logs: bool = Field(default=False)


settings = Settings()
