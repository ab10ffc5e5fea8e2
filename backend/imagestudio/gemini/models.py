"""Pydantic models for the image generation pipeline.

Inbound request and outbound result models are strict and immutable. The
provider response envelope (``ModelResponse``) is deliberately loose: every
field is optional and untyped because nothing about the provider payload is
guaranteed. Only ``agents.validators.validate`` turns it into a result.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

AspectRatio = Literal["1:1", "16:9", "9:16"]

DEFAULT_ASPECT_RATIO: AspectRatio = "1:1"

# Inline image data is the only accepted success shape
DATA_IMAGE_PREFIX = "data:image/"

# The provider silently drops image output unless TEXT is requested alongside IMAGE
RESPONSE_MODALITIES: tuple[str, ...] = ("TEXT", "IMAGE")

HARM_CATEGORIES: tuple[str, ...] = (
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
)


class GenerationRequest(BaseModel):
    """Caller request: a prompt and an aspect-ratio hint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    prompt: str = Field(..., min_length=1, description="Natural-language image prompt")
    aspect_ratio: AspectRatio = Field(
        default=DEFAULT_ASPECT_RATIO,
        alias="aspectRatio",
        description="Aspect-ratio hint embedded in the prompt text",
    )

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        """Reject whitespace-only prompts before anything reaches the model."""
        if not v.strip():
            raise ValueError("Prompt cannot be empty")
        return v

    @field_validator("aspect_ratio", mode="before")
    @classmethod
    def default_aspect_ratio(cls, v: Any) -> Any:
        """Treat an explicit null/empty ratio as the default."""
        return v or DEFAULT_ASPECT_RATIO


class SafetySetting(BaseModel):
    """Block threshold for one harm category."""

    model_config = ConfigDict(frozen=True)

    category: str
    threshold: str


class ModelRequest(BaseModel):
    """Single outbound call to the image-capable model."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(..., min_length=1, description="Provider model identifier")
    prompt: str = Field(..., min_length=1, description="Composed prompt text")
    response_modalities: tuple[str, ...] = Field(default=RESPONSE_MODALITIES)
    safety_settings: tuple[SafetySetting, ...] = Field(default=())

    @field_validator("response_modalities")
    @classmethod
    def validate_modalities(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Image output requires TEXT and IMAGE to be requested together."""
        missing = [m for m in RESPONSE_MODALITIES if m not in v]
        if missing:
            raise ValueError(
                f"response_modalities must include TEXT and IMAGE, missing: {', '.join(missing)}"
            )
        return v


class ModelResponse(BaseModel):
    """Untrusted provider response envelope.

    Attributes:
        media: Optional object with a ``url`` (dict or attribute access)
        candidates: Usually a list of dicts with ``finishReason``/``finishMessage``
        error: Optional top-level provider error (``message``/``status``/``code``)
        text: Text the model returned alongside (or instead of) an image
        prompt_feedback: Provider prompt feedback (e.g. ``blockReason``)
        raw: Full provider payload, for operator logs only
    """

    model_config = ConfigDict(extra="allow")

    media: Any = None
    candidates: Any = None
    error: Any = None
    text: Any = None
    prompt_feedback: Any = None
    raw: Any = None


class GenerationResult(BaseModel):
    """Successful generation: an inline image data URI."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    image_url: str = Field(..., alias="imageUrl", description="data:image/... URI")

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str) -> str:
        """Only inline image data URIs are valid results."""
        if not v.startswith(DATA_IMAGE_PREFIX):
            raise ValueError(f"image_url must start with '{DATA_IMAGE_PREFIX}'")
        return v
