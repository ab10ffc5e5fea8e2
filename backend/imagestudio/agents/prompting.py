from __future__ import annotations

from imagestudio.core.config import settings
from imagestudio.core.logging import log
from imagestudio.gemini.models import (
    HARM_CATEGORIES,
    RESPONSE_MODALITIES,
    GenerationRequest,
    ModelRequest,
    SafetySetting,
)

# Appended to every prompt, in this order, to bias output quality
QUALITY_DESCRIPTORS: tuple[str, ...] = (
    "outstanding",
    "eye-catching",
    "vibrant",
    "youthful",
    "attention-grabbing",
    "attractive",
    "hookable",
    "photorealistic",
    "highly detailed",
    "high quality",
    "professional photography",
    "dynamic composition",
    "cinematic lighting",
)


def compose(request: GenerationRequest) -> str:
    """Builds the final prompt text sent to the model.

    The provider takes no structured aspect-ratio parameter, so the ratio is
    embedded as a textual hint next to the quality descriptors.

    Args:
        request: Caller request (prompt already validated non-empty)

    Returns:
        Composed prompt string; identical for identical requests
    """
    qualities = ", ".join(QUALITY_DESCRIPTORS)
    aspect_ratio = request.aspect_ratio or "1:1"
    composed = (
        f"Image requirements: {qualities}. "
        f'User prompt: "{request.prompt}". '
        f"Aspect ratio: {aspect_ratio}"
    )
    log.info(f"PROMPT_COMPOSED chars={len(composed)} aspect_ratio={aspect_ratio} prompt={composed}")
    return composed


def safety_settings(threshold: str) -> tuple[SafetySetting, ...]:
    """One setting per harm category, all at the same threshold."""
    return tuple(SafetySetting(category=c, threshold=threshold) for c in HARM_CATEGORIES)


def build_model_request(request: GenerationRequest) -> ModelRequest:
    """Wraps the composed prompt with model id, modalities and safety policy.

    Args:
        request: Caller request

    Returns:
        ModelRequest ready for the image model client
    """
    return ModelRequest(
        model=settings.gemini_image_model,
        prompt=compose(request),
        response_modalities=RESPONSE_MODALITIES,
        safety_settings=safety_settings(settings.safety_threshold),
    )
