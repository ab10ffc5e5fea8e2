"""Error taxonomy surfaced to callers of the image generation pipeline.

Every error raised by this package derives from ``ImageStudioError``. The
orchestrator checks that base type (not the message text) to decide whether an
exception has already been classified, so nothing is wrapped twice.
"""

from __future__ import annotations

from enum import Enum

# Max chars of an underlying exception message forwarded to callers
SERVICE_ERROR_PREVIEW_CHARS = 150


class FailureKind(str, Enum):
    """Why a completed model round trip produced no usable image."""

    PROVIDER_ERROR = "provider_error"
    CONTENT_BLOCKED = "content_blocked"
    CANDIDATES_FILTERED = "candidates_filtered"
    NO_IMAGE_PRODUCED = "no_image_produced"
    INCOMPLETE_RESPONSE = "incomplete_response"
    MALFORMED_MEDIA = "malformed_media"


class ImageStudioError(Exception):
    """Base for errors that are already classified. Never re-wrapped."""

    prefix = "AI Service Error"
    category = "service"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class ConfigurationError(ImageStudioError):
    """Raised when a required credential/config value is missing."""

    prefix = "AI Service Configuration Error"
    category = "configuration"

    def __init__(self, detail: str, variable: str | None = None):
        self.variable = variable
        super().__init__(detail)


class GenerationFailure(ImageStudioError):
    """Raised when the model responded but returned no usable image."""

    prefix = "Image Generation Failed"
    category = "generation"

    def __init__(self, kind: FailureKind, detail: str):
        self.kind = kind
        super().__init__(detail)


class ServiceError(ImageStudioError):
    """Raised for unexpected failures during the round trip (network, SDK)."""

    @classmethod
    def from_exception(cls, exc: BaseException) -> ServiceError:
        """Wrap an arbitrary exception with a bounded summary of its message."""
        message = str(exc) or f"An unexpected {type(exc).__name__} occurred"
        summary = message[:SERVICE_ERROR_PREVIEW_CHARS]
        return cls(f"{summary}. Check server logs for more details.")
