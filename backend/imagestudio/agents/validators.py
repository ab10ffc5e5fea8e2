"""
Response validation for generated images.

Checks the provider envelope for an inline image data URI. Checks run in a
fixed order (presence, then type, then prefix) because providers sometimes
return ``media`` with a non-conforming ``url``.
"""

from __future__ import annotations

from enum import Enum

from imagestudio.gemini.models import DATA_IMAGE_PREFIX, GenerationResult, ModelResponse
from imagestudio.gemini.utils import get_field


class MediaCheck(str, Enum):
    """Outcome of inspecting the response media."""

    OK = "ok"
    NO_MEDIA = "no_media"
    URL_NOT_STRING = "url_not_string"
    WRONG_SCHEME = "wrong_scheme"


def inspect_media(response: ModelResponse) -> MediaCheck:
    """
    Classify the media object of a response. First failing check wins.

    Args:
        response: Provider response envelope

    Returns:
        MediaCheck describing the media state
    """
    media = response.media
    if media is None:
        return MediaCheck.NO_MEDIA

    url = get_field(media, "url")
    if not isinstance(url, str):
        return MediaCheck.URL_NOT_STRING

    if not url.startswith(DATA_IMAGE_PREFIX):
        return MediaCheck.WRONG_SCHEME

    return MediaCheck.OK


def validate(response: ModelResponse) -> GenerationResult | None:
    """
    Extract a generation result from a response, if it holds a usable image.

    Only ``media.url`` is considered; all other fields are ignored here.

    Args:
        response: Provider response envelope

    Returns:
        GenerationResult with the URL unchanged, or None if not usable
    """
    if inspect_media(response) is not MediaCheck.OK:
        return None
    return GenerationResult(image_url=get_field(response.media, "url"))
