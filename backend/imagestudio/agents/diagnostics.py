"""
Failure classification for responses that carried no usable image.

Builds a caller-facing diagnostic in priority order:

1. Direct provider error (``error`` object on the envelope)
2. No media, candidates present: first candidate's finish reason
3. No media, candidates present but empty: everything was filtered
4. No media, no candidates: prompt block reason, else incomplete response
   (typically API key / billing / API enablement, not content)
5. Media present but malformed: URL type or scheme mismatch

The raw response goes to the operator log only, never into the error.
"""

from __future__ import annotations

from typing import Any

from imagestudio.agents.validators import MediaCheck, inspect_media
from imagestudio.core.errors import FailureKind, GenerationFailure
from imagestudio.core.logging import log
from imagestudio.gemini.models import ModelResponse
from imagestudio.gemini.utils import dump_response, get_field, redact

# Finish reasons meaning "the model finished normally"
NORMAL_FINISH_REASONS = frozenset({"STOP", "FINISH_REASON_UNSPECIFIED", "UNSPECIFIED"})

# Max chars of an echoed URL / model text included in caller-facing detail
URL_PREVIEW_CHARS = 100
TEXT_PREVIEW_CHARS = 200

NO_MEDIA = "The AI model did not return any media content."
CREDENTIALS_HINT = (
    "Check that GOOGLE_API_KEY is valid, billing is active, and the required "
    "Google APIs (Generative Language / Vertex AI) are enabled."
)


def _provider_error_detail(error: Any) -> str:
    """Format a top-level provider error object (dict, object, or string)."""
    if isinstance(error, str):
        message = error or "Unknown error from AI service"
        status = code = None
    else:
        message = get_field(error, "message") or "Unknown error from AI service"
        status = get_field(error, "status")
        code = get_field(error, "code")

    if status:
        message = f"{message} (Status: {status})"
    if code:
        message = f"{message} (Code: {code})"

    return f"The AI service returned a direct error: {message}. {CREDENTIALS_HINT}"


def _candidate_detail(first: Any, text: Any) -> tuple[FailureKind, str]:
    """Explain a missing image from the first candidate's finish reason."""
    reason = get_field(first, "finishReason")
    finish_message = get_field(first, "finishMessage")

    # finishReason is untrusted; only hashable strings are looked up
    if reason and (not isinstance(reason, str) or reason not in NORMAL_FINISH_REASONS):
        stopped = f"Model processing stopped (reason: {reason}"
        if finish_message:
            stopped += f' - "{finish_message}"'
        stopped += ")."
        return (
            FailureKind.CONTENT_BLOCKED,
            f"{NO_MEDIA} {stopped} This often relates to safety filters or prompt "
            "content; try rephrasing the prompt.",
        )

    detail = (
        f"{NO_MEDIA} The model returned candidate(s) but no finish reason explaining "
        "the missing image."
    )
    if isinstance(text, str) and text:
        detail += f" Model replied with text: '{redact(text, TEXT_PREVIEW_CHARS)}'."
    return FailureKind.NO_IMAGE_PRODUCED, f"{detail} Try a more explicit image prompt."


def _describe(response: ModelResponse) -> tuple[FailureKind, str]:
    """Pick the failure kind and caller-facing detail for a response."""
    if response.error is not None:
        return FailureKind.PROVIDER_ERROR, _provider_error_detail(response.error)

    check = inspect_media(response)

    if check is MediaCheck.NO_MEDIA:
        candidates = response.candidates
        if isinstance(candidates, list):
            if candidates:
                return _candidate_detail(candidates[0], response.text)
            return (
                FailureKind.CANDIDATES_FILTERED,
                f"{NO_MEDIA} The model returned no candidates (all candidates may have "
                "been filtered by safety settings). Try a different prompt or a less "
                "strict SAFETY_THRESHOLD.",
            )

        block_reason = get_field(response.prompt_feedback, "blockReason")
        if block_reason:
            return (
                FailureKind.CONTENT_BLOCKED,
                f"{NO_MEDIA} The prompt was blocked by the provider (reason: {block_reason}). "
                "Try rephrasing the prompt.",
            )

        return (
            FailureKind.INCOMPLETE_RESPONSE,
            f"{NO_MEDIA} The AI response was incomplete or structured unexpectedly "
            f"(missing candidates data). This usually indicates a configuration "
            f"problem rather than prompt content. {CREDENTIALS_HINT}",
        )

    url = get_field(response.media, "url")

    if check is MediaCheck.URL_NOT_STRING:
        return (
            FailureKind.MALFORMED_MEDIA,
            f"The AI model returned media, but its URL is not a string "
            f"(got {type(url).__name__}).",
        )

    if check is MediaCheck.WRONG_SCHEME:
        return (
            FailureKind.MALFORMED_MEDIA,
            "The AI model returned a URL, but it is not an inline image data URI. "
            f"Received: '{redact(url, URL_PREVIEW_CHARS)}'.",
        )

    return (
        FailureKind.MALFORMED_MEDIA,
        "An unknown issue occurred with the image data after it was received from the AI.",
    )


def classify(response: ModelResponse) -> GenerationFailure:
    """
    Classify why a response produced no usable image.

    Logs one ERROR record with the full raw response; the returned error
    carries only the human-readable detail.

    Args:
        response: Provider response envelope that failed validation

    Returns:
        GenerationFailure for the caller to raise
    """
    kind, detail = _describe(response)
    log.error(
        f"IMAGE_GENERATION_FAILED kind={kind.value} detail={detail} "
        f"response={dump_response(response)}"
    )
    return GenerationFailure(kind, detail)
