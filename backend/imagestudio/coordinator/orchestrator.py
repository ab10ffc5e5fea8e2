from __future__ import annotations

from imagestudio.agents.diagnostics import classify
from imagestudio.agents.prompting import build_model_request
from imagestudio.agents.validators import validate
from imagestudio.clients.image_interface import ImageModelClient
from imagestudio.clients.provider_selector import ensure_configured, image_client
from imagestudio.core.errors import ImageStudioError, ServiceError
from imagestudio.core.logging import log
from imagestudio.gemini.models import GenerationRequest, GenerationResult, ModelRequest, ModelResponse
from imagestudio.gemini.utils import redact


def _invoke(model_request: ModelRequest, client: ImageModelClient | None) -> ModelResponse:
    """Runs the single model call on the injected client or an owned one."""
    if client is not None:
        return client.invoke(model_request)
    with image_client() as owned:
        return owned.invoke(model_request)


def generate(request: GenerationRequest, client: ImageModelClient | None = None) -> GenerationResult:
    """Runs one image generation: check config → compose → invoke → validate.

    Linear, no retries. Errors from this package's taxonomy propagate
    unchanged; anything else raised along the way is wrapped once.

    Args:
        request: Caller request (prompt + aspect ratio)
        client: Optional image model client (default: provider from settings,
            closed after the call)

    Returns:
        GenerationResult holding the image data URI

    Raises:
        ConfigurationError: If the provider credential is missing (before any call)
        GenerationFailure: If the model responded without a usable image
        ServiceError: On any other failure during the round trip
    """
    ensure_configured()

    log.info(
        f"IMAGE_GENERATION_START aspect_ratio={request.aspect_ratio} "
        f"prompt_chars={len(request.prompt)}"
    )

    try:
        model_request = build_model_request(request)
        response = _invoke(model_request, client)

        result = validate(response)
        if result is None:
            raise classify(response)

    except ImageStudioError:
        raise
    except Exception as e:
        log.error(
            f"IMAGE_GENERATION_SERVICE_ERROR type={type(e).__name__} "
            f"message={redact(str(e), 500)} code={getattr(e, 'code', None)} "
            f"status={getattr(e, 'status', None)}",
            exc_info=True,
        )
        raise ServiceError.from_exception(e) from e

    log.info(
        f"IMAGE_GENERATION_COMPLETE header={redact(result.image_url.split(',', 1)[0], 60)} "
        f"uri_chars={len(result.image_url)}"
    )
    return result
