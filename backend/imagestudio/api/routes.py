"""Image Studio API routes (image generation + observability)."""

from __future__ import annotations

import json
import uuid

from fastapi import APIRouter, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import StrictBool, TypeAdapter
from slowapi import Limiter
from slowapi.util import get_remote_address

from imagestudio.coordinator.orchestrator import generate
from imagestudio.core.config import settings
from imagestudio.core.errors import (
    ConfigurationError,
    GenerationFailure,
    ImageStudioError,
)
from imagestudio.core.image_utils import save_data_uri
from imagestudio.core.logging import MAX_LOG_LINES, log, tail_log_file, truncate_log_file
from imagestudio.gemini.models import GenerationRequest

router = APIRouter()

# Rate limiter instance
limiter = Limiter(key_func=get_remote_address)

_save_flag = TypeAdapter(StrictBool)


def _status_for(error: ImageStudioError) -> int:
    """Map an error category to an HTTP status code."""
    if isinstance(error, ConfigurationError):
        return 503
    if isinstance(error, GenerationFailure):
        return 422
    return 502


# ============================================================================
# Image Generation
# ============================================================================


@router.post("/images")
@limiter.limit("10/minute")
async def create_image(request: Request) -> dict:
    """Generate one image from a prompt and aspect-ratio hint.

    Request body:
        {"prompt": "a red fox", "aspectRatio": "16:9", "save": false}

    Rate limited to 10 requests per minute per client.

    Args:
        request: FastAPI request object (body + rate limiting)

    Returns:
        Dict with:
        {
            "ok": True,
            "imageUrl": "data:image/png;base64,...",
            "file": "/media/generated/img_abc123.png"   # only when save=true
        }

    Raises:
        HTTPException: 400 on invalid/empty prompt (no model call is made),
            503 on configuration errors, 422 when the model returned no usable
            image, 502 on other service failures
    """
    # Parse body manually to work around slowapi/FastAPI integration issue
    try:
        body = json.loads(await request.body())
        if not isinstance(body, dict):
            raise ValueError("expected a JSON object")
        save = _save_flag.validate_python(body.pop("save", False))
        gen_request = GenerationRequest.model_validate(body)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid request body: {e}")

    try:
        result = await run_in_threadpool(generate, gen_request)
    except ImageStudioError as e:
        detail = {"error": str(e), "category": e.category}
        if isinstance(e, GenerationFailure):
            detail["kind"] = e.kind.value
        raise HTTPException(status_code=_status_for(e), detail=detail)

    response = {"ok": True, "imageUrl": result.image_url}

    if save:
        name = f"img_{uuid.uuid4().hex[:12]}"
        try:
            path = save_data_uri(result.image_url, name)
        except (ValueError, OSError) as e:
            log.error(f"IMAGE_SAVE_FAILED name={name}: {e}")
            raise HTTPException(status_code=502, detail=f"Generated image could not be saved: {e}")
        response["file"] = f"/media/generated/{path.name}"

    return response


# ============================================================================
# Observability
# ============================================================================


@router.get("/healthz")
def healthz() -> dict:
    """Health check endpoint with generation readiness status.

    Returns:
        Dict with status and configuration (NO SECRETS)
    """
    return {
        "ok": True,
        "provider": {
            "name": settings.image_provider,
            "model": settings.gemini_image_model,
            "status": "configured" if settings.google_api_key else "key_missing",
        },
        "safety_threshold": settings.safety_threshold,
    }


@router.get("/logs/tail")
@limiter.limit("60/minute")
def get_logs_tail(request: Request, lines: int = 100) -> dict:
    """Get last N lines from logs.txt for operator log viewing.

    Args:
        request: FastAPI request object (for rate limiting)
        lines: Number of lines to return (default 100, max 10000)

    Returns:
        Dict with log lines array and metadata

    Raises:
        HTTPException: 404 unless EXPOSE_LOGS is enabled
    """
    if not settings.expose_logs:
        raise HTTPException(status_code=404, detail="Not Found")

    truncate_log_file()

    try:
        tail, total = tail_log_file(max(1, min(lines, MAX_LOG_LINES)))
    except OSError as e:
        log.error(f"Failed to read logs: {e}")
        return {"ok": False, "error": str(e)}

    if not total:
        return {"ok": True, "logs": [], "message": "No logs yet"}

    return {
        "ok": True,
        "logs": tail,
        "total_lines": total,
        "returned_lines": len(tail),
    }
