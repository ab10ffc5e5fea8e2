from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from imagestudio.api.routes import limiter, router
from imagestudio.core.config import settings
from imagestudio.core.logging import log
from imagestudio.core.paths import get_data_path


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI app."""
    # Startup
    log.info(
        f"IMAGE_STUDIO_STARTUP provider={settings.image_provider} "
        f"model={settings.gemini_image_model} safety_threshold={settings.safety_threshold}"
    )
    if not settings.google_api_key:
        log.warning("IMAGE_STUDIO_KEY_MISSING variable=GOOGLE_API_KEY generation will fail until set")

    # Ensure saved-images directory exists
    generated_dir = get_data_path("generated")
    generated_dir.mkdir(parents=True, exist_ok=True)
    log.info(f"IMAGE_STUDIO_READY generated_dir={generated_dir}")

    yield

    # Shutdown
    log.info("IMAGE_STUDIO_SHUTDOWN")


app = FastAPI(lifespan=lifespan)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# CORS middleware - restrict to localhost in development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173", "http://localhost:9002"],  # Frontend dev servers
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def body_size_limit_middleware(request: Request, call_next):
    """Limits request body size to prevent DoS attacks.

    Raises:
        JSONResponse: 413 if body exceeds 2MB
    """
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > 2_000_000:
        log.warning(f"body_too_large client={get_remote_address(request)} size={content_length}")
        return JSONResponse(
            {"error": "Payload too large (max 2MB)"},
            status_code=413,
        )
    return await call_next(request)


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    """Adds security headers to all responses."""
    response: Response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "no-referrer"
    return response


# API routes
app.include_router(router, prefix="/api")

# Serve saved images only (the data dir also holds operator logs)
GENERATED_DIR = get_data_path("generated")
GENERATED_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/media/generated", StaticFiles(directory=str(GENERATED_DIR)), name="media")


@app.get("/")
def root() -> dict:
    """Root endpoint."""
    return {
        "name": "Image Studio API",
        "docs": "/docs",
        "health": "/api/healthz",
        "endpoints": {
            "images": "/api/images",
            "logs": "/api/logs/tail",
        },
    }
