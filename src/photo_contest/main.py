# src/photo_contest/main.py
"""Main entry point for the photo contest application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from photo_contest.api.v1 import (
    auth_router,
    categories_router,
    contests_router,
    photos_router,
    rules_router,
    system_router,
    votes_router,
)
from photo_contest.core.settings import settings
from photo_contest.services.errors import ContestError, ValidationError
from photo_contest.services.storage import HttpImageStorage, get_image_fetcher, get_image_storage

logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logging.getLogger("photo_contest").setLevel(settings.log_level.upper())
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Community photo contest backend",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(contests_router, prefix="/api/v1")
app.include_router(categories_router, prefix="/api/v1")
app.include_router(photos_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(rules_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")

# Locally stored uploads are served straight from disk.
if settings.storage_backend == "local" and settings.storage_public_base_url.startswith("/"):
    app.mount(
        settings.storage_public_base_url.rstrip("/"),
        StaticFiles(directory=settings.storage_local_dir, check_dir=False),
        name="uploads",
    )


@app.exception_handler(ContestError)
async def contest_error_handler(_: Request, exc: ContestError) -> JSONResponse:
    """Convert domain failures into ``{detail, kind}`` responses."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


def _describe_validation_error(error: dict[str, object]) -> str:
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    message = str(error.get("msg", "Invalid value"))
    return f"{field}: {message}" if field else message


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests as 400 ``ValidationError``."""
    detail = "; ".join(_describe_validation_error(error) for error in exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail or "Invalid request", "kind": ValidationError.kind},
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    storage = get_image_storage()
    if isinstance(storage, HttpImageStorage):
        await storage.close()
    await get_image_fetcher().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Community photo contest backend",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("photo_contest.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
