# ============================================================================
# Orbital - FastAPI Application Entry Point
# ============================================================================
"""
Main FastAPI application module for the Orbital meetings API.

This module sets up the FastAPI application with:
- Logging configuration
- CORS middleware configuration for cross-origin requests
- Lifespan handler (database tables, baseline metadata, demo meetings)
- Error handling with a consistent error envelope
- API router integration

Usage:
    Direct: python -m orbital.main
    Server: uvicorn orbital.main:app --host 0.0.0.0 --port 8000 --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from orbital.api import api_router
from orbital.config import settings
from orbital.models import ErrorResponse
from orbital.services.database_service import database_service
from orbital.services.meeting_service import meeting_service
from orbital.services.metadata_service import metadata_service
from orbital.services.seed_service import seed_meetings, seed_metadata

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("orbital.main")


# ============================================================================
# APPLICATION LIFESPAN
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup creates missing tables and, when enabled, seeds baseline metadata
    and demo meetings. Shutdown disposes pooled database connections.

    Raises:
        Exception: If the database cannot be initialized
    """
    logger.info(f"Starting {settings.api_title} v{settings.api_version} (debug={settings.debug})")
    await database_service.init_db()

    if settings.seed_metadata:
        try:
            await seed_metadata(metadata_service.store)
            metadata_service.refresh_cache()
        except Exception:
            logger.exception("Metadata seed failed; continuing without baseline metadata")

    if settings.seed_meetings:
        try:
            await seed_meetings(meeting_service.store)
        except Exception:
            logger.exception("Meeting seed failed; continuing without demo meetings")

    logger.info("Startup complete")
    yield

    logger.info(f"Shutting down {settings.api_title}")
    await database_service.close()


# ============================================================================
# APPLICATION INITIALIZATION
# ============================================================================

app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description=(
        "Orbital - Meetings API\n\n"
        "Meetings plus the controlled vocabularies (event status, attendance "
        "mode) they reference, served from an in-memory metadata cache."
    ),
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# ============================================================================
# MIDDLEWARE CONFIGURATION
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Location"],
)

# ============================================================================
# ERROR HANDLERS
# ============================================================================


def _error(status_code: int, error: str, detail: str) -> JSONResponse:
    error_response = ErrorResponse(error=error, detail=detail, timestamp=datetime.now())
    return JSONResponse(status_code=status_code, content=error_response.model_dump(mode="json"))


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request bodies, paths or queries that fail validation return 422."""
    return _error(422, "Validation Error", str(exc.errors()))


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """
    Global exception handler for Pydantic validation errors raised inside
    handlers, e.g. when a payload is re-validated as a typed metadata item.
    """
    return _error(422, "Validation Error", str(exc))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    response = _error(exc.status_code, f"HTTP {exc.status_code}", str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all handler for unexpected errors.

    The exception is logged; its message is only returned in debug mode.
    """
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    detail = str(exc) if settings.debug else "An unexpected error occurred"
    return _error(500, "Internal Server Error", detail)


# ============================================================================
# ROUTER CONFIGURATION
# ============================================================================

app.include_router(api_router, prefix="/api")


# ============================================================================
# ROOT ENDPOINT
# ============================================================================

@app.get("/", tags=["root"])
async def root() -> Dict[str, Any]:
    """
    Root endpoint providing API information.

    Returns:
        Dict[str, Any]: API metadata including version, status, and links
    """
    return {
        "name": settings.api_title,
        "version": settings.api_version,
        "status": "running",
        "docs_url": "/docs",
        "health_check": "/api/health",
        "timestamp": datetime.now(),
    }


# ============================================================================
# DEVELOPMENT SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "orbital.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
