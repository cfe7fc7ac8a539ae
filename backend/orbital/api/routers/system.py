# backend/orbital/api/routers/system.py
from datetime import datetime

from fastapi import APIRouter

from orbital.config import settings
from orbital.models import HealthStatus
from orbital.services.database_service import database_service
from orbital.services.metadata_service import metadata_service

router = APIRouter()


@router.get("/health", response_model=HealthStatus, tags=["System"])
async def health_check():
    """Health check endpoint."""
    database = await database_service.health_check()

    return HealthStatus(
        status="healthy" if database.get("status") == "healthy" else "degraded",
        timestamp=datetime.now(),
        version=settings.api_version,
        database=database,
        cached_metadata_types=metadata_service.cached_types,
    )
