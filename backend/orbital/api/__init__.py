from fastapi import APIRouter

# Aggregate all routers here
from .routers import meetings, metadata, system

api_router = APIRouter()
api_router.include_router(metadata.router)
api_router.include_router(meetings.router)
api_router.include_router(system.router)

__all__ = ["api_router"]
