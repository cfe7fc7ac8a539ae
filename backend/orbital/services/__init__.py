# backend/orbital/services/__init__.py
"""Services package for Orbital."""

from .database_service import database_service
from .meeting_service import meeting_service
from .metadata_service import metadata_service

__all__ = ["database_service", "meeting_service", "metadata_service"]
