# backend/orbital/database/__init__.py
"""
Database package for Orbital.

Provides SQLAlchemy records and the declarative base.
"""

from orbital.database.base import Base
from orbital.database.models import MeetingRecord, MetadataItemRecord

__all__ = [
    "Base",
    "MeetingRecord",
    "MetadataItemRecord",
]
