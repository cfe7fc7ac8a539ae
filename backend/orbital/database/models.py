# backend/orbital/database/models.py
"""
SQLAlchemy records for Orbital's document-style persistence.

Records:
    - MetadataItemRecord: controlled-vocabulary entries, partitioned by type
    - MeetingRecord: meeting documents

Each record keeps the full wire document in a JSON column and promotes the
fields used for filtering and ordering to indexed columns.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    text,
)

from orbital.database.base import Base


class MetadataItemRecord(Base):
    """
    Metadata item document.

    The primary key is ``(type, id)``: ``type`` is the partition key and an id
    is only unique within its partition.

    Attributes:
        id: Item identifier (UUID string unless supplied by the caller)
        type: Metadata category, e.g. "EventStatusType"
        value: Machine-readable code within the category
        display_name: Human readable label
        description: Longer description
        is_active: Visibility flag; inactive items are excluded from queries
        sort_order: Listing order (ascending)
        document: Full camelCase wire document, including variant-only fields
    """

    __tablename__ = "metadata_items"

    type = Column(String(100), primary_key=True)
    id = Column(String(64), primary_key=True)
    value = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    document = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_metadata_items_type_value", "type", "value"),
        Index("ix_metadata_items_type_active_order", "type", "is_active", "sort_order"),
        # At most one active item per (type, value)
        Index(
            "uq_metadata_items_active_value",
            "type",
            "value",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    def __repr__(self) -> str:
        return f"<MetadataItemRecord(type={self.type}, id={self.id}, value={self.value})>"


class MeetingRecord(Base):
    """
    Meeting document.

    Attributes:
        id: Meeting identifier
        type: Always "meeting"
        title: Meeting title
        start_time: Start (UTC, naive) used for ordering
        end_time: End (UTC, naive)
        document: Full camelCase wire document
    """

    __tablename__ = "meetings"

    id = Column(String(64), primary_key=True)
    type = Column(String(50), nullable=False, default="meeting", index=True)
    title = Column(String(100), nullable=False)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    document = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<MeetingRecord(id={self.id}, title={self.title})>"
