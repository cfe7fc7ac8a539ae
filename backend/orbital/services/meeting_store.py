# backend/orbital/services/meeting_store.py
"""
Meeting persistence over the ``meetings`` document table.

Usage:
    from orbital.services.meeting_store import SqlMeetingStore

    store = SqlMeetingStore()
    meetings = await store.list_meetings()
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from orbital.database.models import MeetingRecord
from orbital.models import Meeting
from orbital.services.database_service import DatabaseService, database_service

logger = logging.getLogger("orbital.services.meeting_store")


class MeetingConflictError(ValueError):
    """A meeting with the same id already exists."""


def _utc_naive(value: datetime) -> datetime:
    """Normalize to naive UTC for the indexed time columns."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _apply(record: MeetingRecord, meeting: Meeting) -> None:
    record.title = meeting.title
    record.start_time = _utc_naive(meeting.start_time)
    record.end_time = _utc_naive(meeting.end_time)
    record.document = meeting.model_dump(mode="json", by_alias=True)


class SqlMeetingStore:
    """Meeting store backed by SQLAlchemy."""

    def __init__(self, db: Optional[DatabaseService] = None):
        self.db = db or database_service

    async def list_meetings(self) -> List[Meeting]:
        """Return all meetings ordered by start time."""
        query = (
            select(MeetingRecord)
            .where(MeetingRecord.type == "meeting")
            .order_by(MeetingRecord.start_time, MeetingRecord.id)
        )
        async with self.db.get_session() as session:
            result = await session.execute(query)
            records = result.scalars().all()

        return [Meeting.model_validate(record.document) for record in records]

    async def get_meeting(self, meeting_id: str) -> Optional[Meeting]:
        async with self.db.get_session() as session:
            record = await session.get(MeetingRecord, meeting_id)

        return Meeting.model_validate(record.document) if record else None

    async def create_meeting(self, meeting: Meeting) -> Meeting:
        """
        Persist a meeting, assigning a UUID when it has no id.

        Raises:
            MeetingConflictError: if the id is already taken
        """
        stored = meeting if meeting.id else meeting.model_copy(update={"id": str(uuid.uuid4())})

        record = MeetingRecord(id=stored.id, type=stored.type)
        _apply(record, stored)
        try:
            async with self.db.get_session() as session:
                session.add(record)
        except IntegrityError as e:
            raise MeetingConflictError(f"Meeting '{stored.id}' already exists") from e

        logger.info(f"Created meeting {stored.id} ({stored.title})")
        return stored

    async def update_meeting(self, meeting: Meeting) -> Optional[Meeting]:
        """Replace a meeting. Returns None when it does not exist."""
        async with self.db.get_session() as session:
            record = await session.get(MeetingRecord, meeting.id)
            if record is None:
                return None
            _apply(record, meeting)

        logger.info(f"Updated meeting {meeting.id}")
        return meeting
