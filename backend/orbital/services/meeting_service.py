# backend/orbital/services/meeting_service.py
"""
Meeting service: CRUD over the meeting store plus vocabulary checks.

``event_status`` and ``event_attendance_mode`` must name active metadata
values; they are checked through the cached metadata service so repeated
writes do not hit the metadata store.

Usage:
    from orbital.services.meeting_service import meeting_service

    created = await meeting_service.create_meeting(meeting)
"""

import logging
from typing import List, Optional

from orbital.models import ATTENDANCE_MODE_TYPE, EVENT_STATUS_TYPE, Meeting
from orbital.services.meeting_store import SqlMeetingStore
from orbital.services.metadata_service import MetadataService, metadata_service

logger = logging.getLogger("orbital.services.meetings")


class MeetingValidationError(ValueError):
    """A meeting references a metadata value that does not exist."""


class MeetingService:
    """
    Attributes:
        store: Meeting store
        metadata: Metadata service used for vocabulary checks
    """

    def __init__(
        self,
        store: Optional[SqlMeetingStore] = None,
        metadata: Optional[MetadataService] = None,
    ):
        self.store = store or SqlMeetingStore()
        self.metadata = metadata or metadata_service

    async def list_meetings(self) -> List[Meeting]:
        return await self.store.list_meetings()

    async def get_meeting(self, meeting_id: str) -> Optional[Meeting]:
        return await self.store.get_meeting(meeting_id)

    async def create_meeting(self, meeting: Meeting) -> Meeting:
        """
        Validate and store a new meeting.

        Raises:
            MeetingValidationError: if a vocabulary field holds an unknown value
        """
        await self._validate_vocabulary(meeting)
        return await self.store.create_meeting(meeting)

    async def update_meeting(self, meeting_id: str, meeting: Meeting) -> Optional[Meeting]:
        """
        Replace the meeting with ``meeting_id``; the path id wins over the body.

        Returns:
            The stored meeting, or None when it does not exist

        Raises:
            MeetingValidationError: if a vocabulary field holds an unknown value
        """
        await self._validate_vocabulary(meeting)
        return await self.store.update_meeting(meeting.model_copy(update={"id": meeting_id}))

    async def _validate_vocabulary(self, meeting: Meeting) -> None:
        checks = (
            ("eventStatus", EVENT_STATUS_TYPE, meeting.event_status),
            ("eventAttendanceMode", ATTENDANCE_MODE_TYPE, meeting.event_attendance_mode),
        )
        for field_name, metadata_type, value in checks:
            if value is None:
                continue
            if not await self.metadata.is_valid_value(metadata_type, value):
                logger.warning(f"Rejected meeting with unknown {field_name} '{value}'")
                raise MeetingValidationError(
                    f"'{value}' is not a valid {field_name} ({metadata_type})"
                )


# Global singleton instance
meeting_service = MeetingService()
