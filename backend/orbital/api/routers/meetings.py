# backend/orbital/api/routers/meetings.py
"""
Meetings API Router.

CRUD endpoints for meetings. Event status and attendance mode are checked
against the cached metadata vocabularies by the meeting service.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from orbital.dependencies import get_meeting_service
from orbital.models import Meeting
from orbital.services.meeting_service import MeetingService, MeetingValidationError
from orbital.services.meeting_store import MeetingConflictError

logger = logging.getLogger("orbital.api.meetings")

router = APIRouter(prefix="/meetings", tags=["meetings"])


@router.get("", response_model=List[Meeting])
async def list_meetings(service: MeetingService = Depends(get_meeting_service)):
    """List all meetings ordered by start time."""
    return await service.list_meetings()


@router.get("/{meeting_id}", response_model=Meeting)
async def get_meeting(meeting_id: str, service: MeetingService = Depends(get_meeting_service)):
    meeting = await service.get_meeting(meeting_id)
    if meeting is None:
        raise HTTPException(status_code=404, detail=f"Meeting '{meeting_id}' not found")
    return meeting


@router.post("", response_model=Meeting, status_code=status.HTTP_201_CREATED)
async def create_meeting(
    meeting: Meeting,
    response: Response,
    service: MeetingService = Depends(get_meeting_service),
):
    """
    Create a meeting.

    Returns the stored meeting with its assigned id and a ``Location`` header
    pointing at it. A client-supplied id that is already taken is a 409.
    """
    try:
        created = await service.create_meeting(meeting)
    except MeetingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except MeetingConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    response.headers["Location"] = f"/api/meetings/{created.id}"
    return created


@router.put("/{meeting_id}", response_model=Meeting)
async def update_meeting(
    meeting_id: str,
    meeting: Meeting,
    service: MeetingService = Depends(get_meeting_service),
):
    """Replace a meeting; the id in the path wins over any id in the body."""
    try:
        updated = await service.update_meeting(meeting_id, meeting)
    except MeetingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if updated is None:
        raise HTTPException(status_code=404, detail=f"Meeting '{meeting_id}' not found")
    return updated
