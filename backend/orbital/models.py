# ============================================================================
# Orbital - API and Domain Models
# ============================================================================
"""
Pydantic models shared by the API, services and HTTP clients.

Models:
    - MetadataItem: one controlled-vocabulary entry (generic shape)
    - EventStatusDefinition / AttendanceModeDefinition: typed vocabulary entries
    - Meeting: an event record with schema.org-style optional fields
    - ErrorResponse / HealthStatus: API envelopes

All models use camelCase field names on the wire and snake_case in Python.
"""

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


EVENT_STATUS_TYPE = "EventStatusType"
ATTENDANCE_MODE_TYPE = "EventAttendanceModeEnumeration"
MEETING_TYPE = "meeting"


# ============================================================================
# METADATA MODELS
# ============================================================================

class MetadataItem(BaseModel):
    """
    A controlled-vocabulary entry, partitioned by ``type``.

    Extra fields are kept so that variant-specific attributes survive a
    read through the generic shape.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str = ""
    type: str = ""
    value: str = ""
    display_name: str = ""
    description: str = ""
    is_active: bool = True
    sort_order: int = 0


class EventStatusDefinition(MetadataItem):
    """Status of an event (scheduled, cancelled, postponed...)."""

    type: str = EVENT_STATUS_TYPE
    requires_previous_start_date: bool = False


class AttendanceModeDefinition(MetadataItem):
    """How an event is attended (online, offline, mixed)."""

    type: str = ATTENDANCE_MODE_TYPE


METADATA_ITEM_TYPES: Dict[str, Type[MetadataItem]] = {
    EVENT_STATUS_TYPE: EventStatusDefinition,
    ATTENDANCE_MODE_TYPE: AttendanceModeDefinition,
}


def item_class_for(metadata_type: str) -> Type[MetadataItem]:
    """Return the typed item class registered for a metadata type."""
    return METADATA_ITEM_TYPES.get(metadata_type, MetadataItem)


# ============================================================================
# MEETING MODEL
# ============================================================================

class Meeting(BaseModel):
    """
    Meeting (event) record.

    Mirrors a subset of the schema.org Event vocabulary. ``event_status`` and
    ``event_attendance_mode`` hold metadata values and are checked against the
    metadata service by the meeting service, not here.

    Times given without a UTC offset are taken to be UTC.

    Raises:
        ValidationError: if ``end_time`` is not strictly after ``start_time``,
            on construction or on attribute assignment.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: Optional[str] = None
    type: Literal["meeting"] = MEETING_TYPE
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    start_time: datetime
    end_time: datetime

    event_status: Optional[str] = None
    event_attendance_mode: Optional[str] = None
    location: Optional[str] = None
    organizer: Optional[str] = None
    audience: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    attendees: List[str] = Field(default_factory=list)
    performers: List[str] = Field(default_factory=list)
    sub_events: List[str] = Field(default_factory=list)
    is_accessible_for_free: Optional[bool] = None
    maximum_attendee_capacity: Optional[int] = Field(default=None, ge=0)
    url: Optional[str] = None
    image: Optional[str] = None
    in_language: Optional[str] = None
    door_time: Optional[datetime] = None
    previous_start_date: Optional[datetime] = None

    @field_validator("start_time", "end_time", "door_time", "previous_start_date")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Times without an offset are read as UTC
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _check_time_range(self) -> "Meeting":
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


# ============================================================================
# API ENVELOPES
# ============================================================================

class ErrorResponse(BaseModel):
    """
    Standard error response model for API errors.

    Attributes:
        error: Error category or type
        detail: Detailed error message
        timestamp: When the error occurred
    """

    error: str
    detail: str
    timestamp: datetime


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime
    version: str
    database: Dict[str, object]
    cached_metadata_types: List[str] = Field(default_factory=list)
