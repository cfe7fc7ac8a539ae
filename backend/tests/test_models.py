"""
Unit tests for the pydantic models: defaults, wire names and meeting rules.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from orbital.models import (
    ATTENDANCE_MODE_TYPE,
    EVENT_STATUS_TYPE,
    AttendanceModeDefinition,
    EventStatusDefinition,
    Meeting,
    MetadataItem,
    item_class_for,
)

START = datetime(2026, 3, 18, 18, 0, tzinfo=timezone.utc)


class TestMetadataModels:
    """Test metadata item defaults and typed variants."""

    def test_metadata_item_defaults(self):
        item = MetadataItem()
        assert item.id == ""
        assert item.is_active is True
        assert item.sort_order == 0

    def test_event_status_defaults(self):
        status = EventStatusDefinition()
        assert status.type == EVENT_STATUS_TYPE
        assert status.requires_previous_start_date is False

    def test_attendance_mode_default_type(self):
        assert AttendanceModeDefinition().type == ATTENDANCE_MODE_TYPE

    def test_default_type_can_be_overridden(self):
        assert EventStatusDefinition(type="CustomStatus").type == "CustomStatus"

    def test_wire_names_are_camel_case(self):
        data = EventStatusDefinition(value="EventRescheduled", display_name="Rescheduled").model_dump(by_alias=True)
        assert data["displayName"] == "Rescheduled"
        assert data["requiresPreviousStartDate"] is False
        assert "display_name" not in data

    def test_extra_fields_are_preserved(self):
        item = MetadataItem.model_validate({"type": "Color", "value": "Red", "hex": "#ff0000"})
        assert item.model_dump(by_alias=True)["hex"] == "#ff0000"

    def test_item_class_registry(self):
        assert item_class_for(EVENT_STATUS_TYPE) is EventStatusDefinition
        assert item_class_for(ATTENDANCE_MODE_TYPE) is AttendanceModeDefinition
        assert item_class_for("Color") is MetadataItem


class TestMeetingModel:
    """Test meeting defaults and validation."""

    def test_defaults(self):
        meeting = Meeting(title="Kickoff", start_time=START, end_time=START + timedelta(hours=2))
        assert meeting.type == "meeting"
        assert meeting.id is None
        assert meeting.keywords == []
        assert meeting.attendees == []
        assert meeting.sub_events == []

    def test_accepts_camel_case_payload(self):
        meeting = Meeting.model_validate(
            {
                "title": "Kickoff",
                "startTime": "2026-03-18T18:00:00Z",
                "endTime": "2026-03-18T20:00:00Z",
                "eventStatus": "EventScheduled",
                "maximumAttendeeCapacity": 50,
            }
        )
        assert meeting.event_status == "EventScheduled"
        assert meeting.maximum_attendee_capacity == 50

    def test_end_must_follow_start(self):
        with pytest.raises(ValidationError, match="End time must be after start time"):
            Meeting(title="Kickoff", start_time=START, end_time=START)

    def test_end_checked_on_assignment(self):
        meeting = Meeting(title="Kickoff", start_time=START, end_time=START + timedelta(hours=2))
        with pytest.raises(ValidationError):
            meeting.end_time = START - timedelta(minutes=1)

    @pytest.mark.parametrize("title", ["", "x" * 101])
    def test_title_length(self, title):
        with pytest.raises(ValidationError):
            Meeting(title=title, start_time=START, end_time=START + timedelta(hours=1))

    def test_description_length(self):
        with pytest.raises(ValidationError):
            Meeting(title="Kickoff", description="x" * 501, start_time=START, end_time=START + timedelta(hours=1))

    def test_capacity_not_negative(self):
        with pytest.raises(ValidationError):
            Meeting(title="Kickoff", start_time=START, end_time=START + timedelta(hours=1), maximum_attendee_capacity=-1)

    def test_type_is_fixed(self):
        with pytest.raises(ValidationError):
            Meeting(type="workshop", title="Kickoff", start_time=START, end_time=START + timedelta(hours=1))

    def test_naive_times_are_taken_as_utc(self):
        meeting = Meeting(
            title="Kickoff",
            start_time=START,
            end_time=datetime(2026, 3, 18, 20, 0),
            door_time=datetime(2026, 3, 18, 17, 30),
        )

        assert meeting.end_time.tzinfo is timezone.utc
        assert meeting.end_time - meeting.start_time == timedelta(hours=2)
        assert meeting.door_time == datetime(2026, 3, 18, 17, 30, tzinfo=timezone.utc)
        assert meeting.previous_start_date is None

    def test_mixed_offsets_still_check_range(self):
        with pytest.raises(ValidationError, match="End time must be after start time"):
            Meeting.model_validate(
                {"title": "Kickoff", "startTime": "2026-03-18T18:00:00Z", "endTime": "2026-03-18T17:00:00"}
            )

    def test_naive_assignment_is_checked_against_aware_start(self):
        meeting = Meeting(title="Kickoff", start_time=START, end_time=START + timedelta(hours=2))
        with pytest.raises(ValidationError):
            meeting.end_time = datetime(2026, 3, 18, 17, 0)
