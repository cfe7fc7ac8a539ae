"""
Unit tests for MeetingService vocabulary checks and store delegation.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from orbital.models import ATTENDANCE_MODE_TYPE, EVENT_STATUS_TYPE, Meeting
from orbital.services.meeting_service import MeetingService, MeetingValidationError

START = datetime(2026, 9, 16, 18, 0, tzinfo=timezone.utc)


def _meeting(**overrides):
    fields = {"title": "Async Python", "start_time": START, "end_time": START + timedelta(hours=2)}
    fields.update(overrides)
    return Meeting(**fields)


@pytest.fixture
def metadata():
    valid = {
        EVENT_STATUS_TYPE: {"EventScheduled", "EventCancelled"},
        ATTENDANCE_MODE_TYPE: {"OnlineEventAttendanceMode"},
    }
    service = MagicMock()
    service.is_valid_value = AsyncMock(side_effect=lambda t, v: v in valid.get(t, set()))
    return service


@pytest.fixture
def store():
    store = AsyncMock()
    store.create_meeting.side_effect = lambda m: m.model_copy(update={"id": "new-id"})
    store.update_meeting.side_effect = lambda m: m
    return store


class TestCreateMeeting:

    @pytest.mark.asyncio
    async def test_create_with_valid_vocabulary(self, store, metadata):
        service = MeetingService(store=store, metadata=metadata)

        created = await service.create_meeting(
            _meeting(event_status="EventScheduled", event_attendance_mode="OnlineEventAttendanceMode")
        )

        assert created.id == "new-id"
        metadata.is_valid_value.assert_any_await(EVENT_STATUS_TYPE, "EventScheduled")
        metadata.is_valid_value.assert_any_await(ATTENDANCE_MODE_TYPE, "OnlineEventAttendanceMode")

    @pytest.mark.asyncio
    async def test_unset_vocabulary_is_not_checked(self, store, metadata):
        service = MeetingService(store=store, metadata=metadata)

        await service.create_meeting(_meeting())

        metadata.is_valid_value.assert_not_awaited()
        store.create_meeting.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_status_is_rejected(self, store, metadata):
        service = MeetingService(store=store, metadata=metadata)

        with pytest.raises(MeetingValidationError, match="eventStatus"):
            await service.create_meeting(_meeting(event_status="EventMaybe"))

        store.create_meeting.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_attendance_mode_is_rejected(self, store, metadata):
        service = MeetingService(store=store, metadata=metadata)

        with pytest.raises(MeetingValidationError, match="eventAttendanceMode"):
            await service.create_meeting(_meeting(event_attendance_mode="Teleport"))


class TestUpdateMeeting:

    @pytest.mark.asyncio
    async def test_path_id_wins(self, store, metadata):
        service = MeetingService(store=store, metadata=metadata)

        updated = await service.update_meeting("path-id", _meeting(id="body-id"))

        assert updated.id == "path-id"
        assert store.update_meeting.await_args.args[0].id == "path-id"

    @pytest.mark.asyncio
    async def test_missing_meeting_returns_none(self, store, metadata):
        store.update_meeting.side_effect = None
        store.update_meeting.return_value = None
        service = MeetingService(store=store, metadata=metadata)

        assert await service.update_meeting("missing", _meeting()) is None

    @pytest.mark.asyncio
    async def test_invalid_vocabulary_is_rejected(self, store, metadata):
        service = MeetingService(store=store, metadata=metadata)

        with pytest.raises(MeetingValidationError):
            await service.update_meeting("id", _meeting(event_status="Nope"))

        store.update_meeting.assert_not_awaited()
