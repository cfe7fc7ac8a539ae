# backend/orbital/services/seed_service.py
"""
Seed service - loads baseline metadata and demo meetings from YAML.

Seeding is idempotent: a metadata type is only seeded when it has no active
items, and meetings are only seeded into an empty meetings table.

Usage:
    from orbital.services.seed_service import seed_meetings, seed_metadata

    counts = await seed_metadata(metadata_store)
    created = await seed_meetings(meeting_store)
"""

import logging
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from orbital.models import Meeting, item_class_for
from orbital.services.meeting_store import SqlMeetingStore
from orbital.services.metadata_store import MetadataStore

logger = logging.getLogger("orbital.services.seed")

# Path to YAML baseline files
_SEED_DIR = Path(__file__).resolve().parent.parent / "seed"

_WEDNESDAY = 2


def _load_yaml(path: Path) -> Dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


async def seed_metadata(store: MetadataStore, path: Optional[Path] = None) -> Dict[str, int]:
    """
    Create baseline metadata items for every type that has none yet.

    Returns:
        Number of items created per metadata type
    """
    baseline = _load_yaml(path or _SEED_DIR / "metadata.yaml").get("metadata", {})

    counts: Dict[str, int] = {}
    for metadata_type, entries in baseline.items():
        if await store.query_by_type(metadata_type):
            counts[metadata_type] = 0
            continue

        item_cls = item_class_for(metadata_type)
        for entry in entries or []:
            await store.create(item_cls.model_validate({**entry, "type": metadata_type}))
        counts[metadata_type] = len(entries or [])

    logger.info(f"Metadata seed complete: {counts}")
    return counts


def third_wednesday(year: int, month: int) -> date:
    """Return the third Wednesday of a month."""
    first = date(year, month, 1)
    return first + timedelta(days=(_WEDNESDAY - first.weekday()) % 7 + 14)


def trailing_months(today: date, count: int) -> List[Tuple[int, int]]:
    """Return ``count`` (year, month) pairs ending with today's month, oldest first."""
    current = today.year * 12 + today.month - 1
    return [
        (index // 12, index % 12 + 1)
        for index in range(current - count + 1, current + 1)
    ]


async def seed_meetings(
    store: SqlMeetingStore,
    today: Optional[date] = None,
    path: Optional[Path] = None,
    count: int = 10,
) -> int:
    """
    Create demo meetings on the third Wednesday of the last ``count`` months.

    Returns:
        Number of meetings created (0 when meetings already exist)
    """
    if await store.list_meetings():
        logger.info("Meetings already present, skipping meeting seed")
        return 0

    data = _load_yaml(path or _SEED_DIR / "meetings.yaml")
    defaults = data.get("defaults", {})
    topics = data.get("topics", [])
    if not topics:
        return 0

    today = today or datetime.now(timezone.utc).date()
    start_hour = defaults.get("startHourUtc", 18)
    duration = timedelta(hours=defaults.get("durationHours", 2))

    created = 0
    for index, (year, month) in enumerate(trailing_months(today, count)):
        topic = topics[index % len(topics)]
        day = third_wednesday(year, month)
        start = datetime(day.year, day.month, day.day, start_hour, tzinfo=timezone.utc)

        meeting = Meeting(
            title=topic["title"],
            description=topic.get("description", ""),
            start_time=start,
            end_time=start + duration,
            keywords=topic.get("keywords", []),
            location=defaults.get("location"),
            organizer=defaults.get("organizer"),
            audience=defaults.get("audience"),
            event_status=defaults.get("eventStatus"),
            event_attendance_mode=defaults.get("eventAttendanceMode"),
            is_accessible_for_free=defaults.get("isAccessibleForFree"),
            maximum_attendee_capacity=defaults.get("maximumAttendeeCapacity"),
        )
        await store.create_meeting(meeting)
        created += 1

    logger.info(f"Seeded {created} demo meetings")
    return created
