# backend/orbital/services/metadata_store.py
"""
Metadata store contract and its SQL document-table implementation.

The store is the only component that talks to persistence for metadata
items. Every query is partitioned by ``type`` and only active items are
returned by the read operations.

Usage:
    from orbital.services.metadata_store import SqlMetadataStore

    store = SqlMetadataStore()
    statuses = await store.query_by_type("EventStatusType", EventStatusDefinition)
"""

import logging
import uuid
from typing import List, Optional, Protocol, Type, TypeVar, runtime_checkable

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from orbital.database.models import MetadataItemRecord
from orbital.models import MetadataItem
from orbital.services.database_service import DatabaseService, database_service

logger = logging.getLogger("orbital.services.metadata_store")

ItemT = TypeVar("ItemT", bound=MetadataItem)

# Columns promoted out of the wire document
_COLUMN_ALIASES = ("id", "type", "value", "displayName", "description", "isActive", "sortOrder")


class MetadataConflictError(ValueError):
    """An active item with the same type and value (or the same id) already exists."""


@runtime_checkable
class MetadataStore(Protocol):
    """
    Operations the metadata service consumes from a backing store.

    Not-found on update/delete is reported as ``False``, never raised.
    Any other failure propagates to the caller unchanged.
    """

    async def query_by_type(
        self, metadata_type: str, item_cls: Type[ItemT] = MetadataItem
    ) -> List[ItemT]: ...

    async def query_by_type_and_value(
        self, metadata_type: str, value: str, item_cls: Type[ItemT] = MetadataItem
    ) -> Optional[ItemT]: ...

    async def exists_valid(self, metadata_type: str, value: str) -> bool: ...

    async def create(self, item: ItemT) -> ItemT: ...

    async def update(self, item: MetadataItem) -> bool: ...

    async def delete(self, item_id: str, metadata_type: str) -> bool: ...


def _to_item(record: MetadataItemRecord, item_cls: Type[ItemT]) -> ItemT:
    document = dict(record.document or {})
    document.update(
        {
            "id": record.id,
            "type": record.type,
            "value": record.value,
            "displayName": record.display_name,
            "description": record.description,
            "isActive": record.is_active,
            "sortOrder": record.sort_order,
        }
    )
    return item_cls.model_validate(document)


def _document_for(item: MetadataItem) -> dict:
    document = item.model_dump(mode="json", by_alias=True)
    for key in _COLUMN_ALIASES:
        document.pop(key, None)
    return document


class SqlMetadataStore:
    """
    Metadata store backed by the ``metadata_items`` table.

    Attributes:
        db: Database service providing sessions
    """

    def __init__(self, db: Optional[DatabaseService] = None):
        self.db = db or database_service

    async def query_by_type(
        self, metadata_type: str, item_cls: Type[ItemT] = MetadataItem
    ) -> List[ItemT]:
        """Return active items of a type ordered by sort order."""
        query = (
            select(MetadataItemRecord)
            .where(
                MetadataItemRecord.type == metadata_type,
                MetadataItemRecord.is_active.is_(True),
            )
            .order_by(MetadataItemRecord.sort_order, MetadataItemRecord.value)
        )
        async with self.db.get_session() as session:
            result = await session.execute(query)
            records = result.scalars().all()

        logger.debug(f"Loaded {len(records)} '{metadata_type}' items from database")
        return [_to_item(record, item_cls) for record in records]

    async def query_by_type_and_value(
        self, metadata_type: str, value: str, item_cls: Type[ItemT] = MetadataItem
    ) -> Optional[ItemT]:
        """Return the active item with this type and value, or None."""
        async with self.db.get_session() as session:
            record = await self._find_active(session, metadata_type, value)

        return _to_item(record, item_cls) if record else None

    async def exists_valid(self, metadata_type: str, value: str) -> bool:
        async with self.db.get_session() as session:
            record = await self._find_active(session, metadata_type, value)
        return record is not None

    async def create(self, item: ItemT) -> ItemT:
        """
        Persist a new item, assigning a UUID when ``id`` is blank.

        Returns:
            The stored item (a copy of the input with its id set)

        Raises:
            MetadataConflictError: if the id is taken within the type, or an
                active item with the same value exists
        """
        stored = item if item.id else item.model_copy(update={"id": str(uuid.uuid4())})

        try:
            async with self.db.get_session() as session:
                if stored.is_active:
                    await self._ensure_unique_value(session, stored)
                session.add(
                    MetadataItemRecord(
                        id=stored.id,
                        type=stored.type,
                        value=stored.value,
                        display_name=stored.display_name,
                        description=stored.description,
                        is_active=stored.is_active,
                        sort_order=stored.sort_order,
                        document=_document_for(stored),
                    )
                )
                await session.flush()
        except IntegrityError as e:
            raise MetadataConflictError(
                f"Metadata item '{stored.id}' or an active '{stored.value}' "
                f"already exists in '{stored.type}'"
            ) from e

        logger.info(f"Created metadata item {stored.type}/{stored.id} ({stored.value})")
        return stored

    async def update(self, item: MetadataItem) -> bool:
        """
        Replace the item with the same ``(type, id)``.

        Returns:
            False when no such item exists

        Raises:
            MetadataConflictError: if another active item already uses the value
        """
        try:
            async with self.db.get_session() as session:
                record = await session.get(MetadataItemRecord, {"type": item.type, "id": item.id})
                if record is None:
                    return False

                if item.is_active:
                    await self._ensure_unique_value(session, item)

                record.value = item.value
                record.display_name = item.display_name
                record.description = item.description
                record.is_active = item.is_active
                record.sort_order = item.sort_order
                record.document = _document_for(item)
        except IntegrityError as e:
            raise MetadataConflictError(
                f"An active '{item.type}' item with value '{item.value}' already exists"
            ) from e

        logger.info(f"Updated metadata item {item.type}/{item.id}")
        return True

    async def delete(self, item_id: str, metadata_type: str) -> bool:
        """Physically remove an item. Returns False when it does not exist."""
        async with self.db.get_session() as session:
            result = await session.execute(
                delete(MetadataItemRecord).where(
                    MetadataItemRecord.type == metadata_type,
                    MetadataItemRecord.id == item_id,
                )
            )
            deleted = (result.rowcount or 0) > 0

        if deleted:
            logger.info(f"Deleted metadata item {metadata_type}/{item_id}")
        return deleted

    async def _find_active(
        self, session: AsyncSession, metadata_type: str, value: str
    ) -> Optional[MetadataItemRecord]:
        query = select(MetadataItemRecord).where(
            MetadataItemRecord.type == metadata_type,
            MetadataItemRecord.value == value,
            MetadataItemRecord.is_active.is_(True),
        )
        result = await session.execute(query)
        return result.scalars().first()

    async def _ensure_unique_value(self, session: AsyncSession, item: MetadataItem) -> None:
        existing = await self._find_active(session, item.type, item.value)
        if existing is not None and existing.id != item.id:
            raise MetadataConflictError(
                f"An active '{item.type}' item with value '{item.value}' already exists"
            )
