# ============================================================================
# Orbital - Metadata Service
# ============================================================================
"""
Cached access to controlled-vocabulary metadata (event status, attendance
mode, ...).

The service wraps a MetadataStore with an in-memory cache keyed by
``CacheKey(metadata_type, item_shape)``. The same type requested through
different item classes (e.g. ``EventStatusDefinition`` vs the generic
``MetadataItem``) is cached separately so typed and untyped results never
mix; invalidating a type drops every shape cached for it.

Cache behaviour:
    - A miss fetches the full active list from the store once and caches it,
      including an empty list.
    - Concurrent misses on the same key share one in-flight fetch and all
      observe its result or its failure.
    - Store failures propagate and leave the key cold; so does cancellation.
    - Writes never invalidate on their own. Callers refresh the affected type
      after a successful write.
    - A fetch that started before ``refresh_cache`` does not repopulate the
      cache with its (possibly stale) result.
    - Readers get deep copies; the cached items themselves never leave the
      service.

Usage:
    from orbital.services.metadata_service import metadata_service

    statuses = await metadata_service.get_items("EventStatusType", EventStatusDefinition)
    ok = await metadata_service.is_valid_value("EventStatusType", "EventScheduled")

    await metadata_service.update_item(item)
    metadata_service.refresh_cache(item.type)
"""

import asyncio
import logging
import re
from typing import Dict, List, NamedTuple, Optional, Tuple, Type

from orbital.models import MetadataItem
from orbital.services.metadata_store import ItemT, MetadataStore, SqlMetadataStore

logger = logging.getLogger("orbital.services.metadata")

_ALPHANUMERIC = re.compile(r"^[a-zA-Z0-9]*$")


class MetadataValidationError(ValueError):
    """A metadata payload was rejected before reaching the store."""


class CacheKey(NamedTuple):
    metadata_type: str
    item_shape: Type[MetadataItem]


def _copies(items: List[ItemT]) -> List[ItemT]:
    return [item.model_copy(deep=True) for item in items]


class MetadataService:
    """
    Metadata lookup service with an in-memory, single-flight cache.

    Attributes:
        store: Backing metadata store (database or HTTP)
    """

    def __init__(self, store: Optional[MetadataStore] = None):
        self.store = store if store is not None else SqlMetadataStore()
        self._cache: Dict[CacheKey, List[MetadataItem]] = {}
        self._inflight: Dict[CacheKey, asyncio.Future] = {}
        # Bumped on refresh so fetches started earlier don't repopulate
        self._generations: Dict[str, int] = {}
        self._epoch = 0

    @property
    def cached_types(self) -> List[str]:
        return sorted({key.metadata_type for key in self._cache})

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_items(
        self, metadata_type: str, item_cls: Type[ItemT] = MetadataItem
    ) -> List[ItemT]:
        """
        Return all active items of a type, from cache when warm.

        Args:
            metadata_type: Metadata category, e.g. "EventStatusType"
            item_cls: Item shape to build; part of the cache key

        Returns:
            Items ordered by sort order. Every call gets its own copies, so
            callers can mutate them without touching the cache

        Raises:
            Exception: whatever the store raised on a cold fetch
        """
        key = CacheKey(metadata_type, item_cls)
        while True:
            cached = self._cache.get(key)
            if cached is not None:
                return _copies(cached)

            pending = self._inflight.get(key)
            if pending is None:
                return _copies(await self._populate(key))

            try:
                return _copies(await asyncio.shield(pending))
            except asyncio.CancelledError:
                if pending.cancelled():
                    # The fetching caller was cancelled; start again from a miss
                    continue
                raise

    async def get_item_by_value(
        self, metadata_type: str, value: str, item_cls: Type[ItemT] = MetadataItem
    ) -> Optional[ItemT]:
        """Return the first cached item of a type with this value, or None."""
        items = await self.get_items(metadata_type, item_cls)
        return next((item for item in items if item.value == value), None)

    async def is_valid_value(self, metadata_type: str, value: str) -> bool:
        """True if an active item of the type carries this value."""
        items = await self.get_items(metadata_type)
        return any(item.value == value and item.is_active for item in items)

    async def _populate(self, key: CacheKey) -> List[MetadataItem]:
        future = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        generation = self._generation(key.metadata_type)

        try:
            items = list(await self.store.query_by_type(key.metadata_type, key.item_shape))
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            logger.warning(f"Failed to load '{key.metadata_type}' metadata: {e}")
            future.set_exception(e)
            # Retrieved here so a fetch nobody else waited on doesn't log it again
            future.exception()
            raise
        finally:
            if self._inflight.get(key) is future:
                del self._inflight[key]

        if self._generation(key.metadata_type) == generation:
            self._cache[key] = items
            logger.debug(
                f"Cached {len(items)} '{key.metadata_type}' items as {key.item_shape.__name__}"
            )
        else:
            logger.debug(f"Discarded '{key.metadata_type}' fetch invalidated while in flight")

        future.set_result(items)
        return items

    def _generation(self, metadata_type: str) -> Tuple[int, int]:
        return self._epoch, self._generations.get(metadata_type, 0)

    # =========================================================================
    # Writes (no automatic invalidation)
    # =========================================================================

    async def create_item(self, item: ItemT) -> ItemT:
        """Create an item through the store and return it with its id."""
        return await self.store.create(item)

    async def update_item(self, item: MetadataItem) -> bool:
        """
        Replace an existing item.

        Raises:
            MetadataValidationError: if ``value`` is not purely alphanumeric

        Returns:
            False when the item does not exist
        """
        if not _ALPHANUMERIC.match(item.value):
            raise MetadataValidationError(
                "Metadata value contains invalid characters. "
                "Only alphanumeric characters are allowed."
            )
        return await self.store.update(item)

    async def delete_item(self, item_id: str, metadata_type: str) -> bool:
        """Delete an item. Returns False when it does not exist."""
        return await self.store.delete(item_id, metadata_type)

    # =========================================================================
    # Cache control
    # =========================================================================

    def refresh_cache(self, metadata_type: Optional[str] = None) -> None:
        """
        Drop cached entries for one type (every shape), or everything.

        Refreshing a type that has nothing cached is a no-op.
        """
        if metadata_type is None:
            self._cache.clear()
            self._inflight.clear()
            self._epoch += 1
            logger.info("Metadata cache cleared")
            return

        for key in [k for k in self._cache if k.metadata_type == metadata_type]:
            del self._cache[key]
        for key in [k for k in self._inflight if k.metadata_type == metadata_type]:
            del self._inflight[key]
        self._generations[metadata_type] = self._generations.get(metadata_type, 0) + 1
        logger.info(f"Metadata cache refreshed for '{metadata_type}'")


# Global singleton instance
metadata_service = MetadataService()
