# backend/orbital/client.py
"""
HTTP clients for front-ends talking to the Orbital API.

Clients:
    - MeetingsHttpClient: meeting list/get/add/update
    - MetadataHttpClient: the metadata store contract over HTTP, so a
      MetadataService can cache vocabularies client-side

Usage:
    from orbital.client import MetadataHttpClient
    from orbital.services.metadata_service import MetadataService

    metadata = MetadataService(store=MetadataHttpClient(api_key="..."))
    statuses = await metadata.get_items("EventStatusType", EventStatusDefinition)
"""

import logging
from typing import Any, Dict, List, Optional, Type

import httpx

from orbital.config import settings
from orbital.models import Meeting, MetadataItem
from orbital.services.metadata_service import MetadataValidationError
from orbital.services.metadata_store import ItemT, MetadataConflictError

logger = logging.getLogger("orbital.client")


class _ApiClient:
    """Lazily created ``httpx.AsyncClient`` shared by the API clients."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.api_base_url
        self.timeout = timeout or settings.http_timeout
        self.api_key = api_key
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _build_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers


class MeetingsHttpClient(_ApiClient):
    """HTTP client for the meetings endpoints."""

    async def list_meetings(self) -> List[Meeting]:
        client = await self._get_client()
        response = await client.get("/api/meetings", headers=self._build_headers())
        response.raise_for_status()

        meetings = [Meeting.model_validate(data) for data in response.json() or []]
        logger.debug(f"Fetched {len(meetings)} meetings")
        return meetings

    async def get_meeting(self, meeting_id: str) -> Optional[Meeting]:
        """Fetch one meeting, or None if it does not exist."""
        client = await self._get_client()
        response = await client.get(f"/api/meetings/{meeting_id}", headers=self._build_headers())
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return Meeting.model_validate(response.json())

    async def add_meeting(self, meeting: Meeting) -> bool:
        """
        Create a meeting.

        Returns:
            True when the API accepted it; rejected payloads (400/422) and taken ids
            (409) return False and are logged
        """
        client = await self._get_client()
        response = await client.post(
            "/api/meetings",
            json=meeting.model_dump(mode="json", by_alias=True, exclude_none=True),
            headers=self._build_headers(),
        )
        if response.status_code in (400, 409, 422):
            logger.warning(f"Meeting rejected ({response.status_code}): {response.text}")
            return False
        response.raise_for_status()
        return True

    async def update_meeting(self, meeting: Meeting) -> Optional[Meeting]:
        """
        Replace a meeting by its id.

        Returns:
            The stored meeting, or None if it does not exist

        Raises:
            ValueError: if the meeting has no id
            httpx.HTTPStatusError: if the API rejected the payload
        """
        if not meeting.id:
            raise ValueError("Meeting id is required for update")

        client = await self._get_client()
        response = await client.put(
            f"/api/meetings/{meeting.id}",
            json=meeting.model_dump(mode="json", by_alias=True, exclude_none=True),
            headers=self._build_headers(),
        )
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return Meeting.model_validate(response.json())


class MetadataHttpClient(_ApiClient):
    """
    Metadata store backed by the Orbital HTTP API.

    Reads only see active items, as served by the API. Writes need the admin
    key when the API is configured with one.
    """

    async def query_by_type(
        self, metadata_type: str, item_cls: Type[ItemT] = MetadataItem
    ) -> List[ItemT]:
        client = await self._get_client()
        try:
            response = await client.get(f"/api/metadata/{metadata_type}", headers=self._build_headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Failed to load {metadata_type} metadata: {e.response.status_code}")
            raise

        return [item_cls.model_validate(data) for data in response.json() or []]

    async def query_by_type_and_value(
        self, metadata_type: str, value: str, item_cls: Type[ItemT] = MetadataItem
    ) -> Optional[ItemT]:
        items = await self.query_by_type(metadata_type, item_cls)
        return next((item for item in items if item.value == value), None)

    async def exists_valid(self, metadata_type: str, value: str) -> bool:
        return await self.query_by_type_and_value(metadata_type, value) is not None

    async def create(self, item: ItemT) -> ItemT:
        """
        Create an item through the admin endpoint.

        Raises:
            MetadataConflictError: if the API reports a duplicate (409)
        """
        client = await self._get_client()
        response = await client.post("/api/metadata", json=self._payload(item), headers=self._build_headers())
        if response.status_code == 409:
            raise MetadataConflictError(self._detail(response))
        response.raise_for_status()
        return type(item).model_validate(response.json())

    async def update(self, item: MetadataItem) -> bool:
        """
        Replace an item through the admin endpoint.

        Returns:
            False when the API reports the item missing (404)

        Raises:
            MetadataValidationError: if the API rejected the payload (400)
            MetadataConflictError: if the API reports a duplicate value (409)
        """
        client = await self._get_client()
        response = await client.put("/api/metadata", json=self._payload(item), headers=self._build_headers())
        if response.status_code == 404:
            return False
        if response.status_code == 400:
            raise MetadataValidationError(self._detail(response))
        if response.status_code == 409:
            raise MetadataConflictError(self._detail(response))
        response.raise_for_status()
        return True

    async def delete(self, item_id: str, metadata_type: str) -> bool:
        client = await self._get_client()
        response = await client.delete(
            f"/api/metadata/{metadata_type}/{item_id}", headers=self._build_headers()
        )
        if response.status_code == 404:
            return False
        response.raise_for_status()
        return True

    @staticmethod
    def _payload(item: MetadataItem) -> Dict[str, Any]:
        return item.model_dump(mode="json", by_alias=True)

    @staticmethod
    def _detail(response: httpx.Response) -> str:
        try:
            return str(response.json().get("detail", response.text))
        except ValueError:
            return response.text
