# backend/orbital/api/routers/metadata.py
"""
Metadata API Router.

Serves the controlled vocabularies (event status, attendance mode, ...) from
the cached metadata service and exposes admin endpoints to maintain them.

Writes go straight to the store; after a successful write the affected type
is refreshed so the next read reloads it.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from orbital.dependencies import get_metadata_service, require_admin
from orbital.models import MetadataItem, item_class_for
from orbital.services.metadata_service import MetadataService, MetadataValidationError
from orbital.services.metadata_store import MetadataConflictError

logger = logging.getLogger("orbital.api.metadata")

router = APIRouter(prefix="/metadata", tags=["metadata"])


def _typed(item: MetadataItem) -> MetadataItem:
    """Re-validate a generic payload as the variant registered for its type."""
    return item_class_for(item.type).model_validate(item.model_dump(by_alias=True))


@router.get("/{metadata_type}", response_model=List[MetadataItem])
async def list_metadata(
    metadata_type: str,
    service: MetadataService = Depends(get_metadata_service),
) -> List[Dict[str, Any]]:
    """
    List active items of a metadata type, ordered by sort order.

    Served from the in-memory cache once warm. Variant-specific fields (e.g.
    ``requiresPreviousStartDate``) are included.
    """
    items = await service.get_items(metadata_type, item_class_for(metadata_type))
    return [item.model_dump(by_alias=True) for item in items]


@router.post(
    "",
    response_model=MetadataItem,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_metadata(
    item: MetadataItem,
    service: MetadataService = Depends(get_metadata_service),
) -> Dict[str, Any]:
    """Create a metadata item (admin)."""
    if not item.type.strip() or not item.value.strip():
        raise HTTPException(status_code=400, detail="Metadata type and value are required")

    try:
        created = await service.create_item(_typed(item))
    except MetadataConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    service.refresh_cache(created.type)
    return created.model_dump(by_alias=True)


@router.put(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def update_metadata(
    item: MetadataItem,
    service: MetadataService = Depends(get_metadata_service),
) -> Response:
    """Replace an existing metadata item (admin)."""
    if not item.id.strip() or not item.type.strip():
        raise HTTPException(status_code=400, detail="Metadata id and type are required")

    try:
        updated = await service.update_item(_typed(item))
    except MetadataValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except MetadataConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not updated:
        raise HTTPException(
            status_code=404, detail=f"Metadata item '{item.id}' not found in '{item.type}'"
        )

    service.refresh_cache(item.type)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{metadata_type}/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_metadata(
    metadata_type: str,
    item_id: str,
    service: MetadataService = Depends(get_metadata_service),
) -> Response:
    """Permanently delete a metadata item (admin)."""
    if not await service.delete_item(item_id, metadata_type):
        raise HTTPException(
            status_code=404, detail=f"Metadata item '{item_id}' not found in '{metadata_type}'"
        )

    service.refresh_cache(metadata_type)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/cache/refresh", dependencies=[Depends(require_admin)])
async def refresh_metadata_cache(
    metadata_type: Optional[str] = Query(None, alias="type"),
    service: MetadataService = Depends(get_metadata_service),
) -> Dict[str, Any]:
    """
    Drop cached metadata for one type, or for every type (admin).

    The next read reloads from the store.
    """
    service.refresh_cache(metadata_type)
    return {
        "status": "ok",
        "message": "Metadata cache refreshed",
        "type": metadata_type,
    }
