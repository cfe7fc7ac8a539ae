# backend/orbital/dependencies.py
"""
FastAPI dependency functions for admin access and service lookup.

Key Dependencies:
    - require_admin: Validate the X-API-Key header for metadata write endpoints
    - get_metadata_service: Cached metadata service used by routers
    - get_meeting_service: Meeting service used by routers

Usage:
    from fastapi import Depends
    from orbital.dependencies import require_admin

    @router.post("/metadata", dependencies=[Depends(require_admin)])
    async def create_metadata(...):
        ...

Security:
    - When ADMIN_API_KEY is unset, admin endpoints are open (local development)
    - A missing key returns 401, a wrong key returns 403
    - Keys are compared in constant time
"""

import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException, status

from orbital.config import settings
from orbital.services.meeting_service import MeetingService, meeting_service
from orbital.services.metadata_service import MetadataService, metadata_service

logger = logging.getLogger("orbital.dependencies")


# =========================================================================
# ADMIN ACCESS
# =========================================================================


async def require_admin(
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> None:
    """
    Ensure the caller presented the configured admin API key.

    Args:
        x_api_key: API key from X-API-Key header

    Raises:
        HTTPException: 401 if the header is missing
        HTTPException: 403 if the key does not match
    """
    expected = settings.admin_api_key
    if not expected:
        return

    if not x_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-API-Key header",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if not hmac.compare_digest(x_api_key.encode(), expected.encode()):
        logger.warning("Permission denied: invalid admin API key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin API key required",
        )


# =========================================================================
# SERVICES
# =========================================================================


def get_metadata_service() -> MetadataService:
    return metadata_service


def get_meeting_service() -> MeetingService:
    return meeting_service
