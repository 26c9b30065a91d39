"""
Activity log endpoint.

Exposes the entries written by the services whenever a client,
service, engagement, opportunity or task changes.  Entries are
returned newest first.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ....core.config import settings
from ....schemas.activity import ActivityRead
from ....schemas.listing import Page
from ....services.activity_service import ActivityService
from ...dependencies import get_activity_service


router = APIRouter()


@router.get("/", response_model=Page[ActivityRead])
async def list_activity(
    object_type: Optional[str] = Query(None, description="e.g. client, opportunity, task"),
    action: Optional[str] = Query(None, description="e.g. created, status_changed"),
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    service: ActivityService = Depends(get_activity_service),
) -> Page[ActivityRead]:
    return await service.list_activity(
        object_type=object_type, action=action, page=page, page_size=page_size,
    )
