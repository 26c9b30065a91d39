"""
Engagement endpoints for API v1.

An engagement is the record that a client uses a service.  Creating
one turns the corresponding matrix cell ``active``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....core.config import settings
from ....repositories import EntityNotFound
from ....schemas.engagement import (
    EngagementCreate,
    EngagementFilter,
    EngagementFilterField,
    EngagementRead,
    EngagementSortField,
    EngagementStatus,
    EngagementUpdate,
)
from ....schemas.listing import Page, SortOrder
from ....services.engagement_service import EngagementService
from ...dependencies import get_engagement_service


router = APIRouter()


@router.post("/", response_model=EngagementRead, status_code=status.HTTP_201_CREATED)
async def create_engagement(
    engagement: EngagementCreate,
    service: EngagementService = Depends(get_engagement_service),
) -> EngagementRead:
    """Create an engagement.

    Responds with 400 if the client or service does not exist or the
    end date precedes the start date.
    """
    try:
        return await service.create_engagement(engagement)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/", response_model=Page[EngagementRead])
async def list_engagements(
    search: Optional[str] = Query(None),
    client_id: Optional[int] = Query(None),
    service_id: Optional[int] = Query(None),
    engagement_status: Optional[EngagementStatus] = Query(None, alias="status"),
    sort_by: EngagementSortField = Query(EngagementSortField.START_DATE),
    order: SortOrder = Query(SortOrder.DESC),
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    service: EngagementService = Depends(get_engagement_service),
) -> Page[EngagementRead]:
    filters = [
        EngagementFilter(
            field=EngagementFilterField.CLIENT_ID,
            value=None if client_id is None else str(client_id),
        ),
        EngagementFilter(
            field=EngagementFilterField.SERVICE_ID,
            value=None if service_id is None else str(service_id),
        ),
        EngagementFilter(
            field=EngagementFilterField.STATUS,
            value=engagement_status.value if engagement_status else None,
        ),
    ]
    return await service.list_engagements(
        search=search,
        filters=filters,
        sort_by=sort_by,
        order=order,
        page=page,
        page_size=page_size,
    )


@router.get("/{engagement_id}", response_model=EngagementRead)
async def get_engagement(
    engagement_id: int,
    service: EngagementService = Depends(get_engagement_service),
) -> EngagementRead:
    try:
        return await service.get_engagement(engagement_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{engagement_id}", response_model=EngagementRead)
async def update_engagement(
    engagement_id: int,
    updates: EngagementUpdate,
    service: EngagementService = Depends(get_engagement_service),
) -> EngagementRead:
    """Update an engagement.  Fields sent as ``null`` are ignored."""
    update_dict = {k: v for k, v in updates.model_dump().items() if v is not None}
    try:
        return await service.update_engagement(engagement_id, update_dict)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.patch("/{engagement_id}", response_model=EngagementRead)
async def patch_engagement(
    engagement_id: int,
    updates: EngagementUpdate,
    service: EngagementService = Depends(get_engagement_service),
) -> EngagementRead:
    """Partially update an engagement.

    Fields sent as ``null`` are cleared; send ``"end_date": null`` to
    make an engagement open-ended again.
    """
    try:
        return await service.update_engagement(engagement_id, updates.model_dump(exclude_unset=True))
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.delete("/{engagement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_engagement(
    engagement_id: int,
    service: EngagementService = Depends(get_engagement_service),
) -> None:
    try:
        await service.delete_engagement(engagement_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
