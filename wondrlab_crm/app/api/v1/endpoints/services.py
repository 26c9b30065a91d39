"""
Service catalogue endpoints for API v1.

These routes manage the offerings of each business unit.  A service
referenced by engagements or opportunities cannot be deleted.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....core.config import settings
from ....repositories import EntityNotFound
from ....schemas.listing import Page, SortOrder
from ....schemas.service import (
    ServiceCreate,
    ServiceDetail,
    ServiceFilter,
    ServiceFilterField,
    ServiceRead,
    ServiceSortField,
    ServiceUpdate,
)
from ....services.catalog_service import CatalogService
from ...dependencies import get_catalog_service


router = APIRouter()


@router.post("/", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
async def create_service(
    payload: ServiceCreate,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ServiceRead:
    return await catalog.create_service(payload)


@router.get("/", response_model=Page[ServiceRead])
async def list_services(
    search: Optional[str] = Query(None, description="Matches name, description, business unit or category"),
    business_unit: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
    sort_by: ServiceSortField = Query(ServiceSortField.NAME),
    order: SortOrder = Query(SortOrder.ASC),
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Page[ServiceRead]:
    """List services with search, filters, sorting and pagination.

    - **business_unit**, **category**: exact-match filters.
    - **is_active**: true/false, or omitted for both.
    """
    filters = [
        ServiceFilter(field=ServiceFilterField.BUSINESS_UNIT, value=business_unit),
        ServiceFilter(field=ServiceFilterField.CATEGORY, value=category),
        ServiceFilter(
            field=ServiceFilterField.IS_ACTIVE,
            value=None if is_active is None else str(is_active).lower(),
        ),
    ]
    return await catalog.list_services(
        search=search,
        filters=filters,
        sort_by=sort_by,
        order=order,
        page=page,
        page_size=page_size,
    )


@router.get("/{service_id}", response_model=ServiceRead)
async def get_service(
    service_id: int,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ServiceRead:
    try:
        return await catalog.get_service(service_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{service_id}", response_model=ServiceRead)
async def update_service(
    service_id: int,
    updates: ServiceUpdate,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ServiceRead:
    update_dict = {k: v for k, v in updates.model_dump().items() if v is not None}
    try:
        return await catalog.update_service(service_id, update_dict)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: int,
    catalog: CatalogService = Depends(get_catalog_service),
) -> None:
    """Delete a service.

    Responds with 400 if the service still has engagements or
    opportunities.
    """
    try:
        await catalog.delete_service(service_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return None


@router.get("/{service_id}/detail", response_model=ServiceDetail)
async def get_service_detail(
    service_id: int,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ServiceDetail:
    try:
        return await catalog.get_service_detail(service_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
