"""
Business unit endpoints for API v1.

Besides CRUD, a unit exposes the services it offers and the
opportunities for those services.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....core.config import settings
from ....repositories import EntityNotFound
from ....schemas.business_unit import (
    BusinessUnitCreate,
    BusinessUnitRead,
    BusinessUnitSortField,
    BusinessUnitUpdate,
)
from ....schemas.listing import Page, SortOrder
from ....schemas.opportunity import OpportunityView
from ....schemas.service import ServiceRead
from ....services.business_unit_service import BusinessUnitService
from ...dependencies import get_business_unit_service


router = APIRouter()


@router.post("/", response_model=BusinessUnitRead, status_code=status.HTTP_201_CREATED)
async def create_business_unit(
    unit: BusinessUnitCreate,
    service: BusinessUnitService = Depends(get_business_unit_service),
) -> BusinessUnitRead:
    try:
        return await service.create_business_unit(unit)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/", response_model=Page[BusinessUnitRead])
async def list_business_units(
    search: Optional[str] = Query(None),
    sort_by: BusinessUnitSortField = Query(BusinessUnitSortField.NAME),
    order: SortOrder = Query(SortOrder.ASC),
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    service: BusinessUnitService = Depends(get_business_unit_service),
) -> Page[BusinessUnitRead]:
    return await service.list_business_units(
        search=search, sort_by=sort_by, order=order, page=page, page_size=page_size,
    )


@router.get("/active", response_model=List[BusinessUnitRead])
async def list_active_business_units(
    service: BusinessUnitService = Depends(get_business_unit_service),
) -> List[BusinessUnitRead]:
    return await service.list_active()


@router.get("/{unit_id}", response_model=BusinessUnitRead)
async def get_business_unit(
    unit_id: int,
    service: BusinessUnitService = Depends(get_business_unit_service),
) -> BusinessUnitRead:
    try:
        return await service.get_business_unit(unit_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{unit_id}", response_model=BusinessUnitRead)
async def update_business_unit(
    unit_id: int,
    updates: BusinessUnitUpdate,
    service: BusinessUnitService = Depends(get_business_unit_service),
) -> BusinessUnitRead:
    """Update a business unit.

    A unit referenced by clients or services cannot be renamed.
    """
    update_dict = {k: v for k, v in updates.model_dump().items() if v is not None}
    try:
        return await service.update_business_unit(unit_id, update_dict)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_business_unit(
    unit_id: int,
    service: BusinessUnitService = Depends(get_business_unit_service),
) -> None:
    try:
        await service.delete_business_unit(unit_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return None


@router.get("/{unit_id}/services", response_model=List[ServiceRead])
async def list_business_unit_services(
    unit_id: int,
    service: BusinessUnitService = Depends(get_business_unit_service),
) -> List[ServiceRead]:
    try:
        return await service.services_for(unit_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/{unit_id}/opportunities", response_model=List[OpportunityView])
async def list_business_unit_opportunities(
    unit_id: int,
    service: BusinessUnitService = Depends(get_business_unit_service),
) -> List[OpportunityView]:
    try:
        return await service.opportunities_for(unit_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
