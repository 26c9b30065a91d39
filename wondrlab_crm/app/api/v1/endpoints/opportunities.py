"""
Opportunity endpoints for API v1.

These routes back the opportunities page and the status workflow.
Responses are ``OpportunityView`` objects, which carry the client
name, service name and business unit alongside the stored fields.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....core.config import settings
from ....repositories import EntityNotFound
from ....schemas.listing import Page, SortOrder
from ....schemas.opportunity import (
    OpportunityCreate,
    OpportunityFilter,
    OpportunityFilterField,
    OpportunityPriority,
    OpportunitySortField,
    OpportunityStatus,
    OpportunityStatusUpdate,
    OpportunityUpdate,
    OpportunityView,
)
from ....schemas.note import NoteCreate, NoteParentType, NoteRead
from ....schemas.task import TaskRead
from ....services.note_service import NoteService
from ....services.opportunity_service import OpportunityService
from ....services.task_service import TaskService
from ...dependencies import get_note_service, get_opportunity_service, get_task_service


router = APIRouter()


def _optional_text(value) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "value", None) or str(value)


@router.post("/", response_model=OpportunityView, status_code=status.HTTP_201_CREATED)
async def create_opportunity(
    opportunity: OpportunityCreate,
    service: OpportunityService = Depends(get_opportunity_service),
) -> OpportunityView:
    """Create an opportunity.

    Responds with 400 if the client or service does not exist.
    """
    try:
        return await service.create_opportunity(opportunity)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/", response_model=Page[OpportunityView])
async def list_opportunities(
    search: Optional[str] = Query(
        None, description="Matches client name, service name, business unit, status or assignee",
    ),
    client_id: Optional[int] = Query(None),
    service_id: Optional[int] = Query(None),
    business_unit: Optional[str] = Query(None),
    opportunity_status: Optional[OpportunityStatus] = Query(None, alias="status"),
    priority: Optional[OpportunityPriority] = Query(None),
    assigned_to: Optional[str] = Query(None),
    sort_by: OpportunitySortField = Query(OpportunitySortField.CREATED_DATE),
    order: SortOrder = Query(SortOrder.DESC),
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    service: OpportunityService = Depends(get_opportunity_service),
) -> Page[OpportunityView]:
    """List opportunities with search, filters, sorting and pagination.

    - **client_id**, **service_id**, **business_unit**, **status**,
      **priority**, **assigned_to**: exact-match filters; all given
      filters must match.
    - **sort_by**: any enriched field, e.g. ``client_name`` or
      ``estimated_value``.
    """
    filters = [
        OpportunityFilter(field=OpportunityFilterField.CLIENT_ID, value=_optional_text(client_id)),
        OpportunityFilter(field=OpportunityFilterField.SERVICE_ID, value=_optional_text(service_id)),
        OpportunityFilter(field=OpportunityFilterField.BUSINESS_UNIT, value=business_unit),
        OpportunityFilter(field=OpportunityFilterField.STATUS, value=_optional_text(opportunity_status)),
        OpportunityFilter(field=OpportunityFilterField.PRIORITY, value=_optional_text(priority)),
        OpportunityFilter(field=OpportunityFilterField.ASSIGNED_TO, value=assigned_to),
    ]
    return await service.list_opportunities(
        search=search,
        filters=filters,
        sort_by=sort_by,
        order=order,
        page=page,
        page_size=page_size,
    )


@router.get("/client/{client_id}", response_model=List[OpportunityView])
async def list_client_opportunities(
    client_id: int,
    service: OpportunityService = Depends(get_opportunity_service),
) -> List[OpportunityView]:
    """All opportunities of one client, newest first."""
    try:
        return await service.list_for_client(client_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/{opportunity_id}", response_model=OpportunityView)
async def get_opportunity(
    opportunity_id: int,
    service: OpportunityService = Depends(get_opportunity_service),
) -> OpportunityView:
    try:
        return await service.get_opportunity(opportunity_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{opportunity_id}", response_model=OpportunityView)
async def update_opportunity(
    opportunity_id: int,
    updates: OpportunityUpdate,
    service: OpportunityService = Depends(get_opportunity_service),
) -> OpportunityView:
    """Update an opportunity from the edit form.

    Fields left out or sent as ``null`` keep their current value.
    """
    update_dict = {k: v for k, v in updates.model_dump().items() if v is not None}
    try:
        return await service.update_opportunity(opportunity_id, update_dict)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.patch("/{opportunity_id}", response_model=OpportunityView)
async def patch_opportunity(
    opportunity_id: int,
    updates: OpportunityUpdate,
    service: OpportunityService = Depends(get_opportunity_service),
) -> OpportunityView:
    """Partially update an opportunity.

    Unlike ``PUT``, a field sent as ``null`` is cleared.
    """
    try:
        return await service.update_opportunity(opportunity_id, updates.model_dump(exclude_unset=True))
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.patch("/{opportunity_id}/status", response_model=OpportunityView)
async def update_opportunity_status(
    opportunity_id: int,
    body: OpportunityStatusUpdate,
    service: OpportunityService = Depends(get_opportunity_service),
) -> OpportunityView:
    """Move an opportunity to a new status.

    Entering Won, Lost or Cancelled stamps ``closed_date``; moving
    back to an open status clears it.
    """
    try:
        return await service.update_status(opportunity_id, body.status)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{opportunity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_opportunity(
    opportunity_id: int,
    service: OpportunityService = Depends(get_opportunity_service),
) -> None:
    """Delete an opportunity with its tasks and notes."""
    try:
        await service.delete_opportunity(opportunity_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None


@router.get("/{opportunity_id}/tasks", response_model=List[TaskRead])
async def list_opportunity_tasks(
    opportunity_id: int,
    tasks: TaskService = Depends(get_task_service),
) -> List[TaskRead]:
    try:
        return await tasks.list_for_opportunity(opportunity_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/{opportunity_id}/notes", response_model=List[NoteRead])
async def list_opportunity_notes(
    opportunity_id: int,
    notes: NoteService = Depends(get_note_service),
) -> List[NoteRead]:
    try:
        return await notes.list_notes(NoteParentType.OPPORTUNITY, opportunity_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{opportunity_id}/notes", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def add_opportunity_note(
    opportunity_id: int,
    note: NoteCreate,
    notes: NoteService = Depends(get_note_service),
) -> NoteRead:
    try:
        return await notes.add_note(NoteParentType.OPPORTUNITY, opportunity_id, note)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
