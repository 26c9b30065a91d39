"""
API endpoints for opportunity follow-up tasks.

Tasks are created against an opportunity and worked through from the
tasks page.  Clients mark a task done with the completion endpoint,
which stamps the completion date; the dashboard lists the tasks that
are still outstanding.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....core.config import settings
from ....repositories import EntityNotFound
from ....schemas.listing import Page, SortOrder
from ....schemas.opportunity import OpportunityPriority
from ....schemas.task import (
    TaskCreate,
    TaskFilter,
    TaskFilterField,
    TaskRead,
    TaskSortField,
    TaskStatus,
    TaskUpdate,
)
from ....services.task_service import TaskService
from ...dependencies import get_task_service


router = APIRouter()


@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    task: TaskCreate,
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    """Create a task for an opportunity.

    Responds with 400 if the opportunity does not exist.
    """
    try:
        return await service.create_task(task)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/", response_model=Page[TaskRead])
async def list_tasks(
    search: Optional[str] = Query(None, description="Matches description or assignee"),
    opportunity_id: Optional[int] = Query(None),
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[OpportunityPriority] = Query(None),
    assigned_to: Optional[str] = Query(None),
    sort_by: TaskSortField = Query(TaskSortField.DUE_DATE),
    order: SortOrder = Query(SortOrder.ASC),
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    service: TaskService = Depends(get_task_service),
) -> Page[TaskRead]:
    filters = [
        TaskFilter(
            field=TaskFilterField.OPPORTUNITY_ID,
            value=None if opportunity_id is None else str(opportunity_id),
        ),
        TaskFilter(field=TaskFilterField.STATUS, value=task_status.value if task_status else None),
        TaskFilter(field=TaskFilterField.PRIORITY, value=priority.value if priority else None),
        TaskFilter(field=TaskFilterField.ASSIGNED_TO, value=assigned_to),
    ]
    return await service.list_tasks(
        search=search,
        filters=filters,
        sort_by=sort_by,
        order=order,
        page=page,
        page_size=page_size,
    )


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    try:
        return await service.get_task(task_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    updates: TaskUpdate,
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    update_dict = {k: v for k, v in updates.model_dump().items() if v is not None}
    try:
        return await service.update_task(task_id, update_dict)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.patch("/{task_id}", response_model=TaskRead)
async def patch_task(
    task_id: int,
    updates: TaskUpdate,
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    """Partially update a task; fields sent as ``null`` are cleared."""
    try:
        return await service.update_task(task_id, updates.model_dump(exclude_unset=True))
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.post("/{task_id}/complete", response_model=TaskRead)
async def complete_task(
    task_id: int,
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    """Mark the specified task as completed.

    Parameters
    ----------
    task_id : int
        Identifier of the task to complete.

    Returns
    -------
    TaskRead
        The task with ``status`` set to Completed and
        ``date_completed`` stamped.
    """
    try:
        return await service.complete_task(task_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    service: TaskService = Depends(get_task_service),
) -> None:
    try:
        await service.delete_task(task_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
