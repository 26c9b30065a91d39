"""
Service for managing opportunity follow-up tasks.

Tasks are to-do items attached to an opportunity, such as "Send
proposal" or "Schedule a call".  They are created from the
opportunity page, listed on the tasks page with search, filters and
sorting, and the dashboard shows the ones still outstanding ordered by
due date.  Completing a task stamps ``date_completed``; moving it back
to another status clears the stamp.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from ..core.query import build_page, sort_records
from ..repositories import Store
from ..schemas.listing import Page, SortOrder
from ..schemas.task import (
    TASK_SEARCH_FIELDS,
    TaskCreate,
    TaskFilter,
    TaskRead,
    TaskSortField,
    TaskStatus,
)
from .activity_service import ActivityService

logger = logging.getLogger(__name__)


class TaskService:
    """Service for creating, listing and completing tasks."""

    def __init__(self, store: Store) -> None:
        self.store = store
        self.activity = ActivityService(store)

    def _check_opportunity(self, opportunity_id: int) -> None:
        if not self.store.opportunities.exists(opportunity_id):
            raise ValueError(f"Opportunity {opportunity_id} does not exist")

    @staticmethod
    def _completion_changes(current: Optional[TaskRead], changes: Dict[str, Any]) -> Dict[str, Any]:
        status = changes.get("status")
        if status is None:
            return changes
        status = TaskStatus(status)
        if status is TaskStatus.COMPLETED:
            already = current is not None and current.status is TaskStatus.COMPLETED
            changes["date_completed"] = current.date_completed if already else date.today()
        else:
            changes["date_completed"] = None
        return changes

    # ------------------------------------------------------------------
    # Task creation
    # ------------------------------------------------------------------
    async def create_task(self, data: TaskCreate) -> TaskRead:
        """Create a task for an existing opportunity.

        Raises
        ------
        ValueError
            If ``data.opportunity_id`` does not refer to an opportunity.
        """
        self._check_opportunity(data.opportunity_id)
        payload = data.model_dump()
        payload["date_created"] = date.today()
        payload = self._completion_changes(None, payload)
        task = self.store.tasks.create(payload)
        logger.info("Created task %s for opportunity %s", task.id, task.opportunity_id)
        await self.activity.log(
            "created", "task", task.id,
            summary=task.description,
            actor=task.assigned_to,
            details={"opportunity_id": task.opportunity_id},
        )
        return task

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    async def list_tasks(
        self,
        search: Optional[str] = None,
        filters: Iterable[TaskFilter] = (),
        sort_by: TaskSortField = TaskSortField.DUE_DATE,
        order: SortOrder = SortOrder.ASC,
        page: int = 0,
        page_size: int = 10,
    ) -> Page[TaskRead]:
        return build_page(
            self.store.tasks.list(),
            search,
            filters,
            TASK_SEARCH_FIELDS,
            TaskSortField(sort_by).value,
            order,
            page,
            page_size,
        )

    async def list_for_opportunity(self, opportunity_id: int) -> List[TaskRead]:
        """Return the tasks of one opportunity ordered by due date.

        Raises ``EntityNotFound`` when the opportunity does not exist.
        """
        self.store.opportunities.get(opportunity_id)
        tasks = [t for t in self.store.tasks.list() if t.opportunity_id == opportunity_id]
        return sort_records(tasks, TaskSortField.DUE_DATE.value, SortOrder.ASC)

    async def upcoming(self, limit: Optional[int] = None) -> List[TaskRead]:
        """Tasks not yet completed, soonest due date first.

        Tasks without a due date come last.
        """
        open_tasks = [t for t in self.store.tasks.list() if t.status is not TaskStatus.COMPLETED]
        dated = sort_records([t for t in open_tasks if t.due_date], "due_date", SortOrder.ASC)
        result = dated + [t for t in open_tasks if not t.due_date]
        return result if limit is None else result[:limit]

    async def get_task(self, task_id: int) -> TaskRead:
        return self.store.tasks.get(task_id)

    # ------------------------------------------------------------------
    # Updates and completion
    # ------------------------------------------------------------------
    async def update_task(self, task_id: int, updates: Dict[str, Any]) -> TaskRead:
        current = self.store.tasks.get(task_id)
        changes = self._completion_changes(current, dict(updates))
        task = self.store.tasks.update(task_id, changes)
        logger.info("Updated task %s: %s", task_id, sorted(updates))
        await self.activity.log("updated", "task", task_id, details=updates)
        return task

    async def complete_task(self, task_id: int) -> TaskRead:
        """Mark a task as completed.

        Completing a task that is already completed keeps its original
        ``date_completed``.

        Raises
        ------
        EntityNotFound
            If the task does not exist.
        """
        current = self.store.tasks.get(task_id)
        if current.status is TaskStatus.COMPLETED:
            return current
        task = self.store.tasks.update(
            task_id, {"status": TaskStatus.COMPLETED, "date_completed": date.today()},
        )
        logger.info("Completed task %s", task_id)
        await self.activity.log(
            "completed", "task", task_id, summary=task.description, actor=task.assigned_to,
        )
        return task

    async def delete_task(self, task_id: int) -> None:
        self.store.tasks.delete(task_id)
        logger.info("Deleted task %s", task_id)
        await self.activity.log("deleted", "task", task_id)
