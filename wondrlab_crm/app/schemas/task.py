"""
Pydantic models for opportunity follow-up tasks.

A task is a to-do item attached to an opportunity (e.g. "Send
proposal to Fashion Forward").  Completing a task stamps
``date_completed``; the dashboard lists tasks that are not yet
completed ordered by due date.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .listing import FieldFilter
from .opportunity import OpportunityPriority


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class TaskBase(BaseModel):
    opportunity_id: int = Field(..., examples=[1])
    description: str = Field(..., min_length=1, examples=["Follow up on Digital Marketing proposal"])
    due_date: Optional[date] = Field(None, examples=["2023-06-20"])
    status: TaskStatus = TaskStatus.PENDING
    priority: OpportunityPriority = OpportunityPriority.MEDIUM
    assigned_to: Optional[str] = Field(None, examples=["John Smith"])


class TaskCreate(TaskBase):
    """Schema for creating a task."""
    pass


class TaskUpdate(BaseModel):
    description: str | None = Field(default=None, min_length=1)
    due_date: date | None = None
    status: TaskStatus | None = None
    priority: OpportunityPriority | None = None
    assigned_to: str | None = None


class TaskRead(TaskBase):
    """Schema for a task returned by the tasks API."""

    id: int
    date_created: date
    date_completed: Optional[date] = None

    model_config = {
        "from_attributes": True,
    }


class TaskFilterField(str, Enum):
    OPPORTUNITY_ID = "opportunity_id"
    STATUS = "status"
    PRIORITY = "priority"
    ASSIGNED_TO = "assigned_to"


class TaskSortField(str, Enum):
    ID = "id"
    DUE_DATE = "due_date"
    STATUS = "status"
    PRIORITY = "priority"
    DATE_CREATED = "date_created"


TaskFilter = FieldFilter[TaskFilterField]

TASK_SEARCH_FIELDS = ("description", "assigned_to")
