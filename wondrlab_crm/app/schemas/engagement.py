"""
Pydantic models for engagements.

An engagement records that a client currently uses (or used) a
service.  A missing ``end_date`` means the engagement is open-ended.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .listing import FieldFilter


class EngagementStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    ENDED = "Ended"


class EngagementBase(BaseModel):
    client_id: int = Field(..., examples=[1])
    service_id: int = Field(..., examples=[2])
    start_date: date = Field(..., examples=["2022-08-01"])
    end_date: Optional[date] = None
    status: EngagementStatus = EngagementStatus.ACTIVE
    notes: Optional[str] = None


class EngagementCreate(EngagementBase):
    """Schema for creating an engagement."""
    pass


class EngagementUpdate(BaseModel):
    start_date: date | None = None
    end_date: date | None = None
    status: EngagementStatus | None = None
    notes: str | None = None


class EngagementRead(EngagementBase):
    id: int

    model_config = {
        "from_attributes": True,
    }


class EngagementFilterField(str, Enum):
    CLIENT_ID = "client_id"
    SERVICE_ID = "service_id"
    STATUS = "status"


class EngagementSortField(str, Enum):
    ID = "id"
    CLIENT_ID = "client_id"
    SERVICE_ID = "service_id"
    START_DATE = "start_date"
    END_DATE = "end_date"
    STATUS = "status"


EngagementFilter = FieldFilter[EngagementFilterField]

ENGAGEMENT_SEARCH_FIELDS = ("status", "notes")
