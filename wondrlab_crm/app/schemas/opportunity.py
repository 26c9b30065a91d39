"""
Pydantic models for cross-sell opportunities.

An opportunity tracks the potential or in-progress sale of a service
to a client.  ``OpportunityRead`` mirrors what is stored;
``OpportunityView`` adds the client and service names that the list
page searches on and displays.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .listing import FieldFilter


class OpportunityStatus(str, Enum):
    IDENTIFIED = "Identified"
    IN_DISCUSSION = "In Discussion"
    PROPOSAL_SENT = "Proposal Sent"
    ON_HOLD = "On Hold"
    WON = "Won"
    LOST = "Lost"
    CANCELLED = "Cancelled"

    @classmethod
    def _missing_(cls, value):
        # Labels used by older screens and the first backend schema.
        aliases = {
            "in progress": cls.IN_DISCUSSION,
            "cancelled/not pursued": cls.CANCELLED,
        }
        if isinstance(value, str):
            return aliases.get(value.strip().lower())
        return None

    @property
    def is_closed(self) -> bool:
        return self in CLOSED_STATUSES


CLOSED_STATUSES = frozenset(
    {OpportunityStatus.WON, OpportunityStatus.LOST, OpportunityStatus.CANCELLED}
)


class OpportunityPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def sort_key(self) -> int:
        """Urgency rank used when sorting: Low < Medium < High."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    OpportunityPriority.LOW: 0,
    OpportunityPriority.MEDIUM: 1,
    OpportunityPriority.HIGH: 2,
}


class OpportunityBase(BaseModel):
    client_id: int = Field(..., examples=[1])
    service_id: int = Field(..., examples=[3])
    status: OpportunityStatus = OpportunityStatus.IDENTIFIED
    priority: OpportunityPriority = OpportunityPriority.MEDIUM
    assigned_to: Optional[str] = Field(None, examples=["Sarah Johnson"])
    estimated_value: Optional[float] = Field(None, ge=0, examples=[25000])
    expected_close_date: Optional[date] = Field(None, examples=["2023-07-30"])
    notes: Optional[str] = None


class OpportunityCreate(OpportunityBase):
    """Schema for creating an opportunity.

    ``created_date`` defaults to today when omitted.
    """

    created_date: Optional[date] = None


class OpportunityUpdate(BaseModel):
    """Schema for updating an opportunity.

    All fields are optional; only provided fields will be updated.
    """
    client_id: int | None = None
    service_id: int | None = None
    status: OpportunityStatus | None = None
    priority: OpportunityPriority | None = None
    assigned_to: str | None = None
    estimated_value: float | None = Field(default=None, ge=0)
    expected_close_date: date | None = None
    notes: str | None = None


class OpportunityStatusUpdate(BaseModel):
    status: OpportunityStatus


class OpportunityRead(OpportunityBase):
    id: int
    created_date: date
    closed_date: Optional[date] = None

    model_config = {
        "from_attributes": True,
    }


class OpportunityView(OpportunityRead):
    client_name: Optional[str] = None
    service_name: Optional[str] = None
    business_unit: Optional[str] = None


class OpportunityFilterField(str, Enum):
    CLIENT_ID = "client_id"
    SERVICE_ID = "service_id"
    BUSINESS_UNIT = "business_unit"
    STATUS = "status"
    PRIORITY = "priority"
    ASSIGNED_TO = "assigned_to"


class OpportunitySortField(str, Enum):
    ID = "id"
    CLIENT_NAME = "client_name"
    SERVICE_NAME = "service_name"
    BUSINESS_UNIT = "business_unit"
    STATUS = "status"
    PRIORITY = "priority"
    ASSIGNED_TO = "assigned_to"
    ESTIMATED_VALUE = "estimated_value"
    CREATED_DATE = "created_date"
    EXPECTED_CLOSE_DATE = "expected_close_date"


OpportunityFilter = FieldFilter[OpportunityFilterField]

OPPORTUNITY_SEARCH_FIELDS = ("client_name", "service_name", "business_unit", "status", "assigned_to")
