"""
Pydantic models for the service catalogue.

A service is an offering delivered by one business unit.  The
``active_clients`` and ``potential_clients`` counters are maintained
by hand through the API; they are not recomputed from engagements or
opportunities.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .engagement import EngagementRead
from .listing import FieldFilter
from .opportunity import OpportunityView


class ServiceBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Video Production"])
    description: Optional[str] = Field(None, examples=["Brand films and social video"])
    business_unit: str = Field(..., min_length=1, examples=["Content"])
    category: Optional[str] = Field(None, examples=["Production"])
    active_clients: int = Field(0, ge=0)
    potential_clients: int = Field(0, ge=0)
    is_active: bool = True


class ServiceCreate(ServiceBase):
    """Schema for creating a service."""
    pass


class ServiceUpdate(BaseModel):
    """Schema for updating a service.  Only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    business_unit: str | None = Field(default=None, min_length=1)
    category: str | None = None
    active_clients: int | None = Field(default=None, ge=0)
    potential_clients: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class ServiceRead(ServiceBase):
    id: int

    model_config = {
        "from_attributes": True,
    }


class ServiceDetail(BaseModel):
    service: ServiceRead
    engagements: List[EngagementRead]
    opportunities: List[OpportunityView]


class ServiceFilterField(str, Enum):
    BUSINESS_UNIT = "business_unit"
    CATEGORY = "category"
    IS_ACTIVE = "is_active"


class ServiceSortField(str, Enum):
    ID = "id"
    NAME = "name"
    BUSINESS_UNIT = "business_unit"
    CATEGORY = "category"
    ACTIVE_CLIENTS = "active_clients"
    POTENTIAL_CLIENTS = "potential_clients"


ServiceFilter = FieldFilter[ServiceFilterField]

SERVICE_SEARCH_FIELDS = ("name", "description", "business_unit", "category")
