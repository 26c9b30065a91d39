"""
Pydantic models for business units.

Clients have a primary business unit and every service belongs to
one; the cross-sell matrix compares the two.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class BusinessUnitBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Content"])
    description: Optional[str] = Field(None, examples=["Content strategy and production"])
    lead_user: Optional[str] = Field(None, examples=["Priya Nair"])
    is_active: bool = True


class BusinessUnitCreate(BusinessUnitBase):
    """Schema for creating a business unit."""
    pass


class BusinessUnitUpdate(BaseModel):
    """Schema for updating a business unit.  Only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    lead_user: str | None = None
    is_active: bool | None = None


class BusinessUnitRead(BusinessUnitBase):
    id: int

    model_config = {
        "from_attributes": True,
    }


class BusinessUnitSortField(str, Enum):
    ID = "id"
    NAME = "name"


BUSINESS_UNIT_SEARCH_FIELDS = ("name", "description", "lead_user")
