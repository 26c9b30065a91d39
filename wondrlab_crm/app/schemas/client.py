"""
Pydantic models for client data.

``ClientBase`` holds the shared fields, ``ClientCreate`` is used for
requests and ``ClientRead`` adds the ``id`` for responses.  The
enumerations at the bottom list which fields the client list page may
filter and sort on.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.classifier import CellStatus
from .contact import ContactRead
from .engagement import EngagementRead
from .listing import FieldFilter
from .opportunity import OpportunityView


class ClientBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["TechCorp"])
    industry: Optional[str] = Field(None, examples=["Technology"])
    region: Optional[str] = Field(None, examples=["North"])
    primary_bu: Optional[str] = Field(None, examples=["Content"])
    primary_account_manager: Optional[str] = Field(None, examples=["John Smith"])
    primary_contact: Optional[str] = Field(None, examples=["Jane Doe"])
    address: Optional[str] = None
    is_active: bool = True


class ClientCreate(ClientBase):
    """Schema for creating a client."""
    pass


class ClientUpdate(BaseModel):
    """Schema for updating a client.

    All fields are optional; only provided fields will be updated.
    """
    name: str | None = Field(default=None, min_length=1, max_length=100)
    industry: str | None = None
    region: str | None = None
    primary_bu: str | None = None
    primary_account_manager: str | None = None
    primary_contact: str | None = None
    address: str | None = None
    is_active: bool | None = None


class ClientRead(ClientBase):
    """Schema for reading a client from the API."""

    id: int

    model_config = {
        "from_attributes": True,
    }


class ClientServiceStatus(BaseModel):
    """Matrix status of one service for the client detail page."""

    service_id: int
    service_name: str
    business_unit: str
    status: CellStatus


class ClientDetail(BaseModel):
    client: ClientRead
    contacts: List[ContactRead] = []
    engagements: List[EngagementRead]
    opportunities: List[OpportunityView]
    services: List[ClientServiceStatus]


class ClientFilterField(str, Enum):
    INDUSTRY = "industry"
    REGION = "region"
    PRIMARY_BU = "primary_bu"
    PRIMARY_ACCOUNT_MANAGER = "primary_account_manager"


class ClientSortField(str, Enum):
    ID = "id"
    NAME = "name"
    INDUSTRY = "industry"
    REGION = "region"
    PRIMARY_BU = "primary_bu"
    PRIMARY_ACCOUNT_MANAGER = "primary_account_manager"


ClientFilter = FieldFilter[ClientFilterField]

CLIENT_SEARCH_FIELDS = ("name", "industry", "region", "primary_bu", "primary_contact")
