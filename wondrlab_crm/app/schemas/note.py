"""
Pydantic models for notes.

Notes are free-text entries attached to either a client or an
opportunity.  ``parent_type`` says which, ``parent_id`` holds the id.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class NoteParentType(str, Enum):
    CLIENT = "Client"
    OPPORTUNITY = "Opportunity"


class NoteCreate(BaseModel):
    content: str = Field(..., min_length=1, examples=["Asked for a revised quote by Friday"])
    author: Optional[str] = Field(None, examples=["Sarah Johnson"])


class NoteRead(NoteCreate):
    id: int
    parent_type: NoteParentType
    parent_id: int
    timestamp: datetime

    model_config = {
        "from_attributes": True,
    }
