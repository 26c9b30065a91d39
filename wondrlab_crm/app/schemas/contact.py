"""
Pydantic models for client contacts.

A client can have any number of contacts; at most one of them is
flagged as the primary contact.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ContactBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Jane Doe"])
    email: Optional[str] = Field(None, max_length=100, examples=["jane.doe@techcorp.com"])
    phone: Optional[str] = Field(None, max_length=50, examples=["+91 98200 00000"])
    role_title: Optional[str] = Field(None, max_length=100, examples=["Marketing Director"])
    is_primary: bool = False


class ContactCreate(ContactBase):
    """Schema for adding a contact to a client."""
    pass


class ContactUpdate(BaseModel):
    """Schema for updating a contact.  Only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)
    role_title: str | None = Field(default=None, max_length=100)
    is_primary: bool | None = None


class ContactRead(ContactBase):
    id: int
    client_id: int

    model_config = {
        "from_attributes": True,
    }
