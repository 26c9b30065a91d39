"""
Shared schemas for list endpoints.

Every list page of the CRM narrows, orders and windows its rows the
same way, so the request and response shapes live here:

* ``FieldFilter`` is one ``{field, value}`` constraint.  It is generic
  over an entity's enumeration of filterable fields, so a filter that
  names a field the entity does not have fails validation.
* ``SortOrder`` is the sort direction.
* ``Page`` wraps a window of results together with the total number of
  rows that matched before pagination.
"""

from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

F = TypeVar("F", bound=Enum)
T = TypeVar("T")


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FieldFilter(BaseModel, Generic[F]):
    """Exact-match constraint on a single field.

    An empty or missing ``value`` means "no constraint".
    """

    field: F
    value: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return bool(self.value)


class Page(BaseModel, Generic[T]):
    """A window of list results."""

    items: List[T]
    total: int = Field(..., ge=0, description="Number of rows matching the search and filters")
    page: int = Field(..., ge=0, description="Zero-based page index")
    page_size: int = Field(..., ge=1)
