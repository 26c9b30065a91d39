"""
Repository interface shared by the storage backends.

A repository owns one kind of record (a pydantic ``*Read`` model) and
exposes the five operations the services need.  Services only talk to
this interface, so tests can swap the SQLite tables for in-memory
fixtures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Type, TypeVar

from pydantic import BaseModel

M = TypeVar("M", bound=BaseModel)


class EntityNotFound(ValueError):
    """Raised when a record id does not exist."""

    def __init__(self, entity: str, entity_id: Any) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class Repository(ABC, Generic[M]):
    """CRUD access to one collection of records."""

    def __init__(self, model: Type[M], entity: str) -> None:
        self.model = model
        self.entity = entity

    @abstractmethod
    def list(self) -> List[M]:
        """Return every record in storage order."""

    @abstractmethod
    def get(self, record_id: int) -> M:
        """Return one record or raise ``EntityNotFound``."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> M:
        """Store a new record and return it with its assigned ``id``."""

    @abstractmethod
    def update(self, record_id: int, changes: Dict[str, Any]) -> M:
        """Apply ``changes`` to an existing record and return the result."""

    @abstractmethod
    def delete(self, record_id: int) -> None:
        """Remove a record or raise ``EntityNotFound``."""

    def exists(self, record_id: int) -> bool:
        try:
            self.get(record_id)
        except EntityNotFound:
            return False
        return True
