"""
Storage layer.

``Store`` bundles one repository per record type.  Services receive a
``Store`` instead of opening connections themselves, which lets the
API run against SQLite in production and against in-memory
repositories in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.db import init_db
from ..schemas.activity import ActivityRead
from ..schemas.business_unit import BusinessUnitRead
from ..schemas.client import ClientRead
from ..schemas.contact import ContactRead
from ..schemas.engagement import EngagementRead
from ..schemas.note import NoteRead
from ..schemas.opportunity import OpportunityRead
from ..schemas.service import ServiceRead
from ..schemas.task import TaskRead
from .base import EntityNotFound, Repository
from .memory import InMemoryRepository
from .sqlite import SQLiteRepository

__all__ = [
    "EntityNotFound",
    "InMemoryRepository",
    "Repository",
    "SQLiteRepository",
    "Store",
]

# (attribute, model, entity label, table)
_COLLECTIONS = (
    ("business_units", BusinessUnitRead, "Business unit", "business_units"),
    ("clients", ClientRead, "Client", "clients"),
    ("contacts", ContactRead, "Contact", "client_contacts"),
    ("services", ServiceRead, "Service", "services"),
    ("engagements", EngagementRead, "Engagement", "engagements"),
    ("opportunities", OpportunityRead, "Opportunity", "opportunities"),
    ("tasks", TaskRead, "Task", "tasks"),
    ("notes", NoteRead, "Note", "notes"),
    ("activities", ActivityRead, "Activity", "activity_logs"),
)


@dataclass
class Store:
    business_units: Repository[BusinessUnitRead]
    clients: Repository[ClientRead]
    contacts: Repository[ContactRead]
    services: Repository[ServiceRead]
    engagements: Repository[EngagementRead]
    opportunities: Repository[OpportunityRead]
    tasks: Repository[TaskRead]
    notes: Repository[NoteRead]
    activities: Repository[ActivityRead]

    @classmethod
    def memory(cls) -> "Store":
        return cls(**{
            attr: InMemoryRepository(model, entity)
            for attr, model, entity, _ in _COLLECTIONS
        })

    @classmethod
    def sqlite(cls, db_path: Optional[str] = None) -> "Store":
        """Build a SQLite-backed store, applying pending migrations first."""
        init_db(db_path)
        return cls(**{
            attr: SQLiteRepository(model, entity, table, db_path)
            for attr, model, entity, table in _COLLECTIONS
        })
