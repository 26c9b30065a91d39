"""
Business logic for clients.

Clients are created through the add-client form, listed with search,
filters, sorting and pagination, and updated through the edit form.
There is no deletion flow.  The detail view combines the client with
its contacts, engagements, opportunities and the matrix status of
every service.
"""

import logging
from typing import Iterable, Optional

from ..core.classifier import EntitySnapshot, RelationshipClassifier
from ..core.query import build_page
from ..repositories import Store
from ..schemas.client import (
    CLIENT_SEARCH_FIELDS,
    ClientCreate,
    ClientDetail,
    ClientFilter,
    ClientRead,
    ClientServiceStatus,
    ClientSortField,
)
from ..schemas.listing import Page, SortOrder
from .activity_service import ActivityService
from .contact_service import ContactService
from .opportunity_service import OpportunityService

logger = logging.getLogger(__name__)


class ClientService:
    """Service for managing clients."""

    def __init__(self, store: Store) -> None:
        self.store = store
        self.activity = ActivityService(store)

    def _ensure_unique_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        lowered = name.strip().lower()
        for client in self.store.clients.list():
            if client.id != exclude_id and client.name.strip().lower() == lowered:
                raise ValueError(f"Client with name '{name}' already exists")

    async def create_client(self, data: ClientCreate) -> ClientRead:
        """Create a new client.

        Client names must be unique (case-insensitive); a duplicate
        raises ``ValueError``.
        """
        self._ensure_unique_name(data.name)
        client = self.store.clients.create(data.model_dump())
        logger.info("Created client %s '%s'", client.id, client.name)
        await self.activity.log(
            "created", "client", client.id, summary=f"Client {client.name} added",
        )
        return client

    async def list_clients(
        self,
        search: Optional[str] = None,
        filters: Iterable[ClientFilter] = (),
        sort_by: ClientSortField = ClientSortField.NAME,
        order: SortOrder = SortOrder.ASC,
        page: int = 0,
        page_size: int = 10,
    ) -> Page[ClientRead]:
        """Return one page of clients.

        - ``search`` matches name, industry, region, primary BU and
          primary contact (case-insensitive substring).
        - ``filters`` are exact matches on industry, region, primary
          BU or account manager; empty values are ignored.
        """
        return build_page(
            self.store.clients.list(),
            search,
            filters,
            CLIENT_SEARCH_FIELDS,
            ClientSortField(sort_by).value,
            order,
            page,
            page_size,
        )

    async def get_client(self, client_id: int) -> ClientRead:
        """Retrieve a single client.  Raises ``EntityNotFound`` if missing."""
        return self.store.clients.get(client_id)

    async def update_client(self, client_id: int, updates: dict) -> ClientRead:
        """Update fields of an existing client.

        Only keys present in ``updates`` change.  Renaming onto another
        client's name raises ``ValueError``.
        """
        self.store.clients.get(client_id)
        if updates.get("name"):
            self._ensure_unique_name(updates["name"], exclude_id=client_id)
        client = self.store.clients.update(client_id, updates)
        logger.info("Updated client %s: %s", client_id, sorted(updates))
        await self.activity.log(
            "updated", "client", client_id,
            summary=f"Client {client.name} updated", details=updates,
        )
        return client

    async def get_client_detail(self, client_id: int) -> ClientDetail:
        client = self.store.clients.get(client_id)
        services = self.store.services.list()
        engagements = [e for e in self.store.engagements.list() if e.client_id == client_id]
        opportunities = [o for o in self.store.opportunities.list() if o.client_id == client_id]

        classifier = RelationshipClassifier(
            EntitySnapshot(
                clients=[client],
                services=services,
                engagements=engagements,
                opportunities=opportunities,
            )
        )
        statuses = [
            ClientServiceStatus(
                service_id=service.id,
                service_name=service.name,
                business_unit=service.business_unit,
                status=classifier.classify(client_id, service.id),
            )
            for service in services
        ]
        contacts = [c for c in self.store.contacts.list() if c.client_id == client_id]
        return ClientDetail(
            client=client,
            contacts=ContactService.ordered(contacts),
            engagements=engagements,
            opportunities=OpportunityService(self.store).enrich(opportunities),
            services=statuses,
        )
