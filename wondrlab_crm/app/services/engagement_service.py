"""
Business logic for engagements.

Engagements link a client to a service it currently uses.  Any
engagement for a pair marks the matrix cell as active, whatever its
status.
"""

import logging
from typing import Iterable, Optional

from ..core.query import build_page
from ..repositories import Store
from ..schemas.engagement import (
    ENGAGEMENT_SEARCH_FIELDS,
    EngagementCreate,
    EngagementFilter,
    EngagementRead,
    EngagementSortField,
)
from ..schemas.listing import Page, SortOrder
from .activity_service import ActivityService

logger = logging.getLogger(__name__)


class EngagementService:

    def __init__(self, store: Store) -> None:
        self.store = store
        self.activity = ActivityService(store)

    def _check_references(self, client_id: int, service_id: int) -> None:
        if not self.store.clients.exists(client_id):
            raise ValueError(f"Client {client_id} does not exist")
        if not self.store.services.exists(service_id):
            raise ValueError(f"Service {service_id} does not exist")

    def _check_dates(self, engagement: dict) -> None:
        start, end = engagement.get("start_date"), engagement.get("end_date")
        if start and end and end < start:
            raise ValueError("end_date must not be before start_date")

    async def create_engagement(self, data: EngagementCreate) -> EngagementRead:
        self._check_references(data.client_id, data.service_id)
        payload = data.model_dump()
        self._check_dates(payload)
        engagement = self.store.engagements.create(payload)
        logger.info(
            "Created engagement %s (client %s, service %s)",
            engagement.id, engagement.client_id, engagement.service_id,
        )
        await self.activity.log(
            "created", "engagement", engagement.id,
            details={"client_id": engagement.client_id, "service_id": engagement.service_id},
        )
        return engagement

    async def list_engagements(
        self,
        search: Optional[str] = None,
        filters: Iterable[EngagementFilter] = (),
        sort_by: EngagementSortField = EngagementSortField.START_DATE,
        order: SortOrder = SortOrder.DESC,
        page: int = 0,
        page_size: int = 10,
    ) -> Page[EngagementRead]:
        return build_page(
            self.store.engagements.list(),
            search,
            filters,
            ENGAGEMENT_SEARCH_FIELDS,
            EngagementSortField(sort_by).value,
            order,
            page,
            page_size,
        )

    async def get_engagement(self, engagement_id: int) -> EngagementRead:
        return self.store.engagements.get(engagement_id)

    async def update_engagement(self, engagement_id: int, updates: dict) -> EngagementRead:
        current = self.store.engagements.get(engagement_id)
        self._check_dates({**current.model_dump(), **updates})
        engagement = self.store.engagements.update(engagement_id, updates)
        logger.info("Updated engagement %s: %s", engagement_id, sorted(updates))
        await self.activity.log("updated", "engagement", engagement_id, details=updates)
        return engagement

    async def delete_engagement(self, engagement_id: int) -> None:
        self.store.engagements.delete(engagement_id)
        logger.info("Deleted engagement %s", engagement_id)
        await self.activity.log("deleted", "engagement", engagement_id)
