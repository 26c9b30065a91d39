"""
Business logic for the service catalogue.

"Service" here is the agency's offering (e.g. Video Production), not a
layer of this code base.  The class is named ``CatalogService`` to
keep the two apart.
"""

import logging
from typing import Iterable, Optional

from ..core.query import build_page
from ..repositories import Store
from ..schemas.listing import Page, SortOrder
from ..schemas.service import (
    SERVICE_SEARCH_FIELDS,
    ServiceCreate,
    ServiceDetail,
    ServiceFilter,
    ServiceRead,
    ServiceSortField,
)
from .activity_service import ActivityService
from .opportunity_service import OpportunityService

logger = logging.getLogger(__name__)


class CatalogService:
    """Service for managing the offerings of each business unit."""

    def __init__(self, store: Store) -> None:
        self.store = store
        self.activity = ActivityService(store)

    async def create_service(self, data: ServiceCreate) -> ServiceRead:
        service = self.store.services.create(data.model_dump())
        logger.info("Created service %s '%s' (%s)", service.id, service.name, service.business_unit)
        await self.activity.log(
            "created", "service", service.id,
            summary=f"Service {service.name} added to {service.business_unit}",
        )
        return service

    async def list_services(
        self,
        search: Optional[str] = None,
        filters: Iterable[ServiceFilter] = (),
        sort_by: ServiceSortField = ServiceSortField.NAME,
        order: SortOrder = SortOrder.ASC,
        page: int = 0,
        page_size: int = 10,
    ) -> Page[ServiceRead]:
        """Return one page of services.

        ``search`` matches name, description, business unit and
        category; ``filters`` are exact matches on business unit,
        category or the active flag (``"true"``/``"false"``).
        """
        return build_page(
            self.store.services.list(),
            search,
            filters,
            SERVICE_SEARCH_FIELDS,
            ServiceSortField(sort_by).value,
            order,
            page,
            page_size,
        )

    async def get_service(self, service_id: int) -> ServiceRead:
        return self.store.services.get(service_id)

    async def update_service(self, service_id: int, updates: dict) -> ServiceRead:
        service = self.store.services.update(service_id, updates)
        logger.info("Updated service %s: %s", service_id, sorted(updates))
        await self.activity.log(
            "updated", "service", service_id,
            summary=f"Service {service.name} updated", details=updates,
        )
        return service

    async def delete_service(self, service_id: int) -> None:
        """Delete a service.

        A service still referenced by an engagement or opportunity
        cannot be deleted; deactivate it instead.
        """
        service = self.store.services.get(service_id)
        in_use = any(e.service_id == service_id for e in self.store.engagements.list()) or any(
            o.service_id == service_id for o in self.store.opportunities.list()
        )
        if in_use:
            raise ValueError(
                f"Service {service_id} has engagements or opportunities; deactivate it instead"
            )
        self.store.services.delete(service_id)
        logger.info("Deleted service %s '%s'", service_id, service.name)
        await self.activity.log(
            "deleted", "service", service_id, summary=f"Service {service.name} removed",
        )

    async def get_service_detail(self, service_id: int) -> ServiceDetail:
        service = self.store.services.get(service_id)
        engagements = [e for e in self.store.engagements.list() if e.service_id == service_id]
        opportunities = [o for o in self.store.opportunities.list() if o.service_id == service_id]
        return ServiceDetail(
            service=service,
            engagements=engagements,
            opportunities=OpportunityService(self.store).enrich(opportunities),
        )
