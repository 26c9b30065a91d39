"""
Business logic for business units.
"""

import logging
from typing import List, Optional

from ..core.query import build_page, sort_records
from ..repositories import Store
from ..schemas.business_unit import (
    BUSINESS_UNIT_SEARCH_FIELDS,
    BusinessUnitCreate,
    BusinessUnitRead,
    BusinessUnitSortField,
)
from ..schemas.listing import Page, SortOrder
from ..schemas.opportunity import OpportunitySortField, OpportunityView
from ..schemas.service import ServiceRead
from .opportunity_service import OpportunityService

logger = logging.getLogger(__name__)


class BusinessUnitService:

    def __init__(self, store: Store) -> None:
        self.store = store

    def _ensure_unique_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        for unit in self.store.business_units.list():
            if unit.id != exclude_id and unit.name.lower() == name.lower():
                raise ValueError(f"Business unit '{name}' already exists")

    def _in_use(self, name: str) -> bool:
        return any(c.primary_bu == name for c in self.store.clients.list()) or any(
            s.business_unit == name for s in self.store.services.list()
        )

    async def create_business_unit(self, data: BusinessUnitCreate) -> BusinessUnitRead:
        self._ensure_unique_name(data.name)
        unit = self.store.business_units.create(data.model_dump())
        logger.info("Created business unit %s '%s'", unit.id, unit.name)
        return unit

    async def list_business_units(
        self,
        search: Optional[str] = None,
        sort_by: BusinessUnitSortField = BusinessUnitSortField.NAME,
        order: SortOrder = SortOrder.ASC,
        page: int = 0,
        page_size: int = 10,
    ) -> Page[BusinessUnitRead]:
        return build_page(
            self.store.business_units.list(),
            search,
            (),
            BUSINESS_UNIT_SEARCH_FIELDS,
            BusinessUnitSortField(sort_by).value,
            order,
            page,
            page_size,
        )

    async def get_business_unit(self, unit_id: int) -> BusinessUnitRead:
        return self.store.business_units.get(unit_id)

    async def list_active(self) -> List[BusinessUnitRead]:
        """Active units by name, for filter drop-downs."""
        active = [u for u in self.store.business_units.list() if u.is_active]
        return sort_records(active, BusinessUnitSortField.NAME.value)

    async def services_for(self, unit_id: int) -> List[ServiceRead]:
        """Services offered by a unit, by name."""
        unit = self.store.business_units.get(unit_id)
        services = [s for s in self.store.services.list() if s.business_unit == unit.name]
        return sort_records(services, "name")

    async def opportunities_for(self, unit_id: int) -> List[OpportunityView]:
        """Opportunities for the unit's services, newest first."""
        unit = self.store.business_units.get(unit_id)
        views = OpportunityService(self.store).enrich(self.store.opportunities.list())
        return sort_records(
            [v for v in views if v.business_unit == unit.name],
            OpportunitySortField.CREATED_DATE.value,
            SortOrder.DESC,
        )

    async def update_business_unit(self, unit_id: int, updates: dict) -> BusinessUnitRead:
        current = self.store.business_units.get(unit_id)
        new_name = updates.get("name")
        if new_name and new_name != current.name:
            self._ensure_unique_name(new_name, exclude_id=unit_id)
            # Clients and services reference units by name.
            if self._in_use(current.name):
                raise ValueError(
                    f"Business unit '{current.name}' is referenced by clients or services and cannot be renamed"
                )
        unit = self.store.business_units.update(unit_id, updates)
        logger.info("Updated business unit %s: %s", unit_id, sorted(updates))
        return unit

    async def delete_business_unit(self, unit_id: int) -> None:
        unit = self.store.business_units.get(unit_id)
        if self._in_use(unit.name):
            raise ValueError(f"Business unit '{unit.name}' is referenced by clients or services")
        self.store.business_units.delete(unit_id)
        logger.info("Deleted business unit %s '%s'", unit_id, unit.name)
