"""
Opportunity service for the cross-sell pipeline.

This module contains the business logic behind the opportunities
page: creating and editing opportunities, moving them through the
status workflow and listing them with search, filters and sorting.

Opportunities are stored with client and service ids only.  The list
page searches and sorts on client name, service name and business
unit, so records are enriched into ``OpportunityView`` objects before
they enter the list pipeline.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.query import build_page, sort_records
from ..repositories import Store
from ..schemas.listing import Page, SortOrder
from ..schemas.note import NoteParentType
from ..schemas.opportunity import (
    OPPORTUNITY_SEARCH_FIELDS,
    OpportunityCreate,
    OpportunityFilter,
    OpportunityRead,
    OpportunitySortField,
    OpportunityStatus,
    OpportunityView,
)
from .activity_service import ActivityService

logger = logging.getLogger(__name__)


class OpportunityService:
    """Service class encapsulating opportunity operations."""

    def __init__(self, store: Store) -> None:
        self.store = store
        self.activity = ActivityService(store)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def enrich(self, opportunities: Sequence[OpportunityRead]) -> List[OpportunityView]:
        """Attach client name, service name and business unit to each record.

        References that no longer resolve leave the names empty.
        """
        clients = {c.id: c for c in self.store.clients.list()}
        services = {s.id: s for s in self.store.services.list()}
        views: List[OpportunityView] = []
        for opp in opportunities:
            client = clients.get(opp.client_id)
            service = services.get(opp.service_id)
            views.append(
                OpportunityView(
                    **opp.model_dump(),
                    client_name=client.name if client else None,
                    service_name=service.name if service else None,
                    business_unit=service.business_unit if service else None,
                )
            )
        return views

    def _check_references(self, client_id: Optional[int], service_id: Optional[int]) -> None:
        if client_id is not None and not self.store.clients.exists(client_id):
            raise ValueError(f"Client {client_id} does not exist")
        if service_id is not None and not self.store.services.exists(service_id):
            raise ValueError(f"Service {service_id} does not exist")

    @staticmethod
    def _closed_date_for(
        old_status: Optional[OpportunityStatus],
        new_status: OpportunityStatus,
        current: Optional[date],
    ) -> Optional[date]:
        """Work out ``closed_date`` after a status change.

        Entering a closed status stamps today; moving between closed
        statuses keeps the original date; reopening clears it.
        """
        if not new_status.is_closed:
            return None
        if old_status is not None and old_status.is_closed and current is not None:
            return current
        return date.today()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    async def list_opportunities(
        self,
        search: Optional[str] = None,
        filters: Iterable[OpportunityFilter] = (),
        sort_by: OpportunitySortField = OpportunitySortField.CREATED_DATE,
        order: SortOrder = SortOrder.DESC,
        page: int = 0,
        page_size: int = 10,
    ) -> Page[OpportunityView]:
        """Return one page of opportunities.

        Parameters
        ----------
        search : Optional[str]
            Case-insensitive substring matched against client name,
            service name, business unit, status and assigned user.
        filters : Iterable[OpportunityFilter]
            Exact-match constraints; all non-empty filters must match.
        sort_by : OpportunitySortField
            Field to sort on.  There is no secondary key.
        order : SortOrder
            ``asc`` or ``desc``.
        page, page_size : int
            Zero-based page index and page length.

        Returns
        -------
        Page[OpportunityView]
            The requested window together with the filtered total.
        """
        return build_page(
            self.enrich(self.store.opportunities.list()),
            search,
            filters,
            OPPORTUNITY_SEARCH_FIELDS,
            OpportunitySortField(sort_by).value,
            order,
            page,
            page_size,
        )

    async def get_opportunity(self, opportunity_id: int) -> OpportunityView:
        return self.enrich([self.store.opportunities.get(opportunity_id)])[0]

    async def list_for_client(self, client_id: int) -> List[OpportunityView]:
        """All opportunities of one client, newest first."""
        self.store.clients.get(client_id)
        opps = [o for o in self.store.opportunities.list() if o.client_id == client_id]
        return sort_records(self.enrich(opps), OpportunitySortField.CREATED_DATE.value, SortOrder.DESC)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    async def create_opportunity(self, data: OpportunityCreate) -> OpportunityView:
        """Create an opportunity for an existing client and service.

        ``created_date`` defaults to today.  An opportunity created
        directly in a closed status is stamped with a ``closed_date``.

        Raises
        ------
        ValueError
            If the client or service does not exist.
        """
        self._check_references(data.client_id, data.service_id)
        payload: Dict[str, Any] = data.model_dump()
        payload["created_date"] = payload.get("created_date") or date.today()
        payload["closed_date"] = date.today() if data.status.is_closed else None
        opp = self.store.opportunities.create(payload)
        logger.info(
            "Created opportunity %s (client %s, service %s, %s)",
            opp.id, opp.client_id, opp.service_id, opp.status.value,
        )
        view = self.enrich([opp])[0]
        await self.activity.log(
            "created", "opportunity", opp.id,
            summary=f"New opportunity: {view.service_name} for {view.client_name}",
            actor=opp.assigned_to,
        )
        return view

    async def update_opportunity(self, opportunity_id: int, updates: Dict[str, Any]) -> OpportunityView:
        """Apply ``updates`` to an opportunity.

        A change of ``status`` goes through the same closed-date rules
        as ``update_status`` and is logged as a status change.
        """
        current = self.store.opportunities.get(opportunity_id)
        self._check_references(updates.get("client_id"), updates.get("service_id"))

        changes = dict(updates)
        new_status = changes.get("status")
        status_changed = new_status is not None and OpportunityStatus(new_status) != current.status
        if status_changed:
            new_status = OpportunityStatus(new_status)
            changes["status"] = new_status
            changes["closed_date"] = self._closed_date_for(current.status, new_status, current.closed_date)

        opp = self.store.opportunities.update(opportunity_id, changes)
        logger.info("Updated opportunity %s: %s", opportunity_id, sorted(updates))
        if status_changed:
            await self._log_status_change(opp, current.status)
        else:
            await self.activity.log("updated", "opportunity", opportunity_id, details=updates)
        return self.enrich([opp])[0]

    async def update_status(self, opportunity_id: int, status: OpportunityStatus) -> OpportunityView:
        """Move an opportunity to ``status``.

        Setting the status it already has is a no-op.
        """
        current = self.store.opportunities.get(opportunity_id)
        status = OpportunityStatus(status)
        if status == current.status:
            return self.enrich([current])[0]
        opp = self.store.opportunities.update(
            opportunity_id,
            {
                "status": status,
                "closed_date": self._closed_date_for(current.status, status, current.closed_date),
            },
        )
        logger.info(
            "Opportunity %s status %s -> %s", opportunity_id, current.status.value, status.value,
        )
        await self._log_status_change(opp, current.status)
        return self.enrich([opp])[0]

    async def delete_opportunity(self, opportunity_id: int) -> None:
        """Delete an opportunity together with its tasks and notes."""
        self.store.opportunities.get(opportunity_id)
        task_ids = [t.id for t in self.store.tasks.list() if t.opportunity_id == opportunity_id]
        for task_id in task_ids:
            self.store.tasks.delete(task_id)
        for note in self.store.notes.list():
            if note.parent_type is NoteParentType.OPPORTUNITY and note.parent_id == opportunity_id:
                self.store.notes.delete(note.id)
        self.store.opportunities.delete(opportunity_id)
        logger.info("Deleted opportunity %s and %d task(s)", opportunity_id, len(task_ids))
        await self.activity.log(
            "deleted", "opportunity", opportunity_id, details={"deleted_tasks": task_ids},
        )

    async def _log_status_change(self, opp: OpportunityRead, old_status: OpportunityStatus) -> None:
        view = self.enrich([opp])[0]
        await self.activity.log(
            "status_changed", "opportunity", opp.id,
            summary=f"{view.client_name} {view.service_name}: {old_status.value} -> {opp.status.value}",
            actor=opp.assigned_to,
            details={"old_status": old_status.value, "new_status": opp.status.value},
        )

