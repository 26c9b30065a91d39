"""
Service layer for the dashboard.

This module aggregates the headline metrics shown on the CRM
dashboard: open opportunities, active clients, potential revenue,
recent wins, conversion rate and average days to close, together with
the recent activity feed, upcoming tasks and a summary of the most
recently added clients.

All figures are computed in Python from the repositories, so the same
code runs against SQLite and the in-memory store.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date, timedelta
from typing import Optional

from ..core.classifier import CellStatus, EntitySnapshot, RelationshipClassifier
from ..core.config import settings
from ..repositories import Store
from ..schemas.dashboard import ClientSummary, DashboardOverview
from ..schemas.opportunity import OpportunityStatus
from .activity_service import ActivityService
from .task_service import TaskService

logger = logging.getLogger(__name__)

# A win counts as recent when it closed within this many days.
RECENT_WIN_DAYS = 30
RECENT_CLIENTS = 5
UPCOMING_TASKS = 5


class DashboardService:
    """Service providing aggregated metrics for the dashboard."""

    def __init__(self, store: Store) -> None:
        self.store = store

    async def overview(self, today: Optional[date] = None) -> DashboardOverview:
        """Return the dashboard metrics.

        Parameters
        ----------
        today : Optional[date]
            Reference date for "recent wins".  Defaults to the current
            date.

        Returns
        -------
        DashboardOverview
            ``conversion_rate`` is the share of won opportunities among
            won and lost ones, as a percentage (0 when none is decided).
            ``avg_days_to_close`` averages ``closed_date - created_date``
            over won opportunities and is ``None`` without any.
        """
        today = today or date.today()
        clients = self.store.clients.list()
        services = self.store.services.list()
        engagements = self.store.engagements.list()
        opportunities = self.store.opportunities.list()

        open_opps = [o for o in opportunities if not o.status.is_closed]
        won = [o for o in opportunities if o.status is OpportunityStatus.WON]
        lost = [o for o in opportunities if o.status is OpportunityStatus.LOST]

        client_ids = {c.id for c in clients}
        active_clients = len({e.client_id for e in engagements if e.client_id in client_ids})
        potential_revenue = float(sum(o.estimated_value or 0 for o in open_opps))

        cutoff = today - timedelta(days=RECENT_WIN_DAYS)
        recent_wins = sum(1 for o in won if o.closed_date and o.closed_date >= cutoff)

        decided = len(won) + len(lost)
        conversion_rate = round(100.0 * len(won) / decided, 1) if decided else 0.0

        durations = [(o.closed_date - o.created_date).days for o in won if o.closed_date]
        avg_days_to_close = round(sum(durations) / len(durations), 1) if durations else None

        by_status = Counter(o.status.value for o in opportunities)

        classifier = RelationshipClassifier(
            EntitySnapshot(
                clients=clients,
                services=services,
                engagements=engagements,
                opportunities=opportunities,
            )
        )
        recent_clients = []
        for client in sorted(clients, key=lambda c: c.id, reverse=True)[:RECENT_CLIENTS]:
            statuses = [classifier.classify(client.id, s.id) for s in services]
            recent_clients.append(
                ClientSummary(
                    id=client.id,
                    name=client.name,
                    industry=client.industry,
                    active_services=statuses.count(CellStatus.ACTIVE),
                    potential_services=statuses.count(CellStatus.POTENTIAL),
                )
            )

        overview = DashboardOverview(
            open_opportunities=len(open_opps),
            active_clients=active_clients,
            potential_revenue=potential_revenue,
            recent_wins=recent_wins,
            conversion_rate=conversion_rate,
            avg_days_to_close=avg_days_to_close,
            opportunities_by_status={s.value: by_status.get(s.value, 0) for s in OpportunityStatus},
            recent_activity=await ActivityService(self.store).recent(settings.recent_activity_limit),
            upcoming_tasks=await TaskService(self.store).upcoming(UPCOMING_TASKS),
            recent_clients=recent_clients,
        )
        logger.debug(
            "Dashboard: %d open opportunities, %d active clients",
            overview.open_opportunities, overview.active_clients,
        )
        return overview
