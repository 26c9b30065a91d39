"""
Activity service for recording and querying CRM actions.

This module provides a single place to write activity entries (create,
update, delete and status changes on clients, services, opportunities
and tasks) and to read them back newest first with filters and
pagination.  The dashboard's "Recent Activity" panel is built from
these entries.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.query import paginate
from ..repositories import Store
from ..schemas.activity import ActivityRead
from ..schemas.listing import Page

logger = logging.getLogger(__name__)


class ActivityService:
    """Service class for writing and retrieving activity entries."""

    def __init__(self, store: Store) -> None:
        self.store = store

    async def log(
        self,
        action: str,
        object_type: str,
        object_id: Optional[int] = None,
        summary: Optional[str] = None,
        actor: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Optional[ActivityRead]:
        """Insert a new activity entry.

        Parameters
        ----------
        action : str
            Short verb for what happened (e.g. "created", "status_changed").
        object_type : str
            Kind of record affected (e.g. "client", "opportunity", "task").
        object_id : Optional[int]
            Primary key of the affected record, if applicable.
        summary : Optional[str]
            Human readable line shown on the dashboard.
        actor : Optional[str]
            Name of the user responsible, when known.
        details : Optional[dict]
            Additional structured data about the action.

        Returns
        -------
        Optional[ActivityRead]
            The stored entry, or ``None`` if writing it failed.  A
            failure is logged but never interrupts the caller.
        """
        try:
            return self.store.activities.create(
                {
                    "action": action,
                    "object_type": object_type,
                    "object_id": object_id,
                    "summary": summary,
                    "actor": actor,
                    "details": details,
                    "timestamp": datetime.utcnow(),
                }
            )
        except Exception:
            logger.exception("Failed to record %s %s activity for id %s", object_type, action, object_id)
            return None

    def _newest_first(
        self,
        object_type: Optional[str] = None,
        action: Optional[str] = None,
    ) -> List[ActivityRead]:
        entries = [
            entry for entry in self.store.activities.list()
            if (not object_type or entry.object_type == object_type)
            and (not action or entry.action == action)
        ]
        # Ids grow with insertion, so they break timestamp ties.
        entries.sort(key=lambda entry: (entry.timestamp, entry.id), reverse=True)
        return entries

    async def list_activity(
        self,
        object_type: Optional[str] = None,
        action: Optional[str] = None,
        page: int = 0,
        page_size: int = 10,
    ) -> Page[ActivityRead]:
        """Return activity entries newest first, optionally filtered."""
        entries = self._newest_first(object_type, action)
        return Page[ActivityRead](
            items=paginate(entries, page, page_size),
            total=len(entries),
            page=page,
            page_size=page_size,
        )

    async def recent(self, limit: int) -> List[ActivityRead]:
        return self._newest_first()[:limit]
