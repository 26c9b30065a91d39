"""
Relationship classification for the cross-sell matrix.

For every (client, service) pair the matrix shows one of five
statuses.  The first rule that applies wins:

1. ``active``: an engagement exists for the pair, whatever its status.
2. ``closed``: an opportunity exists and is Won, Lost or Cancelled.
3. ``opportunity``: an opportunity exists with any other status.
4. ``potential``: neither exists and the client's primary business
   unit differs from the service's business unit.
5. ``empty``: otherwise.

When several engagements or opportunities exist for the same pair,
the first one in snapshot order is used.  Classification is pure: it
reads a snapshot of the store and never modifies it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from ..schemas.client import ClientRead
    from ..schemas.engagement import EngagementRead
    from ..schemas.opportunity import OpportunityRead
    from ..schemas.service import ServiceRead


class CellStatus(str, Enum):
    ACTIVE = "active"
    OPPORTUNITY = "opportunity"
    CLOSED = "closed"
    POTENTIAL = "potential"
    EMPTY = "empty"


Pair = Tuple[int, int]


@dataclass(frozen=True)
class EntitySnapshot:
    """The collections the classifier reads from."""

    clients: Sequence["ClientRead"] = ()
    services: Sequence["ServiceRead"] = ()
    engagements: Sequence["EngagementRead"] = ()
    opportunities: Sequence["OpportunityRead"] = ()


@dataclass
class RelationshipClassifier:
    """Classifies (client, service) pairs against one snapshot.

    Lookups are indexed once at construction so classifying a whole
    matrix costs one dictionary lookup per rule and cell.
    """

    snapshot: EntitySnapshot
    _clients: Dict[int, "ClientRead"] = field(init=False, repr=False)
    _services: Dict[int, "ServiceRead"] = field(init=False, repr=False)
    _engagements: Dict[Pair, "EngagementRead"] = field(init=False, repr=False)
    _opportunities: Dict[Pair, "OpportunityRead"] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._clients = {c.id: c for c in self.snapshot.clients}
        self._services = {s.id: s for s in self.snapshot.services}
        self._engagements = {}
        for engagement in self.snapshot.engagements:
            self._engagements.setdefault((engagement.client_id, engagement.service_id), engagement)
        self._opportunities = {}
        for opportunity in self.snapshot.opportunities:
            self._opportunities.setdefault((opportunity.client_id, opportunity.service_id), opportunity)

    def engagement_for(self, client_id: int, service_id: int) -> Optional["EngagementRead"]:
        return self._engagements.get((client_id, service_id))

    def opportunity_for(self, client_id: int, service_id: int) -> Optional["OpportunityRead"]:
        return self._opportunities.get((client_id, service_id))

    def classify(self, client_id: int, service_id: int) -> CellStatus:
        if self.engagement_for(client_id, service_id) is not None:
            return CellStatus.ACTIVE

        opportunity = self.opportunity_for(client_id, service_id)
        if opportunity is not None:
            if opportunity.status.is_closed:
                return CellStatus.CLOSED
            return CellStatus.OPPORTUNITY

        client = self._clients.get(client_id)
        service = self._services.get(service_id)
        if client is not None and service is not None and client.primary_bu != service.business_unit:
            return CellStatus.POTENTIAL

        return CellStatus.EMPTY


def classify(snapshot: EntitySnapshot, client_id: int, service_id: int) -> CellStatus:
    """Classify a single pair.  Use ``RelationshipClassifier`` for many."""
    return RelationshipClassifier(snapshot).classify(client_id, service_id)
