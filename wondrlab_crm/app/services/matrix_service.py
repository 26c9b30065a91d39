"""
Cross-sell matrix service.

Builds the client x service grid shown on the matrix page.  Rows are
the clients that pass the client search and filters, columns are the
services of the selected business unit (or all services), and every
cell is classified by ``RelationshipClassifier`` against one snapshot
of the store.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from ..core.classifier import CellStatus, EntitySnapshot, RelationshipClassifier
from ..core.query import filter_records, sort_records
from ..repositories import Store
from ..schemas.client import CLIENT_SEARCH_FIELDS, ClientFilter, ClientFilterField
from ..schemas.listing import SortOrder
from ..schemas.matrix import MatrixCell, MatrixRead, MatrixRow
from ..schemas.service import ServiceFilter, ServiceFilterField

logger = logging.getLogger(__name__)


class MatrixService:

    def __init__(self, store: Store) -> None:
        self.store = store

    def _snapshot(self) -> EntitySnapshot:
        return EntitySnapshot(
            clients=self.store.clients.list(),
            services=self.store.services.list(),
            engagements=self.store.engagements.list(),
            opportunities=self.store.opportunities.list(),
        )

    @staticmethod
    def _cell(classifier: RelationshipClassifier, client_id: int, service_id: int) -> MatrixCell:
        engagement = classifier.engagement_for(client_id, service_id)
        opportunity = classifier.opportunity_for(client_id, service_id)
        return MatrixCell(
            client_id=client_id,
            service_id=service_id,
            status=classifier.classify(client_id, service_id),
            engagement_id=engagement.id if engagement else None,
            opportunity_id=opportunity.id if opportunity else None,
            opportunity_status=opportunity.status if opportunity else None,
        )

    async def build_matrix(
        self,
        search: Optional[str] = None,
        industry: Optional[str] = None,
        region: Optional[str] = None,
        primary_bu: Optional[str] = None,
        business_unit: Optional[str] = None,
    ) -> MatrixRead:
        """Return the classified matrix.

        Parameters
        ----------
        search : Optional[str]
            Client search term (name, industry, region, primary BU,
            primary contact).
        industry, region, primary_bu : Optional[str]
            Exact-match client filters.
        business_unit : Optional[str]
            Restrict the columns to services of this business unit.

        Returns
        -------
        MatrixRead
            Services (columns, sorted by name), rows (clients sorted by
            name) and the number of cells in each status.
        """
        snapshot = self._snapshot()
        classifier = RelationshipClassifier(snapshot)

        client_filters = [
            ClientFilter(field=ClientFilterField.INDUSTRY, value=industry),
            ClientFilter(field=ClientFilterField.REGION, value=region),
            ClientFilter(field=ClientFilterField.PRIMARY_BU, value=primary_bu),
        ]
        clients = sort_records(
            filter_records(snapshot.clients, search, client_filters, CLIENT_SEARCH_FIELDS),
            "name",
            SortOrder.ASC,
        )
        services = sort_records(
            filter_records(
                snapshot.services,
                None,
                [ServiceFilter(field=ServiceFilterField.BUSINESS_UNIT, value=business_unit)],
                (),
            ),
            "name",
            SortOrder.ASC,
        )

        totals: Dict[CellStatus, int] = {status: 0 for status in CellStatus}
        rows = []
        for client in clients:
            cells = [self._cell(classifier, client.id, service.id) for service in services]
            for cell in cells:
                totals[cell.status] += 1
            rows.append(MatrixRow(client=client, cells=cells))

        logger.debug("Built matrix with %d rows x %d services", len(rows), len(services))
        return MatrixRead(services=services, rows=rows, totals=totals)

    async def get_cell(self, client_id: int, service_id: int) -> MatrixCell:
        """Classify a single pair.

        Both ids must exist; ``EntityNotFound`` is raised otherwise.
        """
        self.store.clients.get(client_id)
        self.store.services.get(service_id)
        return self._cell(RelationshipClassifier(self._snapshot()), client_id, service_id)
