"""
Pydantic models for the cross-sell matrix.

The matrix has one row per client and one column per service.  Each
cell carries the relationship status of the pair and the ids of the
engagement or opportunity that produced it, so the UI can open the
right record when a cell is clicked.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from ..core.classifier import CellStatus
from .client import ClientRead
from .opportunity import OpportunityStatus
from .service import ServiceRead


class MatrixCell(BaseModel):
    client_id: int
    service_id: int
    status: CellStatus
    engagement_id: Optional[int] = None
    opportunity_id: Optional[int] = None
    opportunity_status: Optional[OpportunityStatus] = None


class MatrixRow(BaseModel):
    client: ClientRead
    cells: List[MatrixCell]


class MatrixRead(BaseModel):
    services: List[ServiceRead]
    rows: List[MatrixRow]
    totals: Dict[CellStatus, int]
