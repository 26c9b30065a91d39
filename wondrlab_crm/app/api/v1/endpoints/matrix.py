"""
Cross-sell matrix endpoints for API v1.

``GET /matrix`` returns the whole classified grid for the matrix page;
``GET /matrix/cell`` classifies a single client/service pair, which
the client detail and opportunity forms use to show the current
relationship.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....repositories import EntityNotFound
from ....schemas.matrix import MatrixCell, MatrixRead
from ....services.matrix_service import MatrixService
from ...dependencies import get_matrix_service


router = APIRouter()


@router.get("/", response_model=MatrixRead)
async def get_matrix(
    search: Optional[str] = Query(None, description="Client search term"),
    industry: Optional[str] = Query(None),
    region: Optional[str] = Query(None),
    primary_bu: Optional[str] = Query(None, description="Client primary business unit"),
    business_unit: Optional[str] = Query(None, description="Only show services of this business unit"),
    service: MatrixService = Depends(get_matrix_service),
) -> MatrixRead:
    """Return the client x service matrix.

    Every cell is one of ``active``, ``closed``, ``opportunity``,
    ``potential`` or ``empty``.  ``totals`` counts the cells of each
    status among the returned rows and columns.
    """
    return await service.build_matrix(
        search=search,
        industry=industry,
        region=region,
        primary_bu=primary_bu,
        business_unit=business_unit,
    )


@router.get("/cell", response_model=MatrixCell)
async def get_matrix_cell(
    client_id: int = Query(...),
    service_id: int = Query(...),
    service: MatrixService = Depends(get_matrix_service),
) -> MatrixCell:
    try:
        return await service.get_cell(client_id, service_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
