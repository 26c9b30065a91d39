"""
Dashboard endpoint for API v1.
"""

from fastapi import APIRouter, Depends

from ....schemas.dashboard import DashboardOverview
from ....services.dashboard_service import DashboardService
from ...dependencies import get_dashboard_service


router = APIRouter()


@router.get("/", response_model=DashboardOverview)
async def get_dashboard(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardOverview:
    """Headline metrics, recent activity, upcoming tasks and the most
    recently added clients."""
    return await service.overview()
