"""
Pydantic models for the dashboard overview.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from .activity import ActivityRead
from .task import TaskRead


class ClientSummary(BaseModel):
    id: int
    name: str
    industry: Optional[str] = None
    active_services: int
    potential_services: int


class DashboardOverview(BaseModel):
    open_opportunities: int
    active_clients: int
    potential_revenue: float
    recent_wins: int
    # Percentage of decided opportunities (won + lost) that were won.
    conversion_rate: float
    avg_days_to_close: Optional[float] = None
    opportunities_by_status: Dict[str, int]
    recent_activity: List[ActivityRead]
    upcoming_tasks: List[TaskRead]
    recent_clients: List[ClientSummary]
