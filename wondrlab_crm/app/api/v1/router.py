"""
Top-level router for version 1 of the API.

This router aggregates the domain routers (clients, services,
opportunities, the cross-sell matrix, etc.) under a unified prefix.
When a new domain is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import (
    activity,
    business_units,
    clients,
    dashboard,
    engagements,
    matrix,
    notes,
    opportunities,
    services,
    tasks,
)

router = APIRouter()

router.include_router(business_units.router, prefix="/business-units", tags=["business units"])
router.include_router(clients.router, prefix="/clients", tags=["clients"])
router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(engagements.router, prefix="/engagements", tags=["engagements"])
router.include_router(opportunities.router, prefix="/opportunities", tags=["opportunities"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(matrix.router, prefix="/matrix", tags=["matrix"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router.include_router(activity.router, prefix="/activity", tags=["activity"])
