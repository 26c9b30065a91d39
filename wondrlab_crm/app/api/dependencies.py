"""
API dependencies.

Provides the storage bundle and the service objects injected into the
endpoint handlers.  Tests replace ``get_store`` through
``app.dependency_overrides`` to run against an in-memory store.
"""

import logging
from functools import lru_cache

from fastapi import Depends

from ..core.config import settings
from ..repositories import Store
from ..services.activity_service import ActivityService
from ..services.business_unit_service import BusinessUnitService
from ..services.catalog_service import CatalogService
from ..services.client_service import ClientService
from ..services.contact_service import ContactService
from ..services.dashboard_service import DashboardService
from ..services.engagement_service import EngagementService
from ..services.matrix_service import MatrixService
from ..services.note_service import NoteService
from ..services.opportunity_service import OpportunityService
from ..services.task_service import TaskService

logger = logging.getLogger(__name__)


@lru_cache
def get_store() -> Store:
    """Return the process-wide store selected by ``STORAGE_BACKEND``."""
    if settings.storage_backend == "memory":
        logger.warning("Using in-memory storage; data is lost on restart")
        return Store.memory()
    if settings.storage_backend != "sqlite":
        raise ValueError(f"Unknown STORAGE_BACKEND '{settings.storage_backend}'")
    return Store.sqlite(settings.database_url)


def get_business_unit_service(store: Store = Depends(get_store)) -> BusinessUnitService:
    return BusinessUnitService(store)


def get_client_service(store: Store = Depends(get_store)) -> ClientService:
    return ClientService(store)


def get_contact_service(store: Store = Depends(get_store)) -> ContactService:
    return ContactService(store)


def get_catalog_service(store: Store = Depends(get_store)) -> CatalogService:
    return CatalogService(store)


def get_engagement_service(store: Store = Depends(get_store)) -> EngagementService:
    return EngagementService(store)


def get_opportunity_service(store: Store = Depends(get_store)) -> OpportunityService:
    return OpportunityService(store)


def get_task_service(store: Store = Depends(get_store)) -> TaskService:
    return TaskService(store)


def get_note_service(store: Store = Depends(get_store)) -> NoteService:
    return NoteService(store)


def get_matrix_service(store: Store = Depends(get_store)) -> MatrixService:
    return MatrixService(store)


def get_dashboard_service(store: Store = Depends(get_store)) -> DashboardService:
    return DashboardService(store)


def get_activity_service(store: Store = Depends(get_store)) -> ActivityService:
    return ActivityService(store)
