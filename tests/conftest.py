"""
Shared fixtures: an in-memory store seeded with a small agency book
and a TestClient whose ``get_store`` dependency returns that store.

Seeded matrix (client x service):

                    Video(Content)  Social(DM)   Events(Exp)  SEO(DM)
    TechCorp        active          opportunity  potential    potential
    Fashion Forward potential       active       closed       empty
    Global Foods    opportunity     closed       empty        potential
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from wondrlab_crm.app.api.dependencies import get_store
from wondrlab_crm.app.main import app
from wondrlab_crm.app.repositories import Store


def seed(store: Store) -> Store:
    for name in ("Content", "Digital Media", "Experiential"):
        store.business_units.create({"name": name})

    store.clients.create({
        "name": "TechCorp", "industry": "Technology", "region": "North",
        "primary_bu": "Content", "primary_account_manager": "John Smith",
        "primary_contact": "Jane Doe",
    })
    store.clients.create({
        "name": "Fashion Forward", "industry": "Retail", "region": "West",
        "primary_bu": "Digital Media", "primary_account_manager": "Sarah Johnson",
        "primary_contact": "Mia Wong",
    })
    store.clients.create({
        "name": "Global Foods", "industry": "FMCG", "region": "South",
        "primary_bu": "Experiential", "primary_account_manager": "John Smith",
        "primary_contact": "Ravi Kumar",
    })

    store.services.create({
        "name": "Video Production", "business_unit": "Content", "category": "Production",
        "description": "Brand films", "active_clients": 5, "potential_clients": 2,
    })
    store.services.create({
        "name": "Social Media Management", "business_unit": "Digital Media",
        "category": "Marketing", "active_clients": 7, "potential_clients": 4,
    })
    store.services.create({
        "name": "Event Management", "business_unit": "Experiential", "category": "Events",
        "active_clients": 3, "potential_clients": 1,
    })
    store.services.create({
        "name": "SEO", "business_unit": "Digital Media", "category": "Marketing",
        "active_clients": 4, "potential_clients": 6, "is_active": False,
    })

    store.engagements.create({
        "client_id": 1, "service_id": 1, "start_date": date(2022, 8, 1), "status": "Active",
    })
    store.engagements.create({
        "client_id": 2, "service_id": 2, "start_date": date(2022, 9, 15),
        "end_date": date(2023, 3, 1), "status": "Ended",
    })

    store.contacts.create({
        "client_id": 1, "name": "Jane Doe", "email": "jane.doe@techcorp.com",
        "role_title": "Marketing Director", "is_primary": True,
    })
    store.contacts.create({
        "client_id": 1, "name": "Arjun Mehta", "role_title": "Brand Manager",
    })

    store.opportunities.create({
        "client_id": 1, "service_id": 2, "status": "In Discussion", "priority": "High",
        "assigned_to": "Sarah Johnson", "estimated_value": 25000,
        "created_date": date(2023, 5, 10), "expected_close_date": date(2023, 7, 30),
    })
    store.opportunities.create({
        "client_id": 2, "service_id": 3, "status": "Won", "priority": "Medium",
        "assigned_to": "John Smith", "estimated_value": 40000,
        "created_date": date(2023, 1, 10), "closed_date": date(2023, 3, 1),
    })
    store.opportunities.create({
        "client_id": 3, "service_id": 1, "status": "Proposal Sent", "priority": "Low",
        "assigned_to": "Priya Nair", "estimated_value": 15000,
        "created_date": date(2023, 4, 1),
    })
    store.opportunities.create({
        "client_id": 3, "service_id": 2, "status": "Lost", "priority": "Medium",
        "assigned_to": "Sarah Johnson", "estimated_value": 10000,
        "created_date": date(2023, 2, 1), "closed_date": date(2023, 2, 21),
    })

    store.tasks.create({
        "opportunity_id": 1, "description": "Follow up on Social Media proposal",
        "due_date": date(2023, 6, 20), "priority": "High", "assigned_to": "John Smith",
        "date_created": date(2023, 5, 11),
    })
    store.tasks.create({
        "opportunity_id": 3, "description": "Send revised proposal",
        "due_date": date(2023, 6, 10), "status": "In Progress", "assigned_to": "Priya Nair",
        "date_created": date(2023, 4, 2),
    })
    store.tasks.create({
        "opportunity_id": 1, "description": "Kick-off call",
        "due_date": date(2023, 5, 12), "status": "Completed", "assigned_to": "Sarah Johnson",
        "date_created": date(2023, 5, 10), "date_completed": date(2023, 5, 12),
    })
    return store


@pytest.fixture
def store() -> Store:
    return seed(Store.memory())


@pytest.fixture
def api(store):
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
