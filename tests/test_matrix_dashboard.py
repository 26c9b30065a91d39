"""
Tests for the cross-sell matrix, the dashboard and the activity feed.
"""

import asyncio
from datetime import date

from wondrlab_crm.app.repositories import Store
from wondrlab_crm.app.services.dashboard_service import DashboardService

API = "/api/v1"


def grid(matrix):
    """Map (client_id, service_id) -> status."""
    return {
        (cell["client_id"], cell["service_id"]): cell["status"]
        for row in matrix["rows"]
        for cell in row["cells"]
    }


class TestMatrix:

    def test_full_matrix(self, api):
        res = api.get(f"{API}/matrix/")
        assert res.status_code == 200
        matrix = res.json()
        assert [s["id"] for s in matrix["services"]] == [3, 4, 2, 1]
        assert [r["client"]["id"] for r in matrix["rows"]] == [2, 3, 1]
        assert grid(matrix) == {
            (1, 1): "active", (1, 2): "opportunity", (1, 3): "potential", (1, 4): "potential",
            (2, 1): "potential", (2, 2): "active", (2, 3): "closed", (2, 4): "empty",
            (3, 1): "opportunity", (3, 2): "closed", (3, 3): "empty", (3, 4): "potential",
        }
        assert matrix["totals"] == {
            "active": 2, "opportunity": 2, "closed": 2, "potential": 4, "empty": 2,
        }

    def test_service_business_unit_filter(self, api):
        matrix = api.get(f"{API}/matrix/", params={"business_unit": "Digital Media"}).json()
        assert [s["id"] for s in matrix["services"]] == [4, 2]
        assert matrix["totals"] == {
            "active": 1, "opportunity": 1, "closed": 1, "potential": 2, "empty": 1,
        }

    def test_client_filters(self, api):
        matrix = api.get(f"{API}/matrix/", params={"primary_bu": "Content"}).json()
        assert [r["client"]["name"] for r in matrix["rows"]] == ["TechCorp"]
        matrix = api.get(f"{API}/matrix/", params={"search": "foods"}).json()
        assert [r["client"]["name"] for r in matrix["rows"]] == ["Global Foods"]

    def test_cell_carries_driving_records(self, api):
        cell = api.get(f"{API}/matrix/cell", params={"client_id": 2, "service_id": 3}).json()
        assert cell == {
            "client_id": 2,
            "service_id": 3,
            "status": "closed",
            "engagement_id": None,
            "opportunity_id": 2,
            "opportunity_status": "Won",
        }

    def test_cell_errors(self, api):
        assert api.get(f"{API}/matrix/cell", params={"client_id": 99, "service_id": 1}).status_code == 404
        assert api.get(f"{API}/matrix/cell", params={"client_id": 1}).status_code == 422


class TestDashboard:

    def test_overview_metrics(self, store):
        overview = asyncio.run(DashboardService(store).overview(today=date(2023, 3, 15)))
        assert overview.open_opportunities == 2
        assert overview.active_clients == 2
        assert overview.potential_revenue == 40000.0
        assert overview.recent_wins == 1
        assert overview.conversion_rate == 50.0
        assert overview.avg_days_to_close == 50.0
        assert overview.opportunities_by_status["Won"] == 1
        assert overview.opportunities_by_status["On Hold"] == 0
        assert [t.id for t in overview.upcoming_tasks] == [2, 1]

    def test_recent_wins_window(self, store):
        overview = asyncio.run(DashboardService(store).overview(today=date(2023, 6, 1)))
        assert overview.recent_wins == 0

    def test_client_summaries(self, store):
        overview = asyncio.run(DashboardService(store).overview(today=date(2023, 3, 15)))
        summaries = {c.id: (c.active_services, c.potential_services) for c in overview.recent_clients}
        assert [c.id for c in overview.recent_clients] == [3, 2, 1]
        assert summaries == {1: (1, 2), 2: (1, 1), 3: (0, 1)}

    def test_empty_store(self):
        overview = asyncio.run(DashboardService(Store.memory()).overview())
        assert overview.open_opportunities == 0
        assert overview.conversion_rate == 0.0
        assert overview.avg_days_to_close is None
        assert overview.recent_clients == []

    def test_endpoint(self, api):
        api.post(f"{API}/tasks/2/complete")
        res = api.get(f"{API}/dashboard/")
        assert res.status_code == 200
        body = res.json()
        assert body["open_opportunities"] == 2
        assert body["potential_revenue"] == 40000.0
        assert [t["id"] for t in body["upcoming_tasks"]] == [1]
        assert body["recent_activity"][0]["action"] == "completed"


class TestActivity:

    def test_newest_first_and_paginated(self, api):
        api.post(f"{API}/clients/", json={"name": "Acme Motors"})
        api.put(f"{API}/clients/1", json={"region": "East"})
        api.patch(f"{API}/opportunities/1/status", json={"status": "Won"})

        first = api.get(f"{API}/activity/", params={"page_size": 2}).json()
        assert first["total"] == 3
        assert [e["action"] for e in first["items"]] == ["status_changed", "updated"]
        second = api.get(f"{API}/activity/", params={"page": 1, "page_size": 2}).json()
        assert [e["action"] for e in second["items"]] == ["created"]

    def test_filters(self, api):
        api.post(f"{API}/clients/", json={"name": "Acme Motors"})
        api.post(f"{API}/tasks/", json={"opportunity_id": 1, "description": "Call back"})
        body = api.get(f"{API}/activity/", params={"object_type": "task"}).json()
        assert body["total"] == 1
        assert body["items"][0]["summary"] == "Call back"
