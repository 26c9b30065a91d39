"""
API tests for opportunities and their tasks.
"""

from datetime import date

API = "/api/v1"


def ids(payload):
    return [item["id"] for item in payload["items"]]


class TestListOpportunities:

    def test_default_order_is_newest_first(self, api):
        body = api.get(f"{API}/opportunities/").json()
        assert ids(body) == [1, 3, 4, 2]
        first = body["items"][0]
        assert first["client_name"] == "TechCorp"
        assert first["service_name"] == "Social Media Management"
        assert first["business_unit"] == "Digital Media"

    def test_search_on_enriched_names(self, api):
        assert ids(api.get(f"{API}/opportunities/", params={"search": "global"}).json()) == [3, 4]
        assert ids(api.get(f"{API}/opportunities/", params={"search": "proposal"}).json()) == [3]

    def test_filters(self, api):
        assert ids(api.get(f"{API}/opportunities/", params={"status": "Won"}).json()) == [2]
        assert ids(api.get(f"{API}/opportunities/", params={"business_unit": "Digital Media"}).json()) == [1, 4]
        res = api.get(f"{API}/opportunities/", params={"assigned_to": "Sarah Johnson", "priority": "High"})
        assert ids(res.json()) == [1]
        assert ids(api.get(f"{API}/opportunities/", params={"client_id": 3}).json()) == [3, 4]

    def test_status_alias(self, api):
        assert ids(api.get(f"{API}/opportunities/", params={"status": "In Progress"}).json()) == [1]

    def test_unknown_status_rejected(self, api):
        assert api.get(f"{API}/opportunities/", params={"status": "Maybe"}).status_code == 422

    def test_sort_by_client_name(self, api):
        res = api.get(f"{API}/opportunities/", params={"sort_by": "client_name", "order": "asc"})
        assert ids(res.json()) == [2, 3, 4, 1]

    def test_sort_by_value(self, api):
        res = api.get(f"{API}/opportunities/", params={"sort_by": "estimated_value", "order": "desc"})
        assert ids(res.json()) == [2, 1, 3, 4]

    def test_sort_by_priority_follows_urgency(self, api):
        res = api.get(f"{API}/opportunities/", params={"sort_by": "priority", "order": "desc"})
        assert ids(res.json()) == [1, 2, 4, 3]
        res = api.get(f"{API}/opportunities/", params={"sort_by": "priority", "order": "asc"})
        assert ids(res.json()) == [3, 2, 4, 1]

    def test_by_client(self, api):
        res = api.get(f"{API}/opportunities/client/3")
        assert res.status_code == 200
        assert [o["id"] for o in res.json()] == [3, 4]
        assert res.json()[0]["service_name"] == "Video Production"
        assert api.get(f"{API}/opportunities/client/99").status_code == 404


class TestCreateOpportunity:

    def test_create_defaults(self, api):
        res = api.post(f"{API}/opportunities/", json={"client_id": 1, "service_id": 3, "estimated_value": 5000})
        assert res.status_code == 201
        body = res.json()
        assert body["status"] == "Identified"
        assert body["priority"] == "Medium"
        assert body["created_date"] == date.today().isoformat()
        assert body["closed_date"] is None
        assert body["business_unit"] == "Experiential"
        cell = api.get(f"{API}/matrix/cell", params={"client_id": 1, "service_id": 3}).json()
        assert cell["status"] == "opportunity"

    def test_create_with_unknown_references(self, api):
        assert api.post(f"{API}/opportunities/", json={"client_id": 99, "service_id": 1}).status_code == 400
        assert api.post(f"{API}/opportunities/", json={"client_id": 1, "service_id": 99}).status_code == 400

    def test_negative_value_rejected(self, api):
        res = api.post(f"{API}/opportunities/", json={"client_id": 1, "service_id": 3, "estimated_value": -1})
        assert res.status_code == 422

    def test_create_closed_stamps_closed_date(self, api):
        res = api.post(f"{API}/opportunities/", json={"client_id": 1, "service_id": 4, "status": "Lost"})
        assert res.json()["closed_date"] == date.today().isoformat()


class TestStatusWorkflow:

    def test_close_and_reopen(self, api):
        won = api.patch(f"{API}/opportunities/1/status", json={"status": "Won"})
        assert won.status_code == 200
        assert won.json()["status"] == "Won"
        assert won.json()["closed_date"] == date.today().isoformat()

        cell = api.get(f"{API}/matrix/cell", params={"client_id": 1, "service_id": 2}).json()
        assert cell["status"] == "closed"

        reopened = api.patch(f"{API}/opportunities/1/status", json={"status": "On Hold"})
        assert reopened.json()["closed_date"] is None

    def test_moving_between_closed_statuses_keeps_date(self, api):
        res = api.patch(f"{API}/opportunities/2/status", json={"status": "Cancelled"})
        assert res.json()["closed_date"] == "2023-03-01"

    def test_status_change_is_logged(self, api):
        api.patch(f"{API}/opportunities/3/status", json={"status": "Won"})
        entries = api.get(f"{API}/activity/", params={"action": "status_changed"}).json()["items"]
        assert len(entries) == 1
        assert entries[0]["object_id"] == 3
        assert entries[0]["details"] == {"old_status": "Proposal Sent", "new_status": "Won"}

    def test_same_status_is_noop(self, api):
        api.patch(f"{API}/opportunities/3/status", json={"status": "Proposal Sent"})
        assert api.get(f"{API}/activity/").json()["total"] == 0

    def test_unknown_opportunity(self, api):
        assert api.patch(f"{API}/opportunities/99/status", json={"status": "Won"}).status_code == 404

    def test_invalid_status(self, api):
        assert api.patch(f"{API}/opportunities/1/status", json={"status": "Done"}).status_code == 422


class TestUpdateOpportunity:

    def test_put_keeps_unspecified_fields(self, api):
        res = api.put(f"{API}/opportunities/1", json={"priority": "Low", "assigned_to": None})
        body = res.json()
        assert body["priority"] == "Low"
        assert body["assigned_to"] == "Sarah Johnson"

    def test_patch_clears_null_fields(self, api):
        res = api.patch(f"{API}/opportunities/1", json={"assigned_to": None})
        assert res.status_code == 200
        assert res.json()["assigned_to"] is None

    def test_put_status_goes_through_workflow(self, api):
        res = api.put(f"{API}/opportunities/3", json={"status": "Lost"})
        assert res.json()["closed_date"] == date.today().isoformat()
        entries = api.get(f"{API}/activity/", params={"action": "status_changed"}).json()
        assert entries["total"] == 1

    def test_move_to_unknown_service(self, api):
        assert api.put(f"{API}/opportunities/1", json={"service_id": 99}).status_code == 400

    def test_missing(self, api):
        assert api.get(f"{API}/opportunities/99").status_code == 404
        assert api.put(f"{API}/opportunities/99", json={"priority": "Low"}).status_code == 404


class TestDeleteOpportunity:

    def test_delete_cascades_tasks(self, api):
        assert api.delete(f"{API}/opportunities/1").status_code == 204
        assert api.get(f"{API}/opportunities/1").status_code == 404
        assert api.get(f"{API}/tasks/1").status_code == 404
        assert api.get(f"{API}/tasks/3").status_code == 404
        assert ids(api.get(f"{API}/tasks/").json()) == [2]

    def test_delete_missing(self, api):
        assert api.delete(f"{API}/opportunities/99").status_code == 404


class TestOpportunityTasks:

    def test_tasks_by_due_date(self, api):
        res = api.get(f"{API}/opportunities/1/tasks")
        assert res.status_code == 200
        assert [t["id"] for t in res.json()] == [3, 1]

    def test_unknown_opportunity(self, api):
        assert api.get(f"{API}/opportunities/99/tasks").status_code == 404


class TestTasks:

    def test_list(self, api):
        assert ids(api.get(f"{API}/tasks/").json()) == [3, 2, 1]
        assert ids(api.get(f"{API}/tasks/", params={"status": "Pending"}).json()) == [1]
        assert ids(api.get(f"{API}/tasks/", params={"opportunity_id": 1}).json()) == [3, 1]
        assert ids(api.get(f"{API}/tasks/", params={"search": "proposal"}).json()) == [2, 1]

    def test_create(self, api):
        res = api.post(
            f"{API}/tasks/",
            json={"opportunity_id": 2, "description": "Send thank-you note", "due_date": "2023-07-01"},
        )
        assert res.status_code == 201
        body = res.json()
        assert body["status"] == "Pending"
        assert body["date_created"] == date.today().isoformat()
        assert body["date_completed"] is None

    def test_create_for_unknown_opportunity(self, api):
        res = api.post(f"{API}/tasks/", json={"opportunity_id": 99, "description": "x"})
        assert res.status_code == 400

    def test_complete(self, api):
        res = api.post(f"{API}/tasks/1/complete")
        assert res.status_code == 200
        assert res.json()["status"] == "Completed"
        assert res.json()["date_completed"] == date.today().isoformat()

    def test_complete_twice_keeps_date(self, api):
        res = api.post(f"{API}/tasks/3/complete")
        assert res.json()["date_completed"] == "2023-05-12"

    def test_complete_missing(self, api):
        assert api.post(f"{API}/tasks/99/complete").status_code == 404

    def test_reopen_clears_completion(self, api):
        res = api.patch(f"{API}/tasks/3", json={"status": "Pending"})
        assert res.json()["status"] == "Pending"
        assert res.json()["date_completed"] is None

    def test_update_and_delete(self, api):
        res = api.put(f"{API}/tasks/2", json={"assigned_to": "John Smith"})
        assert res.json()["assigned_to"] == "John Smith"
        assert res.json()["status"] == "In Progress"
        assert api.delete(f"{API}/tasks/2").status_code == 204
        assert api.get(f"{API}/tasks/2").status_code == 404
