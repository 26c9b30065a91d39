"""
Tests for the in-memory and SQLite repositories.

Both backends must behave the same, so most tests run against each.
"""

from datetime import date, datetime

import pytest

from wondrlab_crm.app.core.db import get_connection, init_db
from wondrlab_crm.app.repositories import EntityNotFound, Store
from wondrlab_crm.app.schemas.note import NoteParentType
from wondrlab_crm.app.schemas.opportunity import OpportunityStatus


@pytest.fixture(params=["memory", "sqlite"])
def backend(request, tmp_path):
    if request.param == "memory":
        return Store.memory()
    return Store.sqlite(str(tmp_path / "crm.db"))


class TestRepository:

    def test_create_assigns_increasing_ids(self, backend):
        first = backend.clients.create({"name": "TechCorp"})
        second = backend.clients.create({"name": "Fashion Forward"})
        assert second.id > first.id
        assert [c.name for c in backend.clients.list()] == ["TechCorp", "Fashion Forward"]

    def test_defaults_are_applied(self, backend):
        client = backend.clients.create({"name": "TechCorp"})
        assert client.is_active is True
        assert backend.clients.get(client.id).is_active is True

    def test_get_missing_raises(self, backend):
        with pytest.raises(EntityNotFound) as exc:
            backend.clients.get(42)
        assert exc.value.entity_id == 42
        assert "Client 42 not found" in str(exc.value)

    def test_update_merges_changes(self, backend):
        client = backend.clients.create({"name": "TechCorp", "region": "North"})
        updated = backend.clients.update(client.id, {"region": "South"})
        assert updated.name == "TechCorp"
        assert updated.region == "South"
        assert backend.clients.get(client.id).region == "South"

    def test_update_missing_raises(self, backend):
        with pytest.raises(EntityNotFound):
            backend.clients.update(7, {"name": "x"})

    def test_delete(self, backend):
        service = backend.services.create({"name": "SEO", "business_unit": "Digital Media"})
        backend.services.delete(service.id)
        assert backend.services.list() == []
        with pytest.raises(EntityNotFound):
            backend.services.delete(service.id)

    def test_exists(self, backend):
        service = backend.services.create({"name": "SEO", "business_unit": "Digital Media"})
        assert backend.services.exists(service.id)
        assert not backend.services.exists(service.id + 1)

    def test_enums_and_dates_round_trip(self, backend):
        client = backend.clients.create({"name": "TechCorp"})
        service = backend.services.create({"name": "SEO", "business_unit": "Digital Media"})
        opp = backend.opportunities.create({
            "client_id": client.id, "service_id": service.id, "status": "Proposal Sent",
            "created_date": date(2023, 5, 1), "estimated_value": 1200.5,
        })
        stored = backend.opportunities.get(opp.id)
        assert stored.status is OpportunityStatus.PROPOSAL_SENT
        assert stored.created_date == date(2023, 5, 1)
        assert stored.closed_date is None
        assert stored.estimated_value == 1200.5

    def test_activity_details_round_trip(self, backend):
        entry = backend.activities.create({
            "action": "updated", "object_type": "client", "object_id": 1,
            "details": {"region": "South", "since": date(2023, 1, 1)},
            "timestamp": datetime(2023, 6, 1, 12, 0),
        })
        stored = backend.activities.get(entry.id)
        assert stored.details["region"] == "South"
        assert str(stored.details["since"]) == "2023-01-01"

    def test_contacts_and_notes_round_trip(self, backend):
        client = backend.clients.create({"name": "TechCorp"})
        contact = backend.contacts.create({"client_id": client.id, "name": "Jane Doe", "is_primary": True})
        assert backend.contacts.get(contact.id).is_primary is True
        note = backend.notes.create({
            "parent_type": "Client", "parent_id": client.id,
            "content": "Met at the Cannes festival", "timestamp": datetime(2023, 6, 1, 9, 30),
        })
        stored = backend.notes.get(note.id)
        assert stored.parent_type is NoteParentType.CLIENT
        assert stored.timestamp == datetime(2023, 6, 1, 9, 30)
        assert stored.author is None


class TestSQLiteMigrations:

    def test_init_db_is_idempotent(self, tmp_path):
        path = str(tmp_path / "crm.db")
        init_db(path)
        init_db(path)
        conn = get_connection(path)
        try:
            versions = [row["version"] for row in conn.execute("SELECT version FROM migrations ORDER BY version")]
        finally:
            conn.close()
        assert versions == sorted(set(versions))
        assert len(versions) >= 1

    def test_tables_exist(self, tmp_path):
        path = str(tmp_path / "crm.db")
        init_db(path)
        conn = get_connection(path)
        try:
            tables = {
                row["name"]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            }
        finally:
            conn.close()
        assert {
            "business_units", "clients", "services", "engagements",
            "opportunities", "tasks", "activity_logs", "client_contacts", "notes",
        } <= tables

    def test_data_survives_a_new_store(self, tmp_path):
        path = str(tmp_path / "crm.db")
        Store.sqlite(path).clients.create({"name": "TechCorp"})
        assert [c.name for c in Store.sqlite(path).clients.list()] == ["TechCorp"]
