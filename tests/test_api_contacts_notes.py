"""
API tests for client contacts and notes.
"""

API = "/api/v1"


def names(contacts):
    return [c["name"] for c in contacts]


class TestContacts:

    def test_primary_contact_listed_first(self, api):
        res = api.get(f"{API}/clients/1/contacts")
        assert res.status_code == 200
        assert names(res.json()) == ["Jane Doe", "Arjun Mehta"]
        assert res.json()[0]["is_primary"] is True
        assert api.get(f"{API}/clients/2/contacts").json() == []

    def test_new_primary_replaces_old_one(self, api):
        res = api.post(
            f"{API}/clients/1/contacts",
            json={"name": "Zoe Park", "email": "zoe@techcorp.com", "is_primary": True},
        )
        assert res.status_code == 201
        assert res.json()["client_id"] == 1
        contacts = api.get(f"{API}/clients/1/contacts").json()
        assert names(contacts) == ["Zoe Park", "Arjun Mehta", "Jane Doe"]
        assert [c["is_primary"] for c in contacts] == [True, False, False]

    def test_update_to_primary(self, api):
        res = api.put(f"{API}/clients/1/contacts/2", json={"is_primary": True, "phone": "555-0101"})
        assert res.status_code == 200
        assert res.json()["phone"] == "555-0101"
        assert res.json()["role_title"] == "Brand Manager"
        contacts = api.get(f"{API}/clients/1/contacts").json()
        assert [(c["name"], c["is_primary"]) for c in contacts] == [
            ("Arjun Mehta", True), ("Jane Doe", False),
        ]

    def test_contact_must_belong_to_client(self, api):
        assert api.put(f"{API}/clients/2/contacts/1", json={"phone": "1"}).status_code == 404
        assert api.delete(f"{API}/clients/2/contacts/1").status_code == 404

    def test_unknown_client(self, api):
        assert api.get(f"{API}/clients/99/contacts").status_code == 404
        assert api.post(f"{API}/clients/99/contacts", json={"name": "Nobody"}).status_code == 404

    def test_name_required(self, api):
        assert api.post(f"{API}/clients/1/contacts", json={"name": ""}).status_code == 422

    def test_delete(self, api):
        assert api.delete(f"{API}/clients/1/contacts/2").status_code == 204
        assert names(api.get(f"{API}/clients/1/contacts").json()) == ["Jane Doe"]
        assert api.delete(f"{API}/clients/1/contacts/2").status_code == 404

    def test_changes_are_logged(self, api):
        api.post(f"{API}/clients/2/contacts", json={"name": "Mia Wong"})
        entries = api.get(f"{API}/activity/", params={"object_type": "contact"}).json()
        assert entries["total"] == 1
        assert entries["items"][0]["summary"] == "Contact Mia Wong added to Fashion Forward"


class TestNotes:

    def test_opportunity_notes_newest_first(self, api):
        first = api.post(
            f"{API}/opportunities/1/notes",
            json={"content": "Asked for case studies", "author": "Sarah Johnson"},
        )
        assert first.status_code == 201
        body = first.json()
        assert body["parent_type"] == "Opportunity"
        assert body["parent_id"] == 1
        assert body["author"] == "Sarah Johnson"
        assert body["timestamp"]

        second = api.post(f"{API}/opportunities/1/notes", json={"content": "Budget confirmed"})
        notes = api.get(f"{API}/opportunities/1/notes").json()
        assert [n["id"] for n in notes] == [second.json()["id"], body["id"]]

    def test_client_and_opportunity_notes_are_separate(self, api):
        api.post(f"{API}/clients/1/notes", json={"content": "Prefers quarterly reviews"})
        assert api.get(f"{API}/opportunities/1/notes").json() == []
        notes = api.get(f"{API}/clients/1/notes").json()
        assert [n["content"] for n in notes] == ["Prefers quarterly reviews"]
        assert notes[0]["parent_type"] == "Client"

    def test_unknown_parent(self, api):
        assert api.get(f"{API}/opportunities/99/notes").status_code == 404
        assert api.post(f"{API}/clients/99/notes", json={"content": "x"}).status_code == 404

    def test_content_required(self, api):
        assert api.post(f"{API}/clients/1/notes", json={"content": ""}).status_code == 422

    def test_note_is_logged_against_parent(self, api):
        api.post(f"{API}/clients/3/notes", json={"content": "Renewal talks in Q3", "author": "John Smith"})
        entry = api.get(f"{API}/activity/", params={"action": "note_added"}).json()["items"][0]
        assert entry["object_type"] == "client"
        assert entry["object_id"] == 3
        assert entry["actor"] == "John Smith"

    def test_delete(self, api):
        note_id = api.post(f"{API}/clients/1/notes", json={"content": "Temp"}).json()["id"]
        assert api.delete(f"{API}/notes/{note_id}").status_code == 204
        assert api.get(f"{API}/clients/1/notes").json() == []
        assert api.delete(f"{API}/notes/{note_id}").status_code == 404

    def test_deleting_opportunity_removes_its_notes(self, api, store):
        api.post(f"{API}/opportunities/1/notes", json={"content": "Follow up next week"})
        api.post(f"{API}/clients/1/notes", json={"content": "Key account"})
        assert api.delete(f"{API}/opportunities/1").status_code == 204
        assert [n.content for n in store.notes.list()] == ["Key account"]
