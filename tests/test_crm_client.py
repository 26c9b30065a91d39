"""
Tests for the HTTP client against a stubbed ``requests`` session.
"""

import json

import pytest
import requests

from crm_client import CRMClient

BASE = "http://crm.test/api/v1"


class FakeResponse:

    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.content = json.dumps(payload).encode() if payload is not None else b""

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return self.response


def make_client(response=None, exc=None, **kwargs):
    session = FakeSession(response, exc)
    return CRMClient(BASE, session=session, **kwargs), session


class TestSuccess:

    def test_list_unwraps_page(self):
        page = {"items": [{"id": 1, "name": "TechCorp"}], "total": 1, "page": 0, "page_size": 10}
        client, session = make_client(FakeResponse(payload=page))
        items, error = client.list_clients(search="tech", industry=None, page=0)
        assert error is None
        assert items == [{"id": 1, "name": "TechCorp"}]
        call = session.calls[0]
        assert call["method"] == "GET"
        assert call["url"] == f"{BASE}/clients/"
        assert call["params"] == {"search": "tech", "page": 0}

    def test_status_update_sends_body(self):
        client, session = make_client(FakeResponse(payload={"id": 3, "status": "Won"}))
        data, error = client.update_opportunity_status(3, "Won")
        assert error is None
        assert data["status"] == "Won"
        assert session.calls[0]["method"] == "PATCH"
        assert session.calls[0]["url"] == f"{BASE}/opportunities/3/status"
        assert session.calls[0]["json"] == {"status": "Won"}

    def test_delete_with_empty_body(self):
        client, session = make_client(FakeResponse(status_code=204))
        ok, error = client.delete_task(5)
        assert ok is True
        assert error is None
        assert session.calls[0]["url"] == f"{BASE}/tasks/5"

    def test_api_key_header(self):
        client, session = make_client(FakeResponse(payload={}), api_key="secret")
        client.get_dashboard()
        assert session.calls[0]["headers"] == {"Authorization": "Bearer secret"}


class TestFailures:

    def test_list_returns_empty_on_http_error(self):
        client, _ = make_client(FakeResponse(status_code=500, payload={"detail": "boom"}))
        items, error = client.list_opportunities()
        assert items == []
        assert error == {"status_code": 500, "message": "boom"}

    def test_get_returns_none_on_not_found(self):
        client, _ = make_client(FakeResponse(status_code=404, payload={"detail": "Opportunity 9 not found"}))
        data, error = client.get_opportunity(9)
        assert data is None
        assert error["status_code"] == 404
        assert "not found" in error["message"]

    def test_delete_returns_false_on_error(self):
        client, _ = make_client(FakeResponse(status_code=404, text="missing"))
        ok, error = client.delete_opportunity(9)
        assert ok is False
        assert error == {"status_code": 404, "message": "missing"}

    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.list_services(),
            lambda c: c.create_task({"opportunity_id": 1, "description": "x"}),
            lambda c: c.get_matrix(business_unit="Content"),
        ],
    )
    def test_transport_errors_are_caught(self, call, caplog):
        client, _ = make_client(exc=requests.ConnectionError("refused"))
        data, error = call(client)
        assert not data
        assert error == {"status_code": None, "message": "refused"}
        assert "refused" in caplog.text
