"""Wondrlab CRM API client.

This module defines a small client wrapper around the CRM REST API.
It is meant for scripts and front ends that talk to a running server
and uses the ``requests`` library for the HTTP calls.

Every method returns a tuple ``(data, error)`` and never raises on
transport or API failures:

* list methods return ``([], error)`` on failure,
* single-object methods return ``(None, error)``,
* delete methods return ``(False, error)``.

``error`` is ``None`` on success and otherwise a dictionary with the
keys ``status_code`` and ``message``.  All failures are logged.

The client exposes high-level methods for the operations the CRM
front end needs:

* :meth:`list_clients`, :meth:`list_services`, :meth:`list_tasks`
* :meth:`list_opportunities`, :meth:`get_opportunity`,
  :meth:`create_opportunity`, :meth:`update_opportunity`,
  :meth:`patch_opportunity`, :meth:`update_opportunity_status`,
  :meth:`delete_opportunity`
* :meth:`create_task`, :meth:`update_task`, :meth:`delete_task`
* :meth:`get_matrix`, :meth:`get_dashboard`

An optional API key is sent as a bearer token in the ``Authorization``
header for deployments that sit behind an authenticating proxy.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Optional[Dict[str, Any]]

DEFAULT_BASE_URL = os.getenv("CRM_API_URL", "http://localhost:8000/api/v1")


class CRMClient:
    """Client for the Wondrlab CRM API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL including the version prefix, e.g.
                ``http://localhost:8000/api/v1``.  Defaults to the
                ``CRM_API_URL`` environment variable.
            api_key: Optional API key sent as ``Bearer <api_key>``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level request helper
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Error]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``, etc.).
            path: Path relative to :attr:`base_url` (e.g. ``/clients/``).
            params: Query parameters; ``None`` values are dropped.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.  ``data`` is the parsed JSON body
            (``None`` for empty responses such as 204).
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = str(err_json.get("detail") or err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request %s %s failed (%s): %s", method, path, status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request %s %s failed: %s", method, path, exc)
            return None, {"status_code": None, "message": str(exc)}

    def _list(self, path: str, params: Dict[str, Any]) -> Tuple[List[Dict[str, Any]], Error]:
        data, error = self._request("GET", path, params=params)
        if error:
            return [], error
        # List endpoints wrap their rows in a page object.
        if isinstance(data, dict) and isinstance(data.get("items"), list):
            return data["items"], None
        if isinstance(data, list):
            return data, None
        return [], None

    def _one(self, method: str, path: str, json_body: Any | None = None) -> Tuple[Optional[Dict[str, Any]], Error]:
        data, error = self._request(method, path, json_body=json_body)
        if error:
            return None, error
        return data, None

    def _delete(self, path: str) -> Tuple[bool, Error]:
        _, error = self._request("DELETE", path)
        if error:
            return False, error
        return True, None

    # ------------------------------------------------------------------
    # Clients and services
    # ------------------------------------------------------------------
    def list_clients(self, **params: Any) -> Tuple[List[Dict[str, Any]], Error]:
        """List clients.

        Keyword arguments are passed as query parameters, e.g.
        ``search="tech"``, ``industry="Retail"``, ``sort_by="name"``,
        ``page=0``, ``page_size=10``.
        """
        return self._list("/clients/", params)

    def list_services(self, **params: Any) -> Tuple[List[Dict[str, Any]], Error]:
        return self._list("/services/", params)

    # ------------------------------------------------------------------
    # Opportunities
    # ------------------------------------------------------------------
    def list_opportunities(self, **params: Any) -> Tuple[List[Dict[str, Any]], Error]:
        return self._list("/opportunities/", params)

    def get_opportunity(self, opportunity_id: Any) -> Tuple[Optional[Dict[str, Any]], Error]:
        return self._one("GET", f"/opportunities/{opportunity_id}")

    def create_opportunity(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Error]:
        """Create an opportunity.

        Args:
            payload: At least ``client_id`` and ``service_id``; optional
                ``status``, ``priority``, ``assigned_to``,
                ``estimated_value``, ``expected_close_date``, ``notes``.
        """
        return self._one("POST", "/opportunities/", payload)

    def update_opportunity(self, opportunity_id: Any, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Error]:
        return self._one("PUT", f"/opportunities/{opportunity_id}", payload)

    def patch_opportunity(self, opportunity_id: Any, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Error]:
        return self._one("PATCH", f"/opportunities/{opportunity_id}", payload)

    def update_opportunity_status(self, opportunity_id: Any, status: str) -> Tuple[Optional[Dict[str, Any]], Error]:
        return self._one("PATCH", f"/opportunities/{opportunity_id}/status", {"status": status})

    def delete_opportunity(self, opportunity_id: Any) -> Tuple[bool, Error]:
        return self._delete(f"/opportunities/{opportunity_id}")

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------
    def list_tasks(self, **params: Any) -> Tuple[List[Dict[str, Any]], Error]:
        return self._list("/tasks/", params)

    def create_task(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Error]:
        return self._one("POST", "/tasks/", payload)

    def update_task(self, task_id: Any, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Error]:
        return self._one("PUT", f"/tasks/{task_id}", payload)

    def delete_task(self, task_id: Any) -> Tuple[bool, Error]:
        return self._delete(f"/tasks/{task_id}")

    # ------------------------------------------------------------------
    # Matrix and dashboard
    # ------------------------------------------------------------------
    def get_matrix(self, **params: Any) -> Tuple[Optional[Dict[str, Any]], Error]:
        data, error = self._request("GET", "/matrix/", params=params)
        if error:
            return None, error
        return data, None

    def get_dashboard(self) -> Tuple[Optional[Dict[str, Any]], Error]:
        return self._one("GET", "/dashboard/")
