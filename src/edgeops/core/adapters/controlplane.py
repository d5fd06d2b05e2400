from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from edgeops.core.errors import MalformedResponse, RemoteRequestFailed
from edgeops.core.models import CreatedDatabase, Database, Instance

logger = logging.getLogger(__name__)


class ControlPlaneAdapter:
    """Adapter around the hosted-database control-plane HTTP API.

    Every call is attempted exactly once. Transport failures and non-2xx
    answers become ``RemoteRequestFailed``; undecodable bodies become
    ``MalformedResponse``.
    """

    USER_AGENT = "edge-ops"

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        """Create an adapter for ``base_url`` authenticating with ``token``."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = self.USER_AGENT
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        json_body: dict[str, Any] | None = None,
        expect_body: bool = True,
    ) -> Any:
        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method, url, json=json_body, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise RemoteRequestFailed(operation, detail=str(exc)) from exc

        if not 200 <= resp.status_code < 300:
            logger.debug("%s %s -> %s %s", method, url, resp.status_code, resp.text)
            raise RemoteRequestFailed(operation, status=resp.status_code)

        if not expect_body:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponse(f"{operation}: response is not valid JSON") from exc

    @staticmethod
    def _items(payload: Any, key: str, operation: str) -> list[Any]:
        items = payload.get(key) if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise MalformedResponse(f"{operation}: missing list field '{key}'")
        return items

    # regions

    def list_region_ids(self) -> list[str]:
        """Return the region codes a database can be placed in."""
        payload = self._request("GET", "/v2/regions", operation="list regions")
        ids = self._items(payload, "ids", "list regions")
        return [str(i) for i in ids]

    # databases

    def list_databases(self) -> list[Database]:
        """Return every database visible to the token."""
        payload = self._request("GET", "/v2/databases", operation="list databases")
        return [
            Database.from_payload(item)
            for item in self._items(payload, "databases", "list databases")
        ]

    def create_database(self, name: str, region: str, image: str) -> CreatedDatabase:
        """Create a primary database and return it with its credentials."""
        payload = self._request(
            "POST",
            "/v2/databases",
            operation=f"create database {name}",
            json_body={"name": name, "region": region, "image": image},
        )
        return CreatedDatabase.from_payload(payload)

    def delete_database(self, name: str) -> None:
        """Delete a database with all its regions and instances."""
        self._request(
            "DELETE",
            f"/v2/databases/{quote(name)}",
            operation=f"destroy database {name}",
            expect_body=False,
        )

    def create_database_replica(self, body: dict[str, Any]) -> dict[str, Any]:
        """Create a top-level replica database; returns the raw answer."""
        payload = self._request(
            "POST",
            "/v1/databases",
            operation=f"replicate database {body.get('name')}",
            json_body=body,
        )
        if not isinstance(payload, dict):
            raise MalformedResponse("replicate database: response must be an object")
        return payload

    # instances

    def list_instances(self, database_name: str) -> list[Instance]:
        """Return the instances of a logical database."""
        operation = f"list instances of database {database_name}"
        payload = self._request(
            "GET",
            f"/v2/databases/{quote(database_name)}/instances",
            operation=operation,
        )
        return [
            Instance.from_payload(item)
            for item in self._items(payload, "instances", operation)
        ]

    def create_instance(
        self, database_name: str, password: str, region: str, image: str
    ) -> None:
        """Create an instance of ``database_name`` in ``region``.

        Only the status matters; the instance record in the answer is not read.
        """
        self._request(
            "POST",
            f"/v2/databases/{quote(database_name)}/instances",
            operation=f"create instance of database {database_name}",
            json_body={"password": password, "region": region, "image": image},
            expect_body=False,
        )

    def create_instance_replica(
        self, database_name: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        """Create a replica instance under a logical database; returns the raw answer."""
        payload = self._request(
            "POST",
            f"/v2/databases/{quote(database_name)}/instances",
            operation=f"replicate database {database_name}",
            json_body=body,
        )
        if not isinstance(payload, dict):
            raise MalformedResponse("replicate instance: response must be an object")
        return payload

    def delete_instance(self, database_name: str, instance_name: str) -> None:
        """Delete a single instance of a logical database."""
        self._request(
            "DELETE",
            f"/v2/databases/{quote(database_name)}/instances/{quote(instance_name)}",
            operation=f"destroy instance {instance_name} of database {database_name}",
            expect_body=False,
        )
