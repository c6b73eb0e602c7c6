from __future__ import annotations

import logging
from typing import Any

import httpx

from crmdesk.core.errors import BackendError
from crmdesk.integrations.backend.base import DataBackend
from crmdesk.integrations.backend.query import FetchParams

logger = logging.getLogger(__name__)


class ApperClient(DataBackend):
    """Apper record API client implementing DataBackend protocol.

    One instance is built at startup and handed to every gateway.
    Failures surface as BackendError; nothing is retried here.
    """

    def __init__(
        self,
        project_id: str,
        public_key: str,
        base_url: str,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the Apper client.

        Args:
            project_id: Apper project identifier.
            public_key: Public API key for the project.
            base_url: Root URL of the record API.
            timeout: Per-request timeout in seconds.
        """
        self.project_id = project_id
        self.base_url = base_url

        # We use a single httpx AsyncClient for the instance to pool connections
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {public_key}",
                "X-Apper-Project-Id": project_id,
            },
            timeout=httpx.Timeout(timeout),
        )

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and unwrap the response envelope."""
        try:
            response = await self.client.request(method=method, url=path, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Apper %s %s failed with HTTP %s", method, path, e.response.status_code)
            raise BackendError(
                f"{method} {path} returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error("Apper %s %s transport error: %s", method, path, e)
            raise BackendError(f"{method} {path} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return {"success": True}

        try:
            body = response.json()
        except ValueError as e:
            raise BackendError(f"{method} {path} returned a non-JSON body") from e

        if not isinstance(body, dict):
            raise BackendError(f"{method} {path} returned an unexpected payload")

        if body.get("success") is False:
            message = str(body.get("message") or "Request rejected by backend")
            logger.error("Apper %s %s rejected: %s", method, path, message)
            raise BackendError(message, status_code=response.status_code, user_message=message)

        return body

    @staticmethod
    def _first_result(body: dict[str, Any]) -> dict[str, Any]:
        """Extract `results[0].data` from a create/update envelope."""
        results = body.get("results") or []
        if not results:
            raise BackendError("Backend returned no results")

        first = results[0]
        if first.get("success") is False:
            message = str(first.get("message") or "Record was rejected by backend")
            raise BackendError(message, user_message=message)

        data = first.get("data")
        if not isinstance(data, dict):
            raise BackendError("Backend result carries no record")
        return dict(data)

    async def fetch_records(self, table: str, params: FetchParams) -> list[dict[str, Any]]:
        """Fetch records matching the query, in the requested order."""
        body = await self._request("POST", f"/tables/{table}/fetch", json=params.to_wire())
        data = body.get("data") or []
        return [dict(record) for record in data]

    async def get_record_by_id(self, table: str, record_id: int | str) -> dict[str, Any] | None:
        """Fetch a single record by id."""
        try:
            body = await self._request("GET", f"/tables/{table}/records/{record_id}")
        except BackendError as e:
            if e.status_code == 404:
                return None
            raise

        data = body.get("data")
        return dict(data) if isinstance(data, dict) else None

    async def create_record(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        """Create a record. Returns the stored record with its id."""
        body = await self._request("POST", f"/tables/{table}/records", json={"records": [record]})
        return self._first_result(body)

    async def update_record(
        self, table: str, record_id: int | str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Update the given fields of a record. Returns the stored record."""
        payload = {"records": [{"Id": record_id, **fields}]}
        body = await self._request("PUT", f"/tables/{table}/records", json=payload)
        return self._first_result(body)

    async def delete_records(self, table: str, record_ids: list[int | str]) -> None:
        """Delete records by id."""
        await self._request("DELETE", f"/tables/{table}/records", json={"RecordIds": record_ids})

    async def __aenter__(self) -> ApperClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
