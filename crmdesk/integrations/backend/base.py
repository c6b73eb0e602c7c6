from __future__ import annotations

from typing import Any, Protocol

from crmdesk.integrations.backend.query import FetchParams


class DataBackend(Protocol):
    """Abstract record API interface.

    Implement this protocol to point the CRM at another hosted
    record store (Apper, Airtable-style APIs, a test double, etc.)
    """

    async def fetch_records(self, table: str, params: FetchParams) -> list[dict[str, Any]]:
        """Fetch records matching the query, in the requested order."""
        ...

    async def get_record_by_id(self, table: str, record_id: int | str) -> dict[str, Any] | None:
        """Fetch a single record by id."""
        ...

    async def create_record(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        """Create a record. Returns the stored record with its id."""
        ...

    async def update_record(
        self, table: str, record_id: int | str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Update the given fields of a record. Returns the stored record."""
        ...

    async def delete_records(self, table: str, record_ids: list[int | str]) -> None:
        """Delete records by id."""
        ...
