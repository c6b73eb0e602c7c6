from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from pydantic import ValidationError

from crmdesk.core.errors import BackendError
from crmdesk.integrations.backend.query import FetchParams
from crmdesk.schemas import DependencyHealth, HealthCheckResponse


def _rows_by_table(tables: dict[str, list[dict[str, Any]]]) -> Any:
    async def fetch(table: str, params: FetchParams) -> list[dict[str, Any]]:
        if table not in tables:
            raise BackendError(f"table {table} unavailable")
        return tables[table]

    return fetch


@pytest.mark.asyncio
async def test_dashboard_stats_and_feed(client: AsyncClient, backend: AsyncMock) -> None:
    backend.fetch_records.side_effect = _rows_by_table({
        "contact1": [{"Id": 1}, {"Id": 2}, {"Id": 3}],
        "deal1": [
            {"Id": 1, "value": "$1,000", "stage": "closed"},
            {"Id": 2, "value": "$4,000", "stage": "proposal"},
        ],
        "task": [{"Id": 1, "dueDate": "2020-01-01", "status": "pending"}],
        "Activity2": [{"Id": 9, "title": "Kickoff", "type": "meeting", "date": "2020-01-01T10:00:00Z"}],
    })

    response = await client.get("/api/v1/dashboard/")

    assert response.status_code == 200
    data = response.json()
    assert data["stats"]["total_contacts"] == 3
    assert data["stats"]["active_deals"] == 1
    assert data["stats"]["tasks_due"] == 1
    assert float(data["stats"]["revenue"]) == 1000.0
    assert float(data["stats"]["pipeline_value"]) == 5000.0
    assert data["recent_activities"][0]["icon"] == "CalendarClock"
    assert data["recent_activities"][0]["time"] == "1/1/2020"
    assert data["activities_error"] is None
    assert data["load_errors"] == {}


@pytest.mark.asyncio
async def test_dashboard_survives_feed_failure(client: AsyncClient, backend: AsyncMock) -> None:
    backend.fetch_records.side_effect = _rows_by_table({"contact1": [], "deal1": [], "task": []})

    response = await client.get("/api/v1/dashboard/")

    assert response.status_code == 200
    assert response.json()["recent_activities"] == []
    assert response.json()["activities_error"] == "The CRM backend could not complete the request."


@pytest.mark.asyncio
async def test_dashboard_reports_collection_load_failures(client: AsyncClient, backend: AsyncMock) -> None:
    backend.fetch_records.side_effect = BackendError("connection refused")

    response = await client.get("/api/v1/dashboard/")

    assert response.status_code == 200
    data = response.json()
    message = "The CRM backend could not complete the request."
    assert data["load_errors"] == {"contact": message, "deal": message, "task": message}
    assert data["stats"]["total_contacts"] == 0


@pytest.mark.asyncio
async def test_log_activity(client: AsyncClient, backend: AsyncMock) -> None:
    backend.create_record.return_value = {"Id": 5, "title": "Called Jane", "type": "call"}

    response = await client.post("/api/v1/dashboard/activities", json={"title": "Called Jane", "type": "call"})

    assert response.status_code == 201
    assert response.json()["id"] == 5


@pytest.mark.asyncio
async def test_health_ok(client: AsyncClient, backend: AsyncMock) -> None:
    backend.fetch_records.return_value = []

    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["dependencies"]["backend"]["status"] == "ok"


@pytest.mark.asyncio
async def test_health_degraded_when_backend_down(client: AsyncClient, backend: AsyncMock) -> None:
    backend.fetch_records.side_effect = BackendError("connection refused")

    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["dependencies"]["backend"]["status"] == "error"


@pytest.mark.unit
def test_health_statuses_are_a_closed_set() -> None:
    assert DependencyHealth(name="backend", status="degraded").status == "degraded"

    with pytest.raises(ValidationError):
        DependencyHealth(name="backend", status="unknown")
    with pytest.raises(ValidationError):
        HealthCheckResponse(status="error", version="0.1.0", dependencies={})
