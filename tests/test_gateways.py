from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from crmdesk.schemas import ContactFilters, ContactType, DealFilters, DealStage, TaskFilters
from crmdesk.services.gateways import (
    ActivityGateway,
    ContactGateway,
    DealGateway,
    EntityGateway,
    RecordGateway,
    TaskGateway,
)


@pytest.mark.unit
def test_contact_query_combines_exact_filters_and_search_group() -> None:
    gateway = ContactGateway(AsyncMock())
    params = gateway.build_params(ContactFilters(search_term="jane", type="lead"))
    wire = params.to_wire()

    assert wire["where"] == [{"fieldName": "type", "operator": "ExactMatch", "values": ["lead"]}]
    assert wire["whereGroups"] == [
        {
            "operator": "OR",
            "subGroups": [
                {"conditions": [{"fieldName": "Name", "operator": "Contains", "values": ["jane"]}]},
                {"conditions": [{"fieldName": "email", "operator": "Contains", "values": ["jane"]}]},
            ],
        }
    ]
    assert wire["orderBy"] == [{"fieldName": "Name", "SortType": "ASC"}]
    assert "firstName" in wire["fields"]


@pytest.mark.unit
def test_all_and_blank_filters_send_no_conditions() -> None:
    gateway = ContactGateway(AsyncMock())
    wire = gateway.build_params(ContactFilters(search_term="   ", type="all", status="")).to_wire()

    assert "where" not in wire
    assert "whereGroups" not in wire


@pytest.mark.unit
def test_task_query_uses_wire_names_and_due_date_order() -> None:
    gateway = TaskGateway(AsyncMock())
    wire = gateway.build_params(TaskFilters(status="in-progress")).to_wire()

    assert wire["where"] == [{"fieldName": "status", "operator": "ExactMatch", "values": ["in-progress"]}]
    assert wire["orderBy"] == [{"fieldName": "dueDate", "SortType": "ASC"}]


@pytest.mark.unit
def test_deal_query_orders_by_close_date() -> None:
    wire = DealGateway(AsyncMock()).build_params(DealFilters(stage="closed")).to_wire()

    assert wire["orderBy"] == [{"fieldName": "date", "SortType": "ASC"}]
    assert wire["where"][0]["values"] == ["closed"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_maps_wire_records() -> None:
    backend = AsyncMock()
    backend.fetch_records.return_value = [
        {"Id": "1", "firstName": "Jane", "lastName": "Doe", "type": "Customer", "lastContact": "2026-10-01"},
        {"Id": 2, "firstName": "Bob", "type": "reseller"},
    ]

    contacts = await ContactGateway(backend).list()

    assert [c.id for c in contacts] == [1, 2]
    assert contacts[0].type == ContactType.CUSTOMER
    assert contacts[0].full_name == "Jane Doe"
    assert contacts[0].last_contact is not None
    # Unknown enum values are dropped rather than failing the whole page
    assert contacts[1].type is None
    assert backend.fetch_records.await_args.args[0] == "contact1"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_tracks_echoed_fields() -> None:
    backend = AsyncMock()
    backend.update_record.return_value = {"stage": "proposal"}

    deal = await DealGateway(backend).update(7, {"stage": "proposal"})

    backend.update_record.assert_awaited_once_with("deal1", 7, {"stage": "proposal"})
    assert deal.id == 7
    assert deal.stage == DealStage.PROPOSAL
    assert deal.model_fields_set == {"id", "stage"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_sends_single_id() -> None:
    backend = AsyncMock()
    await ContactGateway(backend).delete(5)
    backend.delete_records.assert_awaited_once_with("contact1", [5])


@pytest.mark.unit
@pytest.mark.asyncio
async def test_recent_activities_are_newest_first_and_limited() -> None:
    backend = AsyncMock()
    backend.fetch_records.return_value = []

    await ActivityGateway(backend).recent(5)

    table, params = backend.fetch_records.await_args.args
    wire = params.to_wire()
    assert table == "Activity2"
    assert wire["orderBy"] == [{"fieldName": "date", "SortType": "DESC"}]
    assert wire["pagingInfo"] == {"limit": 5, "offset": 0}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_activity_log_is_append_only() -> None:
    backend = AsyncMock()
    backend.create_record.return_value = {"Id": 3, "title": "Called Jane", "type": "call"}
    gateway = ActivityGateway(backend)

    activity = await gateway.create({"title": "Called Jane", "type": "call"})

    assert activity.id == 3
    assert isinstance(gateway, RecordGateway)
    assert not isinstance(gateway, EntityGateway)
    assert not hasattr(gateway, "update")
    assert not hasattr(gateway, "delete")
