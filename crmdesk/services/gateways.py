"""Remote data gateways, one per entity table.

A gateway turns a FilterSpec into a record API query and maps the
returned wire records into typed models. It does not retry: any
BackendError reaches the caller unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from crmdesk.integrations.backend.base import DataBackend
from crmdesk.integrations.backend.query import (
    Condition,
    FetchParams,
    OrderBy,
    PagingInfo,
    SortType,
    contains_any,
    exact_match,
)
from crmdesk.schemas.activity import Activity
from crmdesk.schemas.common import EntityRecord, FilterSpec, RecordId
from crmdesk.schemas.company import Company
from crmdesk.schemas.contact import Contact
from crmdesk.schemas.deal import Deal
from crmdesk.schemas.task import Task

logger = logging.getLogger(__name__)


class RecordGateway[R: EntityRecord]:
    """Read and create access to one table; subclasses declare the layout."""

    entity: ClassVar[str]
    table: ClassVar[str]
    record_model: ClassVar[type[EntityRecord]]
    search_fields: ClassVar[tuple[str, ...]] = ()
    order_field: ClassVar[str] = "Name"
    order_direction: ClassVar[SortType] = SortType.ASC

    def __init__(self, backend: DataBackend) -> None:
        self.backend = backend

    def _wire_name(self, attribute: str) -> str:
        field = self.record_model.model_fields[attribute]
        return field.validation_alias if isinstance(field.validation_alias, str) else attribute

    def build_params(
        self,
        filters: FilterSpec | None = None,
        paging: PagingInfo | None = None,
    ) -> FetchParams:
        """Translate UI filter state into a record API query."""
        where: list[Condition] = []
        where_groups = None

        if filters is not None:
            for attribute, value in filters.categorical().items():
                where.append(exact_match(self._wire_name(attribute), str(value)))

            term = filters.term
            if term and self.search_fields:
                where_groups = [contains_any(self.search_fields, term)]

        return FetchParams(
            fields=list(self.record_model.WIRE_FIELDS),
            order_by=[OrderBy(field_name=self.order_field, sort_type=self.order_direction)],
            where=where or None,
            where_groups=where_groups,
            paging_info=paging,
        )

    def _to_record(self, data: dict[str, Any]) -> R:
        return self.record_model.from_wire(data)  # type: ignore[return-value]

    async def list(
        self,
        filters: FilterSpec | None = None,
        paging: PagingInfo | None = None,
    ) -> list[R]:
        params = self.build_params(filters, paging)
        rows = await self.backend.fetch_records(self.table, params)
        logger.debug("Fetched %d %s records", len(rows), self.entity)
        return [self._to_record(row) for row in rows]

    async def get(self, record_id: RecordId) -> R | None:
        data = await self.backend.get_record_by_id(self.table, record_id)
        return self._to_record(data) if data is not None else None

    async def create(self, fields: dict[str, Any]) -> R:
        data = await self.backend.create_record(self.table, fields)
        return self._to_record(data)


class EntityGateway[R: EntityRecord](RecordGateway[R]):
    """Full read and write access for tables the pages edit."""

    async def update(self, record_id: RecordId, fields: dict[str, Any]) -> R:
        """Send a partial update. Returns the record as echoed by the backend.

        The echo may hold only the changed fields; `model_fields_set`
        on the result tells which ones.
        """
        data = await self.backend.update_record(self.table, record_id, fields)
        data.setdefault("Id", record_id)
        return self._to_record(data)

    async def delete(self, record_id: RecordId) -> None:
        await self.backend.delete_records(self.table, [record_id])


class ContactGateway(EntityGateway[Contact]):
    entity = "contact"
    table = "contact1"
    record_model = Contact
    search_fields = ("Name", "email")


class CompanyGateway(EntityGateway[Company]):
    entity = "company"
    table = "company"
    record_model = Company
    search_fields = ("Name", "location", "description")


class DealGateway(EntityGateway[Deal]):
    entity = "deal"
    table = "deal1"
    record_model = Deal
    search_fields = ("Name", "company", "contact")
    order_field = "date"


class TaskGateway(EntityGateway[Task]):
    entity = "task"
    table = "task"
    record_model = Task
    search_fields = ("title", "description")
    order_field = "dueDate"


class ActivityGateway(RecordGateway[Activity]):
    """Activities are an append-only log."""

    entity = "activity"
    table = "Activity2"
    record_model = Activity
    order_field = "date"
    order_direction = SortType.DESC

    async def recent(self, limit: int = 5) -> list[Activity]:
        return await self.list(paging=PagingInfo(limit=limit, offset=0))
