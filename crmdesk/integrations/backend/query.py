from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SortType(StrEnum):
    ASC = "ASC"
    DESC = "DESC"


class Operator(StrEnum):
    EXACT_MATCH = "ExactMatch"
    CONTAINS = "Contains"


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Condition(WireModel):
    field_name: str = Field(alias="fieldName")
    operator: Operator
    values: list[Any]


class ConditionGroup(WireModel):
    conditions: list[Condition]


class WhereGroup(WireModel):
    operator: str = "OR"
    sub_groups: list[ConditionGroup] = Field(alias="subGroups")


class OrderBy(WireModel):
    field_name: str = Field(alias="fieldName")
    sort_type: SortType = Field(default=SortType.ASC, alias="SortType")


class PagingInfo(WireModel):
    limit: int = Field(default=20, ge=1)
    offset: int = Field(default=0, ge=0)


class FetchParams(WireModel):
    """Query payload understood by the record API."""

    fields: list[str]
    order_by: list[OrderBy] | None = Field(default=None, alias="orderBy")
    where: list[Condition] | None = None
    where_groups: list[WhereGroup] | None = Field(default=None, alias="whereGroups")
    paging_info: PagingInfo | None = Field(default=None, alias="pagingInfo")


def exact_match(field_name: str, value: Any) -> Condition:
    return Condition(field_name=field_name, operator=Operator.EXACT_MATCH, values=[value])


def contains_any(field_names: list[str] | tuple[str, ...], term: str) -> WhereGroup:
    """OR-group of Contains conditions, one sub-group per field."""
    return WhereGroup(
        operator="OR",
        sub_groups=[
            ConditionGroup(
                conditions=[
                    Condition(field_name=name, operator=Operator.CONTAINS, values=[term])
                ]
            )
            for name in field_names
        ],
    )
