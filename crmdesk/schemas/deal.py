from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator

from .common import (
    DealStage,
    EntityRecord,
    FilterSpec,
    FormModel,
    normalize_choice,
    parse_form_date,
    parse_wire_date,
)


class Deal(EntityRecord):
    WIRE_FIELDS: ClassVar[tuple[str, ...]] = (
        "Id", "Name", "value", "stage", "date",
        "company", "contact", "Tags", "Owner",
        "CreatedOn", "ModifiedOn",
    )

    name: str | None = Field(default=None, validation_alias="Name")
    company: str | None = None
    contact: str | None = None
    value: str | None = None
    stage: DealStage | None = None
    date: dt.date | None = None

    @field_validator("stage", mode="before")
    @classmethod
    def _known_stage(cls, value: Any) -> DealStage | None:
        return normalize_choice(DealStage, value, "deal stage")

    @field_validator("date", mode="before")
    @classmethod
    def _parse_close_date(cls, value: Any) -> dt.date | None:
        return parse_wire_date(value)

    @field_validator("value", mode="before")
    @classmethod
    def _value_as_text(cls, value: Any) -> str | None:
        return None if value is None else str(value)


class DealForm(FormModel):
    name: str | None = Field(default=None, alias="Name")
    company: str | None = None
    contact: str | None = None
    value: str | None = None
    stage: DealStage = DealStage.LEAD
    date: dt.date | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _parse_close_date(cls, value: Any) -> dt.date | None:
        return parse_form_date(value)


class DealFilters(FilterSpec):
    stage: DealStage | None = None


class StageMove(BaseModel):
    stage: DealStage


class StageColumn(BaseModel):
    stage: DealStage
    label: str
    deals: list[Deal]
    count: int
    value: Decimal


class PipelineBoard(BaseModel):
    columns: list[StageColumn]
    total_value: Decimal
    error: str | None = None
