from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator

from .common import ActivityType, EntityRecord, FormModel, normalize_choice, parse_wire_datetime


class Activity(EntityRecord):
    WIRE_FIELDS: ClassVar[tuple[str, ...]] = (
        "Id", "Name", "title", "type", "description",
        "date", "contact", "company", "Tags", "Owner",
        "CreatedOn", "ModifiedOn",
    )

    name: str | None = Field(default=None, validation_alias="Name")
    title: str | None = None
    type: ActivityType | None = None
    description: str | None = None
    date: datetime | None = None
    contact: str | None = None
    company: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, value: Any) -> ActivityType | None:
        return normalize_choice(ActivityType, value, "activity type")

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> datetime | None:
        return parse_wire_datetime(value)


class ActivityForm(FormModel):
    title: str | None = None
    type: ActivityType = ActivityType.NOTE
    description: str | None = None
    date: datetime | None = None
    contact: str | None = None
    company: str | None = None

    def to_wire(self, partial: bool = False) -> dict[str, Any]:
        payload = super().to_wire(partial)
        if self.title:
            payload["Name"] = self.title
        return payload


class ActivityEntry(BaseModel):
    """Activity as shown in the dashboard feed."""

    id: int | str
    title: str
    type: ActivityType | None = None
    icon: str
    time: str
    contact: str | None = None
