from __future__ import annotations

from datetime import date
from typing import Any, ClassVar

from pydantic import Field, field_validator

from .common import (
    EntityRecord,
    FilterSpec,
    FormModel,
    TaskCategory,
    TaskPriority,
    TaskStatus,
    normalize_choice,
    parse_form_date,
    parse_wire_date,
)


class Task(EntityRecord):
    WIRE_FIELDS: ClassVar[tuple[str, ...]] = (
        "Id", "Name", "title", "description", "dueDate",
        "priority", "category", "status", "contact",
        "company", "deal", "Tags", "Owner",
        "CreatedOn", "ModifiedOn",
    )

    name: str | None = Field(default=None, validation_alias="Name")
    title: str | None = None
    description: str | None = None
    due_date: date | None = Field(default=None, validation_alias="dueDate")
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    status: TaskStatus | None = None
    contact: str | None = None
    company: str | None = None
    deal: str | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def _known_priority(cls, value: Any) -> TaskPriority | None:
        return normalize_choice(TaskPriority, value, "task priority")

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, value: Any) -> TaskCategory | None:
        return normalize_choice(TaskCategory, value, "task category")

    @field_validator("status", mode="before")
    @classmethod
    def _known_status(cls, value: Any) -> TaskStatus | None:
        return normalize_choice(TaskStatus, value, "task status")

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, value: Any) -> date | None:
        return parse_wire_date(value)

    @field_validator("contact", "company", "deal", mode="before")
    @classmethod
    def _reference_as_text(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        if isinstance(value, dict):
            return str(value.get("Name") or value.get("Id") or "") or None
        return str(value)


class TaskForm(FormModel):
    title: str | None = None
    description: str | None = None
    due_date: date | None = Field(default=None, alias="dueDate")
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.GENERAL
    status: TaskStatus = TaskStatus.PENDING
    contact: str | None = None
    company: str | None = None
    deal: str | None = None

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, value: Any) -> date | None:
        return parse_form_date(value)

    def to_wire(self, partial: bool = False) -> dict[str, Any]:
        payload = super().to_wire(partial)
        if self.title:
            payload["Name"] = self.title
        return payload


class TaskFilters(FilterSpec):
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
