from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from enum import StrEnum
from typing import Any, ClassVar, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

logger = logging.getLogger(__name__)

RecordId = int | str


class ContactType(StrEnum):
    LEAD = "lead"
    CUSTOMER = "customer"
    PARTNER = "partner"
    VENDOR = "vendor"


class ContactStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class DealStage(StrEnum):
    LEAD = "lead"
    QUALIFIED = "qualified"
    PROPOSAL = "proposal"
    NEGOTIATION = "negotiation"
    CLOSED = "closed"


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskCategory(StrEnum):
    GENERAL = "general"
    MEETING = "meeting"
    FOLLOW_UP = "follow-up"
    CALL = "call"
    EMAIL = "email"


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class ActivityType(StrEnum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    NOTE = "note"


def normalize_id(value: Any) -> RecordId:
    """Backend ids are integers; keep anything else as an opaque string."""
    if value is None:
        raise ValueError("id must not be empty")
    if isinstance(value, bool):
        raise ValueError("id must not be a boolean")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        raise ValueError("id must not be empty")
    return int(text) if text.lstrip("-").isdigit() else text


def normalize_choice[E: StrEnum](enum_cls: type[E], value: Any, field_name: str) -> E | None:
    """Map a wire value onto a closed enumeration; unknown values become None."""
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        logger.warning("Dropping unknown %s value %r", field_name, value)
        return None


def parse_wire_date(value: Any) -> date | None:
    """Accept YYYY-MM-DD or ISO datetimes; anything unparseable becomes None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.warning("Ignoring unparseable date %r", value)
        return None


def parse_form_date(value: Any) -> date | None:
    """Like parse_wire_date, but a non-empty unparseable value is an error."""
    if value is None or value == "":
        return None
    parsed = parse_wire_date(value)
    if parsed is None:
        raise ValueError("Invalid date format")
    return parsed


def parse_wire_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Ignoring unparseable timestamp %r", value)
        return None


def parse_id_list(value: Any) -> list[RecordId]:
    """Company reference lists arrive as arrays or comma-separated strings."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        parts: list[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        parts = [value]

    ids: list[RecordId] = []
    for part in parts:
        try:
            ids.append(normalize_id(part))
        except ValueError:
            continue
    return ids


class EntityRecord(BaseModel):
    """A persisted record as returned by the data API.

    Wire names are accepted on input only; records always serialize
    with their attribute names.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Wire field list requested on fetch
    WIRE_FIELDS: ClassVar[tuple[str, ...]] = ("Id", "Name", "Tags", "Owner", "CreatedOn", "ModifiedOn")

    id: RecordId = Field(validation_alias="Id")
    tags: str | None = Field(default=None, validation_alias="Tags")
    created_on: datetime | None = Field(default=None, validation_alias="CreatedOn")
    modified_on: datetime | None = Field(default=None, validation_alias="ModifiedOn")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> RecordId:
        return normalize_id(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_as_text(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        if isinstance(value, (list, tuple)):
            return ",".join(str(tag) for tag in value)
        return str(value)

    @field_validator("created_on", "modified_on", mode="before")
    @classmethod
    def _parse_timestamps(cls, value: Any) -> datetime | None:
        return parse_wire_datetime(value)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> Self:
        """Map an untyped wire record into the typed model."""
        return cls.model_validate(data)

    def merged_with(self, other: EntityRecord) -> Self:
        """Overlay the fields the other record was actually given."""
        current = self.model_dump()
        current.update(other.model_dump(include=other.model_fields_set))
        return type(self).model_validate(current)


class FormModel(BaseModel):
    """Client-side field set sent on create or update."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self, partial: bool = False) -> dict[str, Any]:
        return self.model_dump(
            by_alias=True,
            exclude_unset=partial,
            exclude_none=not partial,
            mode="json",
        )


def _attribute_names(model: type[BaseModel]) -> dict[str, str]:
    return {info.alias: name for name, info in model.model_fields.items() if info.alias}


def form_fields(fields: Mapping[str, Any], model: type[BaseModel]) -> dict[str, Any]:
    """Re-key a submitted form by attribute name; wire aliases are accepted."""
    by_alias = _attribute_names(model)
    return {by_alias.get(key, key): value for key, value in fields.items()}


def form_errors(error: ValidationError, model: type[BaseModel]) -> dict[str, str]:
    """Flatten a pydantic ValidationError into a field -> message map.

    Locations reported under a wire alias are mapped back to the
    attribute name so they line up with the form's own messages.
    """
    by_alias = _attribute_names(model)
    errors: dict[str, str] = {}
    for item in error.errors():
        field = str(item["loc"][0]) if item["loc"] else "__root__"
        errors.setdefault(by_alias.get(field, field), item["msg"])
    return errors


class FilterSpec(BaseModel):
    """Free-text search plus categorical filters.

    Subclasses declare one optional field per categorical filter, named
    after the record attribute it matches.
    """

    model_config = ConfigDict(extra="forbid")

    search_term: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name == "search_term":
            return value
        if isinstance(value, str) and value.strip().lower() in ("", "all"):
            return None
        return value

    def categorical(self) -> dict[str, Any]:
        """Non-empty categorical filter values keyed by record attribute."""
        return {
            name: value
            for name, value in self
            if name != "search_term" and value is not None
        }

    @property
    def term(self) -> str | None:
        if self.search_term is None:
            return None
        term = self.search_term.strip()
        return term or None


class PaginatedResponse[T](BaseModel):
    items: list[T]
    total: int
    page: int
    page_size: int
    pages: int


class ErrorResponse(BaseModel):
    detail: str
    error_code: str | None = None
    errors: dict[str, str] | None = None


class CollectionView[T](BaseModel):
    """A page of the filtered collection plus the page banner state."""

    page: PaginatedResponse[T]
    is_loading: bool = False
    error: str | None = None
    selected_id: RecordId | None = None


class DeleteResult(BaseModel):
    deleted_id: RecordId
