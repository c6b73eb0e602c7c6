from __future__ import annotations

from datetime import date
from typing import Any, ClassVar

from pydantic import Field, field_validator

from .common import (
    ContactStatus,
    ContactType,
    EntityRecord,
    FilterSpec,
    FormModel,
    normalize_choice,
    parse_form_date,
    parse_wire_date,
)


class Contact(EntityRecord):
    WIRE_FIELDS: ClassVar[tuple[str, ...]] = (
        "Id", "Name", "firstName", "lastName", "email", "phone",
        "title", "type", "status", "notes", "lastContact", "company",
        "Tags", "Owner", "CreatedOn", "ModifiedOn",
    )

    name: str | None = Field(default=None, validation_alias="Name")
    first_name: str | None = Field(default=None, validation_alias="firstName")
    last_name: str | None = Field(default=None, validation_alias="lastName")
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    title: str | None = None
    type: ContactType | None = None
    status: ContactStatus | None = None
    notes: str | None = None
    last_contact: date | None = Field(default=None, validation_alias="lastContact")

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, value: Any) -> ContactType | None:
        return normalize_choice(ContactType, value, "contact type")

    @field_validator("status", mode="before")
    @classmethod
    def _known_status(cls, value: Any) -> ContactStatus | None:
        return normalize_choice(ContactStatus, value, "contact status")

    @field_validator("last_contact", mode="before")
    @classmethod
    def _parse_last_contact(cls, value: Any) -> date | None:
        return parse_wire_date(value)

    @property
    def full_name(self) -> str:
        parts = [part for part in (self.first_name, self.last_name) if part]
        return " ".join(parts) or self.name or ""


class ContactForm(FormModel):
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    title: str | None = None
    type: ContactType = ContactType.LEAD
    status: ContactStatus = ContactStatus.ACTIVE
    notes: str | None = None
    last_contact: date | None = Field(default=None, alias="lastContact")

    @field_validator("last_contact", mode="before")
    @classmethod
    def _parse_last_contact(cls, value: Any) -> date | None:
        return parse_form_date(value)

    def to_wire(self, partial: bool = False) -> dict[str, Any]:
        payload = super().to_wire(partial)
        if self.first_name and self.last_name:
            payload["Name"] = f"{self.first_name} {self.last_name}"
        return payload


class ContactFilters(FilterSpec):
    type: ContactType | None = None
    status: ContactStatus | None = None
