from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator

from .common import EntityRecord, FilterSpec, FormModel, RecordId, parse_id_list


class Company(EntityRecord):
    WIRE_FIELDS: ClassVar[tuple[str, ...]] = (
        "Id", "Name", "industry", "size", "location",
        "website", "description", "contacts", "deals",
        "Tags", "Owner", "CreatedOn", "ModifiedOn",
    )

    name: str | None = Field(default=None, validation_alias="Name")
    industry: str | None = None
    size: str | None = None
    location: str | None = None
    website: str | None = None
    description: str | None = None
    contacts: list[RecordId] = Field(default_factory=list)
    deals: list[RecordId] = Field(default_factory=list)

    @field_validator("contacts", "deals", mode="before")
    @classmethod
    def _parse_references(cls, value: Any) -> list[RecordId]:
        return parse_id_list(value)


class CompanyForm(FormModel):
    name: str | None = Field(default=None, alias="Name")
    industry: str | None = None
    size: str | None = None
    location: str | None = None
    website: str | None = None
    description: str | None = None
    contacts: list[RecordId] | None = None
    deals: list[RecordId] | None = None

    @field_validator("contacts", "deals", mode="before")
    @classmethod
    def _parse_references(cls, value: Any) -> list[RecordId] | None:
        return None if value is None else parse_id_list(value)


class CompanyFilters(FilterSpec):
    industry: str | None = None
    size: str | None = None


class CompanyOptions(BaseModel):
    industries: list[str]
    sizes: list[str]


class EntityReference(BaseModel):
    id: RecordId
    label: str
    href: str


class CompanyDetail(BaseModel):
    company: Company
    contacts: list[EntityReference]
    deals: list[EntityReference]
