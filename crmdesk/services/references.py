from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import Any, assert_never

from crmdesk.schemas.common import normalize_id
from crmdesk.schemas.company import Company, CompanyDetail, EntityReference


class ReferenceKind(StrEnum):
    CONTACT = "contact"
    DEAL = "deal"


def _label_and_path(kind: ReferenceKind) -> tuple[str, str]:
    match kind:
        case ReferenceKind.CONTACT:
            return "Contact", "/contacts"
        case ReferenceKind.DEAL:
            return "Deal", "/deals"
        case _:
            assert_never(kind)


def resolve_references(ids: Iterable[Any], kind: ReferenceKind) -> list[EntityReference]:
    """Format a link per referenced id without looking the record up.

    Blank ids are skipped; any other value renders, even if the record
    it points at no longer exists.
    """
    label, path = _label_and_path(kind)
    references: list[EntityReference] = []
    for raw in ids:
        try:
            record_id = normalize_id(raw)
        except ValueError:
            continue
        references.append(
            EntityReference(
                id=record_id,
                label=f"{label} #{record_id}",
                href=f"{path}?id={record_id}",
            )
        )
    return references


def company_detail(company: Company) -> CompanyDetail:
    return CompanyDetail(
        company=company,
        contacts=resolve_references(company.contacts, ReferenceKind.CONTACT),
        deals=resolve_references(company.deals, ReferenceKind.DEAL),
    )
