from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, status

from crmdesk.api.deps import get_workspace
from crmdesk.api.views import load_view, parse_filters
from crmdesk.schemas import CollectionView, Contact, ContactFilters, DeleteResult
from crmdesk.services.workspace import Workspace

router = APIRouter()


@router.get("/", response_model=CollectionView[Contact])
async def list_contacts(
    search: str | None = None,
    type_filter: str | None = Query(default=None, alias="type"),
    status_filter: str | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    refresh: bool = False,
    workspace: Workspace = Depends(get_workspace),
) -> CollectionView[Contact]:
    """Filtered, paginated contacts list."""
    filters = parse_filters(ContactFilters, search_term=search, type=type_filter, status=status_filter)
    return await load_view(
        Contact, workspace.contacts, workspace.contact_list, filters, page=page, refresh=refresh
    )


@router.post("/", response_model=Contact, status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: dict[str, Any],
    workspace: Workspace = Depends(get_workspace),
) -> Contact:
    """Validate and create a contact."""
    return await workspace.contacts.add(body)


@router.patch("/{contact_id}", response_model=Contact)
async def update_contact(
    contact_id: str,
    body: dict[str, Any],
    workspace: Workspace = Depends(get_workspace),
) -> Contact:
    """Save the edited fields of a contact."""
    return await workspace.contacts.apply_edit(contact_id, body)


@router.post("/{contact_id}/delete", response_model=Contact)
async def request_contact_delete(
    contact_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> Contact:
    """First step of a delete: remember which contact awaits confirmation."""
    return workspace.contacts.request_delete(contact_id)


@router.post("/delete/confirm", response_model=DeleteResult)
async def confirm_contact_delete(
    workspace: Workspace = Depends(get_workspace),
) -> DeleteResult:
    deleted_id = await workspace.contacts.confirm_delete()
    return DeleteResult(deleted_id=deleted_id)


@router.post("/delete/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_contact_delete(
    workspace: Workspace = Depends(get_workspace),
) -> None:
    workspace.contacts.cancel_delete()
