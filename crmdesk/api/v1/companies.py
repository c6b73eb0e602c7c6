from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from crmdesk.api.deps import get_workspace
from crmdesk.api.views import load_view, parse_filters
from crmdesk.schemas import (
    CollectionView,
    Company,
    CompanyDetail,
    CompanyFilters,
    CompanyOptions,
    DeleteResult,
)
from crmdesk.services.filtering import distinct_values
from crmdesk.services.references import company_detail
from crmdesk.services.workspace import Workspace

router = APIRouter()


@router.get("/", response_model=CollectionView[Company])
async def list_companies(
    search: str | None = None,
    industry: str | None = None,
    size: str | None = None,
    refresh: bool = False,
    workspace: Workspace = Depends(get_workspace),
) -> CollectionView[Company]:
    """Companies matching the search and the industry/size filters."""
    filters = parse_filters(CompanyFilters, search_term=search, industry=industry, size=size)
    return await load_view(
        Company, workspace.companies, workspace.company_list, filters, refresh=refresh
    )


@router.get("/options", response_model=CompanyOptions)
async def company_filter_options(
    workspace: Workspace = Depends(get_workspace),
) -> CompanyOptions:
    """Distinct industries and sizes for the filter dropdowns."""
    items = workspace.companies.items
    return CompanyOptions(
        industries=distinct_values(items, "industry"),
        sizes=distinct_values(items, "size"),
    )


@router.get("/selected", response_model=CompanyDetail)
async def selected_company(
    workspace: Workspace = Depends(get_workspace),
) -> CompanyDetail:
    """Detail panel of the selected company with its contact and deal links."""
    company = workspace.companies.selected
    if company is None:
        raise HTTPException(status_code=404, detail="No company selected")
    return company_detail(company)


@router.post("/", response_model=Company, status_code=status.HTTP_201_CREATED)
async def create_company(
    body: dict[str, Any],
    workspace: Workspace = Depends(get_workspace),
) -> Company:
    return await workspace.companies.add(body)


@router.patch("/{company_id}", response_model=Company)
async def update_company(
    company_id: str,
    body: dict[str, Any],
    workspace: Workspace = Depends(get_workspace),
) -> Company:
    return await workspace.companies.apply_edit(company_id, body)


@router.post("/{company_id}/select", response_model=CompanyDetail)
async def select_company(
    company_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> CompanyDetail:
    return company_detail(workspace.companies.select(company_id))


@router.post("/{company_id}/delete", response_model=Company)
async def request_company_delete(
    company_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> Company:
    return workspace.companies.request_delete(company_id)


@router.post("/delete/confirm", response_model=DeleteResult)
async def confirm_company_delete(
    workspace: Workspace = Depends(get_workspace),
) -> DeleteResult:
    """Delete the company awaiting confirmation; clears it from the detail panel."""
    deleted_id = await workspace.companies.confirm_delete()
    return DeleteResult(deleted_id=deleted_id)


@router.post("/delete/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_company_delete(
    workspace: Workspace = Depends(get_workspace),
) -> None:
    workspace.companies.cancel_delete()
