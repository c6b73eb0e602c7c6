from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from crmdesk.api.deps import get_workspace
from crmdesk.api.views import load_view, parse_filters
from crmdesk.schemas import (
    CollectionView,
    Deal,
    DealFilters,
    DeleteResult,
    PipelineBoard,
    StageMove,
)
from crmdesk.services.filtering import filter_records
from crmdesk.services.pipeline import build_board, move_deal
from crmdesk.services.workspace import Workspace

router = APIRouter()


@router.get("/", response_model=CollectionView[Deal])
async def list_deals(
    search: str | None = None,
    stage: str | None = None,
    refresh: bool = False,
    workspace: Workspace = Depends(get_workspace),
) -> CollectionView[Deal]:
    filters = parse_filters(DealFilters, search_term=search, stage=stage)
    return await load_view(Deal, workspace.deals, workspace.deal_list, filters, refresh=refresh)


@router.get("/board", response_model=PipelineBoard)
async def deal_board(
    search: str | None = None,
    stage: str | None = None,
    workspace: Workspace = Depends(get_workspace),
) -> PipelineBoard:
    """Kanban columns per pipeline stage for the filtered deals."""
    filters = parse_filters(DealFilters, search_term=search, stage=stage)
    workspace.deal_list.set_filters(filters)
    if not workspace.deals.loaded:
        await workspace.deals.refresh()

    visible = filter_records(workspace.deals.items, filters, workspace.deal_list.view)
    return build_board(visible, workspace.deals.items, error=workspace.deals.error)


@router.post("/", response_model=Deal, status_code=status.HTTP_201_CREATED)
async def create_deal(
    body: dict[str, Any],
    workspace: Workspace = Depends(get_workspace),
) -> Deal:
    return await workspace.deals.add(body)


@router.patch("/{deal_id}", response_model=Deal)
async def update_deal(
    deal_id: str,
    body: dict[str, Any],
    workspace: Workspace = Depends(get_workspace),
) -> Deal:
    return await workspace.deals.apply_edit(deal_id, body)


@router.post("/{deal_id}/stage", response_model=Deal)
async def move_deal_stage(
    deal_id: str,
    body: StageMove,
    workspace: Workspace = Depends(get_workspace),
) -> Deal:
    """Move a deal to another pipeline stage."""
    return await move_deal(workspace.deals, deal_id, body.stage)


@router.post("/{deal_id}/delete", response_model=Deal)
async def request_deal_delete(
    deal_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> Deal:
    return workspace.deals.request_delete(deal_id)


@router.post("/delete/confirm", response_model=DeleteResult)
async def confirm_deal_delete(
    workspace: Workspace = Depends(get_workspace),
) -> DeleteResult:
    deleted_id = await workspace.deals.confirm_delete()
    return DeleteResult(deleted_id=deleted_id)


@router.post("/delete/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_deal_delete(
    workspace: Workspace = Depends(get_workspace),
) -> None:
    workspace.deals.cancel_delete()
