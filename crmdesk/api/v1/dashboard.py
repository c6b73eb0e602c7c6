from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from crmdesk.api.deps import get_workspace
from crmdesk.core.config import settings
from crmdesk.schemas import Activity, DashboardResponse
from crmdesk.services.dashboard import build_dashboard, log_activity
from crmdesk.services.workspace import Workspace

router = APIRouter()


@router.get("/", response_model=DashboardResponse)
async def dashboard(
    workspace: Workspace = Depends(get_workspace),
) -> DashboardResponse:
    """Overview stats and the recent activity feed."""
    stores = (workspace.contacts, workspace.deals, workspace.tasks)
    for store in stores:
        if not store.loaded:
            await store.refresh()

    return await build_dashboard(
        workspace.contacts.items,
        workspace.deals.items,
        workspace.tasks.items,
        workspace.activities,
        limit=settings.recent_activity_limit,
        load_errors={store.entity: store.error for store in stores if store.error},
    )


@router.post("/activities", response_model=Activity, status_code=status.HTTP_201_CREATED)
async def create_activity(
    body: dict[str, Any],
    workspace: Workspace = Depends(get_workspace),
) -> Activity:
    return await log_activity(workspace.activities, body)
