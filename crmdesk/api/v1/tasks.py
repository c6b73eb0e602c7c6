from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, status

from crmdesk.api.deps import get_workspace
from crmdesk.api.views import load_view, parse_filters
from crmdesk.schemas import CollectionView, DeleteResult, Task, TaskFilters
from crmdesk.services.tasks import toggle_task
from crmdesk.services.workspace import Workspace

router = APIRouter()


@router.get("/", response_model=CollectionView[Task])
async def list_tasks(
    search: str | None = None,
    status_filter: str | None = Query(default=None, alias="status"),
    priority: str | None = None,
    page: int = Query(default=1, ge=1),
    refresh: bool = False,
    workspace: Workspace = Depends(get_workspace),
) -> CollectionView[Task]:
    """Filtered tasks, soonest due first."""
    filters = parse_filters(TaskFilters, search_term=search, status=status_filter, priority=priority)
    return await load_view(
        Task, workspace.tasks, workspace.task_list, filters, page=page, refresh=refresh
    )


@router.post("/", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    body: dict[str, Any],
    workspace: Workspace = Depends(get_workspace),
) -> Task:
    return await workspace.tasks.add(body)


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    body: dict[str, Any],
    workspace: Workspace = Depends(get_workspace),
) -> Task:
    return await workspace.tasks.apply_edit(task_id, body)


@router.post("/{task_id}/toggle", response_model=Task)
async def toggle_task_status(
    task_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> Task:
    """Mark a task completed, or reopen a completed one."""
    return await toggle_task(workspace.tasks, task_id)


@router.post("/{task_id}/delete", response_model=Task)
async def request_task_delete(
    task_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> Task:
    return workspace.tasks.request_delete(task_id)


@router.post("/delete/confirm", response_model=DeleteResult)
async def confirm_task_delete(
    workspace: Workspace = Depends(get_workspace),
) -> DeleteResult:
    deleted_id = await workspace.tasks.confirm_delete()
    return DeleteResult(deleted_id=deleted_id)


@router.post("/delete/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_task_delete(
    workspace: Workspace = Depends(get_workspace),
) -> None:
    workspace.tasks.cancel_delete()
