from __future__ import annotations

import logging
from typing import assert_never

from crmdesk.schemas.common import RecordId, TaskPriority, TaskStatus
from crmdesk.schemas.task import Task
from crmdesk.services.store import EntityStore

logger = logging.getLogger(__name__)


def priority_rank(priority: TaskPriority | None) -> int:
    """Sort rank, most pressing first; unset priority sorts last."""
    match priority:
        case TaskPriority.URGENT:
            return 0
        case TaskPriority.HIGH:
            return 1
        case TaskPriority.MEDIUM:
            return 2
        case TaskPriority.LOW:
            return 3
        case None:
            return 4
        case _:
            assert_never(priority)


def toggled_status(status: TaskStatus | None) -> TaskStatus:
    """Completed tasks reopen as pending; everything else completes."""
    return TaskStatus.PENDING if status == TaskStatus.COMPLETED else TaskStatus.COMPLETED


async def toggle_task(store: EntityStore[Task], task_id: RecordId) -> Task:
    """Flip a task between completed and pending, sending only the status."""
    task = store.require(task_id)
    new_status = toggled_status(task.status)
    updated = await store.apply_edit(task.id, {"status": new_status})
    logger.info("Task %s marked as %s", task.id, new_status)
    return updated
