from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime
from typing import Any, assert_never

from pydantic import ValidationError

from crmdesk.core.errors import CRMError, ValidationFailed
from crmdesk.schemas.activity import Activity, ActivityEntry, ActivityForm
from crmdesk.schemas.common import ActivityType, DealStage, TaskStatus, form_errors
from crmdesk.schemas.contact import Contact
from crmdesk.schemas.dashboard import DashboardResponse, DashboardStats
from crmdesk.schemas.deal import Deal
from crmdesk.schemas.task import Task
from crmdesk.services.gateways import ActivityGateway
from crmdesk.services.pipeline import total_value
from crmdesk.services.validation import ensure_valid, validate_activity

logger = logging.getLogger(__name__)


def activity_icon(kind: ActivityType | None) -> str:
    match kind:
        case ActivityType.CALL:
            return "Phone"
        case ActivityType.EMAIL:
            return "Mail"
        case ActivityType.MEETING:
            return "CalendarClock"
        case ActivityType.NOTE:
            return "FileText"
        case None:
            return "Activity"
        case _:
            assert_never(kind)


def format_activity_time(when: datetime | None, now: datetime | None = None) -> str:
    """Relative time for the activity feed."""
    if when is None:
        return ""
    now = now or datetime.now(UTC)
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    hours = int((now - when).total_seconds() // 3600)
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours} hours ago"
    if hours < 48:
        return "Yesterday"
    if hours < 168:
        return f"{hours // 24} days ago"
    return f"{when.month}/{when.day}/{when.year}"


def to_entry(activity: Activity, now: datetime | None = None) -> ActivityEntry:
    return ActivityEntry(
        id=activity.id,
        title=activity.title or activity.name or "",
        type=activity.type,
        icon=activity_icon(activity.type),
        time=format_activity_time(activity.date, now),
        contact=activity.contact or activity.company,
    )


def compute_stats(
    contacts: Iterable[Contact],
    deals: Iterable[Deal],
    tasks: Iterable[Task],
    today: date | None = None,
) -> DashboardStats:
    today = today or date.today()
    deals = list(deals)

    active = [deal for deal in deals if deal.stage is not None and deal.stage != DealStage.CLOSED]
    closed = [deal for deal in deals if deal.stage == DealStage.CLOSED]
    due = [
        task
        for task in tasks
        if task.status != TaskStatus.COMPLETED
        and task.due_date is not None
        and task.due_date <= today
    ]

    return DashboardStats(
        total_contacts=sum(1 for _ in contacts),
        active_deals=len(active),
        tasks_due=len(due),
        revenue=total_value(closed),
        pipeline_value=total_value(deals),
    )


async def build_dashboard(
    contacts: Iterable[Contact],
    deals: Iterable[Deal],
    tasks: Iterable[Task],
    activities: ActivityGateway,
    limit: int = 5,
    now: datetime | None = None,
    load_errors: Mapping[str, str] | None = None,
) -> DashboardResponse:
    """Headline stats plus the recent activity feed.

    A failing feed degrades to an empty list with a banner message.
    Stats are computed from whatever the collections hold, so callers
    pass the load errors of any collection that failed to refresh.
    """
    now = now or datetime.now(UTC)
    stats = compute_stats(contacts, deals, tasks, today=now.date())

    entries: list[ActivityEntry] = []
    feed_error: str | None = None
    try:
        recent = await activities.recent(limit)
        entries = [to_entry(activity, now) for activity in recent]
    except CRMError as e:
        logger.error("Failed to load recent activities: %s", e)
        feed_error = e.user_message

    return DashboardResponse(
        stats=stats,
        recent_activities=entries,
        activities_error=feed_error,
        load_errors=dict(load_errors or {}),
    )


async def log_activity(activities: ActivityGateway, fields: Mapping[str, Any]) -> Activity:
    """Validate and create an activity; the date defaults to now."""
    ensure_valid(validate_activity(fields))
    draft = dict(fields)
    if not draft.get("date"):
        draft["date"] = datetime.now(UTC)

    try:
        form = ActivityForm.model_validate(draft)
    except ValidationError as e:
        raise ValidationFailed(form_errors(e, ActivityForm)) from e

    activity = await activities.create(form.to_wire())
    logger.info("Logged %s activity %s", activity.type or "untyped", activity.id)
    return activity
