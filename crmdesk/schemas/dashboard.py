from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from .activity import ActivityEntry


class DashboardStats(BaseModel):
    total_contacts: int
    active_deals: int
    tasks_due: int
    revenue: Decimal
    pipeline_value: Decimal


class DashboardResponse(BaseModel):
    stats: DashboardStats
    recent_activities: list[ActivityEntry]
    activities_error: str | None = None
    # Banner messages of collections that failed to load, keyed by entity
    load_errors: dict[str, str] = Field(default_factory=dict)
