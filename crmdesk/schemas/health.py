from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

type DependencyStatus = Literal["ok", "error", "degraded"]
type ServiceStatus = Literal["ok", "degraded"]


class DependencyHealth(BaseModel):
    name: str
    status: DependencyStatus
    latency_ms: float | None = None
    message: str | None = None


class HealthCheckResponse(BaseModel):
    status: ServiceStatus
    version: str
    dependencies: dict[str, DependencyHealth]
