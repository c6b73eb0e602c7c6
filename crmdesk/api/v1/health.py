from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from crmdesk.api.deps import get_workspace
from crmdesk.integrations.backend.query import PagingInfo
from crmdesk.schemas import DependencyHealth, HealthCheckResponse
from crmdesk.schemas.health import ServiceStatus
from crmdesk.services.gateways import CompanyGateway
from crmdesk.services.workspace import Workspace

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    workspace: Workspace = Depends(get_workspace),
) -> HealthCheckResponse:
    """Check service health and backend reachability."""
    dependencies: dict[str, DependencyHealth] = {}

    # One-row fetch against the record API
    try:
        start = time.monotonic()
        await CompanyGateway(workspace.backend).list(paging=PagingInfo(limit=1))
        latency = (time.monotonic() - start) * 1000
        dependencies["backend"] = DependencyHealth(
            name="backend",
            status="ok",
            latency_ms=round(latency, 2),
        )
    except Exception as exc:
        dependencies["backend"] = DependencyHealth(
            name="backend",
            status="error",
            message=str(exc),
        )

    statuses = [dep.status for dep in dependencies.values()]
    overall: ServiceStatus = "ok" if all(s == "ok" for s in statuses) else "degraded"

    return HealthCheckResponse(
        status=overall,
        version="0.1.0",
        dependencies=dependencies,
    )
