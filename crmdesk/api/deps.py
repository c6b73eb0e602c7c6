from __future__ import annotations

from fastapi import Request

from crmdesk.core.security import get_auth, require_user
from crmdesk.services.workspace import Workspace


def get_workspace(request: Request) -> Workspace:
    return request.app.state.workspace  # type: ignore[no-any-return]


# Re-export for convenient imports
__all__ = ["get_auth", "get_workspace", "require_user"]
