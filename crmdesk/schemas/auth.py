from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class SessionRead(BaseModel):
    authenticated: bool
    user: dict[str, Any] | None = None


class SessionRestore(BaseModel):
    user: dict[str, Any]
