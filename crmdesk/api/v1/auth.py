from __future__ import annotations

from fastapi import APIRouter, Depends, status

from crmdesk.api.deps import get_auth
from crmdesk.core.security import SessionAuth
from crmdesk.schemas import SessionRead, SessionRestore

router = APIRouter()


@router.get("/session", response_model=SessionRead)
async def read_session(auth: SessionAuth = Depends(get_auth)) -> SessionRead:
    user = auth.current_user()
    return SessionRead(authenticated=user is not None, user=user)


@router.post("/session", response_model=SessionRead)
async def restore_session(
    body: SessionRestore,
    auth: SessionAuth = Depends(get_auth),
) -> SessionRead:
    """Adopt the user handed back by the identity provider after sign-in."""
    auth.restore(body.user)
    return SessionRead(authenticated=True, user=auth.current_user())


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(auth: SessionAuth = Depends(get_auth)) -> None:
    await auth.logout()
