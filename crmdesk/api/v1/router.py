from __future__ import annotations

from fastapi import APIRouter, Depends

from crmdesk.api.deps import require_user
from crmdesk.api.v1 import (
    auth,
    companies,
    contacts,
    dashboard,
    deals,
    health,
    tasks,
)

api_v1_router = APIRouter()

api_v1_router.include_router(health.router, tags=["Health"])
api_v1_router.include_router(auth.router, prefix="/auth", tags=["Auth"])

_signed_in = [Depends(require_user)]
api_v1_router.include_router(
    contacts.router, prefix="/contacts", tags=["Contacts"], dependencies=_signed_in
)
api_v1_router.include_router(
    companies.router, prefix="/companies", tags=["Companies"], dependencies=_signed_in
)
api_v1_router.include_router(deals.router, prefix="/deals", tags=["Deals"], dependencies=_signed_in)
api_v1_router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"], dependencies=_signed_in)
api_v1_router.include_router(
    dashboard.router, prefix="/dashboard", tags=["Dashboard"], dependencies=_signed_in
)
