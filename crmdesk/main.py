from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from crmdesk.core.config import settings
from crmdesk.core.errors import BackendError, DeleteNotConfirmed, RecordNotFound, ValidationFailed
from crmdesk.core.logging import setup_logging
from crmdesk.core.security import SessionAuth
from crmdesk.integrations.backend.apper import ApperClient
from crmdesk.schemas import ErrorResponse
from crmdesk.services.workspace import build_workspace

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Startup
    settings.require_backend_credentials()
    backend = ApperClient(
        project_id=settings.apper_project_id,
        public_key=settings.apper_public_key,
        base_url=settings.apper_api_url,
        timeout=settings.apper_timeout_seconds,
    )
    app.state.workspace = build_workspace(backend, page_size=settings.page_size)
    logger.info("Connected workspace to %s", settings.apper_api_url)
    yield
    # Shutdown
    await backend.close()


def _error(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    return _error(
        422,
        ErrorResponse(detail=exc.user_message, error_code="validation_failed", errors=exc.errors),
    )


async def not_found_handler(request: Request, exc: RecordNotFound) -> JSONResponse:
    return _error(404, ErrorResponse(detail=exc.user_message, error_code="not_found"))


async def delete_not_confirmed_handler(request: Request, exc: DeleteNotConfirmed) -> JSONResponse:
    return _error(409, ErrorResponse(detail=exc.user_message, error_code="no_pending_delete"))


async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    logger.error("Backend error on %s %s: %s", request.method, request.url.path, exc.message)
    return _error(502, ErrorResponse(detail=exc.user_message, error_code="backend_error"))


def create_app() -> FastAPI:
    setup_logging(settings.app_log_level)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.auth = SessionAuth()

    app.exception_handler(ValidationFailed)(validation_failed_handler)
    app.exception_handler(RecordNotFound)(not_found_handler)
    app.exception_handler(DeleteNotConfirmed)(delete_not_confirmed_handler)
    app.exception_handler(BackendError)(backend_error_handler)

    # Register routes
    from crmdesk.api.v1.router import api_v1_router

    app.include_router(api_v1_router, prefix="/api/v1")

    return app


app = create_app()
