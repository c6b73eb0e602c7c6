from __future__ import annotations

import os

os.environ["APPER_PROJECT_ID"] = "test-project"
os.environ["APPER_PUBLIC_KEY"] = "test-key"
os.environ["APPER_API_URL"] = "http://fake-apper-url"

from collections.abc import AsyncGenerator, Generator
from typing import Any
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from crmdesk.api.deps import get_workspace, require_user
from crmdesk.main import app
from crmdesk.services.workspace import Workspace, build_workspace

TEST_USER: dict[str, Any] = {"userId": "u-1", "emailAddress": "owner@example.com"}


@pytest.fixture
def backend() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def workspace(backend: AsyncMock) -> Workspace:
    return build_workspace(backend, page_size=10)


@pytest.fixture
def override_workspace(workspace: Workspace) -> Generator[None, None, None]:
    async def _workspace() -> Workspace:
        return workspace

    async def _user() -> dict[str, Any]:
        return TEST_USER

    app.dependency_overrides[get_workspace] = _workspace
    app.dependency_overrides[require_user] = _user
    yield
    app.dependency_overrides.pop(get_workspace, None)
    app.dependency_overrides.pop(require_user, None)


@pytest.fixture
async def client(override_workspace: None) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
