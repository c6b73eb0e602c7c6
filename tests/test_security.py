from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi import HTTPException, status

from crmdesk.core.security import SessionAuth, require_user


@pytest.mark.asyncio
async def test_require_user_rejects_anonymous() -> None:
    with patch("crmdesk.core.config.settings") as mock_settings:
        mock_settings.auth_required = True

        with pytest.raises(HTTPException) as exc_info:
            await require_user(SessionAuth())

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.detail == "Not authenticated"


@pytest.mark.asyncio
async def test_require_user_returns_restored_user() -> None:
    auth = SessionAuth()
    auth.restore({"userId": "u-1", "emailAddress": "owner@example.com"})

    with patch("crmdesk.core.config.settings") as mock_settings:
        mock_settings.auth_required = True
        user = await require_user(auth)

    assert user == {"userId": "u-1", "emailAddress": "owner@example.com"}


@pytest.mark.asyncio
async def test_require_user_skipped_when_auth_disabled() -> None:
    with patch("crmdesk.core.config.settings") as mock_settings:
        mock_settings.auth_required = False
        assert await require_user(SessionAuth()) is None


@pytest.mark.asyncio
async def test_logout_clears_session() -> None:
    auth = SessionAuth()
    auth.restore({"userId": "u-1"})

    await auth.logout()

    assert auth.is_authenticated is False
    assert auth.current_user() is None
