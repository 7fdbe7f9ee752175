"""
Unit tests for the authentication dependencies.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from smartlearn.core.auth import CurrentUser, get_current_user, require_roles
from smartlearn.core.session import session_issuer
from smartlearn.modules.users.models import User, UserRole

REPO = "smartlearn.core.auth.user_repository"


@pytest.fixture
def account():
    user = MagicMock(spec=User)
    user.id = "11111111-1111-1111-1111-111111111111"
    user.username = "acme"
    user.role = UserRole.INSTITUTION
    user.enabled = True
    user.banned = False
    return user


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentUser:
    @pytest.mark.asyncio
    async def test_valid_token(self, mock_db, account):
        token = session_issuer.issue(account)

        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=account)

            user = await get_current_user(_bearer(token), mock_db)

        assert user == CurrentUser(id=account.id, username="acme", role=UserRole.INSTITUTION)

    @pytest.mark.asyncio
    async def test_garbage_token(self, mock_db):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_bearer("not-a-jwt"), mock_db)

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_deleted_account(self, mock_db, account):
        token = session_issuer.issue(account)

        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(HTTPException) as exc_info:
                await get_current_user(_bearer(token), mock_db)

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("banned", "enabled"), [(True, True), (False, False)])
    async def test_inactive_account(self, mock_db, account, banned, enabled):
        account.banned = banned
        account.enabled = enabled
        token = session_issuer.issue(account)

        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=account)

            with pytest.raises(HTTPException) as exc_info:
                await get_current_user(_bearer(token), mock_db)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail["error"] == "ACCOUNT_INACTIVE"


class TestRequireRoles:
    @pytest.mark.asyncio
    async def test_allowed_role(self):
        caller = CurrentUser(id="u1", username="acme", role=UserRole.INSTITUTION)
        dependency = require_roles(UserRole.INSTITUTION, UserRole.ADMIN)

        assert await dependency(caller) is caller

    @pytest.mark.asyncio
    async def test_forbidden_role(self):
        caller = CurrentUser(id="u1", username="alice", role=UserRole.STUDENT)
        dependency = require_roles(UserRole.INSTITUTION)

        with pytest.raises(HTTPException) as exc_info:
            await dependency(caller)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail["error"] == "ROLE_REQUIRED"
