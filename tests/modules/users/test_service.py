"""
Unit tests for the user service layer.

These tests cover:
- Admin search (filters, paging, lenient invalid input)
- Account lookup, update, ban/unban
- Admin-created accounts and deletion
"""

from unittest.mock import AsyncMock, patch

import pytest

from smartlearn.core.security import verify_password
from smartlearn.modules.users.models import UserRole
from smartlearn.modules.users.repository import UserFilter
from smartlearn.modules.users.schemas import UserCreateRequest, UserUpdateRequest
from smartlearn.modules.users.service import (
    EmailTakenError,
    UserNotFoundError,
    UsernameTakenError,
    ban_user,
    create_user,
    delete_user,
    get_user,
    search_users,
    unban_user,
    update_user,
)

REPO = "smartlearn.modules.users.service.repository"


class TestSearchUsers:
    @pytest.mark.asyncio
    async def test_second_page_of_students_named_jo(self, mock_db, make_user):
        users = [make_user(f"jo{i}", f"jo{i}@example.com") for i in range(3)]

        with patch(REPO) as mock_repo:
            mock_repo.search = AsyncMock(return_value=(users, 13))

            result = await search_users(
                mock_db,
                {"username": "jo", "role": "STUDENT", "page": "2", "size": "10"},
            )

            criteria = mock_repo.search.call_args.args[1]
            assert criteria == UserFilter(username="jo", role=UserRole.STUDENT)
            assert mock_repo.search.call_args.kwargs == {"skip": 10, "limit": 10}

            assert result.page == 2
            assert result.size == 10
            assert result.total == 13
            assert result.total_pages == 2
            assert [r.username for r in result.records] == ["jo0", "jo1", "jo2"]

    @pytest.mark.asyncio
    async def test_oversized_page_size_is_capped(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.search = AsyncMock(return_value=([], 0))

            result = await search_users(mock_db, {"size": "1000"})

            assert mock_repo.search.call_args.kwargs == {"skip": 0, "limit": 100}
            assert result.size == 100

    @pytest.mark.asyncio
    async def test_invalid_role_returns_empty_page(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.search = AsyncMock()

            result = await search_users(mock_db, {"role": "MODERATOR", "page": "3"})

            mock_repo.search.assert_not_awaited()
            assert result.records == []
            assert result.total == 0
            assert result.page == 3

    @pytest.mark.asyncio
    async def test_non_numeric_page_returns_empty_page(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.search = AsyncMock()

            result = await search_users(mock_db, {"page": "abc", "size": "x"})

            mock_repo.search.assert_not_awaited()
            assert result.records == []
            assert result.page == 1
            assert result.size == 10

    @pytest.mark.asyncio
    async def test_overlong_username_returns_empty_page(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.search = AsyncMock()

            result = await search_users(mock_db, {"username": "a" * 60})

            mock_repo.search.assert_not_awaited()
            assert result.total == 0


class TestGetUser:
    @pytest.mark.asyncio
    async def test_get_user(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_user)

            result = await get_user(mock_db, sample_user.id)

            assert result.id == sample_user.id
            assert result.username == "john"

    @pytest.mark.asyncio
    async def test_get_missing_user(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(UserNotFoundError):
                await get_user(mock_db, "missing")


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_partial_update(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_user)
            mock_repo.save = AsyncMock(return_value=sample_user)

            await update_user(
                mock_db,
                sample_user.id,
                UserUpdateRequest(phone="555-0100", organization="Acme"),
            )

            assert sample_user.phone == "555-0100"
            assert sample_user.organization == "Acme"
            assert sample_user.username == "john"
            mock_repo.save.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_to_taken_username(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_user)
            mock_repo.username_exists = AsyncMock(return_value=True)
            mock_repo.save = AsyncMock()

            with pytest.raises(UsernameTakenError):
                await update_user(mock_db, sample_user.id, UserUpdateRequest(username="jane"))

            mock_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_to_taken_email(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_user)
            mock_repo.email_exists = AsyncMock(return_value=True)

            with pytest.raises(EmailTakenError):
                await update_user(
                    mock_db, sample_user.id, UserUpdateRequest(email="jane@example.com")
                )

    @pytest.mark.asyncio
    async def test_same_username_is_not_a_conflict(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_user)
            mock_repo.username_exists = AsyncMock(return_value=True)
            mock_repo.save = AsyncMock(return_value=sample_user)

            await update_user(mock_db, sample_user.id, UserUpdateRequest(username="john"))

            mock_repo.username_exists.assert_not_awaited()


class TestBanUnban:
    @pytest.mark.asyncio
    async def test_ban_then_unban(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_user)
            mock_repo.save = AsyncMock(return_value=sample_user)

            await ban_user(mock_db, sample_user.id)
            assert sample_user.banned is True

            await unban_user(mock_db, sample_user.id)
            assert sample_user.banned is False

    @pytest.mark.asyncio
    async def test_ban_missing_user(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(UserNotFoundError):
                await ban_user(mock_db, "missing")


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_create_user_uses_default_password(self, mock_db, make_user):
        created = make_user("school1", "school1@example.com", UserRole.INSTITUTION)

        with patch(REPO) as mock_repo:
            mock_repo.username_exists = AsyncMock(return_value=False)
            mock_repo.email_exists = AsyncMock(return_value=False)
            mock_repo.create = AsyncMock(return_value=created)

            result = await create_user(
                mock_db,
                UserCreateRequest(username="school1", email="school1@example.com"),
                UserRole.INSTITUTION,
            )

            kwargs = mock_repo.create.call_args.kwargs
            assert kwargs["role"] == UserRole.INSTITUTION
            assert kwargs["email_verified"] is True
            assert kwargs["enabled"] is True
            assert kwargs["banned"] is False
            assert verify_password("123456", kwargs["password_hash"])
            assert result.role == UserRole.INSTITUTION

    @pytest.mark.asyncio
    async def test_create_user_duplicate_username(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.username_exists = AsyncMock(return_value=True)
            mock_repo.create = AsyncMock()

            with pytest.raises(UsernameTakenError):
                await create_user(
                    mock_db,
                    UserCreateRequest(username="john", email="new@example.com"),
                    UserRole.STUDENT,
                )

            mock_repo.create.assert_not_awaited()


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_delete_user(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_user)
            mock_repo.delete_by_id = AsyncMock()

            await delete_user(mock_db, sample_user.id)

            mock_repo.delete_by_id.assert_awaited_once_with(mock_db, sample_user.id)

    @pytest.mark.asyncio
    async def test_delete_missing_user(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)
            mock_repo.delete_by_id = AsyncMock()

            with pytest.raises(UserNotFoundError):
                await delete_user(mock_db, "missing")

            mock_repo.delete_by_id.assert_not_awaited()
