"""
User Service Layer

Account directory operations used by administrators: search, lookup,
profile updates, ban/unban, creation and deletion.

The search operation is deliberately lenient. Malformed filter or paging
input yields an empty page instead of an error so the admin listing never
breaks on a bad query string. Every other operation raises a ServiceError.
"""

import logging
from typing import Any
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from smartlearn.core.config import settings
from smartlearn.core.exceptions import ConflictError, NotFoundError
from smartlearn.core.security import hash_password
from smartlearn.modules.shared import PageResponse, page_offset
from smartlearn.modules.users import repository
from smartlearn.modules.users.models import User, UserRole
from smartlearn.modules.users.repository import UserFilter
from smartlearn.modules.users.schemas import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    UserCreateRequest,
    UserQueryRequest,
    UserResponse,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)


class UserNotFoundError(NotFoundError):
    """Raised when an account does not exist."""

    def __init__(self, user_id: str | UUID | None = None):
        message = f"User {user_id} not found" if user_id else "User not found"
        super().__init__(message=message, error_code="USER_NOT_FOUND")


class UsernameTakenError(ConflictError):
    """Raised when a username is already used by another account."""

    def __init__(self):
        super().__init__(message="Username already exists.", error_code="USERNAME_TAKEN")


class EmailTakenError(ConflictError):
    """Raised when an email is already registered to another account."""

    def __init__(self):
        super().__init__(message="Email is already registered.", error_code="EMAIL_TAKEN")


async def _get_user_or_raise(db: AsyncSession, user_id: str | UUID) -> User:
    user = await repository.get_by_id(db, user_id)
    if not user:
        raise UserNotFoundError(user_id)
    return user


def _fallback_paging(raw: dict[str, Any]) -> tuple[int, int]:
    """Best-effort page/size for an empty response to an invalid query."""
    try:
        page = max(int(raw.get("page") or DEFAULT_PAGE), 1)
    except (TypeError, ValueError):
        page = DEFAULT_PAGE
    try:
        size = int(raw.get("size") or DEFAULT_PAGE_SIZE)
    except (TypeError, ValueError):
        size = DEFAULT_PAGE_SIZE
    if size < 1:
        size = DEFAULT_PAGE_SIZE
    return page, min(size, 100)


async def search_users(
    db: AsyncSession,
    raw_query: dict[str, Any],
) -> PageResponse[UserResponse]:
    """
    Search accounts with a dynamic set of ANDed filters.

    Args:
        db: Database session
        raw_query: Untrusted query parameters (strings or typed values)

    Returns:
        One page of matching accounts, newest first. Invalid input yields
        an empty page.
    """
    try:
        query = UserQueryRequest.model_validate(raw_query)
    except ValidationError as e:
        logger.warning(f"Invalid user search parameters: {e.error_count()} error(s)")
        page, size = _fallback_paging(raw_query)
        return PageResponse[UserResponse].empty(page=page, size=size)

    page = query.normalized_page()
    size = query.normalized_size()

    criteria = UserFilter(
        username=query.username,
        email=query.email,
        organization=query.organization,
        role=query.role,
        email_verified=query.email_verified,
        enabled=query.enabled,
        banned=query.banned,
    )

    users, total = await repository.search(
        db,
        criteria,
        skip=page_offset(page, size),
        limit=size,
    )

    return PageResponse[UserResponse].build(
        records=[UserResponse.model_validate(user) for user in users],
        total=total,
        page=page,
        size=size,
    )


async def get_user(db: AsyncSession, user_id: str | UUID) -> UserResponse:
    """Get one account by ID."""
    user = await _get_user_or_raise(db, user_id)
    return UserResponse.model_validate(user)


async def update_user(
    db: AsyncSession,
    user_id: str | UUID,
    data: UserUpdateRequest,
) -> UserResponse:
    """
    Apply a partial update to an account.

    Changing username or email to a value held by another account fails.
    """
    user = await _get_user_or_raise(db, user_id)

    if data.username is not None and data.username != user.username:
        if await repository.username_exists(db, data.username):
            raise UsernameTakenError()
        user.username = data.username

    if data.email is not None and data.email != user.email:
        if await repository.email_exists(db, data.email):
            raise EmailTakenError()
        user.email = data.email

    for field in ("phone", "organization", "address", "enabled", "banned"):
        value = getattr(data, field)
        if value is not None:
            setattr(user, field, value)

    user = await repository.save(db, user)
    logger.info(f"Updated user {user.id}")
    return UserResponse.model_validate(user)


async def set_banned(db: AsyncSession, user_id: str | UUID, banned: bool) -> None:
    """Ban or unban an account."""
    user = await _get_user_or_raise(db, user_id)
    user.banned = banned
    await repository.save(db, user)
    logger.info(f"User {user.id} {'banned' if banned else 'unbanned'}")


async def ban_user(db: AsyncSession, user_id: str | UUID) -> None:
    await set_banned(db, user_id, True)


async def unban_user(db: AsyncSession, user_id: str | UUID) -> None:
    await set_banned(db, user_id, False)


async def create_user(
    db: AsyncSession,
    data: UserCreateRequest,
    role: UserRole,
) -> UserResponse:
    """
    Create an account on behalf of an administrator.

    The account starts enabled, unbanned and email-verified, with the
    configured initial password.
    """
    if await repository.username_exists(db, data.username):
        raise UsernameTakenError()

    if await repository.email_exists(db, data.email):
        raise EmailTakenError()

    user = await repository.create(
        db,
        username=data.username,
        email=data.email,
        password_hash=hash_password(settings.default_admin_created_password),
        role=role,
        phone=data.phone,
        organization=data.organization,
        address=data.address,
        email_verified=True,
        enabled=True,
        banned=False,
    )
    return UserResponse.model_validate(user)


async def delete_user(db: AsyncSession, user_id: str | UUID) -> None:
    """Physically remove an account."""
    await _get_user_or_raise(db, user_id)
    await repository.delete_by_id(db, user_id)
    logger.info(f"Deleted user {user_id}")
