"""
User Repository

Database operations for accounts. Uniqueness of username and email is
enforced by the services before writing and by unique indexes in the store.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import ColumnElement, delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from smartlearn.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserFilter:
    """
    Normalised user search criteria.

    ``None`` means "no constraint" for every field. String fields match as
    case-insensitive substrings, the rest match exactly.
    """

    username: str | None = None
    email: str | None = None
    organization: str | None = None
    role: UserRole | None = None
    email_verified: bool | None = None
    enabled: bool | None = None
    banned: bool | None = None


def build_user_filters(criteria: UserFilter) -> list[ColumnElement[bool]]:
    """
    Translate search criteria into SQLAlchemy predicates.

    All returned predicates are meant to be ANDed together.
    """
    predicates: list[ColumnElement[bool]] = []

    for column, value in (
        (User.username, criteria.username),
        (User.email, criteria.email),
        (User.organization, criteria.organization),
    ):
        if value:
            predicates.append(column.icontains(value, autoescape=True))

    if criteria.role is not None:
        predicates.append(User.role == criteria.role)

    for column, flag in (
        (User.email_verified, criteria.email_verified),
        (User.enabled, criteria.enabled),
        (User.banned, criteria.banned),
    ):
        if flag is not None:
            predicates.append(column == flag)

    return predicates


async def create(
    db: AsyncSession,
    *,
    username: str,
    email: str,
    password_hash: str,
    role: UserRole,
    phone: str | None = None,
    organization: str | None = None,
    address: str | None = None,
    email_verified: bool = False,
    enabled: bool = True,
    banned: bool = False,
) -> User:
    """Create a new account record."""
    user = User(
        username=username,
        email=email,
        password_hash=password_hash,
        role=role,
        phone=phone,
        organization=organization,
        address=address,
        email_verified=email_verified,
        enabled=enabled,
        banned=banned,
    )

    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info(f"Created user: {user.id} - {user.username} ({user.role.value})")
    return user


async def save(db: AsyncSession, user: User) -> User:
    """Persist changes made to a loaded account."""
    await db.commit()
    await db.refresh(user)
    return user


async def get_by_id(db: AsyncSession, user_id: str | UUID) -> User | None:
    """Get an account by ID."""
    return await db.get(User, str(user_id))


async def get_by_username(db: AsyncSession, username: str) -> User | None:
    """Get an account by username."""
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_by_email(db: AsyncSession, email: str) -> User | None:
    """Get an account by email address."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_by_email_and_code(db: AsyncSession, email: str, code: str) -> User | None:
    """Get an account whose stored verification code matches."""
    result = await db.execute(
        select(User).where(
            User.email == email,
            User.verification_code == code,
        )
    )
    return result.scalar_one_or_none()


async def username_exists(db: AsyncSession, username: str) -> bool:
    """Check if a username is already taken."""
    result = await db.execute(select(User.id).where(User.username == username).limit(1))
    return result.scalar_one_or_none() is not None


async def email_exists(db: AsyncSession, email: str) -> bool:
    """Check if an email address is already registered."""
    result = await db.execute(select(User.id).where(User.email == email).limit(1))
    return result.scalar_one_or_none() is not None


async def delete_by_id(db: AsyncSession, user_id: str | UUID) -> None:
    """Physically remove an account."""
    await db.execute(delete(User).where(User.id == str(user_id)))
    await db.commit()


async def search(
    db: AsyncSession,
    criteria: UserFilter,
    *,
    skip: int = 0,
    limit: int = 10,
) -> tuple[list[User], int]:
    """
    Search accounts, newest first.

    Args:
        db: Database session
        criteria: Normalised filter criteria
        skip: Rows to skip
        limit: Maximum rows to return

    Returns:
        Tuple of (accounts on this page, total matching accounts)
    """
    predicates = build_user_filters(criteria)

    query = select(User).where(*predicates)

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(desc(User.created_at)).offset(skip).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total


async def get_usernames(db: AsyncSession, user_ids: set[str]) -> dict[str, str]:
    """Batch-load usernames keyed by account ID."""
    if not user_ids:
        return {}
    result = await db.execute(select(User.id, User.username).where(User.id.in_(user_ids)))
    return {str(row.id): row.username for row in result}
