"""
Authentication and Authorization Dependencies

FastAPI dependencies that resolve the caller from a Bearer session token
and enforce role gates.

Usage:
    @router.post("/tasks")
    async def create_task(
        user: CurrentUser = Depends(require_roles(UserRole.INSTITUTION)),
    ):
        ...
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from smartlearn.core.database import get_db
from smartlearn.core.session import InvalidTokenError, session_issuer
from smartlearn.modules.users import repository as user_repository
from smartlearn.modules.users.models import UserRole

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token for authentication",
)


@dataclass
class CurrentUser:
    """The authenticated caller, loaded from the account store."""

    id: str
    username: str
    role: UserRole

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, username={self.username}, role={self.role.value})"


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """
    Resolve the caller from the Authorization header.

    Raises:
        HTTPException 401: Token invalid or account no longer exists
        HTTPException 403: Account is banned or disabled
    """
    try:
        user_id = session_issuer.resolve(credentials.credentials)
    except InvalidTokenError as e:
        logger.warning(f"Rejected session token: {e.message}")
        raise _unauthorized(e.error_code, e.message) from e

    user = await user_repository.get_by_id(db, user_id)
    if not user:
        logger.warning(f"Session token for unknown account {user_id}")
        raise _unauthorized("INVALID_TOKEN", "Account for this token no longer exists.")

    if user.banned or not user.enabled:
        logger.warning(f"Blocked request from inactive account {user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "ACCOUNT_INACTIVE",
                "message": "This account is banned or disabled.",
            },
        )

    return CurrentUser(id=str(user.id), username=user.username, role=user.role)


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[CurrentUser]]:
    """
    Build a dependency that only admits callers holding one of ``roles``.

    Raises:
        HTTPException 403: Caller's role is not allowed
    """
    allowed = set(roles)

    async def _dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            logger.warning(
                f"Access denied: user {user.id} has role '{user.role.value}', "
                f"requires one of {sorted(r.value for r in allowed)}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "ROLE_REQUIRED",
                    "message": "Your role does not permit this operation.",
                },
            )
        return user

    return _dependency


__all__ = [
    "CurrentUser",
    "get_current_user",
    "require_roles",
]
