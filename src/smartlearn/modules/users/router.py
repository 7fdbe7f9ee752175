"""
User Admin Router

Account management endpoints. Every endpoint requires the ADMIN role.

Endpoints:
- GET /users - Search accounts
- GET /users/{id} - Get account
- PUT /users/{id} - Update account
- PUT /users/{id}/ban - Ban account
- PUT /users/{id}/unban - Unban account
- POST /users?role= - Create account
- DELETE /users/{id} - Delete account
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from smartlearn.core.auth import CurrentUser, require_roles
from smartlearn.core.database import get_db
from smartlearn.core.exceptions import ServiceError
from smartlearn.modules.shared import MessageResponse, PageResponse
from smartlearn.modules.shared.http import raise_internal_error, raise_service_error
from smartlearn.modules.users import service
from smartlearn.modules.users.models import UserRole
from smartlearn.modules.users.schemas import UserCreateRequest, UserResponse, UserUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()

_admin_only = require_roles(UserRole.ADMIN)

_SEARCH_PARAMS = (
    "username",
    "email",
    "organization",
    "role",
    "email_verified",
    "enabled",
    "banned",
    "page",
    "size",
)


@router.get(
    "",
    response_model=PageResponse[UserResponse],
    summary="Search Users",
    description="""
Search accounts. All filters are optional and combined with AND.

- `username`, `email`, `organization`: case-insensitive substring
- `role`: exact (STUDENT, INSTITUTION, ADMIN)
- `email_verified`, `enabled`, `banned`: exact

Paging: `page` (default 1), `size` (default 10, max 100). Malformed
input returns an empty page instead of an error.
""",
)
async def search_users(
    request: Request,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(_admin_only),
) -> PageResponse[UserResponse]:
    # Parameters are read raw so malformed values reach the lenient service
    raw_query = {
        key: request.query_params[key] for key in _SEARCH_PARAMS if key in request.query_params
    }
    try:
        result = await service.search_users(db, raw_query)
        logger.info(f"Admin {admin.id} searched users: total={result.total}")
        return result
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "searching users")


@router.get("/{user_id}", response_model=UserResponse, summary="Get User")
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(_admin_only),
) -> UserResponse:
    try:
        return await service.get_user(db, str(user_id))
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "getting user")


@router.put("/{user_id}", response_model=UserResponse, summary="Update User")
async def update_user(
    user_id: UUID,
    data: UserUpdateRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(_admin_only),
) -> UserResponse:
    try:
        result = await service.update_user(db, str(user_id), data)
        logger.info(f"Admin {admin.id} updated user {user_id}")
        return result
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "updating user")


@router.put("/{user_id}/ban", response_model=MessageResponse, summary="Ban User")
async def ban_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(_admin_only),
) -> MessageResponse:
    try:
        await service.ban_user(db, str(user_id))
        logger.info(f"Admin {admin.id} banned user {user_id}")
        return MessageResponse(message="User banned.")
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "banning user")


@router.put("/{user_id}/unban", response_model=MessageResponse, summary="Unban User")
async def unban_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(_admin_only),
) -> MessageResponse:
    try:
        await service.unban_user(db, str(user_id))
        logger.info(f"Admin {admin.id} unbanned user {user_id}")
        return MessageResponse(message="User unbanned.")
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "unbanning user")


@router.post(
    "",
    response_model=UserResponse,
    status_code=201,
    summary="Create User",
    description="Create an email-verified account with the configured initial password.",
)
async def create_user(
    data: UserCreateRequest,
    role: UserRole = Query(..., description="Role of the new account"),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(_admin_only),
) -> UserResponse:
    try:
        result = await service.create_user(db, data, role)
        logger.info(f"Admin {admin.id} created user {result.id} ({role.value})")
        return result
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "creating user")


@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete User")
async def delete_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(_admin_only),
) -> MessageResponse:
    try:
        await service.delete_user(db, str(user_id))
        logger.info(f"Admin {admin.id} deleted user {user_id}")
        return MessageResponse(message="User deleted.")
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "deleting user")
