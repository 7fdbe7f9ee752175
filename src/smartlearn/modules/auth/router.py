"""
Authentication Router

Endpoints:
- POST /auth/send-code - Email a sign-up verification code
- POST /auth/register - Create an account using the emailed code
- POST /auth/login - Exchange username/password for a session token
- GET /auth/verify-email - Verify an account with its stored code
- POST /auth/resend-verification - Store and email a new account code
- GET /auth/me - Current caller's profile
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartlearn.core.auth import CurrentUser, get_current_user
from smartlearn.core.database import get_db
from smartlearn.core.exceptions import ServiceError
from smartlearn.modules.auth import service
from smartlearn.modules.auth.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    ResendVerificationRequest,
    SendCodeRequest,
)
from smartlearn.modules.auth.verification import VerificationCodeStore, get_verification_store
from smartlearn.modules.shared import MessageResponse
from smartlearn.modules.shared.http import raise_internal_error, raise_service_error
from smartlearn.modules.users import service as user_service
from smartlearn.modules.users.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/send-code", response_model=MessageResponse, summary="Send Verification Code")
async def send_code(
    data: SendCodeRequest,
    db: AsyncSession = Depends(get_db),
    store: VerificationCodeStore = Depends(get_verification_store),
) -> MessageResponse:
    try:
        await service.send_code(db, store, data.email)
        return MessageResponse(message="Verification code sent.")
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "sending verification code")


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=201,
    summary="Register",
    description="Create an email-verified account. Requires the code from `/auth/send-code`.",
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    store: VerificationCodeStore = Depends(get_verification_store),
) -> AuthResponse:
    try:
        return await service.register(db, store, data)
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "registering account")


@router.post("/login", response_model=AuthResponse, summary="Login")
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """
    Authenticate user and return a session token.

    Raises:
        HTTPException 401: Unknown username or wrong password
        HTTPException 403: Account banned or disabled
    """
    try:
        return await service.login(db, credentials)
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "logging in")


@router.get("/verify-email", response_model=MessageResponse, summary="Verify Email")
async def verify_email(
    email: str = Query(..., description="Account email"),
    code: str = Query(..., description="Code from the verification email"),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await service.verify_email_by_account_code(db, email, code)
        return MessageResponse(message="Email verified.")
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "verifying email")


@router.post(
    "/resend-verification",
    response_model=MessageResponse,
    summary="Resend Verification Email",
)
async def resend_verification(
    data: ResendVerificationRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await service.resend_verification(db, data.email)
        return MessageResponse(message="Verification email sent.")
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "resending verification")


@router.get("/me", response_model=UserResponse, summary="Current User")
async def me(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    try:
        return await user_service.get_user(db, user.id)
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "loading current user")
