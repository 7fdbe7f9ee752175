"""
Authentication Service Layer

Sign-up, login and email verification workflows.

Two independent verification mechanisms exist:

1. Sign-up: ``send_code`` puts a code in the in-memory
   VerificationCodeStore and ``register`` consumes it. The account is
   created already verified.
2. Account-bound: ``resend_verification`` stores a code on the account
   row and ``verify_email_by_account_code`` checks it there.

They share nothing but the code format.
"""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smartlearn.core import email as notifier
from smartlearn.core.config import settings
from smartlearn.core.exceptions import (
    ConflictError,
    ExpiredError,
    InvalidCredentialError,
    NotFoundError,
    PermissionDeniedError,
)
from smartlearn.core.security import hash_password, verify_password
from smartlearn.core.session import SessionIssuer, session_issuer
from smartlearn.modules.auth.schemas import AuthResponse, LoginRequest, RegisterRequest
from smartlearn.modules.auth.verification import VerificationCodeStore, generate_code
from smartlearn.modules.users import repository as user_repository
from smartlearn.modules.users.models import User
from smartlearn.modules.users.service import EmailTakenError, UsernameTakenError

logger = logging.getLogger(__name__)

# Greeting used when no account (and so no username) exists yet
SIGNUP_GREETING_NAME = "User"


# ============================================
# Exceptions
# ============================================


class EmailAlreadyRegisteredError(ConflictError):
    def __init__(self):
        super().__init__(
            message="This email is already registered.",
            error_code="EMAIL_ALREADY_REGISTERED",
        )


class UsernameNotFoundError(InvalidCredentialError):
    def __init__(self):
        super().__init__(message="User does not exist.", error_code="USERNAME_NOT_FOUND")


class PasswordMismatchError(InvalidCredentialError):
    def __init__(self):
        super().__init__(message="Incorrect password.", error_code="PASSWORD_MISMATCH")


class AccountBannedError(PermissionDeniedError):
    def __init__(self):
        super().__init__(message="This account has been banned.", error_code="ACCOUNT_BANNED")


class AccountDisabledError(PermissionDeniedError):
    def __init__(self):
        super().__init__(message="This account is disabled.", error_code="ACCOUNT_DISABLED")


class InvalidCodeError(InvalidCredentialError):
    def __init__(self):
        super().__init__(
            message="Invalid verification code.",
            error_code="INVALID_CODE",
            status_code=400,
        )


class AccountCodeExpiredError(ExpiredError):
    def __init__(self):
        super().__init__(
            message="Verification code has expired. Please request a new one.",
            error_code="CODE_EXPIRED",
        )


class EmailNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(message="No account uses this email.", error_code="EMAIL_NOT_FOUND")


class AlreadyVerifiedError(ConflictError):
    def __init__(self):
        super().__init__(message="Email is already verified.", error_code="ALREADY_VERIFIED")


# ============================================
# Helpers
# ============================================


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _code_ttl() -> timedelta:
    return timedelta(hours=settings.verification_code_ttl_hours)


def _build_auth_response(user: User, issuer: SessionIssuer) -> AuthResponse:
    return AuthResponse(
        token=issuer.issue(user),
        user_id=str(user.id),
        username=user.username,
        email=user.email,
        role=user.role,
        email_verified=user.email_verified,
    )


# ============================================
# Sign-up
# ============================================


async def send_code(db: AsyncSession, store: VerificationCodeStore, email: str) -> None:
    """
    Issue a sign-up verification code and email it.

    Any code previously pending for this email is replaced.

    Raises:
        EmailAlreadyRegisteredError: An account already uses this email
    """
    if await user_repository.email_exists(db, email):
        logger.warning(f"Verification code requested for registered email {email}")
        raise EmailAlreadyRegisteredError()

    code = store.issue(email)
    await notifier.send_verification_email(email, SIGNUP_GREETING_NAME, code)


async def register(
    db: AsyncSession,
    store: VerificationCodeStore,
    request: RegisterRequest,
    issuer: SessionIssuer = session_issuer,
) -> AuthResponse:
    """
    Create an account after proving control of its email.

    Username and email uniqueness are checked before the code is looked at,
    so a rejected sign-up never burns a valid code.

    Raises:
        UsernameTakenError: Username already exists
        EmailTakenError: Email already registered
        NoPendingCodeError, CodeMismatchError, CodeExpiredError: From the store
    """
    if await user_repository.username_exists(db, request.username):
        raise UsernameTakenError()

    if await user_repository.email_exists(db, request.email):
        raise EmailTakenError()

    store.consume(request.email, request.verification_code)

    try:
        user = await user_repository.create(
            db,
            username=request.username,
            email=request.email,
            password_hash=hash_password(request.password),
            role=request.role,
            phone=request.phone,
            organization=request.organization,
            address=request.address,
            email_verified=True,
            enabled=True,
            banned=False,
        )
    except IntegrityError:
        # A concurrent sign-up took the username or email after the checks above
        await db.rollback()
        if await user_repository.username_exists(db, request.username):
            raise UsernameTakenError() from None
        if await user_repository.email_exists(db, request.email):
            raise EmailTakenError() from None
        raise

    logger.info(f"Registered {user.role.value} account {user.username}")
    return _build_auth_response(user, issuer)


# ============================================
# Login
# ============================================


async def login(
    db: AsyncSession,
    request: LoginRequest,
    issuer: SessionIssuer = session_issuer,
) -> AuthResponse:
    """
    Authenticate with username and password.

    Checks run in a fixed order: existence, password, banned, enabled.

    Raises:
        UsernameNotFoundError, PasswordMismatchError, AccountBannedError,
        AccountDisabledError
    """
    user = await user_repository.get_by_username(db, request.username)
    if not user:
        logger.warning(f"Login attempt for non-existent username: {request.username}")
        raise UsernameNotFoundError()

    if not verify_password(request.password, user.password_hash):
        logger.warning(f"Invalid password for user: {request.username}")
        raise PasswordMismatchError()

    if user.banned:
        logger.warning(f"Login attempt for banned account: {request.username}")
        raise AccountBannedError()

    if not user.enabled:
        logger.warning(f"Login attempt for disabled account: {request.username}")
        raise AccountDisabledError()

    logger.info(f"User logged in: {user.username} (role: {user.role.value})")
    return _build_auth_response(user, issuer)


# ============================================
# Account-bound verification
# ============================================


async def verify_email_by_account_code(db: AsyncSession, email: str, code: str) -> None:
    """
    Mark an account's email verified using the code stored on the account.

    Raises:
        InvalidCodeError: No account has this email/code pair
        AccountCodeExpiredError: The stored code is past its expiry
    """
    user = await user_repository.get_by_email_and_code(db, email, code)
    if not user:
        logger.warning(f"Invalid account verification code for {email}")
        raise InvalidCodeError()

    expiry = user.verification_code_expiry
    if expiry is not None and _utcnow() > expiry:
        logger.warning(f"Expired account verification code for {email}")
        raise AccountCodeExpiredError()

    user.email_verified = True
    user.verification_code = None
    user.verification_code_expiry = None
    await user_repository.save(db, user)

    logger.info(f"Email verified for account {user.id}")


async def resend_verification(db: AsyncSession, email: str) -> None:
    """
    Store a fresh code on the account and email it.

    Raises:
        EmailNotFoundError: No account uses this email
        AlreadyVerifiedError: The account is already verified
    """
    user = await user_repository.get_by_email(db, email)
    if not user:
        raise EmailNotFoundError()

    if user.email_verified:
        raise AlreadyVerifiedError()

    code = generate_code()
    user.verification_code = code
    user.verification_code_expiry = _utcnow() + _code_ttl()
    await user_repository.save(db, user)

    logger.info(f"Stored new verification code for account {user.id}")
    await notifier.send_verification_email(user.email, user.username, code)
