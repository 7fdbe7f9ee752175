"""
Pending Verification Codes

Process-local store of sign-up verification codes, keyed by email. At most
one code is pending per email; issuing a new one replaces the old one.
Entries are removed when consumed, when found expired on consume, or by
the periodic sweep.

The store is created once per process in the application lifespan and
reached through ``get_verification_store``. Nothing here is persisted, so
pending codes do not survive a restart.
"""

import logging
import secrets
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from fastapi import Request

from smartlearn.core.exceptions import ExpiredError, InvalidCredentialError, ServiceError

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
DEFAULT_CODE_TTL = timedelta(hours=24)


class NoPendingCodeError(ServiceError):
    """Raised when no code was requested for the email (or it was already used)."""

    def __init__(self):
        super().__init__(
            message="Please request a verification code first.",
            error_code="NO_PENDING_CODE",
            status_code=400,
        )


class CodeMismatchError(InvalidCredentialError):
    """Raised when the supplied code differs from the pending one."""

    def __init__(self):
        super().__init__(
            message="Verification code is incorrect.",
            error_code="CODE_MISMATCH",
            status_code=400,
        )


class CodeExpiredError(ExpiredError):
    """Raised when a verification code is past its expiry."""

    def __init__(self):
        super().__init__(
            message="Verification code has expired. Please request a new one.",
            error_code="CODE_EXPIRED",
        )


@dataclass(frozen=True)
class PendingCode:
    code: str
    expires_at: datetime


def generate_code() -> str:
    """Return a uniformly random, zero-padded 6-digit code."""
    return f"{secrets.randbelow(10**CODE_LENGTH):0{CODE_LENGTH}d}"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VerificationCodeStore:
    """
    Thread-safe email -> pending code mapping.

    Args:
        ttl: Lifetime of an issued code
        clock: Returns the current time (aware UTC); injectable for tests
        code_factory: Produces new codes; injectable for tests
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_CODE_TTL,
        clock: Callable[[], datetime] = _utcnow,
        code_factory: Callable[[], str] = generate_code,
    ):
        self._ttl = ttl
        self._clock = clock
        self._code_factory = code_factory
        self._entries: dict[str, PendingCode] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def issue(self, email: str) -> str:
        """
        Generate a code for ``email``, replacing any pending one.

        Returns:
            The new code, for delivery to the email owner
        """
        code = self._code_factory()
        entry = PendingCode(code=code, expires_at=self._clock() + self._ttl)
        with self._lock:
            self._entries[email] = entry
        logger.info(f"Issued verification code for {email}")
        return code

    def consume(self, email: str, code: str) -> None:
        """
        Redeem the pending code for ``email``. Succeeds at most once per issue.

        A mismatch leaves the pending code in place. An expired code is
        removed.

        Raises:
            NoPendingCodeError: Nothing pending for this email
            CodeMismatchError: Supplied code differs from the pending one
            CodeExpiredError: Pending code is past its expiry
        """
        with self._lock:
            entry = self._entries.get(email)
            if entry is None:
                raise NoPendingCodeError()

            if entry.code != code:
                logger.warning(f"Verification code mismatch for {email}")
                raise CodeMismatchError()

            if self._clock() > entry.expires_at:
                del self._entries[email]
                logger.warning(f"Expired verification code presented for {email}")
                raise CodeExpiredError()

            del self._entries[email]

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [email for email, entry in self._entries.items() if now > entry.expires_at]
            for email in expired:
                del self._entries[email]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def get_verification_store(request: Request) -> VerificationCodeStore:
    """FastAPI dependency returning the process-wide store."""
    return request.app.state.verification_store
