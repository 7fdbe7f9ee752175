"""
Session Issuer

Turns an authenticated account into a signed session token and resolves
tokens back into the caller's identity.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Protocol

from smartlearn.core.exceptions import InvalidCredentialError
from smartlearn.core.security import create_access_token, decode_token

logger = logging.getLogger(__name__)


class InvalidTokenError(InvalidCredentialError):
    """Raised when a session token is malformed, tampered or expired."""

    def __init__(self, message: str = "Invalid or expired authentication token."):
        super().__init__(message=message, error_code="INVALID_TOKEN", status_code=401)


class SessionSubject(Protocol):
    """Anything with an id, username and role (normally a User)."""

    id: Any
    username: str
    role: Any


@dataclass(frozen=True)
class SessionClaims:
    """Identity carried by a valid session token."""

    subject_id: str
    username: str
    role: str


class SessionIssuer:
    """Signs and verifies session tokens."""

    def __init__(self, expires_delta: timedelta | None = None):
        self._expires_delta = expires_delta

    def issue(self, account: SessionSubject) -> str:
        role = getattr(account.role, "value", account.role)
        return create_access_token(
            subject=str(account.id),
            additional_claims={"username": account.username, "role": role},
            expires_delta=self._expires_delta,
        )

    def resolve_claims(self, token: str) -> SessionClaims:
        """
        Verify a token and return its claims.

        Raises:
            InvalidTokenError: If the token cannot be verified, is not an
                access token, or lacks a subject
        """
        payload = decode_token(token)
        if payload is None:
            raise InvalidTokenError()

        if payload.get("type", "access") != "access":
            logger.warning(f"Rejected token of type {payload.get('type')}")
            raise InvalidTokenError("This endpoint requires an access token.")

        subject_id = payload.get("sub")
        if not subject_id:
            raise InvalidTokenError("Token contains invalid or missing claims.")

        return SessionClaims(
            subject_id=str(subject_id),
            username=payload.get("username", ""),
            role=payload.get("role", ""),
        )

    def resolve(self, token: str) -> str:
        """Return the caller's account ID from a token."""
        return self.resolve_claims(token).subject_id


session_issuer = SessionIssuer()
