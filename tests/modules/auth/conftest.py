"""
Fixtures for authentication tests.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from smartlearn.core.security import hash_password
from smartlearn.modules.auth.schemas import LoginRequest, RegisterRequest
from smartlearn.modules.auth.verification import VerificationCodeStore
from smartlearn.modules.users.models import User, UserRole


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def store(clock):
    """A store with a 24h TTL and a controllable clock."""
    return VerificationCodeStore(ttl=timedelta(hours=24), clock=clock)


@pytest.fixture
def fixed_code_store(clock):
    """A store that always issues code 123456."""
    return VerificationCodeStore(
        ttl=timedelta(hours=24),
        clock=clock,
        code_factory=lambda: "123456",
    )


@pytest.fixture
def register_request():
    return RegisterRequest(
        username="alice",
        password="secret123",
        email="alice@example.com",
        role=UserRole.STUDENT,
        verification_code="123456",
    )


@pytest.fixture
def login_request():
    return LoginRequest(username="alice", password="secret123")


@pytest.fixture
def sample_user():
    """A verified, enabled student account with password 'secret123'."""
    user = MagicMock(spec=User)
    user.id = str(uuid4())
    user.username = "alice"
    user.email = "alice@example.com"
    user.password_hash = hash_password("secret123")
    user.role = UserRole.STUDENT
    user.email_verified = True
    user.enabled = True
    user.banned = False
    user.verification_code = None
    user.verification_code_expiry = None
    return user
