"""
Fixtures for user management tests.
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from smartlearn.modules.users.models import User, UserRole


def _make_user(username: str, email: str, role: UserRole = UserRole.STUDENT):
    user = MagicMock(spec=User)
    user.id = str(uuid4())
    user.username = username
    user.email = email
    user.role = role
    user.avatar = None
    user.phone = None
    user.organization = None
    user.address = None
    user.email_verified = True
    user.enabled = True
    user.banned = False
    user.created_at = datetime.now(UTC)
    user.updated_at = datetime.now(UTC)
    return user


@pytest.fixture
def make_user():
    return _make_user


@pytest.fixture
def sample_user():
    return _make_user("john", "john@example.com")
