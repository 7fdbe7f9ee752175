"""
Core module - Configuration, database, security, sessions and utilities.
"""

from smartlearn.core.config import get_settings, settings
from smartlearn.core.database import Base, close_db, get_db, init_db
from smartlearn.core.exceptions import ServiceError
from smartlearn.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Errors
    "ServiceError",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
