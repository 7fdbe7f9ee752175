"""
Users module - Account directory and admin account management.
"""

from smartlearn.modules.users.models import User, UserRole

__all__ = ["User", "UserRole"]
