"""
User Schemas

Pydantic schemas for account management and the admin user search.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from smartlearn.modules.users.models import UserRole

# Maximum lengths accepted for search terms
USERNAME_SEARCH_MAX_LENGTH = 50
EMAIL_SEARCH_MAX_LENGTH = 100
ORGANIZATION_SEARCH_MAX_LENGTH = 100

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _clean_string(value: str | None) -> str | None:
    """Trim whitespace; blank strings become None."""
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


class UserResponse(BaseModel):
    """Public view of an account."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    role: UserRole
    avatar: str | None = None
    phone: str | None = None
    organization: str | None = None
    address: str | None = None
    email_verified: bool
    enabled: bool
    banned: bool
    created_at: datetime
    updated_at: datetime


class UserQueryRequest(BaseModel):
    """
    Admin user search parameters.

    Every field is optional; absent fields impose no constraint. String
    terms are trimmed and blank terms are ignored. Paging values are
    corrected by the service rather than rejected.
    """

    username: str | None = None
    email: str | None = None
    organization: str | None = None
    role: UserRole | None = None
    email_verified: bool | None = None
    enabled: bool | None = None
    banned: bool | None = None
    page: int | None = DEFAULT_PAGE
    size: int | None = DEFAULT_PAGE_SIZE

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str | None) -> str | None:
        value = _clean_string(value)
        if value is not None and len(value) > USERNAME_SEARCH_MAX_LENGTH:
            raise ValueError(f"username must be at most {USERNAME_SEARCH_MAX_LENGTH} characters")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str | None) -> str | None:
        value = _clean_string(value)
        if value is not None and len(value) > EMAIL_SEARCH_MAX_LENGTH:
            raise ValueError(f"email must be at most {EMAIL_SEARCH_MAX_LENGTH} characters")
        return value

    @field_validator("organization")
    @classmethod
    def _check_organization(cls, value: str | None) -> str | None:
        value = _clean_string(value)
        if value is not None and len(value) > ORGANIZATION_SEARCH_MAX_LENGTH:
            raise ValueError(
                f"organization must be at most {ORGANIZATION_SEARCH_MAX_LENGTH} characters"
            )
        return value

    def normalized_page(self) -> int:
        if self.page is None or self.page < 1:
            return DEFAULT_PAGE
        return self.page

    def normalized_size(self) -> int:
        if self.size is None or self.size < 1:
            return DEFAULT_PAGE_SIZE
        return min(self.size, MAX_PAGE_SIZE)


class UserUpdateRequest(BaseModel):
    """Partial account update; only provided fields change."""

    username: str | None = Field(None, min_length=3, max_length=50)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=20)
    organization: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=200)
    enabled: bool | None = None
    banned: bool | None = None


class UserCreateRequest(BaseModel):
    """Admin-created account."""

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    phone: str | None = Field(None, max_length=20)
    organization: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=200)
