"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from smartlearn.modules.users.models import UserRole


class SendCodeRequest(BaseModel):
    """Request a sign-up verification code."""

    email: EmailStr


class RegisterRequest(BaseModel):
    """Self-service sign-up, proven by the emailed verification code."""

    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=100)
    email: EmailStr
    role: UserRole = UserRole.STUDENT
    phone: str | None = Field(None, max_length=20)
    organization: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=200)
    verification_code: str = Field(..., min_length=1, max_length=6)

    @field_validator("role")
    @classmethod
    def _no_self_service_admin(cls, value: UserRole) -> UserRole:
        if value == UserRole.ADMIN:
            raise ValueError("ADMIN accounts cannot be self-registered")
        return value


class LoginRequest(BaseModel):
    """Login request schema."""

    username: str
    password: str


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class AuthResponse(BaseModel):
    """Session token plus the identity it was issued for."""

    token: str
    type: str = "Bearer"
    user_id: str
    username: str
    email: str
    role: UserRole
    email_verified: bool
