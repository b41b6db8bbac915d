"""User and authentication schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints

from pob_tracker.schemas.base import RequiredStr, TrimmedStr

Username = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        to_lower=True,
        min_length=3,
        max_length=30,
        pattern=r"^[a-zA-Z0-9\-]+$",
    ),
]


def _reject_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("Password cannot be blank")
    return value


Password = Annotated[str, Field(min_length=8, max_length=128), AfterValidator(_reject_blank)]
Name = Annotated[RequiredStr, Field(max_length=50)]


class UserRegister(BaseModel):
    """User registration request."""

    username: Username
    password: Password
    first_name: Name
    last_name: Name
    home_location: TrimmedStr | None = Field(None, max_length=255)
    is_admin: bool = False


class UserLogin(BaseModel):
    """User login request."""

    username: RequiredStr
    password: str = Field(..., min_length=1, max_length=128)


class ProfileUpdate(BaseModel):
    """Update the current user's own profile and, optionally, password."""

    first_name: Name | None = None
    last_name: Name | None = None
    home_location: TrimmedStr | None = Field(None, max_length=255)
    current_password: str | None = None
    new_password: Password | None = None


class AdminUserUpdate(BaseModel):
    """Administrative update of any user account."""

    username: Username | None = None
    first_name: Name | None = None
    last_name: Name | None = None
    home_location: TrimmedStr | None = Field(None, max_length=255)
    is_admin: bool | None = None
    password: Password | None = None


class PasswordReset(BaseModel):
    """Consume a password reset token."""

    token: RequiredStr
    new_password: Password


class UserResponse(BaseModel):
    """User information response. Secrets are never part of it."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    first_name: str
    last_name: str
    is_admin: bool
    home_location: str | None
    last_login: datetime | None
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    """Login response with token and user info."""

    user: UserResponse
    token: str
    token_type: str = "bearer"  # noqa: S105


class PasswordResetTokenResponse(BaseModel):
    """A freshly issued one-time password reset token."""

    user_id: int
    reset_token: str
    expires_at: datetime


class UserDeleted(BaseModel):
    message: str
    username: str
