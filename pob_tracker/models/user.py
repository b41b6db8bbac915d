"""User and issued-token models."""

import re

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship, validates

from pob_tracker.database import Base
from pob_tracker.errors import ValidationFailed
from pob_tracker.models.mixins import TimestampMixin

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9\-]+$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30


class User(Base, TimestampMixin):
    """User model for authentication and administration."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(USERNAME_MAX_LENGTH), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    home_location = Column(String(255), nullable=True)
    reset_password_token = Column(String(64), nullable=True, index=True)  # sha256 hex digest
    reset_password_expires = Column(DateTime(timezone=True), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    tokens = relationship("UserToken", back_populates="user", cascade="all, delete-orphan")

    @validates("username")
    def validate_username(self, key: str, value: str) -> str:
        value = (value or "").strip().lower()
        if not USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH:
            raise ValidationFailed(
                f"Username must be between {USERNAME_MIN_LENGTH} and "
                f"{USERNAME_MAX_LENGTH} characters"
            )
        if not USERNAME_PATTERN.match(value):
            raise ValidationFailed("Username can only contain letters, numbers, and hyphens")
        return value

    @validates("password_hash")
    def validate_password_hash(self, key: str, value: str) -> str:
        # Plaintext must never reach this column
        if not value or not value.startswith("$2"):
            raise ValidationFailed("Password must be stored hashed")
        return value


class UserToken(Base, TimestampMixin):
    """A bearer token issued to a user at login."""

    __tablename__ = "user_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(Text, nullable=False)

    # Relationships
    user = relationship("User", back_populates="tokens")
