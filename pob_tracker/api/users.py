"""User and authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pob_tracker.api.dependencies import ADMIN_ONLY, get_current_user
from pob_tracker.config import get_settings
from pob_tracker.database import get_db
from pob_tracker.errors import AdminRequired, AuthenticationError, NotFound, ValidationFailed
from pob_tracker.models.user import User
from pob_tracker.schemas.user import (
    AdminUserUpdate,
    AuthResponse,
    PasswordReset,
    PasswordResetTokenResponse,
    ProfileUpdate,
    UserDeleted,
    UserLogin,
    UserRegister,
    UserResponse,
)
from pob_tracker.services.auth import (
    authenticate_user,
    create_password_reset_token,
    create_user,
    get_password_hash,
    get_user_by_username,
    issue_token,
    reset_password,
    verify_password,
)

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/api/users", tags=["users"])


def get_user(db: Session, user_id: int) -> User:
    """Get a user by id or raise NotFound."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user (active immediately)."""
    if user_data.is_admin and not settings.allow_admin_registration:
        raise AdminRequired("Administrator accounts cannot be self-registered")

    if get_user_by_username(db, user_data.username):
        raise ValidationFailed("Username already exists")

    user = create_user(
        db,
        username=user_data.username,
        password=user_data.password,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        home_location=user_data.home_location,
        is_admin=user_data.is_admin,
    )

    logger.info(f"New user registered: {user.username}")
    return user


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with username and password."""
    user = authenticate_user(db, credentials.username, credentials.password)

    if not user:
        raise AuthenticationError("Invalid credentials", code="INVALID_CREDENTIALS")

    token = issue_token(db, user)

    logger.info(f"User logged in: {user.username}")
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post("/reset-password", response_model=UserResponse)
def consume_reset_token(
    reset_data: PasswordReset,
    db: Annotated[Session, Depends(get_db)],
):
    """Set a new password with a one-time reset token."""
    return reset_password(db, reset_data.token, reset_data.new_password)


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user profile."""
    return current_user


@router.put("/me", response_model=UserResponse)
def update_me(
    profile_data: ProfileUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update current user profile, including password."""
    if profile_data.new_password:
        if not profile_data.current_password:
            raise ValidationFailed("Current password is required to set new password")
        if not verify_password(profile_data.current_password, current_user.password_hash):
            raise ValidationFailed("Current password is incorrect")
        current_user.password_hash = get_password_hash(profile_data.new_password)

    if profile_data.first_name is not None:
        current_user.first_name = profile_data.first_name
    if profile_data.last_name is not None:
        current_user.last_name = profile_data.last_name
    if profile_data.home_location is not None:
        current_user.home_location = profile_data.home_location

    db.commit()
    db.refresh(current_user)

    logger.info(f"User profile updated: {current_user.username}")
    return current_user


# Admin routes


@router.get("", response_model=list[UserResponse], dependencies=ADMIN_ONLY)
def list_users(
    db: Annotated[Session, Depends(get_db)],
):
    """Get all users."""
    users = db.query(User).order_by(User.username).all()
    logger.info(f"Admin fetched {len(users)} users")
    return users


@router.get("/{user_id}", response_model=UserResponse, dependencies=ADMIN_ONLY)
def get_user_by_id(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get user by ID."""
    return get_user(db, user_id)


@router.put("/{user_id}", response_model=UserResponse, dependencies=ADMIN_ONLY)
def update_user(
    user_id: int,
    user_data: AdminUserUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    """Update any field of a user, including the password."""
    user = get_user(db, user_id)

    if user_data.username and user_data.username != user.username:
        if get_user_by_username(db, user_data.username):
            raise ValidationFailed("Username already exists")
        user.username = user_data.username

    if user_data.first_name is not None:
        user.first_name = user_data.first_name
    if user_data.last_name is not None:
        user.last_name = user_data.last_name
    if user_data.home_location is not None:
        user.home_location = user_data.home_location
    if user_data.is_admin is not None:
        user.is_admin = user_data.is_admin
    if user_data.password:
        user.password_hash = get_password_hash(user_data.password)

    db.commit()
    db.refresh(user)

    logger.info(f"Admin updated user: {user.username}")
    return user


@router.delete("/{user_id}", response_model=UserDeleted, dependencies=ADMIN_ONLY)
def delete_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Delete user by ID along with its issued tokens."""
    user = get_user(db, user_id)
    username = user.username

    db.delete(user)
    db.commit()

    logger.info(f"Admin deleted user: {username}")
    return UserDeleted(message="User deleted successfully", username=username)


@router.post(
    "/{user_id}/reset-token",
    response_model=PasswordResetTokenResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=ADMIN_ONLY,
)
def issue_reset_token(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Issue a one-time password reset token for a user."""
    user = get_user(db, user_id)
    raw_token, expires_at = create_password_reset_token(db, user)

    logger.info(f"Password reset token issued for user: {user.username}")
    return PasswordResetTokenResponse(user_id=user.id, reset_token=raw_token, expires_at=expires_at)
