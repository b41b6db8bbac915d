"""Authentication service for JWT, password and account handling."""

import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from pob_tracker.config import get_settings
from pob_tracker.errors import InvalidToken, TokenExpired, ValidationFailed
from pob_tracker.models.user import User, UserToken

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a password against its hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user: User) -> str:
    """Create a JWT access token for a user."""
    now = datetime.now(UTC)
    to_encode = {
        "sub": str(user.id),
        "is_admin": bool(user.is_admin),
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expiration_minutes),
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and validate a JWT token.

    Raises TokenExpired for an expired token and InvalidToken for anything
    else that fails verification.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise TokenExpired() from None
    except JWTError:
        raise InvalidToken() from None

    if not str(payload.get("sub", "")).isdigit():
        raise InvalidToken()
    return payload


def get_user_by_username(db: Session, username: str) -> User | None:
    """Get a user by username (case-insensitive)."""
    return db.query(User).filter(User.username == username.strip().lower()).first()


def authenticate_user(db: Session, username: str, password: str) -> User | None:
    """Authenticate a user by username and password."""
    user = get_user_by_username(db, username)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_user(
    db: Session,
    username: str,
    password: str,
    first_name: str,
    last_name: str,
    home_location: str | None = None,
    is_admin: bool = False,
) -> User:
    """Create a new user."""
    user = User(
        username=username,
        password_hash=get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        home_location=home_location or settings.default_home_location,
        is_admin=is_admin,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def issue_token(db: Session, user: User) -> str:
    """Stamp the login time, issue a token and record it against the user."""
    token = create_access_token(user)
    user.last_login = datetime.now(UTC)
    db.add(UserToken(user_id=user.id, token=token))
    db.commit()
    db.refresh(user)
    return token


def _digest(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode()).hexdigest()


def create_password_reset_token(db: Session, user: User) -> tuple[str, datetime]:
    """Issue a one-time reset token. Only its digest is stored."""
    raw_token = secrets.token_hex(20)
    expires_at = datetime.now(UTC) + timedelta(minutes=settings.password_reset_expiration_minutes)
    user.reset_password_token = _digest(raw_token)
    user.reset_password_expires = expires_at
    db.commit()
    return raw_token, expires_at


def reset_password(db: Session, raw_token: str, new_password: str) -> User:
    """Set a new password using a reset token, consuming the token."""
    user = db.query(User).filter(User.reset_password_token == _digest(raw_token)).first()
    if user is None or user.reset_password_expires is None:
        raise ValidationFailed("Password reset token is invalid or has expired")

    expires_at = user.reset_password_expires
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    if expires_at <= datetime.now(UTC):
        raise ValidationFailed("Password reset token is invalid or has expired")

    user.password_hash = get_password_hash(new_password)
    user.reset_password_token = None
    user.reset_password_expires = None
    db.commit()
    db.refresh(user)
    logger.info(f"Password reset completed for user: {user.username}")
    return user
