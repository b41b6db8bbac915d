"""FastAPI dependencies for authentication, authorization and database."""

import logging
from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pob_tracker.database import get_db
from pob_tracker.errors import (
    AdminRequired,
    APIError,
    AuthenticationRequired,
    InvalidToken,
    InvalidTokenFormat,
)
from pob_tracker.models.user import User
from pob_tracker.services.auth import decode_access_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _extract_token(authorization: str | None) -> str:
    if authorization is None:
        raise AuthenticationRequired()
    if not authorization.startswith(BEARER_PREFIX):
        raise InvalidTokenFormat()
    token = authorization[len(BEARER_PREFIX) :].strip()
    if not token:
        raise InvalidToken("Token is missing after Bearer prefix")
    return token


def _resolve_user(db: Session, token: str) -> User:
    payload = decode_access_token(token)
    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if user is None:
        raise InvalidToken("User not found")
    return user


def get_current_user(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Get the current authenticated user from the bearer token.

    The resolved user and token are also attached to ``request.state`` for
    dependencies that run later in the chain.
    """
    token = _extract_token(authorization)
    user = _resolve_user(db, token)

    request.state.user = user
    request.state.token = token
    logger.debug(f"Authenticated user: {user.username}")
    return user


def get_optional_user(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    authorization: Annotated[str | None, Header()] = None,
) -> User | None:
    """Like get_current_user, but yields None instead of rejecting the request."""
    try:
        token = _extract_token(authorization)
        user = _resolve_user(db, token)
    except APIError as e:
        if authorization is not None:
            logger.info(f"Optional auth failed (non-critical): {e.message}")
        return None
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Optional auth skipped, storage error: {e}")
        return None

    request.state.user = user
    request.state.token = token
    return user


def require_admin(request: Request) -> User:
    """Allow the request only if the authenticated identity is an admin.

    Relies on an authentication dependency having populated ``request.state``;
    it does not touch the database.
    """
    user: User | None = getattr(request.state, "user", None)
    if user is None:
        raise AuthenticationRequired("Please log in to access this resource")

    if not user.is_admin:
        logger.warning(f"Admin access denied for user: {user.username}")
        raise AdminRequired()

    logger.debug(f"Admin access granted for user: {user.username}")
    return user


def actor_name(user: User | None) -> str:
    """Describe who issued a request, for audit log lines."""
    return user.username if user is not None else "anonymous"


# Dependency lists applied at route level, in evaluation order
AUTHENTICATED = [Depends(get_current_user)]
ADMIN_ONLY = [Depends(get_current_user), Depends(require_admin)]
