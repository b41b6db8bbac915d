"""API error types and their translation into JSON responses.

Every failure surfaced to a client is one of the ``APIError`` variants below.
Storage-layer exceptions are mapped onto the same set by
``classify_storage_error`` before they are rendered.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException

from pob_tracker.config import get_settings

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base class for errors rendered as ``{"error": ..., "message": ...}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"
    message: str = "Something went wrong"
    code: str | None = None
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None, *, code: str | None = None):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.error, "message": self.message}
        if self.code:
            body["code"] = self.code
        return body


class ValidationFailed(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"
    message = "Invalid request"


class InvalidIdFormat(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid ID format"
    message = "Please provide a valid ID"


class AuthenticationError(APIError):
    """Missing, malformed, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Authentication failed"
    message = "Please authenticate"
    code = "AUTH_FAILED"
    headers = {"WWW-Authenticate": "Bearer"}


class AuthenticationRequired(AuthenticationError):
    error = "Authentication required"
    message = "No authorization header provided"
    code = None


class InvalidTokenFormat(AuthenticationError):
    error = "Invalid token format"
    message = 'Authorization header must start with "Bearer "'
    code = None


class InvalidToken(AuthenticationError):
    error = "Invalid token"
    message = "Malformed JWT token"
    code = "JWT_INVALID"


class TokenExpired(AuthenticationError):
    error = "Token expired"
    message = "Please log in again"
    code = "JWT_EXPIRED"


class AdminRequired(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Admin access required"
    message = "This action requires administrator privileges"


class NotFound(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"
    message = "Resource not found"


class StorageUnavailable(APIError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "Database service unavailable"
    message = "Please try again later"
    code = "DB_ERROR"


class InternalError(APIError):
    pass


def classify_storage_error(exc: SQLAlchemyError) -> APIError:
    """Map a SQLAlchemy exception onto an API error variant."""
    if isinstance(exc, OperationalError | DisconnectionError | PoolTimeoutError):
        return StorageUnavailable()
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return StorageUnavailable()
    if isinstance(exc, IntegrityError | DataError):
        return ValidationFailed("Invalid data")
    return InternalError()


def _with_detail(error: APIError, exc: Exception) -> APIError:
    """Expose the underlying message, in development only."""
    if get_settings().is_development:
        error.message = str(exc)
    return error


def _render(error: APIError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code, content=error.to_dict(), headers=error.headers
    )


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Render an APIError raised by a handler or dependency."""
    return _render(exc)


async def handle_storage_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Log a storage fault and render it as a generic API error."""
    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    error = _with_detail(classify_storage_error(exc), exc)
    return _render(error)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 errors."""
    errors = exc.errors()
    if any(err["loc"][0] == "path" and err["type"].startswith("int") for err in errors):
        return _render(InvalidIdFormat())

    messages = []
    for err in errors:
        field = ".".join(str(part) for part in err["loc"][1:])
        msg = err["msg"].removeprefix("Value error, ")
        messages.append(f"{field}: {msg}" if field else msg)
    return _render(ValidationFailed("; ".join(messages)))


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework-level HTTP errors (unknown routes, bad methods) in the API shape."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error = NotFound(f"No route for {request.url.path}")
    else:
        error = APIError(str(exc.detail))
        error.status_code = exc.status_code
        error.error = "Request failed"
    return JSONResponse(
        status_code=error.status_code, content=error.to_dict(), headers=exc.headers
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for anything not classified above."""
    logger.error(f"Server error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _render(_with_detail(InternalError(), exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Install all error handlers on the application."""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(SQLAlchemyError, handle_storage_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
