"""Tests for bearer authentication and admin gating."""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest
from jose import jwt

from pob_tracker.api.dependencies import _extract_token, get_optional_user, require_admin
from pob_tracker.config import get_settings
from pob_tracker.errors import (
    AdminRequired,
    AuthenticationRequired,
    InvalidToken,
    InvalidTokenFormat,
)
from pob_tracker.services.auth import create_access_token, decode_access_token

settings = get_settings()


def make_token(sub: str, expires_in: timedelta, secret: str | None = None) -> str:
    now = datetime.now(UTC)
    payload = {"sub": sub, "is_admin": False, "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


def test_missing_authorization_header(client):
    """Test a protected route without credentials."""
    response = client.get("/api/users/me")

    assert response.status_code == 401
    data = response.json()
    assert data["error"] == "Authentication required"
    assert response.headers["www-authenticate"] == "Bearer"


def test_wrong_authorization_scheme(client):
    """Test a header that does not use the Bearer scheme."""
    response = client.get("/api/users/me", headers={"Authorization": "Basic abc123"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid token format"


def test_malformed_token(client):
    """Test a token that is not a JWT."""
    response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    data = response.json()
    assert data["error"] == "Invalid token"
    assert data["code"] == "JWT_INVALID"


def test_token_with_wrong_signature(client, auth_headers):
    """Test a token signed with another secret."""
    token = make_token(str(auth_headers.user_id), timedelta(hours=1), secret="another-secret")
    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["code"] == "JWT_INVALID"


def test_expired_token(client, auth_headers):
    """Test an expired token is reported distinctly."""
    token = make_token(str(auth_headers.user_id), timedelta(minutes=-5))
    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    data = response.json()
    assert data["error"] == "Token expired"
    assert data["code"] == "JWT_EXPIRED"


def test_token_for_deleted_user(client, admin_headers, auth_headers):
    """Test a valid token whose user no longer exists."""
    response = client.delete(f"/api/users/{auth_headers.user_id}", headers=admin_headers)
    assert response.status_code == 200

    response = client.get("/api/users/me", headers=auth_headers)

    assert response.status_code == 401
    assert response.json()["message"] == "User not found"


def test_non_admin_is_forbidden(client, auth_headers):
    """Test an authenticated non-admin on an admin route."""
    response = client.get("/api/users", headers=auth_headers)

    assert response.status_code == 403
    assert response.json()["error"] == "Admin access required"


def test_admin_route_without_identity(client):
    """Test an admin route rejects anonymous callers as unauthenticated."""
    response = client.get("/api/users")

    assert response.status_code == 401


def test_admin_is_allowed(client, admin_headers):
    """Test an admin passes the admin gate."""
    response = client.get("/api/users", headers=admin_headers)

    assert response.status_code == 200


def test_access_token_round_trip(db, client, auth_headers):
    """Test issued tokens carry the user id and admin flag."""
    from pob_tracker.models.user import User

    user = db.query(User).filter(User.id == auth_headers.user_id).first()
    payload = decode_access_token(create_access_token(user))

    assert payload["sub"] == str(user.id)
    assert payload["is_admin"] is False
    assert payload["exp"] > payload["iat"]


def test_extract_token_rules():
    """Test header parsing edge cases."""
    with pytest.raises(AuthenticationRequired):
        _extract_token(None)
    with pytest.raises(InvalidTokenFormat):
        _extract_token("Token abc")
    with pytest.raises(InvalidToken) as exc_info:
        _extract_token("Bearer ")
    assert exc_info.value.message == "Token is missing after Bearer prefix"

    assert _extract_token("Bearer abc.def.ghi") == "abc.def.ghi"


def test_optional_user_never_rejects(db):
    """Test optional identity yields None for missing or bad credentials."""
    request = SimpleNamespace(state=SimpleNamespace())

    assert get_optional_user(request, db, None) is None
    assert get_optional_user(request, db, "Bearer garbage") is None
    assert get_optional_user(request, db, "Token abc") is None
    assert not hasattr(request.state, "user")


def test_optional_user_resolves_identity(db, client, auth_headers):
    """Test optional identity resolves a valid token."""
    request = SimpleNamespace(state=SimpleNamespace())

    user = get_optional_user(request, db, auth_headers["Authorization"])

    assert user is not None
    assert user.id == auth_headers.user_id
    assert request.state.user is user


def test_require_admin_reads_request_state():
    """Test the admin gate works from request state alone."""
    with pytest.raises(AuthenticationRequired):
        require_admin(SimpleNamespace(state=SimpleNamespace()))

    regular = SimpleNamespace(username="crew", is_admin=False)
    with pytest.raises(AdminRequired):
        require_admin(SimpleNamespace(state=SimpleNamespace(user=regular)))

    admin = SimpleNamespace(username="boss", is_admin=True)
    assert require_admin(SimpleNamespace(state=SimpleNamespace(user=admin))) is admin
