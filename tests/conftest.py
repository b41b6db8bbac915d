"""Pytest configuration and fixtures."""

import os

# Point the application at the test database before it reads its settings.
# PostgreSQL when TEST_DATABASE_URL is set, SQLite otherwise.
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")
os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL
os.environ["ENVIRONMENT"] = "development"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from pob_tracker import models  # noqa: E402, F401
from pob_tracker.database import Base, get_db  # noqa: E402
from pob_tracker.main import app  # noqa: E402


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id and username."""

    def __init__(self, *args, user_id: int | None = None, username: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.username = username


connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register_and_login(client, username: str, password: str, is_admin: bool = False) -> AuthHeaders:
    """Register a user, log in, and return bearer headers for it."""
    response = client.post(
        "/api/users/register",
        json={
            "username": username,
            "password": password,
            "first_name": "Test",
            "last_name": "User",
            "is_admin": is_admin,
        },
    )
    assert response.status_code == 201

    response = client.post("/api/users/login", json={"username": username, "password": password})
    assert response.status_code == 200
    data = response.json()

    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"},
        user_id=data["user"]["id"],
        username=data["user"]["username"],
    )


@pytest.fixture
def auth_headers(client):
    """Bearer headers for a regular (non-admin) user."""
    return register_and_login(client, "crew-member", "testpass123")


@pytest.fixture
def admin_headers(client):
    """Bearer headers for an administrator."""
    return register_and_login(client, "ops-admin", "adminpass123", is_admin=True)
