"""Pytest configuration and fixtures."""

import os
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import src.services.realtime as realtime_module
from src.database import Base, get_db
from src.main import app
from src.models.inventory import InventoryItem
from src.models.user import User
from src.services.classification import status_value


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/invensync", "/invensync_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

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


@pytest.fixture(autouse=True)
def fake_redis():
    """Capture published inventory events instead of talking to Redis."""
    mock_redis = MagicMock()
    realtime_module._sync_redis = mock_redis
    yield mock_redis
    realtime_module._sync_redis = None


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


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    email = "test@example.com"
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "testpass123", "name": "Test User"},
    )
    assert response.status_code == 201
    data = response.json()
    token = data["access_token"]
    user_id = data["user"]["id"]

    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user_id, email=email)


@pytest.fixture
def owner(db):
    """A user who owns inventory, created directly in the database."""
    user = User(email="owner@example.com", name="Owner", password_hash="fake")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def now():
    """A fixed 'current time' in the middle of a UTC day."""
    return datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def add_item(db):
    """Insert an item whose last update was days_ago days before `at`."""

    def _add_item(
        owner_id: int,
        name: str,
        expiry_days: int | None,
        at: datetime,
        days_ago: float = 0,
        category: str | None = None,
        created_days_ago: float | None = None,
    ) -> InventoryItem:
        updated_at = at - timedelta(days=days_ago)
        created_at = at - timedelta(days=created_days_ago if created_days_ago is not None else days_ago)
        item = InventoryItem(
            owner_id=owner_id,
            name=name,
            quantity=1,
            unit="pcs",
            category=category,
            expiry_days=expiry_days,
            status=status_value(expiry_days),
            created_at=created_at,
            updated_at=updated_at,
        )
        db.add(item)
        db.commit()
        return item

    return _add_item
