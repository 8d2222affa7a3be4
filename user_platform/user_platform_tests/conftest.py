"""
Shared fixtures for the user service tests.

Points the service at its own SQLite file before the package is imported,
and rebuilds the tables before every test.
"""
import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_app.db")

import pytest
from fastapi.testclient import TestClient

from user_platform.user_platform.user_service.main import app
from user_platform.user_platform.user_service.db import Base, engine, SessionLocal
from user_platform.user_platform.user_service.models import User
from user_platform.user_platform.user_service.auth import hash_password


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_user(db_session):
    """Store a user directly, bypassing the API."""
    def _make_user(name="Jane Doe", email=None, password="password123"):
        user = User(
            name=name,
            email=email or f"user_{uuid.uuid4().hex[:8]}@example.com",
            password=hash_password(password),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def registered(client):
    """Register a fresh user through the API and return its credentials and token."""
    unique = uuid.uuid4().hex[:8]
    data = {"name": "John Doe", "email": f"john_{unique}@example.com", "password": "password123"}
    response = client.post("/api/register", json=data)
    assert response.status_code == 200
    return {**data, "token": response.json()["access_token"]}