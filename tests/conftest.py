"""
Test configuration and fixtures for the URL shortener.

Environment variables are set before the application is imported so the
settings object sees an in-memory database, no Redis and cheap bcrypt.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BASE_URL"] = "http://short.test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.shortener.main import app
from src.shortener.core.config import DummyRedis, get_settings
from src.shortener.db.base import Base
from src.shortener.db.session import get_db
from src.shortener.models import click, url, user  # noqa: F401
from src.shortener.services.auth_service import AuthService
from src.shortener.services.url_service import URLService
from src.shortener.services.user_service import UserService

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeRedis:
    """In-memory stand-in implementing the get/setex/delete subset."""

    def __init__(self):
        self.store = {}

    def setex(self, key, ttl, value):
        self.store[key] = value

    def get(self, key):
        return self.store.get(key)

    def delete(self, key):
        self.store.pop(key, None)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def url_service(db_session, settings):
    return URLService(db_session, DummyRedis(), settings)


@pytest.fixture
def user_service(db_session):
    return UserService(db_session)


@pytest.fixture
def auth_service(user_service, settings):
    return AuthService(user_service, settings)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with the database dependency overridden.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """
    Register a user through the API and return its id and auth headers.
    """
    def _register(email, password="pw1"):
        response = client.post("/auth/register", json={"email": email, "password": password})
        assert response.status_code == 201, response.text
        data = response.json()
        return {
            "user": data["user"],
            "headers": {"Authorization": f"Bearer {data['access_token']}"},
        }

    return _register


@pytest.fixture
def owner(register_user):
    return register_user("owner@x.com")


@pytest.fixture
def stranger(register_user):
    return register_user("stranger@x.com")


@pytest.fixture
def fake_cache():
    return FakeRedis()
