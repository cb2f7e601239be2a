"""Pytest fixtures for testing"""

import os

# Settings are read at import time; point them at SQLite and cheap hashing first
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from typing import Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from finance_api.api.main import create_app
from finance_api.infrastructure.database.models import Base
from finance_api.infrastructure.database.session import create_db_engine, get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_db_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app(engine=engine)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def register_user(client: TestClient, email: str = "ana@example.com", name: str = "Ana") -> Dict[str, str]:
    """Register a user through the API and return the auth payload"""
    response = client.post(
        "/v1/auth/register",
        json={"name": name, "email": email, "password": "secret123"},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_user(client: TestClient) -> Dict[str, str]:
    """Registered user: id, name, email, token"""
    return register_user(client)


@pytest.fixture
def auth_headers(auth_user: Dict[str, str]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {auth_user['token']}"}


@pytest.fixture
def make_user(client: TestClient):
    """Factory registering extra users"""

    def _make(email: str, name: str = "User") -> Dict[str, str]:
        return register_user(client, email=email, name=name)

    return _make


@pytest.fixture
def other_user_headers(make_user) -> Dict[str, str]:
    other = make_user("bruno@example.com", "Bruno")
    return {"Authorization": f"Bearer {other['token']}"}
