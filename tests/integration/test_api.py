"""Integration tests for service endpoints and auth"""

from datetime import timedelta
from fastapi.testclient import TestClient
from finance_api.api.main import create_app
from finance_api.config import settings
from finance_api.infrastructure.database.session import create_db_engine
from finance_api.infrastructure.security import create_access_token


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "finance_transactions_created_total" in response.text


def test_register_returns_token(client: TestClient):
    response = client.post(
        "/v1/auth/register",
        json={"name": "Ana", "email": " Ana@Example.com ", "password": "secret123"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "ana@example.com"
    assert data["token"]
    assert data["id"]


def test_register_duplicate_email_conflict(client: TestClient, auth_user):
    response = client.post(
        "/v1/auth/register",
        json={"name": "Ana 2", "email": "ana@example.com", "password": "another1"},
    )
    assert response.status_code == 409


def test_register_short_password_rejected(client: TestClient):
    response = client.post(
        "/v1/auth/register",
        json={"name": "Ana", "email": "ana@example.com", "password": "123"},
    )
    assert response.status_code == 422


def test_login_success(client: TestClient, auth_user):
    response = client.post("/v1/auth/login", json={"email": "ana@example.com", "password": "secret123"})

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == auth_user["id"]
    assert data["token"]


def test_login_wrong_password_and_unknown_email_look_alike(client: TestClient, auth_user):
    """Test both failures are auth failures with the same message"""
    wrong_password = client.post("/v1/auth/login", json={"email": "ana@example.com", "password": "nope123"})
    unknown_email = client.post("/v1/auth/login", json={"email": "ghost@example.com", "password": "secret123"})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_me_requires_token(client: TestClient):
    assert client.get("/v1/auth/me").status_code == 401
    assert client.get("/v1/auth/me", headers={"Authorization": "Token abc"}).status_code == 401
    assert client.get("/v1/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_me_with_valid_token(client: TestClient, auth_user, auth_headers):
    response = client.get("/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == "ana@example.com"


def test_expired_token_rejected(client: TestClient, auth_user):
    token = create_access_token(auth_user["id"], auth_user["email"], settings, expires_delta=timedelta(seconds=-5))
    response = client.get("/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_startup_creates_schema_and_serves(tmp_path):
    """Test lifespan startup verifies the injected engine and creates tables"""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'startup.db'}")

    with TestClient(create_app(engine=engine)) as startup_client:
        response = startup_client.post(
            "/v1/auth/register",
            json={"name": "Dora", "email": "dora@example.com", "password": "secret123"},
        )
    assert response.status_code == 201


def test_register_blank_name_rejected(client: TestClient):
    response = client.post(
        "/v1/auth/register",
        json={"name": "   ", "email": "blank@example.com", "password": "secret123"},
    )
    assert response.status_code == 422
