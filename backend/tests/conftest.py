"""
Pytest fixtures for the warehouse map API.

Every test gets its own app built by create_app with an in-memory SQLite
database and a temporary upload directory.
"""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        ADMIN_USERNAME=ADMIN_USERNAME,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        SEED_DEMO_DATA=False,
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client; entering it runs the lifespan (tables + bootstrap admin)."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(app, client):
    session = app.state.session_factory()
    yield session
    session.close()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def login(client, username: str, password: str) -> str:
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


@pytest.fixture
def admin_headers(client):
    return auth_headers(login(client, ADMIN_USERNAME, ADMIN_PASSWORD))


@pytest.fixture
def worker_headers(client, admin_headers):
    resp = client.post(
        "/api/users",
        json={"username": "worker1", "password": "secret1", "role": "worker"},
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    return auth_headers(login(client, "worker1", "secret1"))


@pytest.fixture
def make_product(client, admin_headers):
    def _make(name: str) -> dict:
        resp = client.post("/api/products", json={"name": name}, headers=admin_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make


@pytest.fixture
def make_warehouse(client, admin_headers):
    def _make(name: str) -> dict:
        resp = client.post("/api/warehouses", json={"name": name}, headers=admin_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make


@pytest.fixture
def save_positions(client, admin_headers):
    def _save(warehouse_id: int, product_id: int, positions: list):
        return client.put(
            f"/api/warehouses/{warehouse_id}/positions",
            json={"productId": product_id, "positions": positions},
            headers=admin_headers,
        )
    return _save
