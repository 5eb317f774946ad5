import os

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["APP_ENV"] = "test"

import pytest
from fastapi.testclient import TestClient

from tuchonga import models  # noqa: F401
from tuchonga.core.database import Base, SessionLocal, engine
from tuchonga.features.auth import token_store
from tuchonga.main import app

SUPER_ADMIN = {
    "email": "root@tuchonga.co.zw",
    "password": "rootpass123",
    "firstname": "Tendai",
    "lastname": "Moyo",
}
USER_PASSWORD = "userpass123"


class FakeRedis:
    """In-memory stand-in for the handful of redis commands the token store uses."""

    def __init__(self):
        self.data = {}

    def set(self, key, value, ex=None):
        self.data[key] = value
        return True

    def get(self, key):
        return self.data.get(key)

    def delete(self, *keys):
        return sum(1 for k in keys if self.data.pop(k, None) is not None)

    def exists(self, key):
        return 1 if key in self.data else 0


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(token_store, "redis_client", fake)
    return fake


@pytest.fixture(autouse=True)
def _tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    return TestClient(app)


def login(client, email, password):
    r = client.post("/api/auth/login", data={"username": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    r = client.post("/api/admin/setup/super-admin", json=SUPER_ADMIN)
    assert r.status_code == 201, r.text
    return login(client, SUPER_ADMIN["email"], SUPER_ADMIN["password"])


@pytest.fixture
def make_user(client):
    def _make(email, full_name=None):
        r = client.post(
            "/api/auth/register",
            json={"email": email, "password": USER_PASSWORD, "full_name": full_name},
        )
        assert r.status_code == 201, r.text
        return login(client, email, USER_PASSWORD)
    return _make


@pytest.fixture
def user_headers(make_user):
    return make_user("rudo@gmail.com", "Rudo Chirwa")


@pytest.fixture
def product(client, admin_headers):
    r = client.post(
        "/api/products",
        json={"product_name": "Mazoe Orange Crush", "product_owner": "Schweppes"},
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def service_item(client, admin_headers):
    r = client.post(
        "/api/services",
        json={"service_name": "EcoCash", "service_owner": "Econet"},
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    return r.json()
