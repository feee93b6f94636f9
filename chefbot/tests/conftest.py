from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from chefbot.app import app
from chefbot.storage.adapter import Storage, get_storage
from chefbot.storage.config import StorageConfig

TEST_CONFIG = StorageConfig(database_url=None, bcrypt_rounds=4)


@pytest.fixture
def storage() -> Storage:
    """A freshly seeded in-memory store per test."""
    store = Storage(TEST_CONFIG)
    store.connect()
    return store


@pytest.fixture
def client(storage):
    app.dependency_overrides[get_storage] = lambda: storage
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client) -> dict[str, str]:
    resp = client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}
