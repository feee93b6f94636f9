from __future__ import annotations

from unittest.mock import patch

from chefbot.storage.backends import StorageError


def _share(client, menu_item_id="menu-1", platform="twitter"):
    return client.post("/api/social-shares/increment", json={"menuItemId": menu_item_id, "platform": platform})


def test_increment_creates_then_counts(client):
    first = _share(client)
    assert first.status_code == 200
    assert first.json()["shareCount"] == 1

    second = _share(client)
    assert second.json()["shareCount"] == 2
    assert second.json()["id"] == first.json()["id"]


def test_shares_listed_per_menu_item(client):
    _share(client, platform="twitter")
    _share(client, platform="facebook")
    _share(client, menu_item_id="menu-2", platform="twitter")

    rows = client.get("/api/social-shares/menuitem/menu-1").json()
    assert sorted(r["platform"] for r in rows) == ["facebook", "twitter"]
    assert len(client.get("/api/social-shares").json()) == 3


def test_increment_unknown_menu_item(client):
    resp = _share(client, menu_item_id="ghost")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Menu item not found"}


def test_increment_requires_platform(client):
    resp = client.post("/api/social-shares/increment", json={"menuItemId": "menu-1"})
    assert resp.status_code == 400


def test_storage_failure_maps_to_500(client, storage):
    with patch.object(storage, "increment_share", side_effect=StorageError("down")):
        resp = _share(client)
    assert resp.status_code == 500
    assert resp.json() == {"message": "Storage unavailable"}


def test_increment_survives_concurrent_first_share(client, storage):
    backend = storage._backend
    real_insert = backend.insert

    def insert_after_competitor(collection, record):
        real_insert(collection, {**record, "id": "competitor"})
        return real_insert(collection, record)

    with patch.object(backend, "insert", side_effect=insert_after_competitor):
        resp = _share(client)

    assert resp.status_code == 200
    assert resp.json()["shareCount"] == 2
    assert resp.json()["id"] == "competitor"
