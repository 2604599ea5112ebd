from unittest.mock import MagicMock
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

from src.server.app import clear_caches, create_app
from src.worklog.exceptions import GenerationFailedError


@pytest.fixture
def client(db_path):
    clear_caches()
    app = create_app()
    yield TestClient(app)
    clear_caches()


def auth_headers(client, username="alice", password="pw"):
    resp = client.post("/api/auth/register", json={"username": username, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


ITEM = {
    "id": "item-1",
    "title": "Weekly sync",
    "content": "Discussed roadmap",
    "category": "Work",
    "date": "2025-11-10T09:00:00.000Z",
    "durationMinutes": 30,
    "seriesId": "series-1",
}

SERIES = {
    "id": "series-1",
    "title": "Roadmap",
    "description": "Q4 planning",
    "status": "active",
    "createdAt": "2025-11-01T00:00:00.000Z",
}


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_register_and_login(client):
    resp = client.post("/api/auth/register", json={"username": "alice", "password": "pw"})
    assert resp.status_code == 200
    assert resp.json()["username"] == "alice"

    resp = client.post("/api/auth/register", json={"username": "alice", "password": "pw"})
    assert resp.status_code == 400

    resp = client.post("/api/auth/login", json={"username": "alice", "password": "pw"})
    assert resp.status_code == 200
    token = resp.json()["token"]

    resp = client.post("/api/auth/login", json={"username": "alice", "password": "nope"})
    assert resp.status_code == 401

    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["username"] == "alice"


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/items"),
        ("delete", "/api/items/x"),
        ("get", "/api/series"),
        ("delete", "/api/series/x"),
        ("get", "/api/stats"),
    ],
)
def test_data_endpoints_require_token(client, method, path):
    resp = getattr(client, method)(path)
    assert resp.status_code == 401

    resp = getattr(client, method)(path, headers={"Authorization": "Bearer forged.token"})
    assert resp.status_code == 401


def test_item_crud_flow(client):
    headers = auth_headers(client)

    resp = client.get("/api/items", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == []

    resp = client.post("/api/items", json=ITEM, headers=headers)
    assert resp.status_code == 200
    saved = resp.json()
    assert saved["id"] == "item-1"
    assert saved["durationMinutes"] == 30
    assert saved["seriesId"] == "series-1"
    assert saved["date"] == "2025-11-10T09:00:00+00:00"

    resp = client.post("/api/items", json={**ITEM, "content": "Updated", "durationMinutes": 50}, headers=headers)
    assert resp.status_code == 200

    items = client.get("/api/items", headers=headers).json()
    assert len(items) == 1
    assert items[0]["content"] == "Updated"
    assert items[0]["durationMinutes"] == 50

    resp = client.delete("/api/items/item-1", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"deleted": True}

    resp = client.delete("/api/items/item-1", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"deleted": False}

    assert client.get("/api/items", headers=headers).json() == []


def test_item_validation(client):
    headers = auth_headers(client)

    resp = client.post("/api/items", json={**ITEM, "durationMinutes": -5}, headers=headers)
    assert resp.status_code == 422

    resp = client.post("/api/items", json={**ITEM, "category": "Gaming"}, headers=headers)
    assert resp.status_code == 422


def test_items_are_scoped_per_user(client):
    alice = auth_headers(client, "alice")
    bob = auth_headers(client, "bob")

    client.post("/api/items", json=ITEM, headers=alice)
    client.post("/api/items", json={**ITEM, "content": "bob's"}, headers=bob)

    assert [i["content"] for i in client.get("/api/items", headers=alice).json()] == ["Discussed roadmap"]
    assert [i["content"] for i in client.get("/api/items", headers=bob).json()] == ["bob's"]

    client.delete("/api/items/item-1", headers=bob)
    assert len(client.get("/api/items", headers=alice).json()) == 1


def test_series_flow_and_orphan_items(client):
    headers = auth_headers(client)

    resp = client.post("/api/series", json=SERIES, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "active"

    client.post("/api/items", json=ITEM, headers=headers)
    client.post("/api/items", json={**ITEM, "id": "item-2"}, headers=headers)

    done = {**SERIES, "status": "completed", "completedAt": "2025-12-01T00:00:00Z"}
    resp = client.post("/api/series", json=done, headers=headers)
    assert resp.json()["status"] == "completed"
    assert resp.json()["completedAt"] == "2025-12-01T00:00:00+00:00"

    resp = client.get("/api/items", params={"series_id": "series-1"}, headers=headers)
    assert len(resp.json()) == 2

    resp = client.delete("/api/series/series-1", headers=headers)
    assert resp.json() == {"deleted": True}
    assert client.get("/api/series", headers=headers).json() == []

    items = client.get("/api/items", headers=headers).json()
    assert [i["seriesId"] for i in items] == ["series-1", "series-1"]


def test_stats_endpoint(client):
    headers = auth_headers(client)
    client.post("/api/items", json={**ITEM, "id": "a", "durationMinutes": 30}, headers=headers)
    client.post("/api/items", json={**ITEM, "id": "b", "durationMinutes": 10}, headers=headers)
    client.post("/api/items", json={**ITEM, "id": "c", "category": "Life", "durationMinutes": 5}, headers=headers)

    body = client.get("/api/stats", headers=headers).json()
    assert body["totalMinutes"] == 45
    assert {b["name"]: b["value"] for b in body["categoryDistribution"]} == {"Work": 40, "Life": 5}
    assert len(body["dailyDistribution"]) == 7
    assert "activity" in body


def test_generate_proxies_to_model(client, monkeypatch):
    headers = auth_headers(client)
    fake = MagicMock()
    fake.generate_text.return_value = "generated"
    monkeypatch.setattr("src.server.routes.generate.get_ollama_client", lambda: fake)

    resp = client.post("/api/generate", json={"prompt": "hello", "model": "m"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"text": "generated"}
    fake.generate_text.assert_called_once_with("hello", "m")


def test_generate_errors(client, monkeypatch):
    headers = auth_headers(client)
    fake = MagicMock()
    fake.generate_text.side_effect = GenerationFailedError("upstream down")
    monkeypatch.setattr("src.server.routes.generate.get_ollama_client", lambda: fake)

    resp = client.post("/api/generate", json={}, headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Prompt is required"}

    resp = client.post("/api/generate", json={"prompt": "hello"}, headers=headers)
    assert resp.status_code == 502
    assert "upstream down" in resp.json()["error"]

    resp = client.post("/api/generate", json={"prompt": "hello"})
    assert resp.status_code == 401


def test_non_ascii_token_is_unauthorized(client):
    resp = client.get("/api/items", headers={"Authorization": b"Bearer caf\xe9.x"})
    assert resp.status_code == 401


@pytest.mark.parametrize("odd_id", ["a?b", "a/b", "a#b"])
def test_delete_only_touches_exact_id(client, odd_id):
    headers = auth_headers(client)
    client.post("/api/items", json={**ITEM, "id": "a"}, headers=headers)
    client.post("/api/items", json={**ITEM, "id": odd_id}, headers=headers)

    resp = client.delete(f"/api/items/{quote(odd_id, safe='')}", headers=headers)
    assert resp.json() == {"deleted": True}
    assert [i["id"] for i in client.get("/api/items", headers=headers).json()] == ["a"]
