# tests/test_api.py

import pytest
from fastapi.testclient import TestClient

from onelook.api.server import create_app
from onelook.assignments.stores import MemoryStore
from onelook.core.app import OneLookApp


@pytest.fixture
def onelook_app(config_file, memory_store, sample_assignments, now):
    memory_store.save(sample_assignments)
    app = OneLookApp(config_path=str(config_file), store=memory_store)
    app.board.now_fn = lambda: now
    yield app
    app.close()


@pytest.fixture
def client(onelook_app):
    return TestClient(create_app(onelook_app))


def test_healthcheck(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_sources(client):
    assert client.get("/api/sources").json() == ["Canvas", "Gradescope", "Piazza", "Other"]


def test_status(client):
    body = client.get("/api/status").json()
    assert body == {"backend": "memory", "key": "assignments_v1", "count": 4, "seeded": False}


def test_list_sorted_with_urgency(client):
    response = client.get("/api/assignments")
    assert response.status_code == 200
    rows = response.json()["assignments"]
    assert [r["id"] for r in rows] == ["a1", "a2", "a3", "a4"]
    assert [r["days_left"] for r in rows] == [1, 1, 3, 20]
    assert [r["urgency"] for r in rows] == ["critical", "critical", "warning", "normal"]
    assert rows[1]["link"] == "https://canvas.example/hw1"
    assert rows[0]["link"] is None


def test_list_filters(client):
    rows = client.get("/api/assignments", params={"q": "quiz"}).json()["assignments"]
    assert [r["title"] for r in rows] == ["Reading Quiz 1"]

    rows = client.get("/api/assignments", params={"source": "Canvas", "next7": "true"}).json()["assignments"]
    assert [r["id"] for r in rows] == ["a1", "a2"]

    rows = client.get("/api/assignments", params={"next7": "true"}).json()["assignments"]
    assert "a4" not in [r["id"] for r in rows]


def test_list_unknown_source_is_bad_request(client):
    assert client.get("/api/assignments", params={"source": "Moodle"}).status_code == 400


def test_list_accepts_any_case_source(client):
    rows = client.get("/api/assignments", params={"source": "piazza"}).json()["assignments"]
    assert [r["id"] for r in rows] == ["a4"]


def test_list_data_errors_are_not_bad_requests(onelook_app, monkeypatch):
    def broken_view(*args, **kwargs):
        raise ValueError("unparseable stored due time")

    monkeypatch.setattr(onelook_app.board, "view", broken_view)
    client = TestClient(create_app(onelook_app), raise_server_exceptions=False)
    assert client.get("/api/assignments").status_code == 500


def test_create_and_fetch(client, onelook_app):
    response = client.post("/api/assignments", json={
        "title": "  Midterm ",
        "course": "CIS 121",
        "source": "Other",
        "due": "2025-01-05T09:30:15",
        "link": "",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Midterm"
    assert body["dueISO"] == "2025-01-05T09:30"
    assert body["link"] is None
    assert body["urgency"] == "normal"

    fetched = client.get(f"/api/assignments/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == body
    assert onelook_app.store.load()[-1].title == "Midterm"


def test_create_rejected(client, onelook_app):
    response = client.post("/api/assignments", json={"title": " ", "course": "CIS 121", "due": "2025-01-05T09:30"})
    assert response.status_code == 400
    assert len(onelook_app.board.items) == 4


def test_delete_is_idempotent(client, onelook_app):
    assert client.delete("/api/assignments/a1").status_code == 204
    assert client.delete("/api/assignments/a1").status_code == 204
    assert client.get("/api/assignments/a1").status_code == 404
    assert "a1" not in {a.id for a in onelook_app.store.load()}


def test_first_run_seeds(config_file):
    app = OneLookApp(config_path=str(config_file), store=MemoryStore())
    try:
        client = TestClient(create_app(app))
        body = client.get("/api/status").json()
        assert body["seeded"] is True
        assert body["count"] == 3
    finally:
        app.close()
