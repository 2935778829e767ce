"""Tests for ui/app.py — JSON API over the store."""

import json

import pytest
from fastapi.testclient import TestClient

from ordiaa.models import MAX_HISTORY_DAYS
from ui.app import app


@pytest.fixture
def client(workspace, monkeypatch):
    monkeypatch.delenv("ORDIAA_USERNAME", raising=False)
    monkeypatch.delenv("ORDIAA_PASSWORD", raising=False)
    return TestClient(app)


def _stored(workspace):
    return json.loads((workspace / "state.json").read_text(encoding="utf-8"))


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_index_renders(client):
    r = client.get("/", params={"day": "2026-10-18"})
    assert r.status_code == 200
    assert "Meditate" in r.text
    assert "Call the dentist" in r.text
    assert "Slow morning" in r.text


def test_index_invalid_day(client):
    assert client.get("/", params={"day": "someday"}).status_code == 400


def test_get_state(client):
    data = client.get("/api/state").json()
    assert [h["id"] for h in data["habits"]] == ["h1", "h2"]


def test_get_day(client):
    data = client.get("/api/days/2026-10-18").json()
    assert data["completion_rate"] == 50
    assert data["habits"][0]["completed"] is True
    assert data["habits"][1]["completed"] is False
    assert [t["id"] for t in data["todos"]] == ["t1", "t2"]


def test_get_empty_day(client):
    data = client.get("/api/days/2026-01-01").json()
    assert data["log"] == ""
    assert data["todos"] == []
    assert data["completion_rate"] == 0


def test_create_and_delete_habit(client, workspace):
    r = client.post("/api/habits", json={"name": "Walk", "emoji": "\U0001f6b6"})
    habit = r.json()["habit"]
    assert habit["name"] == "Walk"
    assert [h["name"] for h in _stored(workspace)["habits"]] == ["Meditate", "Read", "Walk"]

    assert client.delete(f"/api/habits/{habit['id']}").status_code == 200
    assert client.delete(f"/api/habits/{habit['id']}").status_code == 404


def test_toggle_habit(client, workspace):
    r = client.post("/api/habits/h2/toggle", json={"date": "2026-10-18"})
    assert r.json()["completed"] is True
    assert _stored(workspace)["completions"]["h2-2026-10-18"] is True
    assert client.get("/api/days/2026-10-18").json()["completion_rate"] == 100


def test_toggle_habit_bad_date(client):
    assert client.post("/api/habits/h1/toggle", json={"date": "2026-13-40"}).status_code == 400


def test_update_log(client, workspace):
    client.put("/api/days/2026-10-19/log", json={"text": "Quiet day"})
    assert _stored(workspace)["logs"]["2026-10-19"] == "Quiet day"
    assert client.get("/api/days/2026-10-19").json()["log"] == "Quiet day"


def test_todo_lifecycle(client, workspace):
    r = client.post("/api/days/2026-10-19/todos", json={"text": "Buy milk", "priority": "high"})
    todo = r.json()["todo"]
    assert todo["completed"] is False
    assert todo["createdAt"] == "2026-10-19"

    toggled = client.post(f"/api/days/2026-10-19/todos/{todo['id']}/toggle").json()["todo"]
    assert toggled["status"] == "done"
    assert toggled["completed"] is True

    updated = client.patch(
        f"/api/days/2026-10-19/todos/{todo['id']}", json={"status": "doing", "text": "Buy oat milk"}
    ).json()["todo"]
    assert updated["status"] == "doing"
    assert updated["completed"] is False
    assert _stored(workspace)["todos"]["2026-10-19"][0]["text"] == "Buy oat milk"

    assert client.delete(f"/api/days/2026-10-19/todos/{todo['id']}").status_code == 200
    assert _stored(workspace)["todos"]["2026-10-19"] == []


def test_todo_invalid_priority(client):
    r = client.post("/api/days/2026-10-19/todos", json={"text": "x", "priority": "asap"})
    assert r.status_code == 400


def test_todo_not_found(client):
    assert client.post("/api/days/2026-10-18/todos/nope/toggle").status_code == 404
    assert client.patch("/api/days/2026-10-18/todos/nope", json={"text": "y"}).status_code == 404
    assert client.delete("/api/days/2026-10-18/todos/nope").status_code == 404


def test_history(client):
    history = client.get("/api/history", params={"days": 3}).json()["history"]
    assert len(history) == 3
    assert all(0 <= p["rate"] <= 100 for p in history)


def test_history_default_length(client):
    assert len(client.get("/api/history").json()["history"]) == 7


def test_history_rejects_zero(client):
    assert client.get("/api/history", params={"days": 0}).status_code == 400


def test_history_rejects_huge_window(client):
    resp = client.get("/api/history", params={"days": 1000000})
    assert resp.status_code == 400


def test_history_accepts_max_window(client):
    history = client.get("/api/history", params={"days": MAX_HISTORY_DAYS}).json()["history"]
    assert len(history) == MAX_HISTORY_DAYS


def test_auth_required_when_configured(client, monkeypatch):
    monkeypatch.setenv("ORDIAA_USERNAME", "me")
    monkeypatch.setenv("ORDIAA_PASSWORD", "secret")
    assert client.get("/api/state").status_code == 401
    assert client.get("/api/state", auth=("me", "wrong")).status_code == 401
    assert client.get("/api/state", auth=("me", "secret")).status_code == 200
