"""
Tests for the reminders router
"""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from reminder_app import routes


@pytest.fixture
def test_app(manager):
    app = FastAPI()
    app.include_router(routes.router)
    app.dependency_overrides[routes.get_manager] = lambda: manager
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


def _create(client, title="Buy milk", **extra):
    body = {"title": title, "category": "Personal", "repeat": "none", "occurs_at": "2024-01-01T09:00:00"}
    body.update(extra)
    return client.post("/reminders", json=body)


class TestCreateReminder:
    def test_create(self, client, scheduler):
        resp = _create(client)
        assert resp.status_code == 201
        data = resp.json()
        assert data["reminder"]["title"] == "Buy milk"
        assert data["reminder"]["category"] == "Personal"
        assert data["reminder"]["occurs_at"] == "2024-01-01T09:00:00"
        assert data["reminder"]["schedule_handle"] == scheduler.scheduled[0][0]
        assert data["warnings"] == []

    def test_empty_title(self, client, manager):
        resp = _create(client, title="   ")
        assert resp.status_code == 422
        assert manager.reminders == ()

    def test_unknown_category(self, client):
        assert _create(client, category="Errands").status_code == 422

    def test_scheduler_failure_returns_warning(self, client, scheduler):
        scheduler.fail_schedule = True
        resp = _create(client)
        assert resp.status_code == 201
        assert resp.json()["reminder"]["schedule_handle"] is None
        assert resp.json()["warnings"]

    def test_persistence_failure(self, client, kv):
        kv.fail_writes = True
        assert _create(client).status_code == 503


class TestListReminders:
    def test_list_empty(self, client):
        resp = client.get("/reminders")
        assert resp.status_code == 200
        assert resp.json() == {"count": 0, "reminders": []}

    def test_list_newest_first_and_filter(self, client):
        _create(client, title="Report", category="Work")
        _create(client, title="Exam", category="Study")

        data = client.get("/reminders").json()
        assert [r["title"] for r in data["reminders"]] == ["Exam", "Report"]

        data = client.get("/reminders", params={"category": "Work"}).json()
        assert data["count"] == 1
        assert data["reminders"][0]["title"] == "Report"

    def test_get_one(self, client):
        rid = _create(client).json()["reminder"]["id"]
        assert client.get(f"/reminders/{rid}").json()["id"] == rid
        assert client.get("/reminders/missing").status_code == 404


class TestEditReminder:
    def test_edit(self, client, manager):
        rid = _create(client).json()["reminder"]["id"]
        resp = client.put(
            f"/reminders/{rid}",
            json={"title": "Buy milk and eggs", "category": "Personal", "repeat": "none", "occurs_at": "2024-01-01T09:00:00"},
        )
        assert resp.status_code == 200
        assert resp.json()["reminder"]["id"] == rid
        assert resp.json()["reminder"]["title"] == "Buy milk and eggs"
        assert len(manager.reminders) == 1

    def test_edit_missing(self, client):
        resp = client.put(
            "/reminders/missing",
            json={"title": "x", "category": "Work", "repeat": "daily", "occurs_at": "2024-01-01T09:00:00"},
        )
        assert resp.status_code == 404

    def test_edit_empty_title(self, client):
        rid = _create(client).json()["reminder"]["id"]
        resp = client.put(
            f"/reminders/{rid}",
            json={"title": "", "category": "Work", "repeat": "daily", "occurs_at": "2024-01-01T09:00:00"},
        )
        assert resp.status_code == 422


class TestDeleteReminder:
    def test_delete(self, client, scheduler, manager):
        created = _create(client).json()["reminder"]
        resp = client.delete(f"/reminders/{created['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"id": created["id"], "deleted": True, "warnings": []}
        assert scheduler.cancelled == [created["schedule_handle"]]
        assert manager.reminders == ()

    def test_delete_missing(self, client):
        assert client.delete("/reminders/missing").status_code == 404


def test_service_not_running_is_503():
    app = FastAPI()
    app.include_router(routes.router)
    client = TestClient(app)
    assert client.get("/reminders").status_code == 503
