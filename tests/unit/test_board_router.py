"""Tests for the board HTTP interface."""

import pytest
from fastapi.testclient import TestClient

from src.main import app
from src.services import google_service


def login(client: TestClient, phone: str, name: str = "") -> dict:
    response = client.post("/session/login", json={"phone": phone, "name": name})
    assert response.status_code == 200
    return response.json()


@pytest.mark.unit
def test_health_endpoint_returns_healthy() -> None:
    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.unit
class TestSession:
    def test_status(self, client):
        data = client.get("/status").json()

        assert data["offline"] is False
        assert data["offlineNotice"] is None
        assert data["syncIndicator"] == "idle"
        assert data["googleConnected"] is False
        assert data["speechAvailable"] is True

    def test_login_existing_member(self, client):
        data = login(client, "0812345678")

        assert data["user"]["id"] == "gard1"
        assert data["user"]["phoneNumber"] == "0812345678"
        assert data["sync"] is None
        assert client.get("/session").json()["user"]["id"] == "gard1"

    def test_register_gardener_requires_name(self, client):
        response = client.post("/session/login", json={"phone": "0800000000"})

        assert response.status_code == 400
        assert "Name is required" in response.json()["detail"]

    def test_register_gardener(self, client):
        data = login(client, "0800000000", "Charlie Leaf")

        assert data["user"]["role"] == "Gardener"
        assert data["sync"]["status"] == "synced"

    def test_logout(self, client):
        login(client, "0812345678")

        response = client.post("/session/logout")

        assert response.status_code == 200
        assert client.get("/session").json()["user"] is None
        assert client.get("/board").status_code == 401


@pytest.mark.unit
class TestBoard:
    def test_requires_login(self, client):
        response = client.get("/board")

        assert response.status_code == 401

    def test_board_snapshot(self, client):
        login(client, "0812345678")

        data = client.get("/board").json()

        assert [t["id"] for t in data["tasks"]] == ["task1"]
        assert data["tasks"][0]["dueDate"] == "2024-06-01"
        assert len(data["members"]) == 2
        assert [r["id"] for r in data["availableRoutines"]] == ["r1"]
        assert [t["id"] for t in data["overdue"]] == ["task1"]


@pytest.mark.unit
class TestTaskEndpoints:
    def test_create_task(self, client):
        login(client, "0812345678")

        response = client.post(
            "/tasks",
            json={"title": "Mow", "description": "Back lawn", "priority": "MEDIUM", "dueDate": "2024-06-03"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["task"]["status"] == "TODO"
        assert data["task"]["priority"] == "MEDIUM"
        assert data["sync"]["status"] == "synced"

    def test_move_task_auto_assigns(self, client):
        login(client, "0812345678")

        response = client.post("/tasks/task1/move", json={"status": "DOING"})

        assert response.status_code == 200
        assert response.json()["task"]["assigneeId"] == "gard1"

    def test_invalid_transition(self, client):
        login(client, "0812345678")

        response = client.post("/tasks/task1/move", json={"status": "DONE"})

        assert response.status_code == 400

    def test_unknown_task(self, client):
        login(client, "0812345678")

        response = client.post("/tasks/missing/move", json={"status": "DOING"})

        assert response.status_code == 404

    def test_offline_move_reports_sync_result(self, client, seeded_db):
        login(client, "0812345678")
        seeded_db.fail_all = True

        response = client.post("/tasks/task1/move", json={"status": "DOING"})

        assert response.status_code == 200
        sync = response.json()["sync"]
        assert sync["status"] == "offline"
        assert sync["attempted"] is True
        assert client.get("/status").json()["offline"] is True

    def test_upload_attachment(self, client):
        login(client, "0812345678")

        response = client.post(
            "/tasks/task1/attachments",
            files={"file": ("clip.mp4", b"mp4-bytes", "video/mp4")},
        )

        assert response.status_code == 201
        attachment = response.json()["attachment"]
        assert attachment["type"] == "video"
        assert attachment["name"] == "clip.mp4"
        assert "createdAt" in attachment

    def test_readout_and_stop(self, client, speech_engine):
        login(client, "0812345678")

        response = client.post("/tasks/task1/readout")

        assert response.status_code == 200
        assert response.json()["text"].startswith("Task Name: Water plants.")
        assert response.json()["speaking"] is True
        assert len(speech_engine.spoken) == 1

        assert client.post("/speech/stop").status_code == 204
        assert speech_engine.cancel_count == 1

    def test_projections(self, client):
        login(client, "0812345678")
        client.post("/tasks/task1/move", json={"status": "DOING"})
        client.post("/tasks/task1/move", json={"status": "DONE"})

        assert client.get("/tasks/overdue").json() == []
        assert [t["id"] for t in client.get("/tasks/history", params={"month": "2024-06"}).json()] == ["task1"]
        assert client.get("/tasks/history", params={"month": "June"}).status_code == 400

        grid = client.get("/calendar/2024/6").json()
        assert grid["firstWeekday"] == 6
        assert [t["id"] for t in grid["days"][0]["tasks"]] == ["task1"]

    def test_todays_tasks_filter(self, client):
        login(client, "0812345678")

        response = client.get("/tasks/today", params={"status": "DOING"})

        assert response.status_code == 200
        assert response.json() == []


@pytest.mark.unit
class TestTeamAndRoutines:
    def test_gardener_cannot_add_member(self, client):
        login(client, "0812345678")

        response = client.post("/members", json={"name": "Charlie", "phone": "0898765432"})

        assert response.status_code == 403

    def test_admin_manages_team(self, client):
        login(client, "9999")

        created = client.post("/members", json={"name": "Charlie", "phone": "0898765432", "role": "Botanist"})
        removed = client.delete(f"/members/{created.json()['member']['id']}")

        assert created.status_code == 201
        assert removed.status_code == 200
        assert removed.json()["sync"]["status"] == "synced"

    def test_admin_manages_routines(self, client):
        login(client, "9999")

        created = client.post("/routines", json={"title": "Soil Check", "defaultPriority": "MEDIUM"})
        routine_id = created.json()["routine"]["id"]
        edited = client.put(f"/routines/{routine_id}", json={"title": "Soil pH Check"})
        deleted = client.delete(f"/routines/{routine_id}")

        assert created.status_code == 201
        assert edited.json()["routine"]["title"] == "Soil pH Check"
        assert deleted.status_code == 200

    def test_activate_routine_hides_it(self, client):
        login(client, "0812345678")

        response = client.post("/routines/r1/activate")

        assert response.status_code == 201
        assert response.json()["task"]["title"] == "Morning Watering"
        assert client.get("/routines/available").json() == []


@pytest.mark.unit
class TestGoogleEndpoints:
    def test_connect_requires_token(self, client):
        login(client, "0812345678")

        response = client.post("/integrations/google/connect", json={"accessToken": ""})

        assert response.status_code == 400

    def test_connect_and_sync_without_sheet(self, client, monkeypatch):
        async def no_sign_out(self):
            return None

        monkeypatch.setattr(google_service.GoogleService, "sign_out", no_sign_out)
        login(client, "0812345678")

        connected = client.post("/integrations/google/connect", json={"accessToken": "token"})
        synced = client.post("/integrations/google/sync")

        assert connected.json()["googleConnected"] is True
        assert connected.json()["sheetConfigured"] is False
        assert synced.json() == {"synced": False, "syncIndicator": "idle"}

        client.post("/session/logout")
