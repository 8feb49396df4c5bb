"""
Tests de los endpoints HTTP de sincronizacion.
Se usa la app real con las dependencias de base de datos, configuracion y
webhooks sustituidas.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from auraflow.api.v1.dependencies.use_case_deps import (
    get_sheet_webhook_client,
    get_status_webhook_client,
)
from auraflow.core.config import get_settings
from auraflow.infrastructure.database.models import EventModel, ProjectModel
from auraflow.infrastructure.database.session import get_db
from auraflow.infrastructure.external.sheets import SheetWebhookError
from auraflow.infrastructure.security.shared_secret_auth_service import SharedSecretAuthService
from main import create_application


API_KEY = "test-api-key"
AUTH = {"Authorization": f"Bearer {API_KEY}"}


@pytest_asyncio.fixture
async def client(db_session, test_settings, sheet_client, status_client):
    app = create_application()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_sheet_webhook_client] = lambda: sheet_client
    app.dependency_overrides[get_status_webhook_client] = lambda: status_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _count_events(db_session):
    result = await db_session.execute(select(func.count()).select_from(EventModel))
    return result.scalar_one()


class TestSharedSecretAuthService:

    def test_accepts_exact_bearer(self):
        assert SharedSecretAuthService("k").verify_authorization("Bearer k") is True

    @pytest.mark.parametrize("header", [None, "", "k", "Bearer K", "bearer k", "Bearer k "])
    def test_rejects_anything_else(self, header):
        assert SharedSecretAuthService("k").verify_authorization(header) is False

    def test_unconfigured_rejects_all(self):
        service = SharedSecretAuthService("")
        assert service.is_configured() is False
        assert service.verify_authorization("Bearer ") is False


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestBatchSync:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer wrong"}, {"Authorization": API_KEY}])
    async def test_unauthorized_writes_nothing(self, client, db_session, headers):
        response = await client.post(
            "/api/v1/sync/events",
            json=[{"title": "should not exist"}],
            headers=headers,
        )

        assert response.status_code == 401
        assert response.json() == {"status": "error", "message": "Unauthorized."}
        assert await _count_events(db_session) == 0

    @pytest.mark.asyncio
    async def test_partial_failure_is_200(self, client, db_session):
        response = await client.post(
            "/api/v1/sync/events",
            json=[
                {"title": "a", "sheet_row_id": "Sheet1:2"},
                {"title": "b", "status": "bogus", "sheet_row_id": "Sheet1:3"},
            ],
            headers=AUTH,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert [line["success"] for line in body["results"]] == [True, False]
        assert [line["rowNum"] for line in body["results"]] == [2, 3]
        assert body["results"][0]["event_uid"]
        assert body["results"][1]["error"]
        assert await _count_events(db_session) == 1

    @pytest.mark.asyncio
    async def test_project_envelope(self, client, db_session):
        response = await client.post(
            "/api/v1/sync/events",
            json={"project": {"spreadsheet_id": "S9", "name": "Board"}, "tasks": [{"title": "t"}]},
            headers=AUTH,
        )

        assert response.status_code == 200
        project = (await db_session.execute(select(ProjectModel))).scalar_one()
        assert project.spreadsheet_id == "S9"

    @pytest.mark.asyncio
    async def test_malformed_json(self, client):
        response = await client.post(
            "/api/v1/sync/events",
            content=b"{not json",
            headers={**AUTH, "Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json()["status"] == "error"

    @pytest.mark.asyncio
    async def test_wrong_shape_is_400(self, client):
        response = await client.post("/api/v1/sync/events", json={"events": []}, headers=AUTH)

        assert response.status_code == 400
        assert response.json()["status"] == "error"


class TestStrictCreate:

    PAYLOAD = {
        "title": "Kick-off",
        "status": "to_do",
        "priority": "high",
        "project_id": 1,
        "spreadsheet_id": "S1",
        "sheet_gid": "0",
    }

    @pytest.mark.asyncio
    async def test_created(self, client, db_session, sheet_client):
        response = await client.post("/api/v1/events", json=self.PAYLOAD, headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["event"]["title"] == "Kick-off"
        assert body["event"]["sheet_row_id"] == "Tareas:12"
        sheet_client.append_row.assert_awaited_once()
        assert await _count_events(db_session) == 1

    @pytest.mark.asyncio
    async def test_missing_fields(self, client, sheet_client):
        response = await client.post("/api/v1/events", json={"title": "x"}, headers=AUTH)

        assert response.status_code == 400
        assert response.json() == {
            "status": "error",
            "message": "Missing required fields: status, priority, project_id, spreadsheet_id, sheet_gid",
        }
        sheet_client.append_row.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, client):
        response = await client.post(
            "/api/v1/events",
            content=b"[",
            headers={**AUTH, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"status": "error", "message": "Invalid JSON payload."}

    @pytest.mark.asyncio
    async def test_sheet_failure_is_502_and_row_removed(self, client, db_session, sheet_client):
        sheet_client.append_row.side_effect = SheetWebhookError("Tab not found", status_code=200)

        response = await client.post("/api/v1/events", json=self.PAYLOAD, headers=AUTH)

        assert response.status_code == 502
        assert response.json() == {"status": "error", "message": "Tab not found"}
        assert await _count_events(db_session) == 0

    @pytest.mark.asyncio
    async def test_unauthorized(self, client, sheet_client):
        response = await client.post("/api/v1/events", json=self.PAYLOAD)

        assert response.status_code == 401
        sheet_client.append_row.assert_not_awaited()


class TestChangeNotifications:

    @pytest.mark.asyncio
    async def test_empty_diff(self, client, db_session, sheet_client):
        project = ProjectModel(spreadsheet_id="S1")
        db_session.add(project)
        await db_session.commit()
        row = {"event_uid": "u1", "title": "same", "project_id": project.id, "spreadsheet_id": "S1"}

        response = await client.post(
            "/api/v1/events/changes",
            json={"type": "UPDATE", "table": "events", "record": {**row, "updated_at": "later"}, "old_record": row},
        )

        assert response.status_code == 200
        assert response.json()["synced"] is False
        sheet_client.update_row.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_trigger_token_enforced_when_configured(self, client, test_settings, sheet_client):
        test_settings.CHANGE_TRIGGER_TOKEN = "trigger"

        response = await client.post(
            "/api/v1/events/changes",
            json={"record": {"project_id": 1}, "old_record": {}},
        )

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Unauthorized."}
        sheet_client.update_row.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_trigger_token_accepted(self, client, test_settings):
        test_settings.CHANGE_TRIGGER_TOKEN = "trigger"

        response = await client.post(
            "/api/v1/events/changes",
            json={"record": {"event_uid": "u1"}, "old_record": {}},
            headers={"Authorization": "Bearer trigger"},
        )

        assert response.status_code == 200
        assert response.json()["synced"] is False

    @pytest.mark.asyncio
    async def test_update_webhook_failure_is_500(self, client, db_session, sheet_client):
        project = ProjectModel(spreadsheet_id="S1")
        db_session.add(project)
        await db_session.commit()
        row = {"event_uid": "u1", "title": "old", "project_id": project.id, "spreadsheet_id": "S1"}
        sheet_client.update_row.side_effect = SheetWebhookError("Row not found", status_code=200)

        response = await client.post(
            "/api/v1/events/changes",
            json={"record": {**row, "title": "new"}, "old_record": row},
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Row not found"}

    @pytest.mark.asyncio
    async def test_status_change_without_spreadsheet_id(self, client, status_client):
        response = await client.post(
            "/api/v1/events/status-changes",
            json={"record": {"event_uid": "u1", "status": "done"}},
        )

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Missing spreadsheet_id in the database record.",
        }
        status_client.push_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_status_change(self, client, status_client):
        response = await client.post(
            "/api/v1/events/status-changes",
            json={"record": {"event_uid": "u1", "status": "done", "spreadsheet_id": "S1"}},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Webhook sent successfully."
        status_client.push_status.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_status_webhook_failure_is_500(self, client, status_client):
        status_client.push_status.side_effect = SheetWebhookError("boom", status_code=500)

        response = await client.post(
            "/api/v1/events/status-changes",
            json={"record": {"event_uid": "u1", "status": "done", "spreadsheet_id": "S1"}},
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "boom"}
