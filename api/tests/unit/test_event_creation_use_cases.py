"""
Tests de la creacion estricta (insert + alta en la hoja con compensacion).
"""
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from auraflow.application.use_cases.event_creation_use_cases import (
    EventCreationUseCases,
    find_missing_fields,
)
from auraflow.core.config import Settings
from auraflow.infrastructure.database.models import EventModel
from auraflow.infrastructure.external.sheets import SheetWebhookError
from auraflow.infrastructure.repositories.event_repository import EventRepository
from auraflow.shared.exceptions.sync import (
    InvalidPayloadException,
    MissingFieldsException,
    SheetAppendFailedException,
    WebhookConfigurationException,
)


VALID_PAYLOAD = {
    "title": "Kick-off",
    "status": "to_do",
    "priority": "high",
    "project_id": 7,
    "spreadsheet_id": "S1",
    "sheet_gid": "0",
    "owner": "ana",
}


async def _count_events(db_session):
    result = await db_session.execute(select(func.count()).select_from(EventModel))
    return result.scalar_one()


def test_find_missing_fields_keeps_contract_order():
    payload = {"status": "to_do", "priority": "", "sheet_gid": None, "project_id": 0}
    assert find_missing_fields(payload) == ["title", "priority", "spreadsheet_id", "sheet_gid"]


@pytest.mark.asyncio
async def test_missing_fields_message(db_session, test_settings, sheet_client):
    use_cases = EventCreationUseCases(db_session, test_settings, sheet_client)

    with pytest.raises(MissingFieldsException) as exc_info:
        await use_cases.create({"title": "x", "status": "to_do"})

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == (
        "Missing required fields: priority, project_id, spreadsheet_id, sheet_gid"
    )
    sheet_client.append_row.assert_not_awaited()
    assert await _count_events(db_session) == 0


@pytest.mark.asyncio
async def test_non_object_payload(db_session, test_settings, sheet_client):
    use_cases = EventCreationUseCases(db_session, test_settings, sheet_client)

    with pytest.raises(InvalidPayloadException):
        await use_cases.create(["not", "an", "object"])


@pytest.mark.asyncio
async def test_invalid_types_rejected_before_insert(db_session, test_settings, sheet_client):
    use_cases = EventCreationUseCases(db_session, test_settings, sheet_client)

    with pytest.raises(InvalidPayloadException) as exc_info:
        await use_cases.create({**VALID_PAYLOAD, "status": "bogus"})

    assert "status" in exc_info.value.message
    assert await _count_events(db_session) == 0


@pytest.mark.asyncio
async def test_webhook_not_configured(db_session, sheet_client):
    settings = Settings(_env_file=None, AURAFLOW_API_KEY="k", WEBHOOK_V2_URL="")
    use_cases = EventCreationUseCases(db_session, settings, sheet_client)

    with pytest.raises(WebhookConfigurationException) as exc_info:
        await use_cases.create(dict(VALID_PAYLOAD))

    assert exc_info.value.status_code == 500
    assert await _count_events(db_session) == 0


@pytest.mark.asyncio
async def test_create_inserts_and_appends(db_session, test_settings, sheet_client):
    use_cases = EventCreationUseCases(db_session, test_settings, sheet_client)

    response = await use_cases.create(dict(VALID_PAYLOAD))

    assert response.status == "success"
    assert response.event.title == "Kick-off"
    assert response.event.event_uid
    assert response.event.sheet_row_id == "Tareas:12"
    assert response.sheet == {"success": True, "sheet_row_id": "Tareas:12"}

    sheet_client.append_row.assert_awaited_once()
    spreadsheet_id, sheet_gid, data = sheet_client.append_row.await_args.args
    assert (spreadsheet_id, sheet_gid) == ("S1", "0")
    assert data["event_uid"] == response.event.event_uid
    assert data["sync_status"] == "synced"

    stored = await db_session.get(EventModel, response.event.id)
    assert stored.sheet_row_id == "Tareas:12"


@pytest.mark.asyncio
async def test_create_without_row_locator_in_response(db_session, test_settings, sheet_client):
    sheet_client.append_row.return_value = {"success": True}
    use_cases = EventCreationUseCases(db_session, test_settings, sheet_client)

    response = await use_cases.create(dict(VALID_PAYLOAD))

    assert response.event.sheet_row_id is None
    assert await _count_events(db_session) == 1


@pytest.mark.asyncio
async def test_sheet_rejection_deletes_row(db_session, test_settings, sheet_client):
    """success=false de la hoja: 502 con el mensaje de la hoja y sin fila."""
    sheet_client.append_row.side_effect = SheetWebhookError(
        "Sheet not found", status_code=200, body={"success": False, "error": "Sheet not found"}
    )
    use_cases = EventCreationUseCases(db_session, test_settings, sheet_client)

    with pytest.raises(SheetAppendFailedException) as exc_info:
        await use_cases.create(dict(VALID_PAYLOAD))

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Sheet not found"
    assert "orphan_event_uid" not in exc_info.value.details
    assert await _count_events(db_session) == 0


@pytest.mark.asyncio
async def test_transport_error_deletes_row(db_session, test_settings, sheet_client):
    sheet_client.append_row.side_effect = SheetWebhookError("connection refused")
    use_cases = EventCreationUseCases(db_session, test_settings, sheet_client)

    with pytest.raises(SheetAppendFailedException) as exc_info:
        await use_cases.create(dict(VALID_PAYLOAD))

    assert exc_info.value.message == "Unexpected error when contacting Google Sheet."
    assert await _count_events(db_session) == 0


@pytest.mark.asyncio
async def test_failed_compensation_reports_orphan(db_session, test_settings, sheet_client):
    """Si el borrado tambien falla, la fila queda y el error la identifica."""
    sheet_client.append_row.side_effect = SheetWebhookError("Sheet not found", status_code=200)
    event_repo = EventRepository(db_session)
    event_repo.delete = AsyncMock(side_effect=RuntimeError("delete failed"))
    use_cases = EventCreationUseCases(
        db_session, test_settings, sheet_client, event_repository=event_repo
    )

    with pytest.raises(SheetAppendFailedException) as exc_info:
        await use_cases.create(dict(VALID_PAYLOAD))

    orphan_uid = exc_info.value.details["orphan_event_uid"]
    assert sheet_client.append_row.await_args.args[2]["event_uid"] == orphan_uid
    assert await _count_events(db_session) == 1
