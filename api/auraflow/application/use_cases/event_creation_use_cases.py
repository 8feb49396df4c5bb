"""
Casos de uso para la creacion estricta de un evento con alta en la hoja.

Flujo (saga de dos pasos):
1. Insertar el evento con un event_uid nuevo y confirmarlo.
   Compensacion: borrar la fila.
2. Enviar la accion CREATE al webhook de la hoja.

Si el paso 2 falla, la fila del paso 1 se elimina antes de responder 502.
No es una transaccion: si el proceso cae entre ambos pasos, la fila queda
huerfana.
"""
from typing import Any, Dict, List

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from auraflow.application.dto.event_dto import (
    EventCreateDTO,
    EventResponseDTO,
    format_validation_errors,
)
from auraflow.application.dto.sync_dto import EventCreateResponseDTO
from auraflow.application.services.saga import Saga, SagaContext, SagaFailedError, SagaStep
from auraflow.core.config import Settings
from auraflow.domain.repositories.event_repository import IEventRepository
from auraflow.domain.services.idempotency import new_event_uid
from auraflow.infrastructure.external.sheets.sheet_webhook_client import (
    SheetWebhookClient,
    SheetWebhookError,
)
from auraflow.infrastructure.repositories.event_repository import EventRepository
from auraflow.shared.constants.event_constants import STRICT_CREATE_REQUIRED_FIELDS
from auraflow.shared.exceptions.sync import (
    InvalidPayloadException,
    MissingFieldsException,
    SheetAppendFailedException,
    SyncProcessingException,
    SyncRequestException,
    WebhookConfigurationException,
)


def find_missing_fields(payload: Dict[str, Any]) -> List[str]:
    """Campos obligatorios ausentes, nulos o vacios, en el orden fijo del contrato."""
    return [
        field
        for field in STRICT_CREATE_REQUIRED_FIELDS
        if payload.get(field) is None or payload.get(field) == ""
    ]


class EventCreationUseCases:
    """
    Crea un evento y lo refleja en la hoja, compensando si la hoja falla.
    """

    SAGA_NAME = "create-event-with-sheet"

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        sheet_client: SheetWebhookClient,
        event_repository: IEventRepository = None,
    ):
        self.db = db
        self.settings = settings
        self.sheet_client = sheet_client
        self.event_repo = event_repository or EventRepository(db)

    async def create(self, payload: Any) -> EventCreateResponseDTO:
        """
        Ejecuta la creacion estricta.

        Raises:
            MissingFieldsException: Faltan campos obligatorios (400)
            InvalidPayloadException: Tipos invalidos (400)
            WebhookConfigurationException: Webhook sin configurar (500)
            SheetAppendFailedException: La hoja rechazo la fila (502, fila ya eliminada)
        """
        if not isinstance(payload, dict):
            raise InvalidPayloadException("Invalid JSON payload.")

        missing = find_missing_fields(payload)
        if missing:
            raise MissingFieldsException(missing)

        if not self.settings.sheet_webhook_configured:
            raise WebhookConfigurationException()

        try:
            dto = EventCreateDTO.model_validate(payload)
        except ValidationError as e:
            raise InvalidPayloadException(format_validation_errors(e))

        event_uid = new_event_uid()

        async def insert_event(context: SagaContext):
            return await self._insert_event(dto, event_uid)

        saga = Saga(self.SAGA_NAME, [
            SagaStep("event", action=insert_event, compensation=self._delete_event),
            SagaStep("sheet", action=self._append_to_sheet),
        ])

        try:
            context = await saga.run()
        except SagaFailedError as e:
            if e.step_name == "event":
                await self.db.rollback()
            error = self._to_request_error(e)
            if "event" in e.context and "event" not in e.compensated:
                logger.error(f"Evento {event_uid} huerfano: no se pudo eliminar tras el fallo de la hoja")
                error.details["orphan_event_uid"] = event_uid
            raise error from e

        event_dto = EventResponseDTO.model_validate(context["event"])
        sheet_result = context["sheet"]
        event_dto = await self._store_sheet_row_id(event_dto, sheet_result)

        logger.info(f"Evento {event_uid} creado y añadido a la hoja {dto.spreadsheet_id}")
        return EventCreateResponseDTO(event=event_dto, sheet=sheet_result)

    async def _insert_event(self, dto: EventCreateDTO, event_uid: str):
        values = dto.model_dump()
        values.update(event_uid=event_uid, sheet_row_id=None)
        event = await self.event_repo.insert(values)
        await self.db.commit()
        logger.info(f"Evento insertado id={event.id} event_uid={event_uid}")
        return event

    async def _delete_event(self, context: SagaContext) -> None:
        event = context["event"]
        try:
            await self.event_repo.delete(event.id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.warning(f"Evento id={event.id} eliminado tras fallo del webhook de la hoja")

    async def _append_to_sheet(self, context: SagaContext) -> Dict[str, Any]:
        event = context["event"]
        data = {
            "event_uid": event.event_uid,
            "title": event.title,
            "status": event.status,
            "priority": event.priority,
            "owner": event.owner,
            "description": event.description,
            "start_time": event.start_time,
            "end_time": event.end_time,
            "category": event.category,
            "created_at": event.created_at,
            "spreadsheet_id": event.spreadsheet_id,
            "sheet_gid": event.sheet_gid,
            "sync_status": "synced",
        }
        return await self.sheet_client.append_row(event.spreadsheet_id, event.sheet_gid, data)

    async def _store_sheet_row_id(
        self,
        event_dto: EventResponseDTO,
        sheet_result: Dict[str, Any],
    ) -> EventResponseDTO:
        """
        Guarda el sheet_row_id devuelto por la hoja. Un fallo aqui solo se
        registra: el evento y la fila ya existen.
        """
        sheet_row_id = sheet_result.get("sheet_row_id")
        if not sheet_row_id:
            return event_dto

        try:
            updated = await self.event_repo.set_sheet_row_id(event_dto.id, str(sheet_row_id))
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"No se pudo guardar sheet_row_id para el evento {event_dto.id}: {e}")
            return event_dto

        if updated is None:
            return event_dto
        return EventResponseDTO.model_validate(updated)

    @staticmethod
    def _to_request_error(error: SagaFailedError) -> SyncRequestException:
        cause = error.cause
        if error.step_name == "event":
            return SyncProcessingException(str(cause) or "Failed to create event.")

        if isinstance(cause, SheetWebhookError) and not cause.is_transport_error:
            return SheetAppendFailedException(cause.message, details={"sheet": cause.body})
        return SheetAppendFailedException("Unexpected error when contacting Google Sheet.")
