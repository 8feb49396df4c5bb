"""
Casos de uso para la sincronizacion saliente: cambios en la base de datos -> Google Sheets.

Los invoca el trigger de cambios de la tabla events. Cuando llegan, el
cambio ya esta confirmado: si el webhook falla no hay compensacion ni
reintento, solo se registra y se responde 500.
"""
from typing import Any, Dict, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from auraflow.application.dto.sync_dto import ChangeNotificationResponseDTO, RowChangeDTO
from auraflow.core.config import Settings
from auraflow.domain.repositories.event_repository import IProjectRepository
from auraflow.infrastructure.external.sheets.sheet_webhook_client import (
    SheetWebhookClient,
    SheetWebhookError,
)
from auraflow.infrastructure.repositories.project_repository import ProjectRepository
from auraflow.shared.constants.event_constants import NOTIFIER_DIFF_FIELDS
from auraflow.shared.exceptions.notifier import (
    InvalidChangeException,
    NotifierConfigurationException,
    WebhookDeliveryException,
)


def resolve_category(project_category: Optional[str], record: Dict[str, Any]) -> Any:
    """
    Categoria que se envia a la hoja: la del proyecto si tiene una,
    si no la del propio evento. La fila guardada no se modifica.
    """
    if project_category:
        return project_category
    return record.get("category")


def compute_field_diff(
    record: Dict[str, Any],
    old_record: Dict[str, Any],
    final_category: Any,
) -> Dict[str, Any]:
    """
    Campos de la lista permitida cuyo valor cambio, con el valor nuevo.
    category se compara como valor resuelto contra la categoria anterior sin resolver.
    """
    diff = {
        field: record.get(field)
        for field in NOTIFIER_DIFF_FIELDS
        if record.get(field) != old_record.get(field)
    }
    if final_category != old_record.get("category"):
        diff["category"] = final_category
    return diff


class EventChangeUseCases:
    """
    Notificador de cambios de eventos hacia la hoja.

    - notify_update: flujo V2 (eventos con proyecto), envia solo el diff.
    - notify_status: flujo legado V1 (eventos sin proyecto), envia solo el estado.
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        sheet_client: SheetWebhookClient,
        status_client: SheetWebhookClient,
        project_repository: IProjectRepository = None,
    ):
        self.db = db
        self.settings = settings
        self.sheet_client = sheet_client
        self.status_client = status_client
        self.project_repo = project_repository or ProjectRepository(db)

    async def notify_update(self, change: RowChangeDTO) -> ChangeNotificationResponseDTO:
        """
        Procesa la actualizacion de una fila y la refleja en la hoja.

        Returns:
            ChangeNotificationResponseDTO: synced=True si se llamo al webhook

        Raises:
            NotifierConfigurationException: Webhook V2 sin configurar
            WebhookDeliveryException: El webhook fallo
        """
        if not self.settings.sheet_webhook_configured:
            logger.error("Variables de entorno ausentes: WEBHOOK_V2_URL o GOOGLE_SCRIPT_SECRET_TOKEN")
            raise NotifierConfigurationException()

        record = change.record
        project_id = record.get("project_id")
        if not project_id:
            return ChangeNotificationResponseDTO(
                message="Event has no project_id; handled by the status sync path.",
            )

        if change.old_record is None:
            raise InvalidChangeException("old_record is required for update notifications.")

        project_category = await self._lookup_project_category(project_id)
        final_category = resolve_category(project_category, record)
        diff = compute_field_diff(record, change.old_record, final_category)

        if not diff:
            return ChangeNotificationResponseDTO(
                message="No relevant fields changed; nothing to sync.",
            )

        event_uid = record.get("event_uid")
        try:
            await self.sheet_client.update_row(
                spreadsheet_id=record.get("spreadsheet_id"),
                sheet_gid=record.get("sheet_gid"),
                event_uid=event_uid,
                data=diff,
            )
        except SheetWebhookError as e:
            logger.error(f"Fallo al notificar la actualizacion de {event_uid} a la hoja: {e.message}")
            raise WebhookDeliveryException(e.message, details={"sheet": e.body})

        logger.info(f"Actualizacion de {event_uid} enviada a la hoja: {sorted(diff)}")
        return ChangeNotificationResponseDTO(
            synced=True,
            message="Sheet webhook triggered.",
            data=diff,
        )

    async def notify_status(self, change: RowChangeDTO) -> ChangeNotificationResponseDTO:
        """
        Envia el nuevo estado de la fila al receptor legado.

        Raises:
            NotifierConfigurationException: Webhook legado sin configurar
            InvalidChangeException: La fila no tiene spreadsheet_id (500)
            WebhookDeliveryException: El webhook fallo
        """
        if not self.settings.status_webhook_configured:
            raise NotifierConfigurationException()

        record = change.record
        spreadsheet_id = record.get("spreadsheet_id")
        if not spreadsheet_id:
            logger.error("La fila no tiene spreadsheet_id; no se puede determinar la hoja destino")
            raise InvalidChangeException("Missing spreadsheet_id in the database record.", status_code=500)

        event_uid = record.get("event_uid")
        try:
            response = await self.status_client.push_status(
                event_uid=event_uid,
                new_status=record.get("status"),
                spreadsheet_id=spreadsheet_id,
            )
        except SheetWebhookError as e:
            logger.error(f"El webhook de estado fallo para {event_uid}: {e.message}")
            raise WebhookDeliveryException(e.message, details={"sheet": e.body})

        return ChangeNotificationResponseDTO(
            synced=True,
            message="Webhook sent successfully.",
            gsheet_response=response,
        )

    async def _lookup_project_category(self, project_id: Any) -> Optional[str]:
        """Un fallo en la consulta no interrumpe el flujo: se usa la categoria del evento."""
        try:
            return await self.project_repo.get_category(int(project_id))
        except Exception as e:
            logger.error(f"Error consultando la categoria del proyecto (project_id: {project_id}): {e}")
            await self.db.rollback()
            return None
