"""
Casos de uso para la sincronizacion entrante: Google Sheets -> base de datos.

El Apps Script envia un lote de filas. Cada fila con event_uid se trata
como actualizacion; cada fila sin event_uid como alta, asignando la clave
antes del INSERT para poder devolverla en la linea de resultado.

Los registros se procesan en el orden recibido, de uno en uno, y cada
uno se confirma por separado. El lote no es atomico: un fallo a mitad
deja confirmados los registros anteriores.
"""
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from auraflow.application.dto.event_dto import (
    EventSyncRecordDTO,
    ProjectSyncDTO,
    format_validation_errors,
)
from auraflow.application.dto.sync_dto import SyncBatchResponseDTO, SyncResultLineDTO
from auraflow.domain.repositories.event_repository import IEventRepository, IProjectRepository
from auraflow.domain.services.idempotency import new_event_uid
from auraflow.infrastructure.repositories.event_repository import EventRepository
from auraflow.infrastructure.repositories.project_repository import ProjectRepository
from auraflow.shared.constants.event_constants import ROW_LOCATOR_FIELD
from auraflow.shared.exceptions.domain import InvalidSyncRecordException
from auraflow.shared.exceptions.sync import InvalidPayloadException
from auraflow.shared.utils.row_locator import parse_row_number


class ReconcileUseCases:
    """
    Reconciliador de lotes (upsert por event_uid) con resultado por fila.
    """

    def __init__(
        self,
        db: AsyncSession,
        event_repository: Optional[IEventRepository] = None,
        project_repository: Optional[IProjectRepository] = None,
    ):
        self.db = db
        self.event_repo = event_repository or EventRepository(db)
        self.project_repo = project_repository or ProjectRepository(db)

    @staticmethod
    def split_payload(payload: Any) -> Tuple[Optional[Dict[str, Any]], List[Any]]:
        """
        Acepta las dos formas del cuerpo:
        - una lista de eventos
        - un objeto ``{"project": {...}, "tasks": [...]}`` (ambas claves opcionales)

        Returns:
            Tuple: (descriptor de proyecto o None, lista de registros)

        Raises:
            InvalidPayloadException: Si el cuerpo tiene otra forma
        """
        if isinstance(payload, list):
            return None, payload

        if isinstance(payload, dict) and ("tasks" in payload or "project" in payload):
            tasks = payload.get("tasks")
            if tasks is None:
                tasks = []
            if not isinstance(tasks, list):
                raise InvalidPayloadException("Invalid payload: 'tasks' must be an array.")

            project = payload.get("project")
            if project is not None and not isinstance(project, dict):
                raise InvalidPayloadException("Invalid payload: 'project' must be an object.")
            return project, tasks

        raise InvalidPayloadException(
            "Invalid payload: expected an array of events or an object with 'project' and 'tasks'."
        )

    async def reconcile(self, payload: Any) -> SyncBatchResponseDTO:
        """
        Procesa un lote completo.

        Args:
            payload: Cuerpo JSON ya decodificado

        Returns:
            SyncBatchResponseDTO: Una linea de resultado por registro, en el mismo orden
        """
        project, records = self.split_payload(payload)
        logger.info(f"Sincronizacion entrante: {len(records)} registro(s), proyecto={'si' if project else 'no'}")

        # El proyecto se confirma antes del primer registro que lo referencia
        project_id = None
        if project and project.get("spreadsheet_id"):
            project_id = await self._upsert_project(project)

        results: List[SyncResultLineDTO] = []
        for record in records:
            results.append(await self._reconcile_record(record, project_id))

        failed = sum(1 for line in results if not line.success)
        if failed:
            logger.warning(f"Sincronizacion entrante: {failed}/{len(results)} registro(s) con error")
        else:
            logger.info(f"Sincronizacion entrante completada: {len(results)} registro(s)")

        return SyncBatchResponseDTO(results=results)

    async def _upsert_project(self, project: Dict[str, Any]) -> int:
        try:
            dto = ProjectSyncDTO.model_validate(project)
        except ValidationError as e:
            raise InvalidPayloadException(f"Invalid project: {format_validation_errors(e)}")

        project_id = await self.project_repo.upsert_by_spreadsheet(dto.model_dump(exclude_unset=True))
        await self.db.commit()
        logger.info(f"Proyecto {dto.spreadsheet_id} sincronizado (id={project_id})")
        return project_id

    async def _reconcile_record(self, record: Any, project_id: Optional[int]) -> SyncResultLineDTO:
        """
        Procesa un registro. Nunca lanza: los errores quedan en la linea de resultado.
        """
        sheet_row_id = None
        event_uid = None
        data: Optional[Dict[str, Any]] = None

        if isinstance(record, dict):
            data = dict(record)
            sheet_row_id = data.pop(ROW_LOCATOR_FIELD, None)
            raw_uid = data.get("event_uid")
            if isinstance(raw_uid, str) and raw_uid:
                event_uid = raw_uid
            if project_id is not None:
                data["project_id"] = project_id

        row_num = parse_row_number(sheet_row_id)

        try:
            if data is None:
                raise InvalidSyncRecordException("Record must be a JSON object.")

            values = self._validate(data, sheet_row_id)
            uid = values.pop("event_uid", None)
            # Celda vacia: se conserva el valor del servidor en alta y en actualizacion
            if values.get("created_at") is None:
                values.pop("created_at", None)

            if uid:
                event_uid = uid
                affected = await self.event_repo.update_by_uid(uid, values)
                if values and not affected:
                    logger.warning(f"Ningun evento con event_uid={uid} (fila {sheet_row_id}); nada actualizado")
            else:
                allocated = new_event_uid()
                await self.event_repo.insert({**values, "event_uid": allocated})
                event_uid = allocated

            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error procesando registro (sheet_row_id: {sheet_row_id}): {e}")
            return SyncResultLineDTO(
                success=False,
                rowNum=row_num,
                event_uid=event_uid,
                error=str(e),
            )

        return SyncResultLineDTO(success=True, rowNum=row_num, event_uid=event_uid)

    @staticmethod
    def _validate(data: Dict[str, Any], sheet_row_id: Any) -> Dict[str, Any]:
        """Valida el registro y devuelve solo los campos presentes."""
        try:
            dto = EventSyncRecordDTO.model_validate(data)
        except ValidationError as e:
            raise InvalidSyncRecordException(format_validation_errors(e), row_locator=sheet_row_id)
        return dto.model_dump(exclude_unset=True)
