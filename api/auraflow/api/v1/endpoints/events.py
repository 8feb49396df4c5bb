"""
Endpoints de eventos: creacion estricta con alta en la hoja y
notificaciones de cambios enviadas por el trigger de la base de datos.
"""
from fastapi import APIRouter, Depends, Request, status
from loguru import logger

from auraflow.api.v1.dependencies.auth_deps import require_sync_api_key, require_trigger_token
from auraflow.api.v1.dependencies.body_deps import read_json_body
from auraflow.api.v1.dependencies.use_case_deps import (
    get_event_creation_use_cases,
    get_event_change_use_cases,
)
from auraflow.application.dto.sync_dto import (
    ChangeNotificationResponseDTO,
    EventCreateResponseDTO,
    RowChangeDTO,
)
from auraflow.application.use_cases.event_creation_use_cases import EventCreationUseCases
from auraflow.application.use_cases.event_change_use_cases import EventChangeUseCases
from auraflow.shared.exceptions.notifier import ChangeNotificationException
from auraflow.shared.exceptions.sync import SyncProcessingException, SyncRequestException


router = APIRouter(prefix="/events", tags=["Events"])


@router.post(
    "",
    response_model=EventCreateResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Crear un evento y añadirlo a la hoja",
    dependencies=[Depends(require_sync_api_key)],
)
async def create_event(
    request: Request,
    use_cases: EventCreationUseCases = Depends(get_event_creation_use_cases),
) -> EventCreateResponseDTO:
    """
    Creacion estricta de un unico evento.
    
    Si la hoja rechaza la fila, el evento recien creado se elimina y se
    responde 502.
    """
    payload = await read_json_body(request)

    try:
        return await use_cases.create(payload)
    except SyncRequestException:
        raise
    except Exception as e:
        logger.error(f"Error inesperado creando evento: {e}")
        raise SyncProcessingException()


@router.post(
    "/changes",
    response_model=ChangeNotificationResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Reflejar en la hoja la actualizacion de un evento",
    dependencies=[Depends(require_trigger_token)],
)
async def handle_event_update(
    change: RowChangeDTO,
    use_cases: EventChangeUseCases = Depends(get_event_change_use_cases),
) -> ChangeNotificationResponseDTO:
    """
    Invocado por el trigger de cambios con ``{record, old_record}``.
    Solo envia los campos modificados y solo para eventos con proyecto.
    """
    try:
        return await use_cases.notify_update(change)
    except ChangeNotificationException:
        raise
    except Exception as e:
        logger.error(f"Error inesperado notificando la actualizacion: {e}")
        raise ChangeNotificationException(str(e) or "Unexpected server error.")


@router.post(
    "/status-changes",
    response_model=ChangeNotificationResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Enviar el nuevo estado de un evento a la hoja (flujo legado)",
    dependencies=[Depends(require_trigger_token)],
)
async def handle_event_status_change(
    change: RowChangeDTO,
    use_cases: EventChangeUseCases = Depends(get_event_change_use_cases),
) -> ChangeNotificationResponseDTO:
    """Flujo para eventos sin proyecto: solo se propaga status."""
    try:
        return await use_cases.notify_status(change)
    except ChangeNotificationException:
        raise
    except Exception as e:
        logger.error(f"Error inesperado enviando el estado: {e}")
        raise ChangeNotificationException(str(e) or "Unexpected server error.")
