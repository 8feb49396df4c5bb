"""
Endpoints para sincronizacion entrante desde Google Sheets.
El Apps Script envia lotes de filas y escribe de vuelta los event_uid devueltos.
"""
from fastapi import APIRouter, Depends, Request, status
from loguru import logger

from auraflow.api.v1.dependencies.auth_deps import require_sync_api_key
from auraflow.api.v1.dependencies.body_deps import read_json_body
from auraflow.api.v1.dependencies.use_case_deps import get_reconcile_use_cases
from auraflow.application.dto.sync_dto import SyncBatchResponseDTO
from auraflow.application.use_cases.reconcile_use_cases import ReconcileUseCases
from auraflow.shared.exceptions.sync import SyncProcessingException, SyncRequestException


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "/events",
    response_model=SyncBatchResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar un lote de filas de la hoja",
    dependencies=[Depends(require_sync_api_key)],
)
async def sync_events(
    request: Request,
    use_cases: ReconcileUseCases = Depends(get_reconcile_use_cases),
) -> SyncBatchResponseDTO:
    """
    Upsert por lotes: filas con event_uid se actualizan, filas sin event_uid
    se insertan con una clave nueva.
    
    Los errores de una fila se devuelven en results y no interrumpen el lote;
    la respuesta es 200 aunque haya filas fallidas.
    
    Returns:
        SyncBatchResponseDTO con una linea de resultado por fila
    """
    payload = await read_json_body(request, invalid_status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    try:
        return await use_cases.reconcile(payload)
    except SyncRequestException:
        raise
    except Exception as e:
        logger.error(f"Error global de sincronizacion: {e}")
        raise SyncProcessingException(str(e))
