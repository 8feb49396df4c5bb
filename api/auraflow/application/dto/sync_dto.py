"""
DTOs de las respuestas de sincronizacion y de las notificaciones de cambios.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from auraflow.application.dto.event_dto import EventResponseDTO


class SyncResultLineDTO(BaseModel):
    """
    Resultado de una fila del lote.
    El Apps Script usa rowNum para escribir event_uid de vuelta en la hoja.
    """
    success: bool
    rowNum: Optional[int] = None
    event_uid: Optional[str] = None
    error: Optional[str] = None


class SyncBatchResponseDTO(BaseModel):
    """Respuesta del endpoint de sincronizacion por lotes."""
    status: str = "success"
    message: str = "Sync processed."
    results: List[SyncResultLineDTO] = Field(default_factory=list)


class EventCreateResponseDTO(BaseModel):
    """Respuesta de la creacion estricta."""
    status: str = "success"
    event: EventResponseDTO
    sheet: Dict[str, Any] = Field(default_factory=dict)


class RowChangeDTO(BaseModel):
    """
    Payload del webhook de cambios de la base de datos.
    record es la imagen nueva de la fila y old_record la anterior.
    """
    type: Optional[str] = None
    table: Optional[str] = None
    record: Dict[str, Any]
    old_record: Optional[Dict[str, Any]] = None

    class Config:
        """Configuración de Pydantic."""
        extra = "ignore"


class ChangeNotificationResponseDTO(BaseModel):
    """Resultado de procesar una notificacion de cambio."""
    success: bool = True
    synced: bool = False
    message: str
    data: Optional[Dict[str, Any]] = None
    gsheet_response: Optional[Dict[str, Any]] = None
