"""
DTOs relacionados con eventos sincronizados con Google Sheets.

Las celdas de la hoja llegan sin tipar: numeros en columnas de texto y
cadenas vacias en fechas. Los validadores normalizan ambos casos antes
de que el registro llegue a la base de datos.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from auraflow.shared.constants.event_constants import EventStatus


_TEXT_FIELDS = (
    "event_uid",
    "title",
    "priority",
    "owner",
    "description",
    "category",
    "spreadsheet_id",
    "sheet_gid",
)
_NULLABLE_WHEN_BLANK = ("status", "start_time", "end_time", "created_at", "project_id")


def _coerce_cell_to_text(value: Any) -> Any:
    """Las celdas numericas se guardan como texto (p.ej. sheet_gid=0)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class EventSyncRecordDTO(BaseModel):
    """
    Registro de evento tal como lo envia el Apps Script en un lote.
    
    Todos los campos son opcionales: en una actualizacion solo se escriben
    los que vienen en el registro (``exclude_unset``). Campos desconocidos
    invalidan el registro.
    """
    event_uid: Optional[str] = None
    title: Optional[str] = None
    status: Optional[EventStatus] = None
    priority: Optional[str] = None
    owner: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    category: Optional[str] = None
    project_id: Optional[int] = None
    spreadsheet_id: Optional[str] = None
    sheet_gid: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _coerce_cell_to_text(v)

    @field_validator(*_NULLABLE_WHEN_BLANK, mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    class Config:
        """Configuración de Pydantic."""
        extra = "forbid"


class ProjectSyncDTO(BaseModel):
    """Descriptor de proyecto enviado junto al lote (upsert por spreadsheet_id)."""
    spreadsheet_id: str = Field(..., min_length=1, description="ID de la hoja de calculo")
    name: Optional[str] = None
    phase: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None

    @field_validator("spreadsheet_id", "name", "phase", "category", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _coerce_cell_to_text(v)

    class Config:
        """Configuración de Pydantic."""
        extra = "forbid"


class EventCreateDTO(BaseModel):
    """
    Cuerpo de la creacion estricta de un evento.
    La presencia de los campos obligatorios se comprueba antes (mensaje
    agregado); aqui solo se validan tipos.
    """
    title: str
    status: EventStatus
    priority: str
    project_id: int
    spreadsheet_id: str
    sheet_gid: str
    owner: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    category: Optional[str] = None

    @field_validator("title", "priority", "spreadsheet_id", "sheet_gid", "owner", "category", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _coerce_cell_to_text(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    class Config:
        """Configuración de Pydantic."""
        extra = "ignore"


class EventResponseDTO(BaseModel):
    """DTO de respuesta con la fila completa del evento."""
    id: int
    event_uid: str
    sheet_row_id: Optional[str] = None
    title: Optional[str] = None
    status: Optional[EventStatus] = None
    priority: Optional[str] = None
    owner: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    category: Optional[str] = None
    project_id: Optional[int] = None
    spreadsheet_id: Optional[str] = None
    sheet_gid: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Configuración de Pydantic."""
        from_attributes = True


def format_validation_errors(exc: ValidationError) -> str:
    """Resume los errores de pydantic en una linea: 'campo: mensaje; ...'."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "record"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)
