"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .event_dto import (
    EventSyncRecordDTO,
    ProjectSyncDTO,
    EventCreateDTO,
    EventResponseDTO,
    format_validation_errors,
)
from .sync_dto import (
    SyncResultLineDTO,
    SyncBatchResponseDTO,
    EventCreateResponseDTO,
    RowChangeDTO,
    ChangeNotificationResponseDTO,
)

__all__ = [
    "EventSyncRecordDTO",
    "ProjectSyncDTO",
    "EventCreateDTO",
    "EventResponseDTO",
    "format_validation_errors",
    "SyncResultLineDTO",
    "SyncBatchResponseDTO",
    "EventCreateResponseDTO",
    "RowChangeDTO",
    "ChangeNotificationResponseDTO",
]
