"""
Excepciones de los endpoints de sincronización con Google Sheets.

El Apps Script que consume estos endpoints espera el cuerpo
``{"status": "error", "message": ...}``, distinto al formato genérico
de la API; por eso tienen su propio handler en ``main.py``.
"""
from typing import List, Optional, Dict, Any

from auraflow.shared.exceptions.base import AppException


class SyncRequestException(AppException):
    """Excepción base para fallos a nivel de request de sincronización."""

    def to_dict(self) -> Dict[str, Any]:
        return {"status": "error", "message": self.message}


class InvalidPayloadException(SyncRequestException):
    """JSON mal formado o forma del cuerpo inesperada."""
    
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code="INVALID_PAYLOAD"
        )


class MissingFieldsException(SyncRequestException):
    """Faltan campos obligatorios en la creación estricta."""
    
    def __init__(self, fields: List[str]):
        super().__init__(
            message=f"Missing required fields: {', '.join(fields)}",
            status_code=400,
            error_code="MISSING_FIELDS",
            details={"fields": fields}
        )
        self.fields = fields


class WebhookConfigurationException(SyncRequestException):
    """URL o secreto del webhook de la hoja sin configurar."""
    
    def __init__(self, message: str = "Server is missing Google Sheet webhook configuration."):
        super().__init__(
            message=message,
            status_code=500,
            error_code="WEBHOOK_NOT_CONFIGURED"
        )


class SheetAppendFailedException(SyncRequestException):
    """
    El webhook rechazó (o no respondió) el alta de la fila.
    Cuando se lanza, la fila recién insertada ya fue eliminada.
    """
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=502,
            error_code="SHEET_APPEND_FAILED",
            details=details
        )


class SyncProcessingException(SyncRequestException):
    """Error inesperado durante la sincronizacion."""
    
    def __init__(self, message: str = "Unexpected server error."):
        super().__init__(
            message=message,
            status_code=500,
            error_code="SYNC_PROCESSING_ERROR"
        )
