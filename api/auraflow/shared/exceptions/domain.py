"""
Excepciones relacionadas con la lógica de dominio.
"""
from typing import Any

from auraflow.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""
    
    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class InvalidSyncRecordException(DomainException):
    """
    Un registro individual del lote no se pudo validar.
    Solo afecta a su propia fila: el lote continúa.
    """
    
    def __init__(self, message: str, row_locator: Any = None):
        super().__init__(
            message=message,
            error_code="INVALID_SYNC_RECORD",
            details={"sheet_row_id": row_locator} if row_locator else None
        )
