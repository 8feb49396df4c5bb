"""
Excepciones de los endpoints que invoca el trigger de cambios de la base de datos.

El trigger espera ``{"success": false, "error": ...}``, distinto al formato
de los endpoints que consume el Apps Script.
"""
from typing import Any, Dict, Optional

from auraflow.shared.exceptions.base import AppException


class ChangeNotificationException(AppException):
    """Excepción base de las notificaciones de cambios."""

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class ChangeUnauthorizedException(ChangeNotificationException):
    """Token del trigger ausente o incorrecto."""
    
    def __init__(self, message: str = "Unauthorized."):
        super().__init__(
            message=message,
            status_code=401,
            error_code="UNAUTHORIZED"
        )


class NotifierConfigurationException(ChangeNotificationException):
    """URL o secreto del webhook de la hoja sin configurar."""
    
    def __init__(self, message: str = "Server configuration error."):
        super().__init__(
            message=message,
            status_code=500,
            error_code="WEBHOOK_NOT_CONFIGURED"
        )


class InvalidChangeException(ChangeNotificationException):
    """El payload del trigger no permite calcular el cambio o el destino."""
    
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code="INVALID_CHANGE"
        )


class WebhookDeliveryException(ChangeNotificationException):
    """
    El webhook de la hoja fallo en un flujo sin compensacion posible
    (el cambio en la base de datos ya esta confirmado).
    """
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="WEBHOOK_DELIVERY_FAILED",
            details=details
        )
