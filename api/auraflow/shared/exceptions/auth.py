"""
Excepciones relacionadas con autenticación y autorización.
"""
from auraflow.shared.exceptions.sync import SyncRequestException


class SyncUnauthorizedException(SyncRequestException):
    """
    Bearer ausente o distinto del secreto compartido.
    Se lanza antes de leer el cuerpo, por lo que nunca hay escrituras.
    """
    
    def __init__(self, message: str = "Unauthorized."):
        super().__init__(
            message=message,
            status_code=401,
            error_code="UNAUTHORIZED"
        )
