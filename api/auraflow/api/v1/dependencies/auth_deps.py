"""
Dependencias de autenticación de los endpoints de sincronización.
"""
from typing import Optional

from fastapi import Depends, Header
from loguru import logger

from auraflow.core.config import Settings, get_settings
from auraflow.infrastructure.security.shared_secret_auth_service import SharedSecretAuthService
from auraflow.shared.exceptions.auth import SyncUnauthorizedException
from auraflow.shared.exceptions.notifier import ChangeUnauthorizedException


def get_sync_auth_service(settings: Settings = Depends(get_settings)) -> SharedSecretAuthService:
    """
    Servicio de autenticación para los endpoints que llama el Apps Script.
    
    Returns:
        SharedSecretAuthService: Verificador del AURAFLOW_API_KEY
    """
    return SharedSecretAuthService(settings.AURAFLOW_API_KEY)


async def require_sync_api_key(
    authorization: Optional[str] = Header(default=None),
    auth_service: SharedSecretAuthService = Depends(get_sync_auth_service),
) -> None:
    """
    Exige ``Authorization: Bearer <AURAFLOW_API_KEY>``.
    Se resuelve antes de leer el cuerpo, por lo que un fallo nunca escribe nada.
    
    Raises:
        SyncUnauthorizedException: Cabecera ausente, incorrecta o secreto sin configurar
    """
    if not auth_service.is_configured():
        logger.warning("AURAFLOW_API_KEY no configurada: se rechazan las peticiones de sincronizacion")
    if not auth_service.verify_authorization(authorization):
        raise SyncUnauthorizedException()


async def require_trigger_token(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Protege los endpoints invocados por el trigger de la base de datos.
    Solo se exige si CHANGE_TRIGGER_TOKEN está configurado.
    
    Raises:
        ChangeUnauthorizedException: Token ausente o incorrecto
    """
    auth_service = SharedSecretAuthService(settings.CHANGE_TRIGGER_TOKEN)
    if not auth_service.is_configured():
        return
    if not auth_service.verify_authorization(authorization):
        raise ChangeUnauthorizedException()
