"""
Ciclo de vida de la aplicacion (inicio y cierre).
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from loguru import logger

from auraflow.core.config import settings
from auraflow.infrastructure.database.session import init_db, close_db


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Manejador del ciclo de vida que se pasa a ``FastAPI(lifespan=...)``.
    
    Args:
        app: Instancia de FastAPI
    """
    await startup()
    try:
        yield
    finally:
        await shutdown()


async def startup() -> None:
    """Inicializa recursos al inicio de la aplicacion."""
    try:
        logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Entorno: {settings.ENVIRONMENT}")
        
        # Validar configuracion critica
        _validate_config()
        
        # Inicializar base de datos (crea tablas si no existen)
        await init_db()
        logger.info("Base de datos inicializada")
        
        # Configurar logging adicional
        logger.add(
            settings.LOG_FILE,
            rotation="500 MB",
            retention="10 days",
            level=settings.LOG_LEVEL
        )
        
        logger.success("Aplicacion iniciada correctamente")
        
    except Exception as e:
        logger.error(f"Error durante startup: {e}")
        logger.exception("Detalle del error:")
        raise


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []
    
    if not settings.AURAFLOW_API_KEY:
        warnings.append("AURAFLOW_API_KEY no configurada - los endpoints de sincronizacion responderan 401")
    
    if not settings.sheet_webhook_configured:
        warnings.append("WEBHOOK_V2_URL o GOOGLE_SCRIPT_SECRET_TOKEN sin configurar - no se notificara a la hoja")
    
    if not settings.status_webhook_configured:
        warnings.append("GOOGLE_SCRIPT_WEB_APP_URL sin configurar - el flujo legado de estado respondera 500")
    
    if not settings.CHANGE_TRIGGER_TOKEN:
        warnings.append("CHANGE_TRIGGER_TOKEN vacio - los endpoints de cambios no exigen token")
    
    # Mostrar advertencias
    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


async def shutdown() -> None:
    """Libera recursos al cerrar la aplicacion."""
    logger.info("Cerrando aplicacion...")
    
    # Cerrar conexiones de base de datos
    await close_db()
    logger.info("Conexiones de base de datos cerradas")
    
    logger.success("Aplicacion cerrada correctamente")
