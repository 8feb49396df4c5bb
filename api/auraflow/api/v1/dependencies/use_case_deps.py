"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auraflow.application.use_cases.reconcile_use_cases import ReconcileUseCases
from auraflow.application.use_cases.event_creation_use_cases import EventCreationUseCases
from auraflow.application.use_cases.event_change_use_cases import EventChangeUseCases
from auraflow.core.config import Settings, get_settings
from auraflow.infrastructure.database.session import get_db
from auraflow.infrastructure.external.sheets.sheet_webhook_client import SheetWebhookClient


def get_sheet_webhook_client(settings: Settings = Depends(get_settings)) -> SheetWebhookClient:
    """
    Cliente del receptor V2 de la hoja (acciones CREATE/UPDATE).
    
    Returns:
        SheetWebhookClient: Cliente configurado con WEBHOOK_V2_URL
    """
    return SheetWebhookClient(
        url=settings.WEBHOOK_V2_URL,
        secret=settings.GOOGLE_SCRIPT_SECRET_TOKEN,
        timeout=settings.SHEET_WEBHOOK_TIMEOUT_SECONDS,
    )


def get_status_webhook_client(settings: Settings = Depends(get_settings)) -> SheetWebhookClient:
    """Cliente del receptor legado de estado (GOOGLE_SCRIPT_WEB_APP_URL)."""
    return SheetWebhookClient(
        url=settings.GOOGLE_SCRIPT_WEB_APP_URL,
        secret=settings.GOOGLE_SCRIPT_SECRET_TOKEN,
        timeout=settings.SHEET_WEBHOOK_TIMEOUT_SECONDS,
    )


async def get_reconcile_use_cases(
    db: AsyncSession = Depends(get_db)
) -> ReconcileUseCases:
    """
    Dependencia para obtener el reconciliador de lotes.
    
    Args:
        db: Sesion de base de datos
        
    Returns:
        ReconcileUseCases: Instancia del reconciliador
    """
    return ReconcileUseCases(db)


async def get_event_creation_use_cases(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    sheet_client: SheetWebhookClient = Depends(get_sheet_webhook_client),
) -> EventCreationUseCases:
    """
    Dependencia para obtener los casos de uso de creacion estricta.
    
    Returns:
        EventCreationUseCases: Instancia de casos de uso de creacion
    """
    return EventCreationUseCases(db, settings, sheet_client)


async def get_event_change_use_cases(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    sheet_client: SheetWebhookClient = Depends(get_sheet_webhook_client),
    status_client: SheetWebhookClient = Depends(get_status_webhook_client),
) -> EventChangeUseCases:
    """
    Dependencia para obtener el notificador de cambios.
    
    Returns:
        EventChangeUseCases: Instancia del notificador
    """
    return EventChangeUseCases(db, settings, sheet_client, status_client)
