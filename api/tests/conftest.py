"""
Configuración de fixtures para pytest.
"""
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Registra los modelos en Base.metadata
import auraflow.infrastructure.database  # noqa: F401
from auraflow.core.config import Settings
from auraflow.infrastructure.database.session import Base
from auraflow.infrastructure.external.sheets.sheet_webhook_client import SheetWebhookClient


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

API_KEY = "test-api-key"
WEBHOOK_SECRET = "sheet-secret"


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fixture que proporciona una sesión de base de datos para tests.
    Crea una base de datos en memoria para cada test.
    """
    # StaticPool: todas las conexiones comparten la misma base en memoria
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    
    async with async_session() as session:
        yield session
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    
    await engine.dispose()


@pytest.fixture
def test_settings() -> Settings:
    """Configuración con secretos y webhooks de prueba (sin leer .env)."""
    return Settings(
        _env_file=None,
        AURAFLOW_API_KEY=API_KEY,
        WEBHOOK_V2_URL="https://sheets.test/v2",
        GOOGLE_SCRIPT_WEB_APP_URL="https://sheets.test/v1",
        GOOGLE_SCRIPT_SECRET_TOKEN=WEBHOOK_SECRET,
        CHANGE_TRIGGER_TOKEN="",
    )


@pytest.fixture
def sheet_client() -> AsyncMock:
    """Cliente del webhook V2 simulado; por defecto la hoja acepta todo."""
    client = AsyncMock(spec=SheetWebhookClient)
    client.append_row.return_value = {"success": True, "sheet_row_id": "Tareas:12"}
    client.update_row.return_value = {"success": True}
    return client


@pytest.fixture
def status_client() -> AsyncMock:
    """Cliente del webhook legado de estado simulado."""
    client = AsyncMock(spec=SheetWebhookClient)
    client.push_status.return_value = {"success": True, "updated": 1}
    return client
