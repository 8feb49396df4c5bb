"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.
Soporta configuracion dinamica para desarrollo (ENVIRONMENT=development)
y produccion (ENVIRONMENT=production).
"""
import json
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    Los secretos de sincronizacion (API key de la hoja, secreto del webhook)
    viven aqui y se inyectan en los casos de uso; ningun handler los lee
    directamente del entorno.
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="AuraFlow Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Base de datos - Componentes separados
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="auraflow")
    DATABASE_PASSWORD: str = Field(default="auraflow")
    DATABASE_NAME: str = Field(default="auraflow")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # Autenticacion de los endpoints de sincronizacion (Bearer compartido)
    AURAFLOW_API_KEY: str = Field(default="")
    # Token opcional para los endpoints invocados por el trigger de la base de datos
    CHANGE_TRIGGER_TOKEN: str = Field(default="")

    # Webhooks de Google Sheets (Apps Script)
    WEBHOOK_V2_URL: str = Field(default="")
    GOOGLE_SCRIPT_WEB_APP_URL: str = Field(default="")
    GOOGLE_SCRIPT_SECRET_TOKEN: str = Field(default="")
    SHEET_WEBHOOK_TIMEOUT_SECONDS: float = Field(default=30.0)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @property
    def sheet_webhook_configured(self) -> bool:
        """Indica si el webhook V2 (CREATE/UPDATE) esta configurado."""
        return bool(self.WEBHOOK_V2_URL and self.GOOGLE_SCRIPT_SECRET_TOKEN)

    @property
    def status_webhook_configured(self) -> bool:
        """Indica si el webhook legado de estado esta configurado."""
        return bool(self.GOOGLE_SCRIPT_WEB_APP_URL and self.GOOGLE_SCRIPT_SECRET_TOKEN)

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


def get_settings() -> Settings:
    """Dependencia de FastAPI que expone la configuracion cargada."""
    return settings


# Instancia global de configuracion
settings = Settings()
