"""
Punto de entrada principal de la aplicación FastAPI.
Configura la aplicación, middlewares, rutas y eventos.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auraflow.core.config import settings, get_cors_origins
from auraflow.core.events import lifespan
from auraflow.api.v1.router import api_router
from auraflow.api.middlewares.error_handler import ErrorHandlerMiddleware
from auraflow.shared.exceptions.base import AppException
from auraflow.shared.exceptions.notifier import ChangeNotificationException
from auraflow.shared.exceptions.sync import SyncRequestException


def create_application() -> FastAPI:
    """
    Factory para crear y configurar la aplicación FastAPI.
    
    Returns:
        FastAPI: Instancia configurada de la aplicación
    """
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Sincronizacion de eventos de AuraFlow con Google Sheets",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Configurar CORS
    cors_origins = get_cors_origins(settings.CORS_ORIGINS)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Middleware personalizado para manejo de errores
    application.add_middleware(ErrorHandlerMiddleware)

    # Incluir routers de la API
    application.include_router(api_router, prefix="/api")

    # Errores de sincronizacion: formato {"status": "error", "message": ...}
    @application.exception_handler(SyncRequestException)
    async def sync_exception_handler(request, exc: SyncRequestException):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Errores del trigger de cambios: formato {"success": false, "error": ...}
    @application.exception_handler(ChangeNotificationException)
    async def change_exception_handler(request, exc: ChangeNotificationException):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Manejador global de excepciones personalizadas
    @application.exception_handler(AppException)
    async def app_exception_handler(request, exc: AppException):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Health check endpoint
    @application.get("/health", tags=["Health"])
    async def health_check():
        """Endpoint para verificar el estado de la aplicación."""
        return {
            "status": "healthy",
            "app_name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT
        }

    return application


# Crear instancia de la aplicación
app = create_application()


if __name__ == "__main__":
    import uvicorn
    from loguru import logger
    
    # Determinar la URL base de acceso
    if settings.HOST == "0.0.0.0":
        access_host = "localhost"
    else:
        access_host = settings.HOST
    
    base_url = f"http://{access_host}:{settings.PORT}"
    
    logger.info(f"Swagger UI: {base_url}/docs")
    logger.info(f"Health:     {base_url}/health")
    
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
