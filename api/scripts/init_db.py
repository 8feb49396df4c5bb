"""
Script para inicializar la base de datos (tablas projects y events).
"""
import asyncio
from loguru import logger

# Registra los modelos en Base.metadata
import auraflow.infrastructure.database  # noqa: F401
from auraflow.infrastructure.database.session import init_db, close_db


async def main():
    """Función principal para inicializar la base de datos."""
    logger.info("Inicializando base de datos...")
    
    try:
        await init_db()
        logger.success("Base de datos inicializada correctamente")
    except Exception as e:
        logger.error(f"Error al inicializar base de datos: {e}")
        raise
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
