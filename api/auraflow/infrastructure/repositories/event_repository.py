"""
Implementación del repositorio de eventos usando SQLAlchemy.
"""
from typing import Any, Dict, Optional
from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from auraflow.domain.repositories.event_repository import IEventRepository
from auraflow.infrastructure.database.models import EventModel


class EventRepository(IEventRepository):
    """Repositorio para gestionar eventos en la base de datos."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def insert(self, values: Dict[str, Any]) -> EventModel:
        """Inserta un evento y refresca los valores generados por el servidor."""
        event = EventModel(**values)
        self.db.add(event)
        await self.db.flush()
        await self.db.refresh(event)
        return event
    
    async def update_by_uid(self, event_uid: str, values: Dict[str, Any]) -> int:
        """
        Escribe todos los campos recibidos, sin comparar con los actuales.
        Devuelve el numero de filas afectadas (0 si la clave no existe).
        """
        if not values:
            return 0
        result = await self.db.execute(
            update(EventModel)
            .where(EventModel.event_uid == event_uid)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
    
    async def get_by_uid(self, event_uid: str) -> Optional[EventModel]:
        result = await self.db.execute(
            select(EventModel).where(EventModel.event_uid == event_uid)
        )
        return result.scalar_one_or_none()
    
    async def get_by_id(self, event_id: int) -> Optional[EventModel]:
        return await self.db.get(EventModel, event_id)
    
    async def set_sheet_row_id(self, event_id: int, sheet_row_id: str) -> Optional[EventModel]:
        event = await self.get_by_id(event_id)
        if event is None:
            return None
        event.sheet_row_id = sheet_row_id
        await self.db.flush()
        await self.db.refresh(event)
        return event
    
    async def delete(self, event_id: int) -> bool:
        result = await self.db.execute(
            delete(EventModel)
            .where(EventModel.id == event_id)
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)
