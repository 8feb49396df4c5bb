"""
Implementación del repositorio de proyectos.
El upsert usa INSERT ... ON CONFLICT del dialecto activo (PostgreSQL en
producción, SQLite en tests).
"""
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from auraflow.domain.repositories.event_repository import IProjectRepository
from auraflow.infrastructure.database.models import ProjectModel


_INSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class ProjectRepository(IProjectRepository):
    """Repositorio para gestionar proyectos en la base de datos."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    def _insert_for_dialect(self):
        dialect = self.db.get_bind().dialect.name
        try:
            return _INSERT_BY_DIALECT[dialect]
        except KeyError:
            raise NotImplementedError(f"Upsert de proyectos no soportado para el dialecto '{dialect}'")
    
    async def upsert_by_spreadsheet(self, values: Dict[str, Any]) -> int:
        """
        Inserta el proyecto o actualiza el existente con el mismo spreadsheet_id.
        Solo se sobrescriben las columnas presentes en values.
        """
        insert = self._insert_for_dialect()
        stmt = insert(ProjectModel).values(**values)
        update_cols = {
            key: stmt.excluded[key]
            for key in values
            if key != "spreadsheet_id"
        }
        update_cols["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(
            index_elements=[ProjectModel.spreadsheet_id],
            set_=update_cols,
        ).returning(ProjectModel.id)
        
        result = await self.db.execute(stmt)
        return result.scalar_one()
    
    async def get_category(self, project_id: int) -> Optional[str]:
        result = await self.db.execute(
            select(ProjectModel.category).where(ProjectModel.id == project_id)
        )
        return result.scalar_one_or_none()
