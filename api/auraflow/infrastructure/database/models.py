"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey, Enum as SQLEnum
from sqlalchemy.sql import func

from auraflow.infrastructure.database.session import Base
from auraflow.shared.constants.event_constants import EventStatus


class ProjectModel(Base):
    """
    Modelo de base de datos para proyectos.
    Un proyecto corresponde a una hoja de calculo (spreadsheet_id unico).
    """
    
    __tablename__ = "projects"
    
    id = Column(Integer, primary_key=True, index=True)
    spreadsheet_id = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    phase = Column(String(255), nullable=True)
    # Si existe, sustituye la categoria del evento en las notificaciones salientes
    category = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    def __repr__(self):
        return f"<Project(id={self.id}, spreadsheet_id={self.spreadsheet_id}, name={self.name})>"


class EventModel(Base):
    """
    Modelo de base de datos para eventos/tareas sincronizados con una fila de la hoja.
    
    event_uid es la clave natural que une la fila de la hoja con el registro:
    se asigna una sola vez y no se regenera.
    """
    
    __tablename__ = "events"
    
    id = Column(Integer, primary_key=True, index=True)
    event_uid = Column(String(36), nullable=False, unique=True, index=True)
    sheet_row_id = Column(String(255), nullable=True)
    title = Column(String(500), nullable=True)
    status = Column(
        SQLEnum(
            EventStatus,
            name="event_status",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=True,
    )
    priority = Column(String(50), nullable=True)
    owner = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    category = Column(String(255), nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True)
    spreadsheet_id = Column(String(255), nullable=True)
    sheet_gid = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    def __repr__(self):
        return f"<Event(id={self.id}, event_uid={self.event_uid}, title={self.title})>"
