"""
Interfaces de los repositorios de eventos y proyectos.
Define el contrato que debe cumplir cualquier implementación.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class IEventRepository(ABC):
    """
    Interfaz del repositorio de eventos.
    Define las operaciones de persistencia que usan los flujos de sincronización.
    """
    
    @abstractmethod
    async def insert(self, values: Dict[str, Any]) -> Any:
        """
        Inserta un evento. values ya debe traer event_uid.
        
        Args:
            values: Columnas a escribir
            
        Returns:
            La fila creada (con id y valores por defecto del servidor)
        """
        pass
    
    @abstractmethod
    async def update_by_uid(self, event_uid: str, values: Dict[str, Any]) -> int:
        """
        Actualiza el evento con la clave natural dada.
        
        Args:
            event_uid: Clave natural del evento
            values: Columnas a escribir (sin event_uid)
            
        Returns:
            int: Filas afectadas
        """
        pass
    
    @abstractmethod
    async def get_by_uid(self, event_uid: str) -> Optional[Any]:
        """Obtiene un evento por su clave natural."""
        pass
    
    @abstractmethod
    async def set_sheet_row_id(self, event_id: int, sheet_row_id: str) -> Optional[Any]:
        """Guarda el localizador de fila devuelto por la hoja."""
        pass
    
    @abstractmethod
    async def delete(self, event_id: int) -> bool:
        """Elimina un evento por su ID."""
        pass


class IProjectRepository(ABC):
    """Interfaz del repositorio de proyectos."""
    
    @abstractmethod
    async def upsert_by_spreadsheet(self, values: Dict[str, Any]) -> int:
        """
        Inserta o actualiza un proyecto usando spreadsheet_id como clave de conflicto.
        
        Returns:
            int: ID del proyecto
        """
        pass
    
    @abstractmethod
    async def get_category(self, project_id: int) -> Optional[str]:
        """Obtiene la categoría de un proyecto (None si no tiene o no existe)."""
        pass
