"""
Casos de uso de la aplicacion.
"""
from .reconcile_use_cases import ReconcileUseCases
from .event_creation_use_cases import EventCreationUseCases
from .event_change_use_cases import EventChangeUseCases

__all__ = ["ReconcileUseCases", "EventCreationUseCases", "EventChangeUseCases"]
