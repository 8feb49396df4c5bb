"""
Servicios de aplicacion.

Contiene la logica de negocio reutilizable que no pertenece
a un caso de uso especifico.
"""
from auraflow.application.services.saga import Saga, SagaStep, SagaFailedError

__all__ = [
    "Saga",
    "SagaStep",
    "SagaFailedError",
]
