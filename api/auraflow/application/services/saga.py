"""
Ejecucion de sagas: una lista ordenada de pasos (accion, compensacion).

Si un paso falla, se ejecutan las compensaciones de los pasos ya
completados en orden inverso y se relanza el error envuelto en
``SagaFailedError``. No es una transaccion: si el proceso muere entre
pasos, las compensaciones no se ejecutan.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger


SagaContext = Dict[str, Any]


@dataclass(frozen=True)
class SagaStep:
    """
    Paso de una saga.
    
    El resultado de action se guarda en el contexto bajo ``name`` para que
    los pasos siguientes (y las compensaciones) puedan usarlo.
    """
    name: str
    action: Callable[[SagaContext], Awaitable[Any]]
    compensation: Optional[Callable[[SagaContext], Awaitable[None]]] = None


class SagaFailedError(Exception):
    """Un paso de la saga fallo; las compensaciones ya se ejecutaron."""

    def __init__(
        self,
        step_name: str,
        cause: BaseException,
        compensated: List[str],
        context: Optional[SagaContext] = None,
    ):
        super().__init__(f"Paso '{step_name}' fallido: {cause}")
        self.step_name = step_name
        self.cause = cause
        self.compensated = compensated
        self.context = context or {}


class Saga:
    """Ejecuta pasos en orden y compensa los completados ante un fallo."""

    def __init__(self, name: str, steps: List[SagaStep]):
        self.name = name
        self.steps = steps

    async def run(self, context: Optional[SagaContext] = None) -> SagaContext:
        """
        Ejecuta la saga.
        
        Returns:
            SagaContext: Contexto con el resultado de cada paso
            
        Raises:
            SagaFailedError: Si algun paso falla
        """
        context = dict(context or {})
        completed: List[SagaStep] = []

        for step in self.steps:
            try:
                context[step.name] = await step.action(context)
            except Exception as exc:
                logger.warning(f"[{self.name}] paso '{step.name}' fallido: {exc}")
                compensated = await self._compensate(completed, context)
                raise SagaFailedError(step.name, exc, compensated, context) from exc
            completed.append(step)

        return context

    async def _compensate(self, completed: List[SagaStep], context: SagaContext) -> List[str]:
        compensated = []
        for step in reversed(completed):
            if step.compensation is None:
                continue
            try:
                await step.compensation(context)
                compensated.append(step.name)
                logger.info(f"[{self.name}] compensacion de '{step.name}' ejecutada")
            except Exception:
                # Queda un registro huerfano; se registra y se siguen compensando los demas
                logger.exception(f"[{self.name}] compensacion de '{step.name}' fallida")
        return compensated
