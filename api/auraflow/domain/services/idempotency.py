"""
Asignacion de la clave natural (``event_uid``) de los eventos.
"""
import uuid


def new_event_uid() -> str:
    """
    Genera un UUID4 aleatorio en formato canonico.

    Se llama antes de emitir el INSERT: el valor devuelto es el que se
    escribe y el que se reporta al Apps Script para que lo guarde en la
    fila. Nunca se llama para un registro que ya trae clave.
    """
    return str(uuid.uuid4())
