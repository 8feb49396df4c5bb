"""
Lectura del cuerpo JSON de los endpoints de sincronizacion.

El cuerpo puede ser una lista o un objeto, por eso se lee en crudo en
lugar de declararlo como modelo de pydantic.
"""
import json
from typing import Any

from fastapi import Request

from auraflow.shared.exceptions.sync import InvalidPayloadException


async def read_json_body(request: Request, invalid_status: int = 400, message: str = "Invalid JSON payload.") -> Any:
    """
    Decodifica el cuerpo de la peticion.
    
    Raises:
        InvalidPayloadException: Si el cuerpo no es JSON valido
    """
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidPayloadException(message, status_code=invalid_status)
