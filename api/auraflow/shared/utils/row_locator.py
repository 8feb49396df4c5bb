"""
Utilidades para el localizador de filas de la hoja (``sheet_row_id``).

El localizador tiene la forma ``"<hoja>:<fila>"``; solo se usa para
correlacionar la linea de resultado con la fila de origen.
"""
import re
from typing import Any, Optional


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_row_number(sheet_row_id: Any) -> Optional[int]:
    """
    Extrae el numero de fila del ultimo segmento del localizador.

    Sigue la lectura tolerante del Apps Script: se toman los digitos
    iniciales del ultimo segmento ("Sheet1:17" -> 17, "Sheet1:17b" -> 17).
    Cualquier otra cosa devuelve None.

    Args:
        sheet_row_id: Localizador recibido en el registro (puede faltar)

    Returns:
        Optional[int]: Numero de fila o None
    """
    if sheet_row_id is None or isinstance(sheet_row_id, bool):
        return None
    if isinstance(sheet_row_id, int):
        return sheet_row_id

    last_segment = str(sheet_row_id).split(":")[-1]
    match = _LEADING_INT.match(last_segment)
    if not match:
        return None
    return int(match.group(1))
