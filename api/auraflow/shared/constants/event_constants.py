"""
Constantes relacionadas con eventos y su sincronizacion con Google Sheets.
"""
from enum import Enum


class EventStatus(str, Enum):
    """Estados posibles de un evento."""
    TO_DO = "to_do"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"


# Columna de la hoja usada como clave de busqueda en los webhooks
EVENT_UID_COLUMN = "event_uid"

# Campo que solo sirve para correlacionar el resultado con la fila de la hoja
ROW_LOCATOR_FIELD = "sheet_row_id"

# Campos que el notificador compara entre la imagen anterior y la nueva.
# category se resuelve aparte (override del proyecto).
NOTIFIER_DIFF_FIELDS = (
    "title",
    "status",
    "priority",
    "owner",
    "start_time",
    "end_time",
    "description",
)

# Campos obligatorios para la creacion estricta (orden del mensaje de error)
STRICT_CREATE_REQUIRED_FIELDS = (
    "title",
    "status",
    "priority",
    "project_id",
    "spreadsheet_id",
    "sheet_gid",
)


class WebhookAction(str, Enum):
    """Acciones que entiende el receptor V2 de la hoja."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
