"""
Cliente para el receptor de webhooks de Google Sheets (Apps Script).

El receptor valida un secreto que viaja en el cuerpo (no en cabeceras) y
responde ``{"success": true, ...}``. Cada llamada se intenta una sola vez:
no hay reintentos.
"""
from typing import Any, Dict, Optional

import httpx
from fastapi.encoders import jsonable_encoder
from loguru import logger

from auraflow.shared.constants.event_constants import EVENT_UID_COLUMN, WebhookAction


class SheetWebhookError(RuntimeError):
    """El receptor no respondio, respondio no-2xx o reporto success=false."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body or {}

    @property
    def is_transport_error(self) -> bool:
        return self.status_code is None


class SheetWebhookClient:
    """
    Cliente simple para enviar acciones al receptor de la hoja.
    """

    def __init__(
        self,
        url: str,
        secret: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.secret = secret
        self.timeout = timeout
        self.transport = transport

    async def append_row(self, spreadsheet_id: str, sheet_gid: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Añade una fila nueva a la hoja (accion CREATE).
        
        Returns:
            Dict: Respuesta del receptor (puede incluir sheet_row_id)
        """
        return await self.post({
            "secret": self.secret,
            "action": WebhookAction.CREATE.value,
            "spreadsheet_id": spreadsheet_id,
            "sheet_gid": sheet_gid,
            "data": data,
        })

    async def update_row(
        self,
        spreadsheet_id: str,
        sheet_gid: str,
        event_uid: str,
        data: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Actualiza la fila cuya columna event_uid coincide (accion UPDATE).
        Solo se envian los campos de data.
        """
        return await self.post({
            "secret": self.secret,
            "action": WebhookAction.UPDATE.value,
            "spreadsheet_id": spreadsheet_id,
            "sheet_gid": sheet_gid,
            "lookup": {
                "column": EVENT_UID_COLUMN,
                "value": event_uid,
            },
            "data": data,
        })

    async def push_status(self, event_uid: str, new_status: Any, spreadsheet_id: str) -> Dict[str, Any]:
        """Formato legado del receptor V1: solo el nuevo estado."""
        return await self.post({
            "secret": self.secret,
            "event_uid": event_uid,
            "new_status": new_status,
            "spreadsheet_id": spreadsheet_id,
        })

    async def post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Envia el payload y valida la respuesta.
        
        Raises:
            SheetWebhookError: Error de red, respuesta no-2xx o success=false
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=jsonable_encoder(payload))
        except httpx.HTTPError as e:
            logger.error(f"No se pudo contactar el webhook de la hoja: {e}")
            raise SheetWebhookError(f"Error de red contactando el webhook: {e}") from e

        body = self._parse_body(response)
        if response.is_success and body.get("success"):
            return body

        logger.error(
            f"El webhook de la hoja respondio con error: status={response.status_code} "
            f"reason={response.reason_phrase} body={body}"
        )
        reason = None if response.is_success else response.reason_phrase
        message = body.get("error") or reason or "Failed to append to Google Sheet."
        raise SheetWebhookError(str(message), status_code=response.status_code, body=body)

    @staticmethod
    def _parse_body(response: httpx.Response) -> Dict[str, Any]:
        try:
            parsed = response.json()
        except ValueError:
            return {"raw": response.text}
        if isinstance(parsed, dict):
            return parsed
        return {"raw": parsed}
