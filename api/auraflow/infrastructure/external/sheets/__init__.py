"""
Integracion con el receptor de webhooks de Google Sheets (Apps Script).
"""
from .sheet_webhook_client import SheetWebhookClient, SheetWebhookError

__all__ = ["SheetWebhookClient", "SheetWebhookError"]
