"""
Autenticación por secreto compartido (Bearer) para los endpoints de sincronización.

IMPORTANTE:
- Hay un único secreto por endpoint, configurado por env e inyectado.
- Sin secreto configurado no se acepta ninguna petición.
"""

from __future__ import annotations

import hmac
from typing import Optional


class SharedSecretAuthService:
    """
    Verifica la cabecera Authorization contra ``Bearer <secreto>``.

    Usa comparación en tiempo constante (hmac.compare_digest) para reducir leaks
    por timing.
    """

    SCHEME = "Bearer"

    def __init__(self, expected_secret: str) -> None:
        self._expected_secret = expected_secret or ""

    def is_configured(self) -> bool:
        return bool(self._expected_secret)

    def verify_authorization(self, authorization: Optional[str]) -> bool:
        if not self.is_configured() or not authorization:
            return False

        expected = f"{self.SCHEME} {self._expected_secret}"
        # compare_digest con bytes para aceptar cualquier caracter en la cabecera
        return hmac.compare_digest(authorization.encode("utf-8"), expected.encode("utf-8"))
