"""Autorizacion de operaciones de administrador por clave compartida."""

from __future__ import annotations

import hmac
import logging

from shared.errors import AuthError

LOGGER = logging.getLogger(__name__)


class AdminGate:
    """Compara la clave recibida con el secreto configurado."""

    def __init__(self, admin_key: str) -> None:
        self._admin_key = admin_key or ""
        if not self._admin_key:
            LOGGER.warning(
                "ADMIN_KEY no configurada: todas las operaciones de administrador seran rechazadas."
            )

    def authorize(self, provided_key: str | None) -> bool:
        """Retorna True solo si la clave coincide con el secreto configurado."""
        if not self._admin_key or not provided_key:
            return False
        return hmac.compare_digest(
            provided_key.encode("utf-8"),
            self._admin_key.encode("utf-8"),
        )

    def require(self, provided_key: str | None) -> None:
        """Levanta AuthError cuando la clave falta o no coincide."""
        if not self.authorize(provided_key):
            LOGGER.warning("Operacion de administrador rechazada por clave invalida.")
            raise AuthError("Admin requerido")
