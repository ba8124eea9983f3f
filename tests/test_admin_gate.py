"""Tests para AdminGate."""

from __future__ import annotations

import unittest

from servidor.services.admin_gate import AdminGate
from shared.errors import AuthError


class AdminGateTests(unittest.TestCase):
    """Valida la comparacion de clave compartida."""

    def test_authorize_accepts_only_exact_key(self) -> None:
        """Solo la clave configurada debe autorizar."""
        gate = AdminGate("secreto")
        self.assertTrue(gate.authorize("secreto"))
        self.assertFalse(gate.authorize("SECRETO"))
        self.assertFalse(gate.authorize("otro"))
        self.assertFalse(gate.authorize(""))
        self.assertFalse(gate.authorize(None))

    def test_empty_secret_rejects_everything(self) -> None:
        """Sin secreto configurado ninguna clave es valida."""
        with self.assertLogs("servidor.services.admin_gate", level="WARNING"):
            gate = AdminGate("")
        self.assertFalse(gate.authorize(""))
        self.assertFalse(gate.authorize("cualquiera"))

    def test_require_raises_auth_error_with_401(self) -> None:
        """require debe levantar AuthError con estado 401."""
        gate = AdminGate("secreto")
        gate.require("secreto")
        with self.assertRaises(AuthError) as ctx:
            gate.require("mala")
        self.assertEqual(ctx.exception.status_code, 401)


if __name__ == "__main__":
    unittest.main()
