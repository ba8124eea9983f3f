"""Inicializacion de la aplicacion de cliente."""

from __future__ import annotations

import logging
import sys

from PyQt6.QtWidgets import QApplication

from cliente.backend.controller import AppController
from cliente.backend.gateway import LocalServerGateway
from cliente.frontend.main_window import MainWindow
from parametros import CatalogSettings

LOGGER = logging.getLogger(__name__)


def main() -> int:
    """Ejecuta la aplicacion grafica."""
    app = QApplication(sys.argv)

    settings = CatalogSettings.from_env()
    gateway = LocalServerGateway(settings=settings)
    controller = AppController(gateway=gateway)
    window = MainWindow(controller=controller)
    window.showMaximized()

    LOGGER.info("Aplicacion iniciada con sucursales: %s", ", ".join(gateway.list_branches()))
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
