"""Persistencia del catalogo por sucursal como snapshot JSON."""

from __future__ import annotations

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Protocol

from servidor.domain.models import Catalogo
from servidor.services.branch_registry import BranchRegistry
from shared.errors import StorageError

LOGGER = logging.getLogger(__name__)


class CatalogStore(Protocol):
    """Interfaz de carga y guardado del catalogo completo de una sucursal."""

    def load(self, branch: str) -> Catalogo:
        """Retorna el catalogo persistido; vacio si no existe o es ilegible."""

    def save(self, branch: str, catalogo: Catalogo) -> None:
        """Reemplaza el snapshot completo de la sucursal."""


class JsonCatalogStore:
    """Guarda un archivo ``<sucursal>.json`` por sucursal con reemplazo atomico."""

    def __init__(self, data_dir: Path, registry: BranchRegistry) -> None:
        self._data_dir = data_dir
        self._registry = registry

    def snapshot_path(self, branch: str) -> Path:
        """Retorna la ruta del snapshot de una sucursal valida."""
        return self._data_dir / f"{self._registry.validate(branch)}.json"

    def ensure_branch(self, branch: str) -> Path:
        """Crea un snapshot vacio si la sucursal aun no tiene uno."""
        path = self.snapshot_path(branch)
        if not path.exists():
            self.save(branch, Catalogo())
            LOGGER.info("Snapshot de catalogo inicializado: %s", path)
        return path

    def load(self, branch: str) -> Catalogo:
        """Carga el catalogo; degrada a vacio ante ausencia o corrupcion."""
        path = self.snapshot_path(branch)
        if not path.exists():
            return Catalogo()

        try:
            raw_text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            LOGGER.warning("Snapshot ilegible, se usa catalogo vacio: %s", path, exc_info=True)
            self._preserve_corrupt(path)
            return Catalogo()

        try:
            catalogo = Catalogo.from_dict(json.loads(raw_text))
        except (ValueError, RecursionError) as exc:
            LOGGER.warning("Snapshot corrupto, se usa catalogo vacio: %s (%s)", path, exc)
            self._preserve_corrupt(path)
            return Catalogo()

        LOGGER.debug("Catalogo cargado: %s (%d productos)", path, len(catalogo.productos))
        return catalogo

    def save(self, branch: str, catalogo: Catalogo) -> None:
        """Escribe el snapshot en un temporal y lo reemplaza de una vez."""
        path = self.snapshot_path(branch)
        temp_path = path.with_name(f"{path.name}.tmp")
        payload = json.dumps(catalogo.to_dict(), ensure_ascii=False, indent=2) + "\n"

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(payload, encoding="utf-8")
            temp_path.replace(path)
        except OSError as exc:
            LOGGER.exception("Error al guardar snapshot de catalogo: %s", path)
            raise StorageError(f"No fue posible guardar el catalogo de la sucursal: {branch}") from exc
        finally:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)

        LOGGER.info("Catalogo guardado: %s (%d productos)", path, len(catalogo.productos))

    @staticmethod
    def _preserve_corrupt(path: Path) -> None:
        """Copia el snapshot danado a un respaldo antes de que sea reemplazado."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = path.with_name(f"{path.name}.corrupt-{timestamp}")
        try:
            shutil.copy2(path, backup_path)
        except OSError:
            LOGGER.warning("No fue posible respaldar snapshot corrupto: %s", path, exc_info=True)
            return
        LOGGER.info("Snapshot corrupto respaldado en: %s", backup_path)
