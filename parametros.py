"""Parametros globales del proyecto."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"
EXPORT_DIR = DATA_DIR / "export"
PUBLIC_DIR = BASE_DIR / "public"
UPLOADS_DIR = PUBLIC_DIR / "uploads"
UPLOADS_URL_PREFIX = "/uploads"
DEFAULT_SUCURSALES: tuple[str, ...] = ("central", "fernando", "caacupe")
DEFAULT_IMAGE_EXTENSION = ".jpg"
DEFAULT_LOG_LEVEL = "INFO"

logging.basicConfig(
    level=os.environ.get("CATALOGO_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)


def _split_csv_env(value: str | None) -> tuple[str, ...]:
    """Separa una variable de entorno por comas descartando vacios."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True, slots=True)
class CatalogSettings:
    """Configuracion explicita del catalogo, construida una vez al iniciar."""

    data_dir: Path = DATA_DIR
    uploads_dir: Path = UPLOADS_DIR
    uploads_url_prefix: str = UPLOADS_URL_PREFIX
    sucursales: tuple[str, ...] = DEFAULT_SUCURSALES
    admin_key: str = ""
    default_image_extension: str = DEFAULT_IMAGE_EXTENSION
    sucursales_recientes: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CatalogSettings:
        """Construye la configuracion leyendo variables de entorno."""
        env = os.environ if environ is None else environ

        data_dir = Path(env["CATALOGO_DATA_DIR"]) if env.get("CATALOGO_DATA_DIR") else DATA_DIR
        uploads_dir = (
            Path(env["CATALOGO_UPLOADS_DIR"]) if env.get("CATALOGO_UPLOADS_DIR") else UPLOADS_DIR
        )
        sucursales = _split_csv_env(env.get("CATALOGO_SUCURSALES")) or DEFAULT_SUCURSALES

        return cls(
            data_dir=data_dir,
            uploads_dir=uploads_dir,
            sucursales=sucursales,
            admin_key=env.get("ADMIN_KEY", ""),
            sucursales_recientes=frozenset(
                _split_csv_env(env.get("CATALOGO_SUCURSALES_RECIENTES"))
            ),
        )
