"""Prepara directorio de imagenes y snapshot vacio para cada sucursal configurada."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from parametros import CatalogSettings
from servidor.services.asset_manager import AssetManager
from servidor.services.branch_registry import BranchRegistry
from servidor.services.catalog_store import JsonCatalogStore
from shared.errors import CatalogError

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parsea argumentos CLI del aprovisionamiento."""
    parser = argparse.ArgumentParser(
        description=(
            "Crea <data>/<sucursal>.json y <uploads>/<sucursal>/ para cada sucursal "
            "configurada. Es idempotente: no modifica catalogos existentes."
        )
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directorio de snapshots (por defecto CATALOGO_DATA_DIR o data/).",
    )
    parser.add_argument(
        "--uploads-dir",
        type=Path,
        default=None,
        help="Directorio de imagenes (por defecto CATALOGO_UPLOADS_DIR o public/uploads/).",
    )
    parser.add_argument(
        "--sucursal",
        action="append",
        dest="sucursales",
        default=None,
        help="Sucursal a aprovisionar; puede repetirse. Por defecto todas las configuradas.",
    )
    return parser.parse_args(argv)


def configure_logging() -> None:
    """Configura logging para salida en consola, reemplazando el formato de parametros."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        force=True,
    )


def provision(
    settings: CatalogSettings,
    sucursales: Sequence[str] | None = None,
) -> list[str]:
    """Aprovisiona las sucursales indicadas y retorna las normalizadas procesadas."""
    registry = BranchRegistry(settings.sucursales)
    store = JsonCatalogStore(settings.data_dir, registry)
    assets = AssetManager(
        uploads_dir=settings.uploads_dir,
        registry=registry,
        url_prefix=settings.uploads_url_prefix,
        default_extension=settings.default_image_extension,
    )

    targets = list(sucursales) if sucursales else registry.branches()
    provisioned: list[str] = []
    for sucursal in targets:
        branch = registry.validate(sucursal)
        snapshot_path = store.ensure_branch(branch)
        uploads_path = assets.ensure_branch_dir(branch)
        LOGGER.info(
            "PROVISION %s | snapshot=%s | uploads=%s",
            branch,
            snapshot_path,
            uploads_path,
        )
        provisioned.append(branch)

    return provisioned


def main(argv: Sequence[str] | None = None) -> int:
    """Punto de entrada CLI."""
    configure_logging()
    args = parse_args(argv)

    settings = CatalogSettings.from_env()
    if args.data_dir is not None:
        settings = replace(settings, data_dir=args.data_dir)
    if args.uploads_dir is not None:
        settings = replace(settings, uploads_dir=args.uploads_dir)

    try:
        provision(settings, args.sucursales)
    except (CatalogError, ValueError) as exc:
        LOGGER.error("Aprovisionamiento fallido: %s", exc)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
