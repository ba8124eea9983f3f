"""Exportacion del catalogo de una sucursal en CSV o JSON."""

from __future__ import annotations

import csv
import json
import logging
import re
from dataclasses import dataclass
from io import StringIO

from servidor.domain.models import Catalogo, Producto
from servidor.services.branch_registry import BranchRegistry
from servidor.services.catalog_store import CatalogStore
from shared.csv_schema import CATALOG_EXPORT_HEADERS
from shared.errors import ValidationError

LOGGER = logging.getLogger(__name__)

_FILENAME_UNSAFE_PATTERN = re.compile(r"[^A-Za-z0-9_-]+")


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Contenido renderizado con metadatos de descarga."""

    content: bytes
    media_type: str
    filename: str

    @property
    def content_disposition(self) -> str:
        """Cabecera de adjunto para el transporte."""
        return f'attachment; filename="{self.filename}"'


class ExportService:
    """Renderiza el catalogo sin modificar lo persistido."""

    FORMATS: dict[str, tuple[str, str]] = {
        "csv": ("text/csv; charset=utf-8", "csv"),
        "json": ("application/json; charset=utf-8", "json"),
    }

    def __init__(self, registry: BranchRegistry, store: CatalogStore) -> None:
        self._registry = registry
        self._store = store

    def export(
        self,
        branch: str,
        formato: str = "csv",
        categoria: str | None = None,
    ) -> ExportResult:
        """Exporta el catalogo de la sucursal, opcionalmente filtrado por categoria."""
        normalized_branch = self._registry.validate(branch)
        format_key = (formato or "").strip().lower()
        if format_key not in self.FORMATS:
            raise ValidationError(f"Formato de exportacion no soportado: {formato}")

        catalogo = self._store.load(normalized_branch)
        productos = self.filter_by_category(catalogo, categoria)

        if format_key == "csv":
            content = self.render_csv(productos).encode("utf-8")
        else:
            content = self.render_json(productos).encode("utf-8")

        media_type, extension = self.FORMATS[format_key]
        filename = self._build_filename(normalized_branch, categoria, extension)
        LOGGER.info(
            "Catalogo exportado: sucursal=%s, formato=%s, categoria=%s, productos=%d",
            normalized_branch,
            format_key,
            categoria or "-",
            len(productos),
        )
        return ExportResult(content=content, media_type=media_type, filename=filename)

    @staticmethod
    def filter_by_category(catalogo: Catalogo, categoria: str | None) -> list[Producto]:
        """Retorna una lista nueva con los productos de la categoria indicada."""
        expected = (categoria or "").strip().casefold()
        if not expected:
            return list(catalogo.productos)
        return [
            producto
            for producto in catalogo.productos
            if producto.categoria.strip().casefold() == expected
        ]

    @staticmethod
    def render_csv(productos: list[Producto]) -> str:
        """CSV con comillas solo donde hace falta y dobles comillas escapadas."""
        buffer = StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
        writer.writerow(CATALOG_EXPORT_HEADERS)
        for producto in productos:
            writer.writerow(
                [
                    producto.codigo,
                    producto.nombre,
                    producto.precio,
                    producto.categoria,
                    "1" if producto.oferta else "0",
                    producto.precio_promo,
                    producto.img,
                ]
            )
        return buffer.getvalue()

    @staticmethod
    def render_json(productos: list[Producto]) -> str:
        """Estructura del catalogo tal como se persiste."""
        payload = Catalogo(productos=productos).to_dict()
        return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"

    @staticmethod
    def _build_filename(branch: str, categoria: str | None, extension: str) -> str:
        """Nombre de adjunto seguro: catalogo_<sucursal>[_<categoria>].<ext>."""
        parts = ["catalogo", branch]
        category_part = _FILENAME_UNSAFE_PATTERN.sub("-", (categoria or "").strip()).strip("-")
        if category_part:
            parts.append(category_part.lower())
        return f"{'_'.join(parts)}.{extension}"
