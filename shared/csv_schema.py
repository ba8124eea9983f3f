"""Esquema canonico de columnas CSV compartido por cliente/servidor."""

from __future__ import annotations

CATALOG_EXPORT_HEADERS: tuple[str, ...] = (
    "codigo",
    "nombre",
    "precio",
    "categoria",
    "oferta",
    "precioPromo",
    "img",
)
