"""DTOs del protocolo cliente-servidor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ProductFields:
    """Campos de producto recibidos desde el cliente.

    Cada campo es opcional: ``None`` significa "no enviado". En altas los
    campos de texto obligatorios deben venir con contenido; en ediciones solo
    se aplican los campos presentes.
    """

    codigo: str | None = None
    nombre: str | None = None
    precio: str | None = None
    categoria: str | None = None
    oferta: str | bool | None = None
    precio_promo: str | None = None


@dataclass(slots=True)
class UploadedImage:
    """Imagen ya recibida por el transporte."""

    content: bytes
    original_name: str = ""


@dataclass(slots=True)
class GetCatalogRequest:
    """Solicitud de listado de productos de una sucursal."""

    sucursal: str


@dataclass(slots=True)
class GetCatalogResponse:
    """Snapshot del catalogo de una sucursal."""

    sucursal: str
    productos: list[dict[str, Any]] = field(default_factory=list)


@dataclass(slots=True)
class CreateProductRequest:
    """Solicitud de alta de producto."""

    sucursal: str
    admin_key: str | None
    fields: ProductFields
    image: UploadedImage | None = None


@dataclass(slots=True)
class UpdateProductRequest:
    """Solicitud de edicion parcial de producto."""

    sucursal: str
    admin_key: str | None
    product_id: str
    fields: ProductFields = field(default_factory=ProductFields)
    image: UploadedImage | None = None


@dataclass(slots=True)
class ProductResponse:
    """Respuesta con el producto creado o editado."""

    producto: dict[str, Any]
    ok: bool = True


@dataclass(slots=True)
class DeleteProductRequest:
    """Solicitud de baja de producto."""

    sucursal: str
    admin_key: str | None
    product_id: str


@dataclass(slots=True)
class DeleteProductResponse:
    """Respuesta con el producto eliminado."""

    removed: dict[str, Any]
    ok: bool = True


@dataclass(slots=True)
class ExportCatalogRequest:
    """Solicitud de exportacion del catalogo."""

    sucursal: str
    formato: str = "csv"
    categoria: str | None = None


@dataclass(slots=True)
class ExportCatalogResponse:
    """Contenido exportado con nombre de archivo tipo adjunto."""

    filename: str
    media_type: str
    content_disposition: str
    content: bytes
