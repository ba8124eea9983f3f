"""Modelos de dominio del catalogo."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from shared.normalizers import codigo_key, parse_flag

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class Producto:
    """Representa un producto publicado en el catalogo de una sucursal."""

    id: str
    codigo: str
    nombre: str
    precio: str
    categoria: str
    img: str
    ts: int
    oferta: bool = False
    precio_promo: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serializa con las claves del snapshot JSON."""
        return {
            "id": self.id,
            "codigo": self.codigo,
            "nombre": self.nombre,
            "precio": self.precio,
            "categoria": self.categoria,
            "oferta": self.oferta,
            "precioPromo": self.precio_promo,
            "img": self.img,
            "ts": self.ts,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Producto:
        """Construye un producto desde un registro del snapshot."""
        raw_ts = data.get("ts")
        try:
            ts = int(raw_ts) if raw_ts is not None else 0
        except (TypeError, ValueError, OverflowError):
            ts = 0

        return cls(
            id=str(data.get("id") or ""),
            codigo=str(data.get("codigo") or ""),
            nombre=str(data.get("nombre") or ""),
            precio=str(data.get("precio") or ""),
            categoria=str(data.get("categoria") or ""),
            img=str(data.get("img") or ""),
            ts=ts,
            oferta=parse_flag(data.get("oferta")),
            precio_promo=str(data.get("precioPromo") or ""),
        )


@dataclass(slots=True)
class Catalogo:
    """Secuencia ordenada de productos de una sucursal."""

    productos: list[Producto] = field(default_factory=list)

    def find_index(self, product_id: str) -> int | None:
        """Retorna la posicion del producto con ese id, o None."""
        for index, producto in enumerate(self.productos):
            if producto.id == product_id:
                return index
        return None

    def codigo_exists(self, codigo: str, exclude_id: str | None = None) -> bool:
        """Indica si el codigo ya esta usado por otro producto (sin distinguir mayusculas)."""
        expected = codigo_key(codigo)
        return any(
            codigo_key(producto.codigo) == expected
            for producto in self.productos
            if producto.id != exclude_id
        )

    def to_dict(self) -> dict[str, Any]:
        """Serializa el catalogo completo como snapshot."""
        return {"productos": [producto.to_dict() for producto in self.productos]}

    @classmethod
    def from_dict(cls, data: Any) -> Catalogo:
        """Construye el catalogo desde el snapshot; ValueError si la estructura es invalida."""
        if not isinstance(data, dict):
            raise ValueError("El snapshot debe ser un objeto JSON.")

        raw_products = data.get("productos", [])
        if not isinstance(raw_products, list):
            raise ValueError("La clave 'productos' debe ser una lista.")

        productos: list[Producto] = []
        for raw in raw_products:
            if not isinstance(raw, dict):
                LOGGER.warning("Registro de producto ignorado por formato invalido: %r", raw)
                continue
            productos.append(Producto.from_dict(raw))

        return cls(productos=productos)
