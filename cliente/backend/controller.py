"""Controlador principal del cliente de administracion."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from parametros import EXPORT_DIR
from shared.errors import ServiceError, ValidationError
from shared.protocol import (
    CreateProductRequest,
    DeleteProductRequest,
    ExportCatalogRequest,
    GetCatalogRequest,
    ProductFields,
    UpdateProductRequest,
    UploadedImage,
)

from .gateway import ServerGateway
from .validators import read_image_file, validate_output_dir

if TYPE_CHECKING:
    from PyQt6.QtWidgets import QApplication

LOGGER = logging.getLogger(__name__)


class AppController:
    """Coordina acciones de UI y servicios del catalogo."""

    def __init__(
        self,
        gateway: ServerGateway,
        export_dir: Path = EXPORT_DIR,
    ) -> None:
        self._gateway = gateway
        self._export_dir = export_dir
        self._admin_key: str = ""
        self._branches = gateway.list_branches()
        if not self._branches:
            raise ServiceError("No hay sucursales configuradas.")
        self._current_branch = self._branches[0]
        self._catalog_cache: dict[str, list[dict[str, Any]]] = {}

    @property
    def current_branch(self) -> str:
        """Sucursal activa en la interfaz."""
        return self._current_branch

    @property
    def has_admin_key(self) -> bool:
        """Indica si el usuario ingreso una clave de administrador."""
        return bool(self._admin_key)

    def list_branches(self) -> list[str]:
        """Lista sucursales disponibles."""
        return list(self._branches)

    def on_select_branch(self, branch: str) -> None:
        """Cambia la sucursal activa."""
        branch_clean = branch.strip()
        if branch_clean not in self._branches:
            raise ValidationError(f"Sucursal invalida: {branch}")
        self._current_branch = branch_clean
        LOGGER.info("Sucursal activa: %s", branch_clean)

    def set_admin_key(self, admin_key: str) -> None:
        """Guarda la clave de administrador usada en operaciones de escritura."""
        self._admin_key = admin_key.strip()

    def load_products(
        self,
        categoria: str | None = None,
        refresh: bool = False,
    ) -> list[dict[str, Any]]:
        """Retorna productos de la sucursal activa, usando cache salvo refresh."""
        branch = self._current_branch
        productos = self._catalog_cache.get(branch)
        if productos is None or refresh:
            response = self._gateway.get_catalog(GetCatalogRequest(sucursal=branch))
            productos = response.productos
            self._catalog_cache[branch] = productos
            LOGGER.info("Catalogo cargado: sucursal=%s, productos=%d", branch, len(productos))

        expected = (categoria or "").strip().casefold()
        if not expected:
            return list(productos)
        return [
            producto
            for producto in productos
            if str(producto.get("categoria", "")).strip().casefold() == expected
        ]

    def list_categories(self) -> list[str]:
        """Categorias presentes en el catalogo activo, sin duplicados."""
        seen: dict[str, str] = {}
        for producto in self.load_products():
            categoria = str(producto.get("categoria", "")).strip()
            if categoria and categoria.casefold() not in seen:
                seen[categoria.casefold()] = categoria
        return sorted(seen.values(), key=str.casefold)

    def on_create_product(self, fields: ProductFields, image_path: str) -> dict[str, Any]:
        """Crea un producto en la sucursal activa leyendo la imagen elegida."""
        if not image_path.strip():
            raise ValidationError("Selecciona una imagen para el producto.")

        image = self._build_image(image_path)
        response = self._gateway.create_product(
            CreateProductRequest(
                sucursal=self._current_branch,
                admin_key=self._admin_key,
                fields=fields,
                image=image,
            )
        )
        self._catalog_cache.pop(self._current_branch, None)
        LOGGER.info("Producto creado desde UI: %s", response.producto.get("id"))
        return response.producto

    def on_update_product(
        self,
        product_id: str,
        fields: ProductFields,
        image_path: str | None = None,
    ) -> dict[str, Any]:
        """Edita un producto; la imagen solo se reemplaza si se indica una ruta."""
        image = self._build_image(image_path) if image_path and image_path.strip() else None
        response = self._gateway.update_product(
            UpdateProductRequest(
                sucursal=self._current_branch,
                admin_key=self._admin_key,
                product_id=product_id,
                fields=fields,
                image=image,
            )
        )
        self._catalog_cache.pop(self._current_branch, None)
        LOGGER.info("Producto editado desde UI: %s", product_id)
        return response.producto

    def on_delete_product(self, product_id: str) -> dict[str, Any]:
        """Elimina un producto de la sucursal activa."""
        response = self._gateway.delete_product(
            DeleteProductRequest(
                sucursal=self._current_branch,
                admin_key=self._admin_key,
                product_id=product_id,
            )
        )
        self._catalog_cache.pop(self._current_branch, None)
        LOGGER.info("Producto eliminado desde UI: %s", product_id)
        return response.removed

    def on_export(
        self,
        formato: str,
        categoria: str | None = None,
        output_dir: Path | None = None,
    ) -> Path:
        """Exporta el catalogo activo y lo escribe en disco sin sobrescribir."""
        target_dir = output_dir or self._export_dir
        validate_output_dir(target_dir)

        response = self._gateway.export_catalog(
            ExportCatalogRequest(
                sucursal=self._current_branch,
                formato=formato,
                categoria=categoria or None,
            )
        )

        output_path = self._resolve_collision(target_dir / response.filename)
        try:
            output_path.write_bytes(response.content)
        except OSError as exc:
            LOGGER.exception("Error al escribir exportacion: %s", output_path)
            raise ServiceError(f"No fue posible escribir el archivo: {output_path}") from exc

        LOGGER.info("Catalogo exportado a: %s", output_path)
        return output_path

    def on_exit(
        self,
        app: QApplication | Callable[[], None] | None,
    ) -> None:
        """Cierra la aplicacion."""
        LOGGER.info("Accion ejecutada: salir")

        if callable(app):
            app()
            return

        if app is not None:
            app.quit()

    @staticmethod
    def _build_image(image_path: str) -> UploadedImage:
        """Lee la imagen local y arma el DTO de subida."""
        path = Path(image_path.strip())
        return UploadedImage(content=read_image_file(path), original_name=path.name)

    @staticmethod
    def _resolve_collision(path: Path) -> Path:
        """Resuelve colisiones de nombre para no sobrescribir archivos existentes."""
        if not path.exists():
            return path

        counter = 1
        candidate = path
        while candidate.exists():
            candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
            counter += 1

        return candidate
