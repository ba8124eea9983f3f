"""Gateway de comunicacion cliente-servidor."""

from __future__ import annotations

import logging
from typing import Protocol

from parametros import CatalogSettings
from servidor.services.admin_gate import AdminGate
from servidor.services.asset_manager import AssetManager
from servidor.services.branch_registry import BranchRegistry
from servidor.services.catalog_store import JsonCatalogStore
from servidor.services.export_service import ExportService
from servidor.services.product_service import ProductService
from shared.errors import CatalogError, ServiceError
from shared.protocol import (
    CreateProductRequest,
    DeleteProductRequest,
    DeleteProductResponse,
    ExportCatalogRequest,
    ExportCatalogResponse,
    GetCatalogRequest,
    GetCatalogResponse,
    ProductResponse,
    UpdateProductRequest,
)

LOGGER = logging.getLogger(__name__)


class ServerGateway(Protocol):
    """Interfaz de acceso del cliente a servicios del servidor."""

    def list_branches(self) -> list[str]:
        """Lista las sucursales configuradas."""

    def get_catalog(self, request: GetCatalogRequest) -> GetCatalogResponse:
        """Solicita el catalogo de una sucursal."""

    def create_product(self, request: CreateProductRequest) -> ProductResponse:
        """Solicita el alta de un producto."""

    def update_product(self, request: UpdateProductRequest) -> ProductResponse:
        """Solicita la edicion parcial de un producto."""

    def delete_product(self, request: DeleteProductRequest) -> DeleteProductResponse:
        """Solicita la baja de un producto."""

    def export_catalog(self, request: ExportCatalogRequest) -> ExportCatalogResponse:
        """Solicita la exportacion del catalogo."""


class LocalServerGateway:
    """Implementacion local del gateway usando servicios en proceso."""

    def __init__(
        self,
        settings: CatalogSettings | None = None,
        product_service: ProductService | None = None,
        export_service: ExportService | None = None,
    ) -> None:
        self._settings = settings or CatalogSettings.from_env()
        self._registry = BranchRegistry(self._settings.sucursales)
        store = JsonCatalogStore(self._settings.data_dir, self._registry)
        assets = AssetManager(
            uploads_dir=self._settings.uploads_dir,
            registry=self._registry,
            url_prefix=self._settings.uploads_url_prefix,
            default_extension=self._settings.default_image_extension,
        )
        self._product_service = product_service or ProductService(
            registry=self._registry,
            gate=AdminGate(self._settings.admin_key),
            store=store,
            assets=assets,
            sucursales_recientes=self._settings.sucursales_recientes,
        )
        self._export_service = export_service or ExportService(
            registry=self._registry,
            store=store,
        )

    def list_branches(self) -> list[str]:
        """Retorna las sucursales configuradas normalizadas."""
        return self._registry.branches()

    def get_catalog(self, request: GetCatalogRequest) -> GetCatalogResponse:
        """Retorna el snapshot del catalogo de la sucursal."""
        try:
            productos = self._product_service.list_products(request.sucursal)
        except CatalogError:
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al leer catalogo: %s", request.sucursal)
            raise ServiceError("No fue posible leer el catalogo.") from exc

        return GetCatalogResponse(
            sucursal=self._registry.validate(request.sucursal),
            productos=[producto.to_dict() for producto in productos],
        )

    def create_product(self, request: CreateProductRequest) -> ProductResponse:
        """Crea un producto delegando en el servicio."""
        try:
            producto = self._product_service.create(
                branch=request.sucursal,
                admin_key=request.admin_key,
                fields=request.fields,
                image=request.image,
            )
        except CatalogError:
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al crear producto en: %s", request.sucursal)
            raise ServiceError("No fue posible crear el producto.") from exc

        return ProductResponse(producto=producto.to_dict())

    def update_product(self, request: UpdateProductRequest) -> ProductResponse:
        """Edita un producto delegando en el servicio."""
        try:
            producto = self._product_service.update(
                branch=request.sucursal,
                admin_key=request.admin_key,
                product_id=request.product_id,
                fields=request.fields,
                image=request.image,
            )
        except CatalogError:
            raise
        except Exception as exc:
            LOGGER.exception(
                "Fallo inesperado al editar producto: sucursal=%s, id=%s",
                request.sucursal,
                request.product_id,
            )
            raise ServiceError("No fue posible editar el producto.") from exc

        return ProductResponse(producto=producto.to_dict())

    def delete_product(self, request: DeleteProductRequest) -> DeleteProductResponse:
        """Elimina un producto delegando en el servicio."""
        try:
            removed = self._product_service.delete(
                branch=request.sucursal,
                admin_key=request.admin_key,
                product_id=request.product_id,
            )
        except CatalogError:
            raise
        except Exception as exc:
            LOGGER.exception(
                "Fallo inesperado al eliminar producto: sucursal=%s, id=%s",
                request.sucursal,
                request.product_id,
            )
            raise ServiceError("No fue posible eliminar el producto.") from exc

        return DeleteProductResponse(removed=removed.to_dict())

    def export_catalog(self, request: ExportCatalogRequest) -> ExportCatalogResponse:
        """Exporta el catalogo en el formato solicitado."""
        try:
            result = self._export_service.export(
                branch=request.sucursal,
                formato=request.formato,
                categoria=request.categoria,
            )
        except CatalogError:
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al exportar catalogo: %s", request.sucursal)
            raise ServiceError("No fue posible exportar el catalogo.") from exc

        return ExportCatalogResponse(
            filename=result.filename,
            media_type=result.media_type,
            content_disposition=result.content_disposition,
            content=result.content,
        )
