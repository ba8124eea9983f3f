"""Tests para LocalServerGateway."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from cliente.backend.gateway import LocalServerGateway
from parametros import CatalogSettings
from shared.errors import (
    AuthError,
    ConflictError,
    InvalidBranchError,
    NotFoundError,
    ServiceError,
    status_for_error,
)
from shared.protocol import (
    CreateProductRequest,
    DeleteProductRequest,
    ExportCatalogRequest,
    GetCatalogRequest,
    ProductFields,
    UpdateProductRequest,
    UploadedImage,
)

ADMIN_KEY = "clave-test"


class LocalServerGatewayTests(unittest.TestCase):
    """Valida el set de operaciones y el mapeo de errores."""

    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        base_path = Path(self._temp_dir.name)
        self.settings = CatalogSettings(
            data_dir=base_path / "data",
            uploads_dir=base_path / "public" / "uploads",
            sucursales=("central", "fernando", "caacupe"),
            admin_key=ADMIN_KEY,
        )
        self.gateway = LocalServerGateway(settings=self.settings)

    def tearDown(self) -> None:
        self._temp_dir.cleanup()

    def test_create_then_export_json_round_trip(self) -> None:
        """Un producto creado debe aparecer igual en la exportacion JSON."""
        created = self._create("A1").producto

        response = self.gateway.export_catalog(
            ExportCatalogRequest(sucursal="central", formato="json")
        )
        exported = json.loads(response.content)["productos"]

        self.assertEqual(exported, [created])
        self.assertEqual(created["codigo"], "A1")
        self.assertEqual(created["nombre"], "Gafas")
        self.assertEqual(created["precio"], "100000")
        self.assertEqual(created["categoria"], "dama")
        self.assertEqual(response.content_disposition, 'attachment; filename="catalogo_central.json"')

    def test_get_catalog_returns_snapshot(self) -> None:
        """get_catalog debe listar los productos con claves del snapshot."""
        self._create("A1")
        response = self.gateway.get_catalog(GetCatalogRequest(sucursal="Central"))

        self.assertEqual(response.sucursal, "central")
        self.assertEqual(len(response.productos), 1)
        self.assertEqual(
            set(response.productos[0]),
            {"id", "codigo", "nombre", "precio", "categoria", "oferta", "precioPromo", "img", "ts"},
        )

    def test_update_and_delete_flow(self) -> None:
        """Edicion parcial y baja deben reflejarse en el catalogo."""
        created = self._create("A1").producto

        updated = self.gateway.update_product(
            UpdateProductRequest(
                sucursal="central",
                admin_key=ADMIN_KEY,
                product_id=created["id"],
                fields=ProductFields(precio="120000"),
            )
        ).producto
        self.assertEqual(updated["precio"], "120000")

        removed = self.gateway.delete_product(
            DeleteProductRequest(sucursal="central", admin_key=ADMIN_KEY, product_id=created["id"])
        ).removed
        self.assertEqual(removed["id"], created["id"])
        self.assertEqual(self.gateway.get_catalog(GetCatalogRequest("central")).productos, [])

    def test_errors_carry_transport_status(self) -> None:
        """Cada error debe mapear a su codigo de estado."""
        self._create("A1")
        cases = (
            (InvalidBranchError, 400, lambda: self.gateway.get_catalog(GetCatalogRequest("norte"))),
            (AuthError, 401, lambda: self._create("B2", admin_key="mala")),
            (ConflictError, 409, lambda: self._create("a1")),
            (
                NotFoundError,
                404,
                lambda: self.gateway.delete_product(
                    DeleteProductRequest("central", ADMIN_KEY, "no-existe")
                ),
            ),
        )
        for error_type, status, operation in cases:
            with self.subTest(error_type=error_type.__name__):
                with self.assertRaises(error_type) as ctx:
                    operation()
                self.assertEqual(status_for_error(ctx.exception), status)

    def test_unexpected_errors_are_wrapped_in_service_error(self) -> None:
        """Fallos no previstos deben envolverse en ServiceError."""
        product_service = mock.Mock()
        product_service.list_products.side_effect = RuntimeError("boom")
        gateway = LocalServerGateway(settings=self.settings, product_service=product_service)

        with self.assertLogs("cliente.backend.gateway", level="ERROR"):
            with self.assertRaises(ServiceError) as ctx:
                gateway.get_catalog(GetCatalogRequest("central"))

        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)
        self.assertEqual(status_for_error(ctx.exception), 500)

    def test_list_branches(self) -> None:
        """Debe exponer las sucursales configuradas."""
        self.assertEqual(self.gateway.list_branches(), ["caacupe", "central", "fernando"])

    def _create(self, codigo: str, admin_key: str = ADMIN_KEY):
        return self.gateway.create_product(
            CreateProductRequest(
                sucursal="central",
                admin_key=admin_key,
                fields=ProductFields(
                    codigo=codigo,
                    nombre="Gafas",
                    precio="100000",
                    categoria="dama",
                ),
                image=UploadedImage(content=b"img1", original_name="img1.jpg"),
            )
        )


if __name__ == "__main__":
    unittest.main()
