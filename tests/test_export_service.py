"""Tests para ExportService."""

from __future__ import annotations

import csv
import json
import tempfile
import unittest
from io import StringIO
from pathlib import Path

from servidor.domain.models import Catalogo, Producto
from servidor.services.branch_registry import BranchRegistry
from servidor.services.catalog_store import JsonCatalogStore
from servidor.services.export_service import ExportService
from shared.csv_schema import CATALOG_EXPORT_HEADERS
from shared.errors import InvalidBranchError, ValidationError


class ExportServiceTests(unittest.TestCase):
    """Valida renderizado CSV/JSON y filtro por categoria."""

    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        registry = BranchRegistry(["central"])
        self.store = JsonCatalogStore(Path(self._temp_dir.name) / "data", registry)
        self.service = ExportService(registry=registry, store=self.store)

    def tearDown(self) -> None:
        self._temp_dir.cleanup()

    def test_csv_quotes_commas_and_doubles_quotes(self) -> None:
        """Un nombre con coma y comillas debe escaparse segun RFC 4180."""
        self._save(self._build_product("1", "A1", nombre='Ray, "Special"'))

        result = self.service.export("central", "csv")
        text = result.content.decode("utf-8")

        self.assertIn('"Ray, ""Special"""', text)
        lines = text.split("\r\n")
        self.assertEqual(lines[0], ",".join(CATALOG_EXPORT_HEADERS))

    def test_csv_renders_oferta_as_one_or_zero(self) -> None:
        """oferta debe exportarse como 1/0 y las columnas en orden fijo."""
        self._save(
            self._build_product("1", "A1", oferta=True, precio_promo="90000"),
            self._build_product("2", "B2", nombre="Linea\nnueva"),
        )

        text = self.service.export("central", "csv").content.decode("utf-8")
        rows = list(csv.reader(StringIO(text, newline="")))
        index = {name: position for position, name in enumerate(rows[0])}

        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[1][index["oferta"]], "1")
        self.assertEqual(rows[1][index["precioPromo"]], "90000")
        self.assertEqual(rows[2][index["oferta"]], "0")
        self.assertEqual(rows[2][index["nombre"]], "Linea\nnueva")
        self.assertEqual(rows[1][index["img"]], "/uploads/central/1.jpg")

    def test_json_export_is_catalog_verbatim(self) -> None:
        """La exportacion JSON debe reproducir el snapshot."""
        productos = [self._build_product("1", "A1"), self._build_product("2", "B2")]
        self._save(*productos)

        result = self.service.export("central", "JSON")

        self.assertEqual(json.loads(result.content), Catalogo(productos=productos).to_dict())
        self.assertTrue(result.media_type.startswith("application/json"))
        self.assertEqual(result.filename, "catalogo_central.json")

    def test_category_filter_does_not_mutate_catalog(self) -> None:
        """El filtro restringe filas sin modificar lo persistido."""
        self._save(
            self._build_product("1", "A1", categoria="dama"),
            self._build_product("2", "B2", categoria="caballero"),
            self._build_product("3", "C3", categoria=" Dama "),
        )

        result = self.service.export("central", "csv", categoria="DAMA")
        rows = list(csv.reader(StringIO(result.content.decode("utf-8"), newline="")))

        self.assertEqual([row[0] for row in rows[1:]], ["A1", "C3"])
        self.assertEqual(len(self.store.load("central").productos), 3)
        self.assertEqual(result.filename, "catalogo_central_dama.csv")

    def test_attachment_headers(self) -> None:
        """El resultado debe traer nombre y disposicion de adjunto."""
        result = self.service.export("central", "csv")
        self.assertEqual(result.filename, "catalogo_central.csv")
        self.assertEqual(result.content_disposition, 'attachment; filename="catalogo_central.csv"')
        self.assertTrue(result.media_type.startswith("text/csv"))

    def test_empty_catalog_exports_only_header(self) -> None:
        """Sin productos el CSV solo contiene encabezado."""
        text = self.service.export("central", "csv").content.decode("utf-8")
        self.assertEqual(text, ",".join(CATALOG_EXPORT_HEADERS) + "\r\n")

    def test_unknown_format_and_branch_are_rejected(self) -> None:
        """Formato no soportado y sucursal invalida deben fallar."""
        with self.assertRaises(ValidationError):
            self.service.export("central", "xml")
        with self.assertRaises(InvalidBranchError):
            self.service.export("norte", "csv")

    def _save(self, *productos: Producto) -> None:
        self.store.save("central", Catalogo(productos=list(productos)))

    @staticmethod
    def _build_product(
        product_id: str,
        codigo: str,
        nombre: str = "Gafas",
        categoria: str = "dama",
        oferta: bool = False,
        precio_promo: str = "",
    ) -> Producto:
        return Producto(
            id=product_id,
            codigo=codigo,
            nombre=nombre,
            precio="100000",
            categoria=categoria,
            img=f"/uploads/central/{product_id}.jpg",
            ts=1700000000000,
            oferta=oferta,
            precio_promo=precio_promo,
        )


if __name__ == "__main__":
    unittest.main()
