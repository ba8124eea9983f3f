"""Tests para AssetManager."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from servidor.services.asset_manager import AssetManager, DeleteStatus
from servidor.services.branch_registry import BranchRegistry
from shared.errors import InvalidBranchError, StorageError, ValidationError


class AssetManagerTests(unittest.TestCase):
    """Valida guardado, resolucion y borrado de imagenes."""

    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.uploads_dir = Path(self._temp_dir.name) / "uploads"
        self.registry = BranchRegistry(["central", "caacupe"])
        self.assets = AssetManager(uploads_dir=self.uploads_dir, registry=self.registry)

    def tearDown(self) -> None:
        self._temp_dir.cleanup()

    def test_store_writes_file_with_generated_name(self) -> None:
        """Debe guardar bytes bajo la sucursal sin usar el nombre original."""
        reference = self.assets.store("central", b"img-bytes", "../../etc/passwd.png")

        self.assertTrue(reference.startswith("/uploads/central/"))
        self.assertTrue(reference.endswith(".png"))
        self.assertNotIn("passwd", reference)

        path = self.assets.resolve(reference)
        self.assertEqual(path.read_bytes(), b"img-bytes")
        self.assertEqual(path.parent, (self.uploads_dir / "central").resolve())

    def test_store_defaults_extension_when_missing_or_unsafe(self) -> None:
        """Sin extension valida debe usar .jpg."""
        for original_name in ("", "foto", "foto.", "foto.p/ng", "foto.muy-larga-ext"):
            with self.subTest(original_name=original_name):
                reference = self.assets.store("central", b"x", original_name)
                self.assertTrue(reference.endswith(".jpg"))

    def test_store_names_never_collide(self) -> None:
        """Subidas en rafaga deben producir referencias distintas."""
        references = {self.assets.store("central", b"x", "a.jpg") for _ in range(50)}
        self.assertEqual(len(references), 50)

    def test_store_retries_on_name_collision(self) -> None:
        """Si el nombre generado ya existe debe reintentar con otro."""
        directory = self.assets.ensure_branch_dir("central")
        (directory / "fijo.jpg").write_bytes(b"previo")

        with mock.patch.object(
            AssetManager,
            "_generate_name",
            side_effect=["fijo.jpg", "nuevo.jpg"],
        ):
            reference = self.assets.store("central", b"x", "a.jpg")

        self.assertEqual(reference, "/uploads/central/nuevo.jpg")
        self.assertEqual((directory / "fijo.jpg").read_bytes(), b"previo")

    def test_store_gives_up_after_repeated_collisions(self) -> None:
        """Tras agotar intentos debe levantar StorageError."""
        directory = self.assets.ensure_branch_dir("central")
        (directory / "fijo.jpg").write_bytes(b"previo")

        with mock.patch.object(AssetManager, "_generate_name", return_value="fijo.jpg"):
            with self.assertRaises(StorageError):
                self.assets.store("central", b"x", "a.jpg")

    def test_store_rejects_invalid_branch_before_io(self) -> None:
        """Sucursal invalida no debe crear directorios."""
        with self.assertRaises(InvalidBranchError):
            self.assets.store("norte", b"x", "a.jpg")
        self.assertFalse(self.uploads_dir.exists())

    def test_resolve_rejects_escaping_references(self) -> None:
        """Referencias que salen del directorio de la sucursal deben rechazarse."""
        for reference in (
            "",
            "/otra/central/a.jpg",
            "/uploads/central/../caacupe/a.jpg",
            "/uploads/central/..",
            "/uploads/central",
            "/uploads/central/sub/a.jpg",
            "/uploads/norte/a.jpg",
            "/uploads/central/..\\a.jpg",
        ):
            with self.subTest(reference=reference):
                with self.assertRaises(ValidationError):
                    self.assets.resolve(reference)

    def test_delete_reports_status_without_raising(self) -> None:
        """delete debe retornar estado y nunca propagar errores."""
        reference = self.assets.store("central", b"x", "a.jpg")

        self.assertIs(self.assets.delete(reference), DeleteStatus.DELETED)
        self.assertFalse(self.assets.resolve(reference).exists())
        self.assertIs(self.assets.delete(reference), DeleteStatus.NOT_FOUND)
        self.assertIs(self.assets.delete("/uploads/central/../x.jpg"), DeleteStatus.FAILED)

    def test_delete_absorbs_os_errors(self) -> None:
        """Errores de permisos deben reportarse como FAILED."""
        reference = self.assets.store("central", b"x", "a.jpg")

        with mock.patch.object(Path, "unlink", side_effect=PermissionError("denegado")):
            status = self.assets.delete(reference)

        self.assertIs(status, DeleteStatus.FAILED)


if __name__ == "__main__":
    unittest.main()
