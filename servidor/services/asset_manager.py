"""Almacenamiento de imagenes subidas por sucursal."""

from __future__ import annotations

import enum
import logging
import re
import secrets
import time
from pathlib import Path, PurePosixPath

from parametros import DEFAULT_IMAGE_EXTENSION, UPLOADS_URL_PREFIX
from servidor.services.branch_registry import BranchRegistry
from shared.errors import StorageError, ValidationError

LOGGER = logging.getLogger(__name__)

_EXTENSION_PATTERN = re.compile(r"^\.[a-z0-9]{1,8}$")


class DeleteStatus(enum.Enum):
    """Resultado de una eliminacion de imagen; nunca se propaga como error."""

    DELETED = "deleted"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class AssetManager:
    """Guarda, resuelve y elimina imagenes bajo el directorio de cada sucursal."""

    MAX_NAME_ATTEMPTS = 5

    def __init__(
        self,
        uploads_dir: Path,
        registry: BranchRegistry,
        url_prefix: str = UPLOADS_URL_PREFIX,
        default_extension: str = DEFAULT_IMAGE_EXTENSION,
    ) -> None:
        self._uploads_dir = uploads_dir
        self._registry = registry
        self._url_prefix = "/" + url_prefix.strip("/")
        self._default_extension = default_extension

    def branch_dir(self, branch: str) -> Path:
        """Retorna el directorio de imagenes de una sucursal valida."""
        return self._uploads_dir / self._registry.validate(branch)

    def ensure_branch_dir(self, branch: str) -> Path:
        """Crea el directorio de imagenes de la sucursal si no existe."""
        directory = self.branch_dir(branch)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"No fue posible crear el directorio de imagenes: {directory}"
            ) from exc
        return directory

    def store(self, branch: str, content: bytes, original_name: str = "") -> str:
        """Guarda la imagen con nombre generado y retorna su referencia publica."""
        normalized_branch = self._registry.validate(branch)
        directory = self.ensure_branch_dir(normalized_branch)
        extension = self._extension_for(original_name)

        for _ in range(self.MAX_NAME_ATTEMPTS):
            filename = self._generate_name(extension)
            target = directory / filename
            try:
                with target.open("xb") as image_file:
                    image_file.write(content)
            except FileExistsError:
                LOGGER.debug("Colision de nombre de imagen, reintentando: %s", target)
                continue
            except OSError as exc:
                LOGGER.exception("Error al guardar imagen: %s", target)
                target.unlink(missing_ok=True)
                raise StorageError("No fue posible guardar la imagen.") from exc

            reference = f"{self._url_prefix}/{normalized_branch}/{filename}"
            LOGGER.info("Imagen guardada: %s (%d bytes)", reference, len(content))
            return reference

        raise StorageError("No fue posible generar un nombre unico para la imagen.")

    def resolve(self, reference: str) -> Path:
        """Mapea una referencia publica a su ruta en disco dentro de la sucursal."""
        prefix = f"{self._url_prefix}/"
        if not reference or not reference.startswith(prefix):
            raise ValidationError(f"Referencia de imagen invalida: {reference!r}")

        parts = PurePosixPath(reference[len(prefix):]).parts
        if len(parts) != 2 or "\\" in reference:
            raise ValidationError(f"Referencia de imagen invalida: {reference!r}")

        branch_part, filename = parts
        if filename in {".", ".."}:
            raise ValidationError(f"Referencia de imagen invalida: {reference!r}")

        directory = self.branch_dir(branch_part).resolve()
        candidate = (directory / filename).resolve()
        if not candidate.is_relative_to(directory) or candidate == directory:
            raise ValidationError(f"Referencia de imagen fuera de la sucursal: {reference!r}")
        return candidate

    def delete(self, reference: str) -> DeleteStatus:
        """Elimina la imagen referenciada sin propagar errores."""
        try:
            path = self.resolve(reference)
        except ValidationError:
            LOGGER.warning("No se elimina imagen con referencia invalida: %r", reference)
            return DeleteStatus.FAILED

        try:
            path.unlink()
        except FileNotFoundError:
            LOGGER.info("Imagen a eliminar no existe: %s", path)
            return DeleteStatus.NOT_FOUND
        except OSError:
            LOGGER.warning("No fue posible eliminar imagen: %s", path, exc_info=True)
            return DeleteStatus.FAILED

        LOGGER.info("Imagen eliminada: %s", path)
        return DeleteStatus.DELETED

    def _extension_for(self, original_name: str) -> str:
        """Conserva la extension original si es segura; si no, usa la de defecto."""
        suffix = PurePosixPath((original_name or "").replace("\\", "/")).suffix.lower()
        if _EXTENSION_PATTERN.fullmatch(suffix):
            return suffix
        return self._default_extension

    @staticmethod
    def _generate_name(extension: str) -> str:
        """Nombre con marca de tiempo en milisegundos y componente aleatorio."""
        return f"{time.time_ns() // 1_000_000}_{secrets.token_hex(6)}{extension}"
