"""Validaciones para entradas del cliente."""

from __future__ import annotations

from pathlib import Path

from shared.errors import ValidationError

MAX_IMAGE_BYTES = 10 * 1024 * 1024


def validate_output_dir(path: Path) -> None:
    """Valida que la ruta de salida sea utilizable para archivos exportados."""
    if path.exists() and not path.is_dir():
        raise ValidationError(f"La ruta no es un directorio: {path}")

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ValidationError(f"No se pudo crear/acceder al directorio: {path}") from exc


def read_image_file(path: Path) -> bytes:
    """Lee la imagen elegida por el usuario validando que exista y no este vacia."""
    if not path.is_file():
        raise ValidationError(f"La imagen no existe: {path}")

    try:
        content = path.read_bytes()
    except OSError as exc:
        raise ValidationError(f"No se pudo leer la imagen: {path}") from exc

    if not content:
        raise ValidationError(f"La imagen esta vacia: {path}")
    if len(content) > MAX_IMAGE_BYTES:
        raise ValidationError("La imagen supera el tamano maximo de 10 MB.")
    return content
