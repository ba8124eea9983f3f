"""Normalizacion unica de valores de entrada poco tipados."""

from __future__ import annotations

import unicodedata

# Tokens textuales aceptados como verdadero para el flag "oferta".
# Se comparan sin acentos, sin espacios y en minusculas.
TRUTHY_TOKENS: frozenset[str] = frozenset(
    {"1", "true", "t", "si", "s", "yes", "y", "on", "x", "oferta"}
)


def parse_flag(value: object) -> bool:
    """Convierte un valor booleano o textual en bool.

    ``bool`` se respeta tal cual; enteros distintos de cero son verdaderos;
    los textos son verdaderos solo si coinciden con ``TRUTHY_TOKENS``
    (``"Si"``, ``"sí"``, ``"TRUE"``, ``"on"``...). Cualquier otro valor,
    incluido ``None``, es falso.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if not isinstance(value, str):
        return False
    return _fold(value) in TRUTHY_TOKENS


def clean_text(value: str | None) -> str | None:
    """Retorna el texto sin espacios extremos, o None si queda vacio."""
    if value is None:
        return None
    cleaned = value.replace("\x00", "").strip()
    return cleaned or None


def provided_text(value: str | None) -> str | None:
    """Retorna el valor tal como llego si tiene contenido; None si falta o esta en blanco."""
    if clean_text(value) is None:
        return None
    return value


def codigo_key(codigo: str) -> str:
    """Clave de comparacion insensible a mayusculas para codigos."""
    return codigo.strip().casefold()


def _fold(text: str) -> str:
    """Quita acentos, espacios y mayusculas."""
    normalized = unicodedata.normalize("NFKD", text)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    return ascii_text.strip().lower()
