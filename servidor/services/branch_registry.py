"""Registro fijo de sucursales validas."""

from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Iterable

from shared.errors import InvalidBranchError

LOGGER = logging.getLogger(__name__)

_SEPARATORS_PATTERN = re.compile(r"[\s_]+")
_INVALID_CHARS_PATTERN = re.compile(r"[^a-z0-9-]")
_DASHES_PATTERN = re.compile(r"-{2,}")


def normalize_branch(branch_id: str) -> str:
    """Normaliza un identificador de sucursal.

    Quita acentos, pasa a minusculas, convierte espacios y guiones bajos en
    guiones, elimina cualquier caracter fuera de ``[a-z0-9-]`` y colapsa
    guiones repetidos. La misma forma se usa para directorios y claves.
    """
    normalized = unicodedata.normalize("NFKD", branch_id)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").casefold().strip()
    slug = _SEPARATORS_PATTERN.sub("-", ascii_text)
    slug = _INVALID_CHARS_PATTERN.sub("", slug)
    slug = _DASHES_PATTERN.sub("-", slug)
    return slug.strip("-")


class BranchRegistry:
    """Valida sucursales contra un conjunto fijo conocido al iniciar."""

    def __init__(self, sucursales: Iterable[str]) -> None:
        allowed = {normalize_branch(sucursal) for sucursal in sucursales}
        allowed.discard("")
        if not allowed:
            raise ValueError("Se requiere al menos una sucursal valida.")
        self._allowed: frozenset[str] = frozenset(allowed)

    def validate(self, branch_id: str | None) -> str:
        """Retorna la sucursal normalizada o levanta InvalidBranchError."""
        normalized = normalize_branch(branch_id or "")
        if normalized not in self._allowed:
            LOGGER.warning("Sucursal invalida solicitada: %r", branch_id)
            raise InvalidBranchError("Sucursal invalida")
        return normalized

    def is_valid(self, branch_id: str | None) -> bool:
        """Indica si la sucursal pertenece al conjunto permitido."""
        return normalize_branch(branch_id or "") in self._allowed

    def branches(self) -> list[str]:
        """Lista las sucursales permitidas en orden estable."""
        return sorted(self._allowed)
