"""Excepciones compartidas del proyecto."""

from __future__ import annotations


class CatalogError(Exception):
    """Error base del catalogo con un codigo de estado para el transporte."""

    status_code = 500


class ValidationError(CatalogError):
    """Error de validacion de datos de entrada."""

    status_code = 400


class InvalidBranchError(ValidationError):
    """La sucursal solicitada no pertenece al conjunto permitido."""


class AuthError(CatalogError):
    """Clave de administrador ausente o incorrecta."""

    status_code = 401


class NotFoundError(CatalogError):
    """El producto solicitado no existe en la sucursal."""

    status_code = 404


class ConflictError(CatalogError):
    """Codigo de producto duplicado dentro de la sucursal."""

    status_code = 409


class ServiceError(CatalogError):
    """Error en la ejecucion de servicios."""


class StorageError(ServiceError):
    """Fallo inesperado del sistema de archivos al persistir datos."""


def status_for_error(exc: BaseException) -> int:
    """Retorna el codigo de estado asociado a una excepcion."""
    if isinstance(exc, CatalogError):
        return exc.status_code
    return 500
