"""Servicio de alta, edicion y baja de productos por sucursal."""

from __future__ import annotations

import logging
import secrets
import string
import threading
import time
from collections.abc import Iterable
from dataclasses import replace

from servidor.domain.models import Catalogo, Producto
from servidor.services.admin_gate import AdminGate
from servidor.services.asset_manager import AssetManager, DeleteStatus
from servidor.services.branch_registry import BranchRegistry, normalize_branch
from servidor.services.catalog_store import CatalogStore
from shared.errors import ConflictError, NotFoundError, StorageError, ValidationError
from shared.normalizers import parse_flag, provided_text
from shared.protocol import ProductFields, UploadedImage

LOGGER = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_product_id() -> str:
    """Genera un id opaco: milisegundos actuales mas sufijo aleatorio base36."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    return f"{_now_ms()}_{suffix}"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class ProductService:
    """Coordina validacion, unicidad de codigo, snapshot e imagenes.

    Cada ciclo cargar-modificar-guardar de una sucursal se ejecuta bajo un
    lock propio de la sucursal, por lo que dos mutaciones concurrentes en el
    mismo proceso no se pisan. Procesos distintos no se coordinan entre si.
    """

    REQUIRED_FIELDS: tuple[str, ...] = ("nombre", "precio", "categoria", "codigo")

    def __init__(
        self,
        registry: BranchRegistry,
        gate: AdminGate,
        store: CatalogStore,
        assets: AssetManager,
        sucursales_recientes: Iterable[str] = (),
    ) -> None:
        self._registry = registry
        self._gate = gate
        self._store = store
        self._assets = assets
        self._sucursales_recientes = frozenset(
            normalize_branch(sucursal) for sucursal in sucursales_recientes
        )
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def list_products(self, branch: str) -> list[Producto]:
        """Retorna los productos de la sucursal en el orden persistido."""
        normalized_branch = self._registry.validate(branch)
        return list(self._store.load(normalized_branch).productos)

    def create(
        self,
        branch: str,
        admin_key: str | None,
        fields: ProductFields,
        image: UploadedImage | None,
    ) -> Producto:
        """Crea un producto nuevo con su imagen."""
        normalized_branch = self._registry.validate(branch)
        self._gate.require(admin_key)

        if image is None or not image.content:
            raise ValidationError("Falta imagen")

        values = {attr: provided_text(getattr(fields, attr)) for attr in self.REQUIRED_FIELDS}
        missing = [attr for attr in self.REQUIRED_FIELDS if values[attr] is None]
        if missing:
            raise ValidationError("Faltan datos: " + ", ".join(missing))

        codigo = values["codigo"]
        with self._branch_lock(normalized_branch):
            catalogo = self._store.load(normalized_branch)
            if catalogo.codigo_exists(codigo):
                LOGGER.info(
                    "Alta rechazada por codigo duplicado: sucursal=%s, codigo=%s",
                    normalized_branch,
                    codigo,
                )
                raise ConflictError("Codigo ya existente en esta sucursal")

            img_ref = self._assets.store(normalized_branch, image.content, image.original_name)
            producto = Producto(
                id=generate_product_id(),
                codigo=codigo,
                nombre=values["nombre"],
                precio=values["precio"],
                categoria=values["categoria"],
                img=img_ref,
                ts=_now_ms(),
                oferta=parse_flag(fields.oferta),
                precio_promo=provided_text(fields.precio_promo) or "",
            )

            if normalized_branch in self._sucursales_recientes:
                catalogo.productos.insert(0, producto)
            else:
                catalogo.productos.append(producto)

            self._save_or_discard_image(normalized_branch, catalogo, img_ref)

        LOGGER.info(
            "Producto creado: sucursal=%s, id=%s, codigo=%s",
            normalized_branch,
            producto.id,
            producto.codigo,
        )
        return producto

    def update(
        self,
        branch: str,
        admin_key: str | None,
        product_id: str,
        fields: ProductFields,
        image: UploadedImage | None = None,
    ) -> Producto:
        """Aplica una edicion parcial; solo cambian los campos presentes."""
        normalized_branch = self._registry.validate(branch)
        self._gate.require(admin_key)

        with self._branch_lock(normalized_branch):
            catalogo = self._store.load(normalized_branch)
            index = catalogo.find_index(product_id)
            if index is None:
                raise NotFoundError("Producto no encontrado")

            current = catalogo.productos[index]
            changes: dict[str, object] = {}

            codigo = provided_text(fields.codigo)
            if codigo is not None and codigo != current.codigo:
                if catalogo.codigo_exists(codigo, exclude_id=current.id):
                    LOGGER.info(
                        "Edicion rechazada por codigo duplicado: sucursal=%s, id=%s, codigo=%s",
                        normalized_branch,
                        current.id,
                        codigo,
                    )
                    raise ConflictError("Codigo ya existente")
                changes["codigo"] = codigo

            for attr in ("nombre", "precio", "categoria"):
                value = provided_text(getattr(fields, attr))
                if value is not None:
                    changes[attr] = value

            if fields.oferta is not None:
                changes["oferta"] = parse_flag(fields.oferta)
            if fields.precio_promo is not None:
                changes["precio_promo"] = provided_text(fields.precio_promo) or ""

            new_img: str | None = None
            if image is not None and image.content:
                new_img = self._assets.store(normalized_branch, image.content, image.original_name)
                changes["img"] = new_img

            updated = replace(current, ts=max(_now_ms(), current.ts + 1), **changes)
            catalogo.productos[index] = updated
            self._save_or_discard_image(normalized_branch, catalogo, new_img)

        if new_img is not None and current.img and current.img != new_img:
            status = self._assets.delete(current.img)
            LOGGER.info("Imagen anterior reemplazada: %s (%s)", current.img, status.value)

        LOGGER.info(
            "Producto actualizado: sucursal=%s, id=%s, campos=%s",
            normalized_branch,
            updated.id,
            sorted(changes),
        )
        return updated

    def delete(self, branch: str, admin_key: str | None, product_id: str) -> Producto:
        """Elimina el producto y su imagen asociada."""
        normalized_branch = self._registry.validate(branch)
        self._gate.require(admin_key)

        with self._branch_lock(normalized_branch):
            catalogo = self._store.load(normalized_branch)
            index = catalogo.find_index(product_id)
            if index is None:
                raise NotFoundError("Producto no encontrado")

            removed = catalogo.productos.pop(index)
            self._store.save(normalized_branch, catalogo)

        if removed.img:
            status = self._assets.delete(removed.img)
            if status is not DeleteStatus.DELETED:
                LOGGER.warning(
                    "Imagen de producto eliminado no se pudo borrar: %s (%s)",
                    removed.img,
                    status.value,
                )

        LOGGER.info(
            "Producto eliminado: sucursal=%s, id=%s, codigo=%s",
            normalized_branch,
            removed.id,
            removed.codigo,
        )
        return removed

    def _save_or_discard_image(
        self,
        branch: str,
        catalogo: Catalogo,
        img_ref: str | None,
    ) -> None:
        """Guarda el snapshot; si falla, elimina la imagen recien subida."""
        try:
            self._store.save(branch, catalogo)
        except StorageError:
            if img_ref is not None:
                self._assets.delete(img_ref)
            raise

    def _branch_lock(self, branch: str) -> threading.Lock:
        """Retorna el lock de la sucursal, creandolo si es necesario."""
        with self._locks_guard:
            lock = self._locks.get(branch)
            if lock is None:
                lock = threading.Lock()
                self._locks[branch] = lock
            return lock
