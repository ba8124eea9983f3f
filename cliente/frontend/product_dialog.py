"""Dialogo para crear o editar productos del catalogo."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QCheckBox,
    QDialog,
    QFileDialog,
    QFrame,
    QGraphicsDropShadowEffect,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from cliente.frontend.dialogs import show_error, show_info
from shared.errors import CatalogError
from shared.protocol import ProductFields

if TYPE_CHECKING:
    from cliente.backend.controller import AppController


class ProductDialog(QDialog):
    """Dialogo modal de alta (sin producto) o edicion (con producto)."""

    IMAGE_FILTER = "Imagenes (*.jpg *.jpeg *.png *.webp *.gif)"

    def __init__(
        self,
        controller: AppController,
        producto: dict[str, Any] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._producto = producto
        self._image_path = ""

        self._codigo_input: QLineEdit
        self._nombre_input: QLineEdit
        self._precio_input: QLineEdit
        self._categoria_input: QLineEdit
        self._precio_promo_input: QLineEdit
        self._oferta_input: QCheckBox
        self._image_label: QLabel

        title = "Editar producto" if self._is_edit else "Crear producto"
        self.setWindowTitle(title)
        self.setModal(True)
        self.setMinimumSize(480, 420)

        self._build_ui(title)
        self._apply_styles()
        if producto is not None:
            self._load_product(producto)

    @property
    def _is_edit(self) -> bool:
        return self._producto is not None

    def _build_ui(self, title: str) -> None:
        """Construye widgets del dialogo."""
        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(18, 18, 18, 18)

        card = QFrame(self)
        card.setObjectName("dialogCard")
        card_layout = QVBoxLayout(card)
        card_layout.setContentsMargins(24, 24, 24, 24)
        card_layout.setSpacing(12)

        title_label = QLabel(title, card)
        title_label.setObjectName("titleLabel")
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        form_layout = QGridLayout()
        form_layout.setHorizontalSpacing(14)
        form_layout.setVerticalSpacing(10)
        form_layout.setColumnStretch(1, 1)

        self._codigo_input = QLineEdit(card)
        self._codigo_input.setPlaceholderText("A1")
        self._nombre_input = QLineEdit(card)
        self._precio_input = QLineEdit(card)
        self._precio_input.setPlaceholderText("100000")
        self._categoria_input = QLineEdit(card)
        self._categoria_input.setPlaceholderText("dama")
        self._oferta_input = QCheckBox("En oferta", card)
        self._precio_promo_input = QLineEdit(card)

        rows = (
            ("Codigo", self._codigo_input),
            ("Nombre", self._nombre_input),
            ("Precio", self._precio_input),
            ("Categoria", self._categoria_input),
            ("Oferta", self._oferta_input),
            ("Precio promo", self._precio_promo_input),
        )
        for row_index, (label_text, widget) in enumerate(rows):
            label = QLabel(label_text, card)
            label.setObjectName("fieldLabel")
            form_layout.addWidget(label, row_index, 0)
            form_layout.addWidget(widget, row_index, 1)

        image_layout = QHBoxLayout()
        self._image_label = QLabel("Sin imagen seleccionada", card)
        self._image_label.setObjectName("helpLabel")
        self._image_label.setWordWrap(True)
        image_button = QPushButton("Elegir imagen", card)
        image_button.clicked.connect(self._on_choose_image)
        image_layout.addWidget(self._image_label, 1)
        image_layout.addWidget(image_button)

        buttons_layout = QHBoxLayout()
        buttons_layout.addStretch(1)
        cancel_button = QPushButton("Cancelar", card)
        cancel_button.setObjectName("cancelButton")
        save_button = QPushButton("Guardar", card)
        cancel_button.clicked.connect(self.reject)
        save_button.clicked.connect(self._on_save_clicked)
        buttons_layout.addWidget(cancel_button)
        buttons_layout.addWidget(save_button)

        card_layout.addWidget(title_label)
        card_layout.addLayout(form_layout)
        card_layout.addLayout(image_layout)
        card_layout.addSpacing(4)
        card_layout.addLayout(buttons_layout)

        shadow = QGraphicsDropShadowEffect(card)
        shadow.setBlurRadius(30)
        shadow.setOffset(0, 6)
        shadow.setColor(QColor(0, 0, 0, 35))
        card.setGraphicsEffect(shadow)

        root_layout.addWidget(card)
        self._codigo_input.setFocus()

    def _apply_styles(self) -> None:
        """Aplica estilos visuales consistentes con la app."""
        self.setStyleSheet(
            """
            QDialog {
                background-color: #eef1f4;
            }
            QFrame#dialogCard {
                background-color: #ffffff;
                border-radius: 16px;
            }
            QLabel#titleLabel {
                color: #20232a;
                font-family: "Segoe UI";
                font-size: 22px;
                font-weight: 700;
            }
            QLabel#fieldLabel {
                color: #334155;
                font-family: "Segoe UI";
                font-size: 13px;
                font-weight: 600;
            }
            QLabel#helpLabel {
                color: #475569;
                font-size: 12px;
            }
            QLineEdit {
                background-color: #f8fafc;
                border: 1px solid #d1d5db;
                border-radius: 8px;
                padding: 8px;
            }
            QLineEdit:focus {
                border: 1px solid #2563eb;
                background-color: #ffffff;
            }
            QPushButton {
                background-color: #2563eb;
                border: none;
                border-radius: 10px;
                color: #ffffff;
                font-weight: 600;
                min-height: 36px;
                min-width: 100px;
                padding: 6px 12px;
            }
            QPushButton:hover {
                background-color: #1d4ed8;
            }
            QPushButton#cancelButton {
                background-color: #e5e7eb;
                color: #1f2937;
            }
            """
        )

    def _load_product(self, producto: dict[str, Any]) -> None:
        """Precarga el formulario con los valores actuales."""
        self._codigo_input.setText(str(producto.get("codigo", "")))
        self._nombre_input.setText(str(producto.get("nombre", "")))
        self._precio_input.setText(str(producto.get("precio", "")))
        self._categoria_input.setText(str(producto.get("categoria", "")))
        self._oferta_input.setChecked(bool(producto.get("oferta")))
        self._precio_promo_input.setText(str(producto.get("precioPromo", "")))
        self._image_label.setText(f"Actual: {producto.get('img', '')}")

    def _on_choose_image(self) -> None:
        """Abre selector de archivos para la imagen."""
        path, _ = QFileDialog.getOpenFileName(self, "Elegir imagen", "", self.IMAGE_FILTER)
        if path:
            self._image_path = path
            self._image_label.setText(path)

    def _collect_fields(self) -> ProductFields:
        """Arma el DTO con los valores del formulario."""
        return ProductFields(
            codigo=self._codigo_input.text(),
            nombre=self._nombre_input.text(),
            precio=self._precio_input.text(),
            categoria=self._categoria_input.text(),
            oferta=self._oferta_input.isChecked(),
            precio_promo=self._precio_promo_input.text(),
        )

    def _on_save_clicked(self) -> None:
        """Crea o edita el producto usando el controller."""
        fields = self._collect_fields()
        try:
            if self._producto is None:
                producto = self._controller.on_create_product(fields, self._image_path)
                message = f"Producto creado: {producto.get('codigo', '')}"
            else:
                producto = self._controller.on_update_product(
                    str(self._producto.get("id", "")),
                    fields,
                    self._image_path or None,
                )
                message = f"Producto actualizado: {producto.get('codigo', '')}"
        except CatalogError as exc:
            show_error(self, "Error al guardar producto", str(exc))
            return

        show_info(self, "Catalogo", message)
        self.accept()
