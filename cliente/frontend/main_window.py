"""Ventana principal del administrador de catalogo."""

from __future__ import annotations

from typing import Any

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QFont, QGuiApplication
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QApplication,
    QComboBox,
    QFrame,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from cliente.backend.controller import AppController
from cliente.frontend.dialogs import ask_confirmation, show_error, show_info
from cliente.frontend.product_dialog import ProductDialog
from shared.errors import CatalogError


class MainWindow(QMainWindow):
    """Ventana con selector de sucursal, tabla de productos y acciones."""

    TABLE_COLUMNS: tuple[tuple[str, str], ...] = (
        ("codigo", "Codigo"),
        ("nombre", "Nombre"),
        ("precio", "Precio"),
        ("categoria", "Categoria"),
        ("oferta", "Oferta"),
        ("precioPromo", "Precio promo"),
        ("img", "Imagen"),
    )
    ALL_CATEGORIES_LABEL = "Todas las categorias"

    def __init__(self, controller: AppController) -> None:
        super().__init__()
        self._controller = controller
        self._productos: list[dict[str, Any]] = []

        self._branch_combo: QComboBox
        self._category_combo: QComboBox
        self._admin_key_input: QLineEdit
        self._table: QTableWidget
        self._create_button: QPushButton
        self._edit_button: QPushButton
        self._delete_button: QPushButton
        self._export_csv_button: QPushButton
        self._export_json_button: QPushButton
        self._exit_button: QPushButton

        self.setWindowTitle("Catalogo de sucursales")
        screen = QGuiApplication.primaryScreen()
        geo = screen.availableGeometry()
        w = int(geo.width() * 0.70)
        h = int(geo.height() * 0.80)
        self.resize(w, h)
        self.setMinimumSize(int(w * 0.70), int(h * 0.70))
        self._build_ui()
        self._apply_styles()
        self._connect_signals()
        self._refresh_products(refresh=True)

    def _build_ui(self) -> None:
        """Construye la estructura de la ventana principal."""
        page = QWidget(self)
        self.setCentralWidget(page)

        root_layout = QVBoxLayout(page)
        root_layout.setContentsMargins(24, 24, 24, 24)

        card = QFrame(page)
        card.setObjectName("mainCard")
        card_layout = QVBoxLayout(card)
        card_layout.setContentsMargins(24, 24, 24, 24)
        card_layout.setSpacing(14)

        title_label = QLabel("Catalogo", card)
        title_label.setObjectName("titleLabel")
        title_label.setFont(QFont("Segoe UI", 22, QFont.Weight.Bold))
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        filters_layout = QHBoxLayout()
        self._branch_combo = QComboBox(card)
        for branch in self._controller.list_branches():
            self._branch_combo.addItem(branch, branch)
        self._category_combo = QComboBox(card)
        self._category_combo.addItem(self.ALL_CATEGORIES_LABEL, "")
        self._admin_key_input = QLineEdit(card)
        self._admin_key_input.setEchoMode(QLineEdit.EchoMode.Password)
        self._admin_key_input.setPlaceholderText("Clave de administrador")

        filters_layout.addWidget(QLabel("Sucursal", card))
        filters_layout.addWidget(self._branch_combo)
        filters_layout.addWidget(QLabel("Categoria", card))
        filters_layout.addWidget(self._category_combo, 1)
        filters_layout.addWidget(self._admin_key_input, 1)

        self._table = QTableWidget(0, len(self.TABLE_COLUMNS), card)
        self._table.setHorizontalHeaderLabels([label for _, label in self.TABLE_COLUMNS])
        self._table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self._table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self._table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self._table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)

        buttons_layout = QHBoxLayout()
        self._create_button = self._build_button("Crear")
        self._edit_button = self._build_button("Editar")
        self._delete_button = self._build_button("Eliminar")
        self._export_csv_button = self._build_button("Exportar CSV")
        self._export_json_button = self._build_button("Exportar JSON")
        self._exit_button = self._build_button("Salir")
        self._exit_button.setObjectName("exitButton")
        for button in (
            self._create_button,
            self._edit_button,
            self._delete_button,
            self._export_csv_button,
            self._export_json_button,
        ):
            buttons_layout.addWidget(button)
        buttons_layout.addStretch(1)
        buttons_layout.addWidget(self._exit_button)

        card_layout.addWidget(title_label)
        card_layout.addLayout(filters_layout)
        card_layout.addWidget(self._table, 1)
        card_layout.addLayout(buttons_layout)

        shadow = QGraphicsDropShadowEffect(card)
        shadow.setBlurRadius(38)
        shadow.setOffset(0, 8)
        shadow.setColor(QColor(0, 0, 0, 38))
        card.setGraphicsEffect(shadow)

        root_layout.addWidget(card)

    def _apply_styles(self) -> None:
        """Aplica estilos QSS de la interfaz."""
        self.setStyleSheet(
            """
            QMainWindow {
                background-color: #eef1f4;
            }
            QFrame#mainCard {
                background-color: #ffffff;
                border-radius: 18px;
            }
            QPushButton {
                background-color: #C80202;
                border: none;
                border-radius: 10px;
                color: #ffffff;
                font-family: "Segoe UI";
                font-size: 14px;
                font-weight: 600;
                min-height: 40px;
                padding: 8px 14px;
            }
            QPushButton:hover {
                background-color: #A30202;
            }
            QPushButton:pressed {
                background-color: #820101;
            }
            QPushButton#exitButton {
                background-color: #e5e7eb;
                color: #1f2937;
            }
            QPushButton#exitButton:hover {
                background-color: #d1d5db;
            }
            QLineEdit, QComboBox {
                border: 1px solid #d1d5db;
                border-radius: 8px;
                padding: 6px;
            }
            """
        )

    def _connect_signals(self) -> None:
        """Conecta widgets con acciones del controller."""
        self._branch_combo.currentIndexChanged.connect(self._on_branch_changed)
        self._category_combo.currentIndexChanged.connect(self._on_category_changed)
        self._admin_key_input.textChanged.connect(self._controller.set_admin_key)
        self._create_button.clicked.connect(self._on_create_clicked)
        self._edit_button.clicked.connect(self._on_edit_clicked)
        self._delete_button.clicked.connect(self._on_delete_clicked)
        self._export_csv_button.clicked.connect(lambda: self._on_export_clicked("csv"))
        self._export_json_button.clicked.connect(lambda: self._on_export_clicked("json"))
        self._exit_button.clicked.connect(self._on_exit_clicked)

    def _refresh_products(self, refresh: bool = False) -> None:
        """Recarga tabla y categorias desde el controller."""
        try:
            self._productos = self._controller.load_products(
                categoria=self._selected_category(),
                refresh=refresh,
            )
            categories = self._controller.list_categories()
        except CatalogError as exc:
            show_error(self, "Error al cargar catalogo", str(exc))
            return

        self._fill_table()
        self._fill_categories(categories)

    def _fill_table(self) -> None:
        """Vuelca los productos cargados en la tabla."""
        self._table.setRowCount(len(self._productos))
        for row_index, producto in enumerate(self._productos):
            for column_index, (key, _) in enumerate(self.TABLE_COLUMNS):
                value = producto.get(key, "")
                if key == "oferta":
                    value = "Si" if value else "No"
                self._table.setItem(row_index, column_index, QTableWidgetItem(str(value)))

    def _fill_categories(self, categories: list[str]) -> None:
        """Actualiza el combo de categorias conservando la seleccion."""
        selected = self._selected_category()
        self._category_combo.blockSignals(True)
        self._category_combo.clear()
        self._category_combo.addItem(self.ALL_CATEGORIES_LABEL, "")
        for category in categories:
            self._category_combo.addItem(category, category)
        index = self._category_combo.findData(selected)
        self._category_combo.setCurrentIndex(max(index, 0))
        self._category_combo.blockSignals(False)

    def _selected_category(self) -> str:
        return str(self._category_combo.currentData() or "")

    def _selected_product(self) -> dict[str, Any] | None:
        """Retorna el producto de la fila seleccionada."""
        row = self._table.currentRow()
        if row < 0 or row >= len(self._productos):
            return None
        return self._productos[row]

    def _on_branch_changed(self, _index: int) -> None:
        try:
            self._controller.on_select_branch(str(self._branch_combo.currentData()))
        except CatalogError as exc:
            show_error(self, "Sucursal", str(exc))
            return
        self._category_combo.setCurrentIndex(0)
        self._refresh_products(refresh=True)

    def _on_category_changed(self, _index: int) -> None:
        self._refresh_products()

    def _on_create_clicked(self, _checked: bool = False) -> None:
        """Abre dialogo modal de alta."""
        dialog = ProductDialog(controller=self._controller, parent=self)
        if dialog.exec():
            self._refresh_products(refresh=True)

    def _on_edit_clicked(self, _checked: bool = False) -> None:
        """Abre dialogo de edicion del producto seleccionado."""
        producto = self._selected_product()
        if producto is None:
            show_error(self, "Editar producto", "Selecciona un producto de la tabla.")
            return

        dialog = ProductDialog(controller=self._controller, producto=producto, parent=self)
        if dialog.exec():
            self._refresh_products(refresh=True)

    def _on_delete_clicked(self, _checked: bool = False) -> None:
        """Elimina el producto seleccionado previa confirmacion."""
        producto = self._selected_product()
        if producto is None:
            show_error(self, "Eliminar producto", "Selecciona un producto de la tabla.")
            return

        codigo = producto.get("codigo", "")
        if not ask_confirmation(self, "Eliminar producto", f"Eliminar el producto {codigo}?"):
            return

        try:
            self._controller.on_delete_product(str(producto.get("id", "")))
        except CatalogError as exc:
            show_error(self, "Error al eliminar producto", str(exc))
            return

        self._refresh_products(refresh=True)

    def _on_export_clicked(self, formato: str) -> None:
        """Exporta el catalogo filtrado al directorio de exportacion."""
        try:
            output_path = self._controller.on_export(formato, self._selected_category() or None)
        except CatalogError as exc:
            show_error(self, "Error de exportacion", str(exc))
            return

        show_info(self, "Exportacion", f"Archivo generado: {output_path}")

    def _on_exit_clicked(self) -> None:
        """Solicita al controller el cierre de la app."""
        self._controller.on_exit(QApplication.instance())

    @staticmethod
    def _build_button(text: str) -> QPushButton:
        """Construye un boton estandar."""
        button = QPushButton(text)
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        return button
