"""Main application window for PDF preview, field placement, and export."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup, QKeySequence, QPixmap
from PySide6.QtWidgets import (
    QFileDialog,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QSplitter,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from fieldstamp.model.field import FieldKind, PlacedField
from fieldstamp.pdf.loader import InvalidFileTypeError, PdfLoadError
from fieldstamp.pdf.renderer import PdfRenderError, render_pages
from fieldstamp.pdf.writer import PdfWriteError
from fieldstamp.state.controller import EditorController, ExportInProgressError, NoDocumentError
from fieldstamp.viewer.canvas import PdfCanvas
from fieldstamp.viewer.signature_pad import SignaturePad

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, controller: EditorController) -> None:
        super().__init__()
        self.setWindowTitle("PDF Field Stamper")
        self.resize(1300, 850)

        self._controller = controller
        self._selected_text_id: int | None = None

        self.canvas = PdfCanvas(controller)
        self.canvas.field_selection_changed.connect(self._on_field_selected)
        self.canvas.fields_changed.connect(self._on_canvas_fields_changed)
        self.canvas.field_created.connect(self._on_canvas_field_created)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(False)
        self.scroll_area.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        self.scroll_area.setWidget(self.canvas)
        self.scroll_area.setVisible(False)

        self.value_edit = QLineEdit()
        self.value_edit.setPlaceholderText("Select a text field to edit its value")
        self.value_edit.setEnabled(False)
        self.value_edit.textEdited.connect(self._on_value_edited)

        self.signature_pad = SignaturePad()
        clear_signature = QPushButton("Clear Signature")
        clear_signature.clicked.connect(self.signature_pad.clear)

        side_panel = QWidget()
        side_layout = QVBoxLayout(side_panel)
        side_layout.addWidget(QLabel("Text value"))
        side_layout.addWidget(self.value_edit)
        side_layout.addWidget(QLabel("Signature"))
        side_layout.addWidget(self.signature_pad)
        side_layout.addWidget(clear_signature)
        side_layout.addStretch(1)

        splitter = QSplitter()
        splitter.addWidget(self.scroll_area)
        splitter.addWidget(side_panel)
        splitter.setStretchFactor(0, 4)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        self._build_toolbar()
        self.statusBar().showMessage("Open a PDF to start")

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        open_action = QAction("Open PDF", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.open_pdf)
        toolbar.addAction(open_action)

        self._export_action = QAction("Save Modified PDF", self)
        self._export_action.setShortcut(QKeySequence.StandardKey.Save)
        self._export_action.triggered.connect(self.export_pdf)
        toolbar.addAction(self._export_action)

        delete_action = QAction("Delete Field", self)
        delete_action.triggered.connect(self.delete_selected_field)
        toolbar.addAction(delete_action)

        toolbar.addSeparator()

        mode_group = QActionGroup(self)
        mode_group.setExclusive(True)

        self._pointer_action = QAction("Pointer", self)
        self._pointer_action.setCheckable(True)
        self._pointer_action.setChecked(True)
        self._pointer_action.triggered.connect(lambda: self._set_mode(None))
        mode_group.addAction(self._pointer_action)
        toolbar.addAction(self._pointer_action)

        for label, kind in (
            ("Add Text Field", FieldKind.TEXT),
            ("Add Checkbox", FieldKind.CHECKBOX),
            ("Add Radio Button", FieldKind.RADIO),
            ("Add E-Signature", FieldKind.SIGNATURE),
        ):
            action = QAction(label, self)
            action.setCheckable(True)
            action.triggered.connect(lambda _checked=False, kind=kind: self._set_mode(kind))
            mode_group.addAction(action)
            toolbar.addAction(action)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        session = self._controller.session
        if session is not None:
            session.close()
        super().closeEvent(event)

    def open_pdf(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Open PDF",
            str(Path.home()),
            "PDF Files (*.pdf)",
        )
        if not file_path:
            return

        try:
            session = self._controller.open_document(file_path)
        except InvalidFileTypeError as exc:
            QMessageBox.warning(self, "Unsupported File", str(exc))
            return
        except PdfLoadError as exc:
            QMessageBox.critical(self, "Open Failed", str(exc))
            return

        try:
            images = render_pages(session.document, zoom=session.zoom)
        except PdfRenderError as exc:
            logger.error(f"Render failed for {file_path}: {exc}")
            self._controller.close_document()
            self._show_editor(False)
            QMessageBox.critical(self, "Render Failed", str(exc))
            return

        session.rendered_size = (float(images[0].width()), float(images[0].height()))
        self.canvas.set_pages([QPixmap.fromImage(image) for image in images])
        self._show_editor(True)
        self._pointer_action.setChecked(True)
        self.statusBar().showMessage(f"Loaded: {file_path} ({session.total_pages} page(s))")

    def export_pdf(self) -> None:
        session = self._controller.session
        if session is None:
            QMessageBox.information(self, "No Document", "Open a PDF first.")
            return

        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Modified PDF",
            str(session.document.path.with_name(self._controller.config.output_filename)),
            "PDF Files (*.pdf)",
        )
        if not output_path:
            return

        self._export_action.setEnabled(False)
        try:
            result = self._controller.export(
                signature=self.signature_pad,
                deliver=Path(output_path).write_bytes,
            )
        except ExportInProgressError:
            self.statusBar().showMessage("An export is already running.")
            return
        except (NoDocumentError, PdfWriteError, OSError) as exc:
            logger.error(f"Export failed: {exc}")
            QMessageBox.critical(self, "Save Failed", str(exc))
            return
        finally:
            self._export_action.setEnabled(True)

        self.canvas.clear_pages()
        self._show_editor(False)
        self.signature_pad.clear()
        message = f"Saved: {output_path}"
        if result.warnings:
            message += f" ({len(result.warnings)} field(s) skipped: {result.warnings[0]})"
        self.statusBar().showMessage(message)

    def delete_selected_field(self) -> None:
        field_id = self.canvas.selected_id
        if field_id is None or not self._controller.remove_field(field_id):
            self.statusBar().showMessage("No selected field to delete.")
            return
        self.canvas.select_field(None)
        self.statusBar().showMessage(f"Deleted field. {len(self._controller.store)} field(s)")

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.key() == Qt.Key.Key_Delete and not self.value_edit.hasFocus():
            self.delete_selected_field()
            event.accept()
            return
        if event.key() == Qt.Key.Key_Escape:
            self._pointer_action.setChecked(True)
            self._set_mode(None)
            event.accept()
            return
        super().keyPressEvent(event)

    def _show_editor(self, visible: bool) -> None:
        self.scroll_area.setVisible(visible)
        if not visible:
            self._on_field_selected(None)

    def _set_mode(self, kind: FieldKind | None) -> None:
        self._controller.arm(kind)
        label = "Pointer mode" if kind is None else f"Click a page to place: {kind.value}"
        self.statusBar().showMessage(label)

    def _on_field_selected(self, placed: PlacedField | None) -> None:
        if placed is not None and placed.kind is FieldKind.TEXT:
            self._selected_text_id = placed.id
            self.value_edit.setEnabled(True)
            self.value_edit.setText(placed.value)
            self.value_edit.setFocus()
        else:
            self._selected_text_id = None
            self.value_edit.clear()
            self.value_edit.setEnabled(False)

    def _on_value_edited(self, value: str) -> None:
        if self._selected_text_id is None:
            return
        self._controller.update_value(self._selected_text_id, value)
        self.canvas.update()

    def _on_canvas_fields_changed(self) -> None:
        session = self._controller.session
        total = session.total_pages if session is not None else 0
        self.statusBar().showMessage(
            f"{len(self._controller.store)} field(s) across {total} page(s)"
        )

    def _on_canvas_field_created(self) -> None:
        self._pointer_action.setChecked(True)
        self._controller.arm(None)
