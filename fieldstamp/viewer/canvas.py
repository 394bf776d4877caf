"""Stacked-page canvas for field placement and dragging."""

from __future__ import annotations

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QFont, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QWidget

from fieldstamp.model.field import FieldKind, PlacedField
from fieldstamp.pdf.writer import kind_height
from fieldstamp.state.controller import EditorController

TEXT_MARKER_WIDTH = 140.0


class PdfCanvas(QWidget):
    field_selection_changed = Signal(object)
    fields_changed = Signal()
    field_created = Signal()

    def __init__(self, controller: EditorController) -> None:
        super().__init__()
        self._controller = controller
        self._pixmaps: list[QPixmap] = []
        self._selected_id: int | None = None
        self._drag_preview: tuple[float, float] | None = None

        self.setMinimumSize(500, 600)

    @property
    def selected_id(self) -> int | None:
        return self._selected_id

    @property
    def stacked_height(self) -> float:
        return float(sum(pixmap.height() for pixmap in self._pixmaps))

    def set_pages(self, pixmaps: list[QPixmap]) -> None:
        self._pixmaps = pixmaps
        self._selected_id = None
        self._drag_preview = None
        self.field_selection_changed.emit(None)
        width = max((pixmap.width() for pixmap in self._pixmaps), default=500)
        self.resize(width, int(self.stacked_height) or 600)
        self.update()

    def clear_pages(self) -> None:
        self._pixmaps = []
        self._selected_id = None
        self._drag_preview = None
        self.resize(500, 600)
        self.update()

    def select_field(self, field_id: int | None) -> None:
        self._selected_id = field_id
        selected = self._controller.store.get(field_id) if field_id is not None else None
        self.field_selection_changed.emit(selected)
        self.update()

    def paintEvent(self, event) -> None:  # type: ignore[override]
        del event
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor("#e9eaee"))

        if not self._pixmaps:
            return

        top = 0
        for pixmap in self._pixmaps:
            painter.drawPixmap(0, top, pixmap)
            top += pixmap.height()

        for placed in self._controller.fields():
            rect = self._marker_rect(placed)
            selected = placed.id == self._selected_id
            color = QColor("#c62828") if selected else QColor("#1565c0")
            pen = QPen(color)
            pen.setWidth(2)
            painter.setPen(pen)
            self._paint_marker(painter, placed, rect, color)

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if not self._pixmaps or event.button() != Qt.MouseButton.LeftButton:
            return

        pos = event.position()
        if self._controller.armed_kind is not None:
            placed = self._controller.click(pos.x(), pos.y())
            self.field_created.emit()
            if placed is not None:
                self.select_field(placed.id)
                self.fields_changed.emit()
            return

        clicked = self._field_at(pos)
        self.select_field(clicked.id if clicked is not None else None)
        if clicked is not None:
            self._controller.begin_drag(clicked.id, pos.x(), pos.y())

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        preview = self._controller.drag_to(event.position().x(), event.position().y())
        if preview is None:
            return
        self._drag_preview = preview
        self.update()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        pos = event.position()
        self._drag_preview = None
        moved = self._controller.end_drag(pos.x(), pos.y())
        if moved is not None:
            self.select_field(moved.id)
            self.fields_changed.emit()
        self.update()

    def _paint_marker(self, painter: QPainter, placed: PlacedField, rect: QRectF, color: QColor) -> None:
        if placed.kind is FieldKind.TEXT:
            painter.drawRect(rect)
            if placed.value:
                painter.setFont(QFont("Helvetica", int(self._controller.config.font_size)))
                painter.drawText(rect, Qt.AlignmentFlag.AlignVCenter, placed.value)
        elif placed.kind is FieldKind.CHECKBOX:
            painter.fillRect(rect, color)
        elif placed.kind is FieldKind.RADIO:
            painter.setBrush(color)
            painter.drawEllipse(rect)
            painter.setBrush(Qt.BrushStyle.NoBrush)
        else:
            painter.drawRect(rect)
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, "Signature")

    def _marker_rect(self, placed: PlacedField) -> QRectF:
        config = self._controller.config
        zoom = config.zoom
        if self._drag_preview is not None and placed.id == self._controller.drag.field_id:
            left, top = self._drag_preview
        else:
            left, top = self._controller.container_position(placed)

        height = kind_height(placed.kind, config) * zoom
        if placed.kind is FieldKind.TEXT:
            width = TEXT_MARKER_WIDTH * zoom
        elif placed.kind is FieldKind.SIGNATURE:
            width = config.signature_width * zoom
        else:
            width = height
        return QRectF(left, top, width, height)

    def _field_at(self, pos: QPointF) -> PlacedField | None:
        for placed in reversed(self._controller.fields()):
            if self._marker_rect(placed).contains(pos):
                return placed
        return None
