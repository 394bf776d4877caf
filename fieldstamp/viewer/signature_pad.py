"""Freehand signature capture widget."""

from __future__ import annotations

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QPointF, QRect, Qt, Signal
from PySide6.QtGui import QColor, QImage, QPainter, QPainterPath, QPen
from PySide6.QtWidgets import QWidget


class SignatureRasterError(RuntimeError):
    """Raised when the captured strokes cannot be encoded as PNG."""


class SignaturePad(QWidget):
    changed = Signal()

    PAD_W = 300
    PAD_H = 150

    def __init__(self, stroke_width: float = 2.5) -> None:
        super().__init__()
        self._strokes: list[list[QPointF]] = []
        self._current: list[QPointF] = []
        self._stroke_width = stroke_width
        self.setFixedSize(self.PAD_W, self.PAD_H)

    def is_empty(self) -> bool:
        return not any(len(stroke) > 1 for stroke in self._strokes)

    def clear(self) -> None:
        self._strokes.clear()
        self._current = []
        self.changed.emit()
        self.update()

    def to_png(self) -> bytes:
        if self.is_empty():
            raise SignatureRasterError("Signature pad is empty")

        image = QImage(self.PAD_W, self.PAD_H, QImage.Format_ARGB32)
        image.fill(Qt.GlobalColor.transparent)
        painter = QPainter(image)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            self._paint_strokes(painter)
        finally:
            painter.end()

        trimmed = image.copy(self._ink_bounds())
        data = QByteArray()
        buffer = QBuffer(data)
        buffer.open(QIODevice.OpenModeFlag.WriteOnly)
        if not trimmed.save(buffer, "PNG"):
            raise SignatureRasterError("Could not encode signature as PNG")
        png = bytes(buffer.data())
        buffer.close()
        return png

    def paintEvent(self, event) -> None:  # type: ignore[override]
        del event
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor("#ffffff"))
        painter.setPen(QPen(QColor("#9e9e9e"), 1))
        painter.drawRect(self.rect().adjusted(0, 0, -1, -1))
        self._paint_strokes(painter)

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self._current = [event.position()]
        self._strokes.append(self._current)
        self.update()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if not self._current:
            return
        self._current.append(event.position())
        self.update()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        del event
        if self._current:
            self._current = []
            self.changed.emit()

    def _paint_strokes(self, painter: QPainter) -> None:
        pen = QPen(QColor("#000000"), self._stroke_width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        painter.setPen(pen)
        for stroke in self._strokes:
            if len(stroke) < 2:
                continue
            path = QPainterPath(stroke[0])
            for point in stroke[1:]:
                path.lineTo(point)
            painter.drawPath(path)

    def _ink_bounds(self) -> QRect:
        points = [point for stroke in self._strokes if len(stroke) > 1 for point in stroke]
        margin = int(self._stroke_width) + 1
        left = max(0, int(min(p.x() for p in points)) - margin)
        top = max(0, int(min(p.y() for p in points)) - margin)
        right = min(self.PAD_W, int(max(p.x() for p in points)) + margin)
        bottom = min(self.PAD_H, int(max(p.y() for p in points)) + margin)
        return QRect(left, top, max(1, right - left), max(1, bottom - top))
