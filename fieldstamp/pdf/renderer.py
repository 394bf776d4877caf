"""Rasterize document pages for the stacked editing surface."""

from __future__ import annotations

import logging

import fitz
from PySide6.QtGui import QImage

from fieldstamp.model.document import PdfDocument

logger = logging.getLogger(__name__)


class PdfRenderError(RuntimeError):
    """Raised when a page cannot be rendered."""


def _pixmap_to_image(pix: fitz.Pixmap) -> QImage:
    # QImage borrows the sample buffer, so detach before the pixmap goes away.
    return QImage(pix.samples, pix.width, pix.height, pix.stride, QImage.Format_RGB888).copy()


def render_pages(document: PdfDocument, zoom: float = 1.25) -> list[QImage]:
    if document.page_count < 1:
        raise PdfRenderError(f"Nothing to render in {document.path.name}")

    matrix = fitz.Matrix(zoom, zoom)
    images: list[QImage] = []
    for page in document.handle:
        try:
            pix = page.get_pixmap(matrix=matrix, alpha=False, annots=False)
        except Exception as exc:  # pragma: no cover - PyMuPDF errors
            raise PdfRenderError(f"Failed to render page {page.number + 1}") from exc
        images.append(_pixmap_to_image(pix))

    logger.debug(f"Rendered {len(images)} page(s) of {document.path.name} at zoom {zoom}")
    return images
