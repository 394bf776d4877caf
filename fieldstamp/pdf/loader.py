"""PDF loading helpers."""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

import fitz

from fieldstamp.model.document import PdfDocument

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
PDF_MAGIC = b"%PDF-"


class PdfLoadError(RuntimeError):
    """Raised when a PDF cannot be opened."""


class InvalidFileTypeError(PdfLoadError):
    """Raised when the selected file is not a PDF."""


def guess_mime_type(path: str | Path) -> str | None:
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type


def load_pdf(path: str | Path) -> PdfDocument:
    source_path = Path(path)
    if not source_path.exists():
        raise PdfLoadError(f"File not found: {source_path}")

    mime_type = guess_mime_type(source_path)
    if mime_type != PDF_MIME_TYPE:
        raise InvalidFileTypeError(
            f"Unsupported file type {mime_type or 'unknown'}: {source_path.name}"
        )

    try:
        source_bytes = source_path.read_bytes()
    except OSError as exc:
        raise PdfLoadError(f"Failed to read file: {source_path}") from exc

    if not source_bytes.startswith(PDF_MAGIC):
        raise InvalidFileTypeError(f"Not a PDF file: {source_path.name}")

    try:
        handle = fitz.open(stream=source_bytes, filetype="pdf")
    except Exception as exc:
        raise PdfLoadError(f"Failed to open PDF: {source_path}") from exc

    if handle.page_count < 1:
        handle.close()
        raise PdfLoadError(f"PDF has no pages: {source_path}")

    logger.info(f"Loaded {source_path} ({handle.page_count} page(s))")
    return PdfDocument(path=source_path, source_bytes=source_bytes, handle=handle)
