"""Flatten placed fields into a PDF using a reportlab overlay merged with pypdf."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from io import BytesIO
import logging
from typing import Iterable, Protocol

from pypdf import PdfReader, PdfWriter
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from fieldstamp.config import EditorConfig
from fieldstamp.model.field import FieldKind, PlacedField

logger = logging.getLogger(__name__)

TEXT_FONT = "Helvetica"


class PdfWriteError(RuntimeError):
    """Raised when output generation fails."""


class SignatureSource(Protocol):
    def is_empty(self) -> bool: ...

    def to_png(self) -> bytes: ...


@dataclass(slots=True)
class ExportResult:
    data: bytes
    drawn: list[int] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def kind_height(kind: FieldKind, config: EditorConfig) -> float:
    if kind is FieldKind.TEXT:
        return config.font_size
    if kind is FieldKind.CHECKBOX:
        return config.checkbox_size
    if kind is FieldKind.RADIO:
        return config.radio_size
    return config.signature_height


def kind_width(kind: FieldKind, config: EditorConfig) -> float:
    # Text width depends on the value, so only its start point is bounded.
    if kind is FieldKind.TEXT:
        return 0.0
    if kind is FieldKind.CHECKBOX:
        return config.checkbox_size
    if kind is FieldKind.RADIO:
        return config.radio_size
    return config.signature_width


def pdf_anchor(
    placed: PlacedField,
    pdf_height: float,
    scale: float = 1.0,
    config: EditorConfig | None = None,
) -> tuple[float, float]:
    """Convert a field's top-left screen point to its PDF drawing origin.

    Screen space is y-down from the page's top-left corner, PDF space is y-up
    from the bottom-left corner, so the y axis is flipped and the drawn
    shape's height is subtracted to keep its top edge under the click.
    """
    config = config or EditorConfig()
    x = placed.x / scale
    y = pdf_height - placed.y / scale - kind_height(placed.kind, config)
    return x, y


def export_pdf(
    source_bytes: bytes,
    fields: Iterable[PlacedField],
    signature: SignatureSource | None = None,
    scale: float = 1.0,
    config: EditorConfig | None = None,
) -> ExportResult:
    config = config or EditorConfig()
    warnings: list[str] = []

    try:
        reader = PdfReader(BytesIO(source_bytes))
        writer = PdfWriter()
        for page in reader.pages:
            writer.add_page(page)

        grouped = _group_by_page(fields, len(reader.pages), warnings)
        signature_image = None
        if any(f.kind is FieldKind.SIGNATURE for page_fields in grouped.values() for f in page_fields):
            signature_image = _signature_image(signature, warnings)

        drawn: list[int] = []
        if grouped:
            overlay_pdf = _build_overlay_pdf(
                reader, grouped, signature_image, scale, config, drawn, warnings
            )
            overlay_reader = PdfReader(overlay_pdf)
            for page_index in sorted(grouped):
                writer.pages[page_index].merge_page(overlay_reader.pages[page_index])

        buffer = BytesIO()
        writer.write(buffer)
    except Exception as exc:
        raise PdfWriteError("Failed to export annotated PDF") from exc

    logger.info(f"Exported {len(drawn)} field(s), {len(warnings)} skipped")
    return ExportResult(data=buffer.getvalue(), drawn=drawn, warnings=warnings)


def _warn(warnings: list[str], message: str) -> None:
    logger.warning(message)
    warnings.append(message)


def _group_by_page(
    fields: Iterable[PlacedField],
    page_count: int,
    warnings: list[str],
) -> dict[int, list[PlacedField]]:
    grouped: dict[int, list[PlacedField]] = defaultdict(list)
    for placed in fields:
        if not 1 <= placed.page_number <= page_count:
            _warn(
                warnings,
                f"Skipped field {placed.id}: page {placed.page_number} is outside 1..{page_count}",
            )
            continue
        grouped[placed.page_number - 1].append(placed)
    return grouped


def _signature_image(signature: SignatureSource | None, warnings: list[str]) -> ImageReader | None:
    if signature is None or signature.is_empty():
        return None
    try:
        return ImageReader(BytesIO(signature.to_png()))
    except Exception as exc:
        _warn(warnings, f"Could not rasterize signature: {exc}")
        return None


def _build_overlay_pdf(
    reader: PdfReader,
    grouped: dict[int, list[PlacedField]],
    signature_image: ImageReader | None,
    scale: float,
    config: EditorConfig,
    drawn: list[int],
    warnings: list[str],
) -> BytesIO:
    buffer = BytesIO()

    first_box = reader.pages[0].mediabox
    report = canvas.Canvas(buffer, pagesize=(float(first_box.right), float(first_box.top)))

    for page_index, page in enumerate(reader.pages):
        box = page.mediabox
        report.setPageSize((float(box.right), float(box.top)))
        left = float(box.left)
        bottom = float(box.bottom)

        for placed in grouped.get(page_index, []):
            x, y = pdf_anchor(placed, float(box.height), scale=scale, config=config)
            try:
                if _draw_field(report, placed, left + x, bottom + y, signature_image, config):
                    drawn.append(placed.id)
                else:
                    _warn(warnings, f"Skipped signature field {placed.id}: no signature ink to embed")
            except Exception as exc:
                _warn(warnings, f"Skipped field {placed.id} ({placed.kind.value}): {exc}")

        report.showPage()

    report.save()
    buffer.seek(0)
    return buffer


def _draw_field(
    report: canvas.Canvas,
    placed: PlacedField,
    x: float,
    y: float,
    signature_image: ImageReader | None,
    config: EditorConfig,
) -> bool:
    report.setFillColor(colors.black)
    if placed.kind is FieldKind.TEXT:
        if placed.value:
            report.setFont(TEXT_FONT, config.font_size)
            report.drawString(x, y, placed.value)
    elif placed.kind is FieldKind.CHECKBOX:
        size = config.checkbox_size
        report.rect(x, y, size, size, stroke=0, fill=1)
    elif placed.kind is FieldKind.RADIO:
        size = config.radio_size
        report.ellipse(x, y, x + size, y + size, stroke=0, fill=1)
    else:
        if signature_image is None:
            return False
        report.drawImage(
            signature_image,
            x,
            y,
            width=config.signature_width,
            height=config.signature_height,
            mask="auto",
        )
    return True
