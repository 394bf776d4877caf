"""Transient state tied to one loaded source document."""

from __future__ import annotations

from dataclasses import dataclass

from fieldstamp.model.document import PdfDocument


@dataclass(slots=True)
class DocumentSession:
    document: PdfDocument
    zoom: float = 1.25
    # Pixel size of the first rendered page once the canvas has it; pixmap
    # dimensions are whole pixels while points * zoom is fractional.
    rendered_size: tuple[float, float] | None = None

    @property
    def source_bytes(self) -> bytes:
        return self.document.source_bytes

    @property
    def total_pages(self) -> int:
        return self.document.page_count

    @property
    def page_size(self) -> tuple[float, float]:
        """Screen size of one page, taken from the first page."""
        if self.rendered_size is not None:
            return self.rendered_size
        width_pt, height_pt = self.document.page_size_pt(0)
        return width_pt * self.zoom, height_pt * self.zoom

    @property
    def page_width(self) -> float:
        return self.page_size[0]

    @property
    def page_height(self) -> float:
        return self.page_size[1]

    @property
    def container_height(self) -> float:
        return self.page_height * self.total_pages

    def close(self) -> None:
        self.document.close()
