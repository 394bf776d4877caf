"""Document model for source PDF bytes and render handles."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import fitz


@dataclass(slots=True)
class PdfDocument:
    path: Path
    source_bytes: bytes
    handle: fitz.Document

    @property
    def page_count(self) -> int:
        return self.handle.page_count

    def page_size_pt(self, page_index: int) -> tuple[float, float]:
        rect = self.handle.load_page(page_index).rect
        return float(rect.width), float(rect.height)

    def close(self) -> None:
        if not self.handle.is_closed:
            self.handle.close()
