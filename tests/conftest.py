"""Shared fixtures: synthetic PDFs and signature sources."""

from __future__ import annotations

from pathlib import Path

import fitz
import pytest


def make_pdf_bytes(page_count: int = 1, width: float = 612, height: float = 792) -> bytes:
    document = fitz.open()
    for _ in range(page_count):
        document.new_page(width=width, height=height)
    data = document.tobytes()
    document.close()
    return data


def make_png_bytes(width: int = 40, height: int = 20) -> bytes:
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
    pix.clear_with(0)
    return pix.tobytes("png")


class FakeSignature:
    def __init__(self, png: bytes | None = None) -> None:
        self._png = png

    def is_empty(self) -> bool:
        return self._png is None

    def to_png(self) -> bytes:
        if self._png is None:
            raise RuntimeError("empty")
        return self._png


@pytest.fixture
def two_page_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "two_pages.pdf"
    path.write_bytes(make_pdf_bytes(page_count=2))
    return path


@pytest.fixture
def three_page_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "three_pages.pdf"
    path.write_bytes(make_pdf_bytes(page_count=3))
    return path
