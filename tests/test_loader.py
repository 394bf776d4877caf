import pytest

from conftest import make_pdf_bytes
from fieldstamp.pdf.loader import InvalidFileTypeError, PdfLoadError, load_pdf


def test_load_pdf_reads_bytes_and_page_count(two_page_pdf):
    document = load_pdf(two_page_pdf)
    try:
        assert document.page_count == 2
        assert document.source_bytes == two_page_pdf.read_bytes()
        assert document.page_size_pt(1) == (612, 792)
    finally:
        document.close()


def test_missing_file_raises(tmp_path):
    with pytest.raises(PdfLoadError, match="File not found"):
        load_pdf(tmp_path / "absent.pdf")


def test_non_pdf_extension_is_rejected(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_bytes(make_pdf_bytes())

    with pytest.raises(InvalidFileTypeError):
        load_pdf(path)


def test_pdf_extension_without_pdf_header_is_rejected(tmp_path):
    path = tmp_path / "fake.pdf"
    path.write_bytes(b"\x89PNG\r\n\x1a\n")

    with pytest.raises(InvalidFileTypeError):
        load_pdf(path)
