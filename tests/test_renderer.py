from fieldstamp.pdf.loader import load_pdf
from fieldstamp.pdf.renderer import render_pages


def test_every_page_is_rendered_at_zoom(two_page_pdf):
    document = load_pdf(two_page_pdf)
    try:
        images = render_pages(document, zoom=1.25)
    finally:
        document.close()

    assert len(images) == 2
    assert [(image.width(), image.height()) for image in images] == [(765, 990)] * 2
    assert not images[1].isNull()
