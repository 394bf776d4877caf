import fitz
import pytest
from PySide6.QtCore import QSettings

from conftest import FakeSignature, make_pdf_bytes
from fieldstamp.config import EditorConfig
from fieldstamp.model.field import FieldKind, PlacedField
from fieldstamp.pdf.loader import InvalidFileTypeError
from fieldstamp.pdf.writer import pdf_anchor
from fieldstamp.state.controller import EditorController, ExportInProgressError, NoDocumentError
from fieldstamp.state.persistence import FieldStorePersistence

PAGE_H = 792


@pytest.fixture
def controller():
    return EditorController(config=EditorConfig(zoom=1.0))


def test_click_without_armed_kind_is_noop(controller, two_page_pdf):
    controller.open_document(two_page_pdf)

    assert controller.click(50, 50) is None
    assert controller.fields() == []


def test_armed_kind_is_consumed_by_one_click(controller, two_page_pdf):
    controller.open_document(two_page_pdf)
    controller.arm(FieldKind.CHECKBOX)

    placed = controller.click(50, PAGE_H + 40)

    assert placed.kind is FieldKind.CHECKBOX
    assert (placed.page_number, placed.x, placed.y) == (2, 50, 40)
    assert controller.armed_kind is None
    assert controller.click(60, 60) is None
    assert len(controller.fields()) == 1


def test_click_uses_container_geometry(controller, three_page_pdf):
    controller.open_document(three_page_pdf)
    controller.arm(FieldKind.TEXT)

    placed = controller.click(130, 280, container_top=30, container_left=30, container_height=300)

    assert (placed.page_number, placed.x, placed.y) == (3, 100, 50)


def test_click_without_document_keeps_arm(controller):
    controller.arm(FieldKind.TEXT)

    assert controller.click(1, 1) is None
    assert controller.armed_kind is FieldKind.TEXT


def test_invalid_file_leaves_session_unchanged(controller, two_page_pdf, tmp_path):
    controller.open_document(two_page_pdf)
    controller.arm(FieldKind.TEXT)
    controller.click(10, 10)
    other = tmp_path / "image.png"
    other.write_bytes(b"\x89PNG")

    with pytest.raises(InvalidFileTypeError):
        controller.open_document(other)

    assert controller.session is not None
    assert controller.session.document.path == two_page_pdf
    assert len(controller.fields()) == 1


def test_opening_new_document_discards_fields(controller, two_page_pdf, three_page_pdf):
    controller.open_document(two_page_pdf)
    controller.arm(FieldKind.RADIO)
    controller.click(10, 10)

    session = controller.open_document(three_page_pdf)

    assert session.total_pages == 3
    assert controller.fields() == []


def test_drop_on_another_page_updates_page_number(controller, two_page_pdf):
    controller.open_document(two_page_pdf)
    controller.arm(FieldKind.TEXT)
    placed = controller.click(100, 100)
    controller.update_value(placed.id, "moved")

    assert controller.begin_drag(placed.id, 105, 110)
    assert controller.drag_to(205, PAGE_H) == (200, PAGE_H - 10)
    moved = controller.end_drag(205, PAGE_H + 60)

    assert (moved.page_number, moved.x, moved.y) == (2, 200, 50)
    assert moved.value == "moved"
    assert moved.kind is FieldKind.TEXT
    assert controller.drag_to(1, 1) is None


@pytest.mark.parametrize("rendered_size", [None, (744.0, 1053.0)])
def test_press_and_release_in_place_keeps_field_on_later_page(tmp_path, rendered_size):
    path = tmp_path / "a4.pdf"
    path.write_bytes(make_pdf_bytes(page_count=10, width=595.28, height=841.89))
    controller = EditorController(config=EditorConfig(zoom=1.25))
    session = controller.open_document(path)
    session.rendered_size = rendered_size
    controller.arm(FieldKind.TEXT)
    placed = controller.click(120, 9 * session.page_height + 508)
    before = (placed.page_number, placed.x, placed.y)
    assert placed.page_number == 10

    for _ in range(5):
        left, top = controller.container_position(controller.store.get(placed.id))
        assert controller.begin_drag(placed.id, left + 5, top + 5)
        controller.end_drag(left + 5, top + 5)

    after = controller.store.get(placed.id)
    assert (after.page_number, after.x, after.y) == before


def test_small_drag_on_later_page_moves_by_pointer_delta(tmp_path):
    path = tmp_path / "a4.pdf"
    path.write_bytes(make_pdf_bytes(page_count=10, width=595.28, height=841.89))
    controller = EditorController(config=EditorConfig(zoom=1.25))
    session = controller.open_document(path)
    session.rendered_size = (744.0, 1053.0)
    controller.arm(FieldKind.CHECKBOX)
    placed = controller.click(120, 9 * 1053 + 508)

    controller.begin_drag(placed.id, 125, 9 * 1053 + 513)
    moved = controller.end_drag(135, 9 * 1053 + 523)

    assert (moved.page_number, moved.x, moved.y) == (10, 130, 518)


def test_drop_left_of_page_is_clamped_to_edge(controller, two_page_pdf):
    controller.open_document(two_page_pdf)
    controller.arm(FieldKind.CHECKBOX)
    placed = controller.click(100, 100)

    controller.begin_drag(placed.id, 105, 105)
    moved = controller.end_drag(-400, 50)

    assert (moved.page_number, moved.x, moved.y) == (1, 0, 45)


def test_drop_below_last_page_stays_inside_it(controller, two_page_pdf):
    controller.open_document(two_page_pdf)
    controller.arm(FieldKind.CHECKBOX)
    placed = controller.click(100, 100)

    controller.begin_drag(placed.id, 105, 105)
    moved = controller.end_drag(105, 5000)

    assert (moved.page_number, moved.x, moved.y) == (2, 100, PAGE_H - 10)
    assert pdf_anchor(moved, PAGE_H, config=controller.config) == (100, 0)


def test_signature_dropped_past_right_edge_keeps_its_width_on_page(controller, two_page_pdf):
    controller.open_document(two_page_pdf)
    controller.arm(FieldKind.SIGNATURE)
    placed = controller.click(10, 10)

    controller.begin_drag(placed.id, 10, 10)
    moved = controller.end_drag(700, 10)

    assert (moved.x, moved.y) == (612 - 100, 10)

def test_export_tears_down_session_after_delivery(controller, two_page_pdf):
    controller.open_document(two_page_pdf)
    controller.arm(FieldKind.TEXT)
    placed = controller.click(30, PAGE_H + 700)
    controller.update_value(placed.id, "Sign here")
    delivered = []

    result = controller.export(deliver=delivered.append)

    assert delivered == [result.data]
    assert controller.session is None
    assert controller.fields() == []
    with fitz.open(stream=result.data, filetype="pdf") as document:
        assert "Sign here" in document[1].get_text()


def test_failed_delivery_keeps_session(controller, two_page_pdf):
    controller.open_document(two_page_pdf)
    controller.arm(FieldKind.CHECKBOX)
    controller.click(10, 10)

    def deliver(data):
        raise OSError("disk full")

    with pytest.raises(OSError):
        controller.export(deliver=deliver)

    assert controller.session is not None
    assert len(controller.fields()) == 1
    assert not controller.export_in_flight


def test_reentrant_export_is_rejected(controller, two_page_pdf):
    controller.open_document(two_page_pdf)
    rejected = []

    def deliver(data):
        assert controller.export_in_flight
        with pytest.raises(ExportInProgressError):
            controller.export()
        rejected.append(True)

    controller.export(signature=FakeSignature(), deliver=deliver)

    assert rejected == [True]
    assert not controller.export_in_flight


def test_export_without_document_raises(controller):
    with pytest.raises(NoDocumentError):
        controller.export()


def test_scale_follows_zoom(two_page_pdf):
    controller = EditorController(config=EditorConfig(zoom=2.0))
    controller.open_document(two_page_pdf)
    controller.arm(FieldKind.CHECKBOX)
    placed = controller.click(40, 2 * PAGE_H + 40)
    assert placed.page_number == 2

    result = controller.export()

    with fitz.open(stream=result.data, filetype="pdf") as document:
        rects = [d["rect"] for d in document[1].get_drawings() if d.get("fill") is not None]
        assert len(rects) == 1
        assert rects[0].x0 == pytest.approx(20, abs=0.5)
        assert rects[0].y0 == pytest.approx(20, abs=0.5)


def test_restored_fields_survive_first_open_only(tmp_path, two_page_pdf, three_page_pdf):
    settings = QSettings(str(tmp_path / "fieldstamp.ini"), QSettings.Format.IniFormat)
    persistence = FieldStorePersistence(settings)
    persistence.save(
        [
            PlacedField(id=5, kind=FieldKind.TEXT, page_number=2, x=1, y=2, value="kept"),
            PlacedField(id=6, kind=FieldKind.RADIO, page_number=3, x=1, y=2),
        ]
    )

    controller = EditorController(config=EditorConfig(zoom=1.0), persistence=persistence)
    controller.open_document(two_page_pdf)

    assert [f.id for f in controller.fields()] == [5]
    controller.arm(FieldKind.CHECKBOX)
    assert controller.click(0, 0).id == 7
    assert [f.id for f in persistence.load()] == [5, 7]

    controller.open_document(three_page_pdf)
    assert controller.fields() == []
    assert persistence.load() == []
