"""Editor controller owning the document session, placed fields and gestures."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from fieldstamp.config import EditorConfig
from fieldstamp.model.field import FieldKind, PlacedField
from fieldstamp.pdf.loader import load_pdf
from fieldstamp.pdf.placement import place_click
from fieldstamp.pdf.writer import (
    ExportResult,
    SignatureSource,
    export_pdf,
    kind_height,
    kind_width,
)
from fieldstamp.state.field_store import FieldStore
from fieldstamp.state.interaction import DragInteraction
from fieldstamp.state.persistence import FieldStorePersistence
from fieldstamp.state.session import DocumentSession

logger = logging.getLogger(__name__)


class NoDocumentError(RuntimeError):
    """Raised when an operation needs a loaded document and none is open."""


class ExportInProgressError(RuntimeError):
    """Raised when an export is requested while another one is running."""


class EditorController:
    def __init__(
        self,
        config: EditorConfig | None = None,
        persistence: FieldStorePersistence | None = None,
    ) -> None:
        self.config = config or EditorConfig()
        self.store = FieldStore()
        self.drag = DragInteraction()
        self._session: DocumentSession | None = None
        self._armed_kind: FieldKind | None = None
        self._export_in_flight = False
        self._pending_restore = False

        if persistence is not None:
            restored = persistence.load()
            if restored:
                self.store.replace_all(restored)
                self._pending_restore = True
                logger.info(f"Restored {len(restored)} stored field(s)")
            self.store.subscribe(persistence.save)

    @property
    def session(self) -> DocumentSession | None:
        return self._session

    @property
    def armed_kind(self) -> FieldKind | None:
        return self._armed_kind

    @property
    def export_in_flight(self) -> bool:
        return self._export_in_flight

    def open_document(self, path: str | Path) -> DocumentSession:
        document = load_pdf(path)

        keep_restored = self._pending_restore and self._session is None
        self._pending_restore = False
        if self._session is not None:
            self._session.close()
        self._session = DocumentSession(document=document, zoom=self.config.zoom)
        self._armed_kind = None
        self.drag.cancel()

        if keep_restored:
            total = self._session.total_pages
            self.store.replace_all(f for f in self.store.list() if 1 <= f.page_number <= total)
        else:
            self.store.clear()
        return self._session

    def close_document(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
        self._armed_kind = None
        self.drag.cancel()
        self.store.clear()

    def arm(self, kind: FieldKind | None) -> None:
        self._armed_kind = kind

    def fields(self) -> list[PlacedField]:
        return self.store.list()

    def click(
        self,
        click_x: float,
        click_y: float,
        container_top: float = 0.0,
        container_left: float = 0.0,
        container_height: float | None = None,
    ) -> PlacedField | None:
        kind = self._armed_kind
        if kind is None or self._session is None:
            return None
        self._armed_kind = None

        total = self._session.total_pages
        height = container_height if container_height is not None else self._session.container_height
        placement = place_click(click_x, click_y, container_top, container_left, height, total)
        return self.store.add_field(kind, placement.x, placement.y, placement.page_number, total)

    def update_value(self, field_id: int, value: str) -> None:
        self.store.update_value(field_id, value)

    def remove_field(self, field_id: int) -> bool:
        return self.store.remove(field_id)

    def container_position(self, placed: PlacedField) -> tuple[float, float]:
        """Top-left corner of a field in stacked-container coordinates."""
        session = self._require_session()
        return placed.x, (placed.page_number - 1) * session.page_height + placed.y

    def begin_drag(self, field_id: int, pointer_x: float, pointer_y: float) -> bool:
        placed = self.store.get(field_id)
        if placed is None or self._session is None:
            return False
        field_x, field_y = self.container_position(placed)
        return self.drag.press(field_id, pointer_x, pointer_y, field_x, field_y)

    def drag_to(self, pointer_x: float, pointer_y: float) -> tuple[float, float] | None:
        return self.drag.move(pointer_x, pointer_y)

    def end_drag(self, pointer_x: float, pointer_y: float) -> PlacedField | None:
        drop = self.drag.release(pointer_x, pointer_y)
        if drop is None or self._session is None:
            return None
        placed = self.store.get(drop.field_id)
        if placed is None or not drop.moved:
            return placed

        session = self._session
        placement = place_click(
            drop.x, drop.y, 0.0, 0.0, session.container_height, session.total_pages
        )
        x, y = self._clamp_to_page(placed.kind, placement.x, placement.y)
        self.store.move(drop.field_id, placement.page_number, x, y)
        return self.store.get(drop.field_id)

    def _clamp_to_page(self, kind: FieldKind, x: float, y: float) -> tuple[float, float]:
        session = self._require_session()
        zoom = session.zoom
        max_x = max(0.0, session.page_width - kind_width(kind, self.config) * zoom)
        max_y = max(0.0, session.page_height - kind_height(kind, self.config) * zoom)
        return max(0.0, min(x, max_x)), max(0.0, min(y, max_y))

    def export(
        self,
        signature: SignatureSource | None = None,
        deliver: Callable[[bytes], None] | None = None,
    ) -> ExportResult:
        if self._export_in_flight:
            raise ExportInProgressError("An export is already running")
        session = self._require_session()

        self._export_in_flight = True
        try:
            result = export_pdf(
                session.source_bytes,
                self.store.list(),
                signature=signature,
                scale=session.zoom,
                config=self.config,
            )
            if deliver is not None:
                deliver(result.data)
        finally:
            self._export_in_flight = False

        self.close_document()
        return result

    def _require_session(self) -> DocumentSession:
        if self._session is None:
            raise NoDocumentError("Open a PDF first.")
        return self._session
