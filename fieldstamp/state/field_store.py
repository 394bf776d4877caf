"""Ordered in-memory store of placed fields."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import Callable, Iterable

from fieldstamp.model.field import FieldKind, PlacedField

logger = logging.getLogger(__name__)

StoreListener = Callable[[list[PlacedField]], None]


class FieldStore:
    def __init__(self) -> None:
        self._fields: list[PlacedField] = []
        self._next_id = 1
        self._listeners: list[StoreListener] = []

    def __len__(self) -> int:
        return len(self._fields)

    def subscribe(self, listener: StoreListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def add_field(
        self,
        kind: FieldKind | None,
        x: float,
        y: float,
        page_number: int,
        total_pages: int,
    ) -> PlacedField | None:
        if kind is None:
            return None
        if not 1 <= page_number <= total_pages:
            logger.debug(f"Dropped {kind.value} placement on page {page_number} of {total_pages}")
            return None

        placed = PlacedField(
            id=self._next_id,
            kind=kind,
            page_number=page_number,
            x=x,
            y=y,
        )
        self._next_id += 1
        self._fields.append(placed)
        self._notify()
        return replace(placed)

    def update_value(self, field_id: int, value: str) -> None:
        placed = self._find(field_id)
        if placed is None or placed.kind is not FieldKind.TEXT:
            return
        placed.value = value
        self._notify()

    def move(self, field_id: int, page_number: int, x: float, y: float) -> bool:
        placed = self._find(field_id)
        if placed is None:
            return False
        placed.page_number = page_number
        placed.x = x
        placed.y = y
        self._notify()
        return True

    def remove(self, field_id: int) -> bool:
        placed = self._find(field_id)
        if placed is None:
            return False
        self._fields.remove(placed)
        self._notify()
        return True

    def get(self, field_id: int) -> PlacedField | None:
        placed = self._find(field_id)
        return replace(placed) if placed is not None else None

    def list(self) -> list[PlacedField]:
        return [replace(placed) for placed in self._fields]

    def clear(self) -> None:
        self._fields.clear()
        self._notify()

    def replace_all(self, fields: Iterable[PlacedField]) -> None:
        """Load fields wholesale, keeping ids unique and the counter ahead of them."""
        loaded: list[PlacedField] = []
        seen: set[int] = set()
        for placed in fields:
            if placed.id in seen:
                logger.warning(f"Ignored duplicate field id {placed.id}")
                continue
            seen.add(placed.id)
            loaded.append(replace(placed))

        self._fields = loaded
        self._next_id = max(self._next_id, max(seen, default=0) + 1)
        self._notify()

    def _find(self, field_id: int) -> PlacedField | None:
        for placed in self._fields:
            if placed.id == field_id:
                return placed
        return None

    def _notify(self) -> None:
        snapshot = self.list()
        for listener in list(self._listeners):
            listener(snapshot)
