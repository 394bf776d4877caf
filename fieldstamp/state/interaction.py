"""Pointer drag state machine for moving placed fields."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RELEASED = "released"


@dataclass(frozen=True, slots=True)
class DragDrop:
    field_id: int
    x: float
    y: float
    moved: bool = True


class DragInteraction:
    """Tracks one drag at a time.

    ``press`` records the offset between the pointer and the field's top-left
    corner so the field keeps its grab point while moving. All positions are
    container coordinates.
    """

    def __init__(self) -> None:
        self._state = DragState.IDLE
        self._field_id: int | None = None
        self._offset = (0.0, 0.0)
        self._press_point = (0.0, 0.0)
        self._position = (0.0, 0.0)

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def field_id(self) -> int | None:
        return self._field_id if self._state is DragState.DRAGGING else None

    @property
    def is_dragging(self) -> bool:
        return self._state is DragState.DRAGGING

    def press(
        self,
        field_id: int,
        pointer_x: float,
        pointer_y: float,
        field_x: float,
        field_y: float,
    ) -> bool:
        if self._state is DragState.DRAGGING:
            return False
        self._state = DragState.DRAGGING
        self._field_id = field_id
        self._offset = (pointer_x - field_x, pointer_y - field_y)
        self._press_point = (pointer_x, pointer_y)
        self._position = (field_x, field_y)
        return True

    def move(self, pointer_x: float, pointer_y: float) -> tuple[float, float] | None:
        if self._state is not DragState.DRAGGING:
            return None
        self._position = (pointer_x - self._offset[0], pointer_y - self._offset[1])
        return self._position

    def release(self, pointer_x: float, pointer_y: float) -> DragDrop | None:
        if self._state is not DragState.DRAGGING or self._field_id is None:
            return None
        x, y = self.move(pointer_x, pointer_y) or self._position
        moved = (pointer_x, pointer_y) != self._press_point
        drop = DragDrop(field_id=self._field_id, x=x, y=y, moved=moved)
        self._state = DragState.RELEASED
        self._field_id = None
        return drop

    def cancel(self) -> None:
        self._state = DragState.IDLE
        self._field_id = None
