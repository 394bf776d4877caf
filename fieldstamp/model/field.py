"""Placed field model definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FieldKind(str, Enum):
    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SIGNATURE = "signature"


@dataclass(slots=True)
class PlacedField:
    """One placed annotation.

    ``x`` and ``y`` are screen pixels measured from the top-left corner of the
    field's own rendered page, y increasing downward.
    """

    id: int
    kind: FieldKind
    page_number: int
    x: float
    y: float
    value: str = ""

    def to_record(self) -> dict[str, object]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "pageNumber": self.page_number,
            "x": self.x,
            "y": self.y,
            "value": self.value,
        }

    @classmethod
    def from_record(cls, record: dict[str, object]) -> PlacedField:
        return cls(
            id=int(record["id"]),
            kind=FieldKind(record["kind"]),
            page_number=int(record["pageNumber"]),
            x=float(record["x"]),
            y=float(record["y"]),
            value=str(record.get("value") or ""),
        )
