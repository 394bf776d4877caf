"""Mirror placed fields into QSettings so they survive a restart."""

from __future__ import annotations

import json
import logging

from PySide6.QtCore import QSettings

from fieldstamp.config import EditorConfig
from fieldstamp.model.field import PlacedField

logger = logging.getLogger(__name__)


class FieldStorePersistence:
    """Best-effort key-value mirror; failures are logged, never raised."""

    def __init__(self, settings: QSettings | None = None, config: EditorConfig | None = None) -> None:
        self._config = config or EditorConfig()
        self._settings = settings or QSettings(
            self._config.settings_organization,
            self._config.settings_application,
        )

    @property
    def key(self) -> str:
        return self._config.storage_key

    def save(self, fields: list[PlacedField]) -> None:
        try:
            payload = json.dumps([placed.to_record() for placed in fields])
            self._settings.setValue(self.key, payload)
            self._settings.sync()
        except Exception as exc:
            logger.warning(f"Could not persist fields: {exc}")

    def load(self) -> list[PlacedField]:
        raw = self._settings.value(self.key, "")
        if not raw:
            return []

        try:
            records = json.loads(str(raw))
        except ValueError:
            logger.warning(f"Discarding unreadable stored fields under {self.key!r}")
            return []
        if not isinstance(records, list):
            logger.warning(f"Discarding stored fields under {self.key!r}: expected a list")
            return []

        fields: list[PlacedField] = []
        for record in records:
            try:
                fields.append(PlacedField.from_record(record))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.warning(f"Skipping stored field record {record!r}: {exc}")
        return fields

    def clear(self) -> None:
        self._settings.remove(self.key)
        self._settings.sync()
