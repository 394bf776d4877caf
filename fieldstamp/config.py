"""Editor configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
import os

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EditorConfig:
    zoom: float = 1.25
    output_filename: str = "modified.pdf"
    storage_key: str = "formFields"
    settings_organization: str = "fieldstamp"
    settings_application: str = "fieldstamp"
    font_size: float = 12.0
    checkbox_size: float = 10.0
    radio_size: float = 10.0
    signature_width: float = 100.0
    signature_height: float = 50.0

    @classmethod
    def from_env(cls) -> EditorConfig:
        config = cls()
        zoom = os.environ.get("FIELDSTAMP_ZOOM")
        if zoom:
            try:
                config = replace(config, zoom=max(0.1, float(zoom)))
            except ValueError:
                logger.warning(f"Ignoring invalid FIELDSTAMP_ZOOM={zoom!r}, using {config.zoom}")
        output_filename = os.environ.get("FIELDSTAMP_OUTPUT_NAME")
        if output_filename:
            config = replace(config, output_filename=output_filename)
        return config
