"""Application bootstrap."""

from __future__ import annotations

import logging
import os
import sys

from PySide6.QtWidgets import QApplication

from fieldstamp.config import EditorConfig
from fieldstamp.state.controller import EditorController
from fieldstamp.state.persistence import FieldStorePersistence
from fieldstamp.ui.main_window import MainWindow


def configure_logging() -> None:
    level_name = os.environ.get("FIELDSTAMP_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    configure_logging()
    config = EditorConfig.from_env()

    app = QApplication(sys.argv)
    app.setOrganizationName(config.settings_organization)
    app.setApplicationName(config.settings_application)

    controller = EditorController(config=config, persistence=FieldStorePersistence(config=config))
    window = MainWindow(controller)
    window.show()
    return app.exec()
