"""
Qt application setup: organization and application names, high-DPI
environment and pyqtgraph defaults shared by the 2D views.
"""
from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QCoreApplication, QSettings

import sys
import os
from typing import Optional, Sequence

import pyqtgraph as pg

ORG_ID = "fluidbrush"
APP_ID = "fluidbrush"

VISIBLE_APP_NAME = "Fluid Brush"


def configure_pyqtgraph() -> None:
    pg.setConfigOption("background", "w")
    pg.setConfigOption("foreground", "k")
    pg.setConfigOption("antialias", True)


def create_app(argv: Optional[Sequence[str]] = None) -> QApplication:
    """Create and configure the QApplication instance (or reuse a running one)."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")
    os.environ.setdefault("QT_AUTO_SCREEN_SCALE_FACTOR", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    configure_pyqtgraph()

    app = QApplication.instance()
    if app is None:
        app = QApplication(list(argv) if argv is not None else sys.argv)

    app.setApplicationDisplayName(VISIBLE_APP_NAME)
    return app
