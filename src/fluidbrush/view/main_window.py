"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, the three linked views and
the brushing controls.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects global actions (File -> Open, arrow keys) to the
   appropriate controllers and runs the loader worker.
"""
import logging
import os
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QSplitter, QFileDialog, QMessageBox,
    QApplication, QAbstractSpinBox
)
from PySide6.QtCore import Qt, QEvent, QObject
from PySide6.QtGui import QAction

from fluidbrush.app import VISIBLE_APP_NAME
from fluidbrush.controller.brush import BrushController
from fluidbrush.controller.workers import LoaderWorker
from fluidbrush.model.particles import ParticleSet
from fluidbrush.model.state import Store
from fluidbrush.view.panels.brush_panel import BrushControlPanel
from fluidbrush.view.widgets.color_legend import ColorLegendWidget
from fluidbrush.view.widgets.cross_section import CrossSectionWidget
from fluidbrush.view.widgets.point_cloud import PointCloudWidget

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, store: Store) -> None:
        super().__init__()
        self.store: Store = store
        self.controller = BrushController(store)
        self.worker: Optional[LoaderWorker] = None

        self.update_window_title()
        self.resize(1600, 900)

        # --- SPLITTER (CONTENT AREA) ---
        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        # --- LEFT: 3D View ---
        self.visualizer = PointCloudWidget(self.store)
        splitter.addWidget(self.visualizer)

        # --- MIDDLE: Cross-Section ---
        self.cross_section = CrossSectionWidget(self.store)
        splitter.addWidget(self.cross_section)

        # --- RIGHT: Controls + Legend ---
        sidebar = QWidget()
        sidebar_layout = QVBoxLayout(sidebar)
        sidebar_layout.setContentsMargins(0, 0, 0, 0)

        self.brush_panel = BrushControlPanel(self.store, self.controller)
        sidebar_layout.addWidget(self.brush_panel)

        self.legend = ColorLegendWidget(self.store)
        self.legend.setMinimumHeight(300)
        sidebar_layout.addWidget(self.legend, stretch=1)

        splitter.addWidget(sidebar)

        # Set initial proportions (3D : cross-section : sidebar)
        splitter.setSizes([700, 600, 300])

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        # Arrow keys move the brush wherever the focus is
        QApplication.instance().installEventFilter(self)

        self.statusBar().showMessage("Ready.")

    def _create_actions(self) -> None:
        # File Actions
        self.act_open = QAction("Open...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(self.on_file_open)

        self.act_close_data = QAction("Close Dataset", self)
        self.act_close_data.triggered.connect(self.on_file_close)

        self.act_exit = QAction("Exit", self)
        self.act_exit.setShortcut("Ctrl+Q")
        self.act_exit.triggered.connect(self.close)

        # View Actions
        self.act_reset_camera = QAction("Reset Camera", self)
        self.act_reset_camera.triggered.connect(self.visualizer.reset_camera)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_open)
        file_menu.addAction(self.act_close_data)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        view_menu = menu_bar.addMenu("&View")
        view_menu.addAction(self.act_reset_camera)

    # --- HELPER METHODS ---
    def update_window_title(self) -> None:
        source = self.store.source
        name = os.path.basename(source) if source else "No data"
        self.setWindowTitle(f"{VISIBLE_APP_NAME} - [{name}]")

    # --- LOADING ---

    def load_file(self, filepath: str) -> None:
        """Parses `filepath` in a background thread; the Store is updated when done."""
        if self.worker is not None and self.worker.isRunning():
            logger.warning("A dataset is already being loaded; ignoring request.")
            return

        self.act_open.setEnabled(False)
        self.worker = LoaderWorker(filepath)
        self.worker.progress_updated.connect(self.statusBar().showMessage)
        self.worker.finished_loading.connect(self.on_load_finished)
        self.worker.error_occurred.connect(self.on_load_error)
        self.worker.finished.connect(self.on_worker_done)
        self.worker.start()

    def on_load_finished(self, particles: ParticleSet, filepath: str) -> None:
        self.store.set_dataset(particles, source=filepath)
        self.update_window_title()
        self.statusBar().showMessage(f"Loaded {len(particles)} particles from {os.path.basename(filepath)}.")

    def on_load_error(self, message: str) -> None:
        self.statusBar().showMessage("Loading failed.")
        QMessageBox.critical(self, "Error", f"Could not load the particle file:\n{message}")

    def on_worker_done(self) -> None:
        self.act_open.setEnabled(True)

    # --- FILE SLOTS ---

    def on_file_open(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(
            self, "Open Particle Data", "", "CSV Files (*.csv);;All Files (*)"
        )
        if fname:
            self.load_file(fname)

    def on_file_close(self) -> None:
        self.store.reset()
        self.update_window_title()
        self.statusBar().showMessage("Dataset closed.")

    # --- KEYBOARD ---

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        # Every key event reaches the window handle exactly once
        if (
            event.type() == QEvent.KeyRelease
            and watched is self.windowHandle()
            and not event.isAutoRepeat()
            and not isinstance(QApplication.focusWidget(), QAbstractSpinBox)
        ):
            if event.key() == Qt.Key_Up:
                self.controller.step_up()
            elif event.key() == Qt.Key_Down:
                self.controller.step_down()
        return super().eventFilter(watched, event)

    def closeEvent(self, event, /) -> None:
        QApplication.instance().removeEventFilter(self)

        # Let a running load finish; its result is discarded
        if self.worker is not None and self.worker.isRunning():
            self.worker.finished_loading.disconnect(self.on_load_finished)
            self.worker.wait()

        self.cross_section.shutdown()
        self.legend.shutdown()
        self.brush_panel.shutdown()

        # Close the PyVista plotter safely
        self.visualizer.shutdown()

        event.accept()
