"""
3D Point Cloud Widget (PyVista Wrapper)
Shows every particle above the threshold, colored by concentration, with
the slab around the slicing plane highlighted.
"""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout
from PySide6.QtCore import QTimer
from PySide6.QtGui import QCloseEvent, QResizeEvent

from pyvistaqt import QtInteractor

from fluidbrush import config
from fluidbrush.model.scene import SceneBuilder, SceneHandle
from fluidbrush.model.state import StateChange, Store
from fluidbrush.view.widgets.scene_adapter import PyVistaSceneAdapter

logger = logging.getLogger(__name__)

VIEWPORT_CHANGE = StateChange(frozenset({"viewport"}))


class PointCloudWidget(QWidget):
    """
    Rebuilds run on Store notifications and commit to `scene_handle`;
    a fixed-rate timer applies the latest committed scene and renders.
    """

    def __init__(self, store: Store, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.store = store

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        self._init_plotter()

        self.scene_handle = SceneHandle()
        self._builder = SceneBuilder()
        self._adapter = PyVistaSceneAdapter(self.plotter)
        self._last_width: Optional[int] = None
        self._closed: bool = False

        self.store.changed.connect(self.on_state_changed)

        # Render loop
        self._render_timer = QTimer(self)
        self._render_timer.setInterval(config.RENDER_INTERVAL_MS)
        self._render_timer.timeout.connect(self._render_frame)
        self._render_timer.start()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def on_state_changed(self, change: StateChange) -> None:
        self.rebuild(change)

    def rebuild(self, change: StateChange) -> None:
        self._builder.publish(self.scene_handle, self.store.snapshot(), change, self._viewport_width())

    def reset_camera(self) -> None:
        self.plotter.camera_position = [config.CAMERA_POSITION, (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)]

    def shutdown(self) -> None:
        """Stops the render loop and releases the VTK render window."""
        if self._closed:
            return
        self._closed = True
        self._render_timer.stop()
        self.store.changed.disconnect(self.on_state_changed)
        self._adapter.clear()
        self.plotter.close()

    # ------------------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------------------

    def _init_plotter(self) -> None:
        self.plotter.set_background("white")
        # Per-point alpha needs order independent transparency
        self.plotter.enable_depth_peeling()
        self.reset_camera()

    def _viewport_width(self) -> int:
        return max(self.plotter.width(), 1)

    def _render_frame(self) -> None:
        version, scene = self.scene_handle.snapshot()
        if self._adapter.apply(version, scene):
            self.plotter.render()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        width = event.size().width()
        if width != self._last_width:
            self._last_width = width
            self.rebuild(VIEWPORT_CHANGE)

    def closeEvent(self, event: QCloseEvent) -> None:
        self.shutdown()
        event.accept()
