"""
2D Cross-Section Widget (pyqtgraph)
Draws one velocity glyph per particle inside the brush slab.
"""
from __future__ import annotations

import logging
from typing import Optional

import pyqtgraph as pg
from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel, QGraphicsPathItem
from PySide6.QtCore import Qt, QPointF
from PySide6.QtGui import QPainterPath, QResizeEvent

from fluidbrush import config
from fluidbrush.model.cross_section import CrossSectionFrame, Glyph, compute_cross_section
from fluidbrush.model.state import StateChange, Store

logger = logging.getLogger(__name__)


def glyph_path(glyph: Glyph) -> QPainterPath:
    """Triangle plus concentration circle, relative to the glyph origin."""
    path = QPainterPath()
    path.setFillRule(Qt.WindingFill)

    (x0, y0), (x1, y1), (x2, y2) = glyph.triangle
    path.moveTo(x0, y0)
    path.lineTo(x1, y1)
    path.lineTo(x2, y2)
    path.closeSubpath()

    cx, cy = glyph.circle_center
    r = glyph.circle_radius
    if r > 0:
        path.addEllipse(QPointF(cx, cy), r, r)
    return path


class CrossSectionWidget(QWidget):
    """
    The ViewBox works in pixel coordinates (0..width, 0..height) with Y
    pointing down, so glyph geometry from the model is used unchanged.
    """

    def __init__(self, store: Store, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.store = store

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.graphics = pg.GraphicsView()
        self.view_box = pg.ViewBox(enableMouse=False, enableMenu=False, invertY=True, defaultPadding=0.0)
        self.view_box.disableAutoRange()
        self.graphics.setCentralItem(self.view_box)
        layout.addWidget(self.graphics)

        self.lbl_status = QLabel("No data loaded.")
        self.lbl_status.setStyleSheet("color: gray; font-style: italic;")
        layout.addWidget(self.lbl_status)

        self._pen = pg.mkPen(color="k", width=config.GLYPH_STROKE_WIDTH)
        # Glyph items keyed by particle id, reused across redraws
        self._items: dict[int, QGraphicsPathItem] = {}
        self.frame: Optional[CrossSectionFrame] = None

        self.store.changed.connect(self.on_state_changed)

    def on_state_changed(self, change: StateChange) -> None:
        # Any field of the interaction state can move the slab or its filter
        self.redraw()

    def redraw(self) -> None:
        width, height = self._viewport_size()
        state = self.store.snapshot()
        frame = compute_cross_section(state.particles, state.bounds, state.interaction, width, height)
        self.frame = frame

        if frame is None:
            self._clear()
            self.lbl_status.setText("No data loaded.")
            return

        self.view_box.setRange(xRange=(0, frame.width), yRange=(0, frame.height), padding=0)

        live: dict[int, QGraphicsPathItem] = {}
        for glyph in frame.glyphs:
            item = self._items.pop(glyph.id, None)
            if item is None:
                item = QGraphicsPathItem()
                item.setPen(self._pen)
                self.view_box.addItem(item)
            item.setPath(glyph_path(glyph))
            item.setPos(glyph.x, glyph.y)
            item.setBrush(pg.mkBrush(glyph.color))
            item.setToolTip(f"Particle {glyph.id}\nconcentration: {glyph.concentration:.3f}")
            live[glyph.id] = item

        # Particles that left the slab
        for item in self._items.values():
            self.view_box.removeItem(item)
        self._items = live

        interaction = state.interaction
        self.lbl_status.setText(
            f"{interaction.brushed_axis.value} = {interaction.brushed_coord:.2f}  |  "
            f"{frame.brushed_count} in slab, {len(frame)} shown"
        )

    def _clear(self) -> None:
        for item in self._items.values():
            self.view_box.removeItem(item)
        self._items = {}

    def _viewport_size(self) -> tuple[int, int]:
        viewport = self.graphics.viewport()
        return viewport.width(), viewport.height()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self.redraw()

    def shutdown(self) -> None:
        self.store.changed.disconnect(self.on_state_changed)
