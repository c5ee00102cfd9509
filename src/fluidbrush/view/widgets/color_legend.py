"""
Color Legend Widget (pyqtgraph)
Discrete swatches for the visible concentration range.
"""
from __future__ import annotations

import logging
from typing import Optional

import pyqtgraph as pg
from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel, QGraphicsRectItem
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont, QResizeEvent

from fluidbrush.model.legend import LegendLayout, compute_legend
from fluidbrush.model.state import StateChange, Store

logger = logging.getLogger(__name__)

LEGEND_TRIGGERS = ("particles", "bounds", "threshold")


class ColorLegendWidget(QWidget):
    def __init__(self, store: Store, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.store = store

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        title = QLabel("<b>Concentration</b>")
        title.setAlignment(Qt.AlignCenter)
        layout.addWidget(title)

        self.graphics = pg.GraphicsView()
        self.view_box = pg.ViewBox(enableMouse=False, enableMenu=False, invertY=True, defaultPadding=0.0)
        self.view_box.disableAutoRange()
        self.graphics.setCentralItem(self.view_box)
        layout.addWidget(self.graphics)

        self._items: list = []
        self.layout_data: Optional[LegendLayout] = None

        self.store.changed.connect(self.on_state_changed)

    def on_state_changed(self, change: StateChange) -> None:
        if change.touches(*LEGEND_TRIGGERS):
            self.redraw()

    def redraw(self) -> None:
        self._clear()

        viewport = self.graphics.viewport()
        width, height = viewport.width(), viewport.height()
        legend = compute_legend(self.store.bounds, self.store.interaction.threshold, width, height)
        self.layout_data = legend
        if legend is None:
            return

        self.view_box.setRange(xRange=(0, width), yRange=(0, height), padding=0)

        font = QFont()
        font.setPixelSize(int(legend.font_size))

        for entry in legend.entries:
            rect = QGraphicsRectItem(legend.x, entry.y, legend.bar_width, legend.bar_height)
            rect.setBrush(pg.mkBrush(entry.color))
            rect.setPen(pg.mkPen(None))
            self.view_box.addItem(rect)

            # TextItem ignores the inverted view transform, so labels stay upright
            text = pg.TextItem(entry.label, color="k", anchor=(0, 0.5))
            text.setFont(font)
            text.setPos(legend.label_x, entry.y + legend.bar_height / 2.0)
            self.view_box.addItem(text)

            self._items.extend((rect, text))

    def _clear(self) -> None:
        for item in self._items:
            self.view_box.removeItem(item)
        self._items = []

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self.redraw()

    def shutdown(self) -> None:
        self.store.changed.disconnect(self.on_state_changed)
