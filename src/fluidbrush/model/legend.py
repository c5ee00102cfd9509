"""
Color legend layout: one swatch and one label per concentration increment
of the visible range [threshold * max_c, max_c].
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from fluidbrush import config
from fluidbrush.model.bounds import Bounds
from fluidbrush.model.colors import ColorMapper


@dataclass(frozen=True)
class LegendEntry:
    value: float
    color: str
    y: float

    @property
    def label(self) -> str:
        return f"{self.value:.2f}"


@dataclass(frozen=True)
class LegendLayout:
    entries: tuple[LegendEntry, ...]
    x: float
    bar_width: float
    bar_height: float
    font_size: float

    @property
    def label_x(self) -> float:
        return self.x + self.bar_width + 2.0


def legend_increments(threshold: float, count: int = config.LEGEND_INCREMENTS) -> list[float]:
    """Fractions of max_c: threshold, then `count - 1` equal steps short of 1."""
    t = threshold / 100.0
    if t >= 1.0:
        return [1.0]
    step = (1.0 - t) / count
    return [t + k * step for k in range(count)]


def compute_legend(
    bounds: Optional[Bounds],
    threshold: float,
    width: float,
    height: float,
    count: int = config.LEGEND_INCREMENTS,
) -> Optional[LegendLayout]:
    if bounds is None or width <= 0 or height <= 0:
        return None

    increments = legend_increments(threshold, count)
    scale = ColorMapper(bounds, threshold).saturated()

    y_margin = config.LEGEND_Y_MARGIN
    x_margin = config.LEGEND_X_MARGIN
    # rough room reserved for the labels
    text_length = max(width * 0.5, 10.0)
    bar_height = max((height - 2 * y_margin) / len(increments), 1.0)
    bar_width = max(width - text_length - 2 * x_margin, 1.0)

    values = np.array(increments) * bounds.max_c
    colors = scale.hex_colors(values)
    entries = tuple(
        LegendEntry(value=float(v), color=color, y=y_margin + i * bar_height)
        for i, (v, color) in enumerate(zip(values, colors))
    )
    return LegendLayout(
        entries=entries,
        x=x_margin,
        bar_width=bar_width,
        bar_height=bar_height,
        font_size=max(bar_height / 4.0, 10.0),
    )
