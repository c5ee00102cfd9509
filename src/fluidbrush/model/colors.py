"""
Color Mapping
=============
Concentration -> RGBA mapping shared by the 3D view and the legend.

Concentrations cluster near zero but span several orders of magnitude, so the
main scales are symmetric-log: linear around zero, logarithmic further out,
defined at zero. The cross-section uses a plain linear scale for local contrast.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, Sequence, TYPE_CHECKING

import numpy as np
from matplotlib.colors import LinearSegmentedColormap, to_hex

from fluidbrush import config
from fluidbrush.model.bounds import Bounds

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

RGBA = tuple[float, float, float, float]


def symlog(values: npt.ArrayLike, constant: float = config.SYMLOG_CONSTANT) -> npt.NDArray[np.float64]:
    """sign(x) * log1p(|x| / C)"""
    x = np.asarray(values, dtype=np.float64)
    return np.sign(x) * np.log1p(np.abs(x) / constant)


class _ColorScale:
    """Two-color interpolating scale over a numeric domain."""

    def __init__(self, domain: tuple[float, float], color_range: Sequence[str], name: str = "scale") -> None:
        self.domain = (float(domain[0]), float(domain[1]))
        self.color_range = tuple(color_range)
        self.cmap = LinearSegmentedColormap.from_list(name, list(self.color_range), N=256)

    def _transform(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return x

    def normalize(self, values: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Position of each value within the domain, clamped to [0, 1]."""
        x = np.asarray(values, dtype=np.float64)
        lo, hi = self._transform(np.array(self.domain))
        span = hi - lo
        if abs(span) < config.EPSILON:
            # Degenerate domain (e.g. threshold 100 %): everything maps to the start color
            return np.where(np.isnan(x), np.nan, 0.0)
        return np.clip((self._transform(x) - lo) / span, 0.0, 1.0)

    def rgba(self, values: npt.ArrayLike, alpha: float | npt.ArrayLike = 1.0) -> npt.NDArray[np.float64]:
        """(N, 4) float RGBA in [0, 1]."""
        colors = np.array(self.cmap(self.normalize(np.atleast_1d(values))), dtype=np.float64)
        colors[:, 3] = alpha
        return colors

    def hex_colors(self, values: npt.ArrayLike) -> list[str]:
        return [to_hex(rgba) for rgba in self.rgba(values)]

    def __call__(self, value: float) -> str:
        """Hex color for a single value."""
        return to_hex(self.cmap(float(self.normalize(value))))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(domain={self.domain}, range={self.color_range})"


class SymlogColorScale(_ColorScale):
    def __init__(
        self,
        domain: tuple[float, float],
        color_range: Sequence[str],
        constant: float = config.SYMLOG_CONSTANT,
        name: str = "symlog",
    ) -> None:
        self.constant = constant
        super().__init__(domain, color_range, name)

    def _transform(self, x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return symlog(x, self.constant)


class LinearColorScale(_ColorScale):
    pass


@dataclass(frozen=True)
class ColorMapper:
    """
    Derives the brushed (saturated) and unbrushed (desaturated) scales from the
    dataset bounds and the current threshold.
    """
    bounds: Bounds
    threshold: float
    saturated_range: tuple[str, str] = config.SATURATED_RANGE
    desaturated_range: tuple[str, str] = config.DESATURATED_RANGE
    unbrushed_opacity: float = config.UNBRUSHED_OPACITY

    @property
    def min_visible(self) -> float:
        return (self.threshold / 100.0) * self.bounds.max_c

    def _domain(self, domain_min: Optional[float]) -> tuple[float, float]:
        lo = self.min_visible if domain_min is None else domain_min
        return lo, self.bounds.max_c

    def saturated(self, domain_min: Optional[float] = None) -> SymlogColorScale:
        """Scale for brushed particles. domain_min defaults to the visible minimum."""
        return SymlogColorScale(self._domain(domain_min), self.saturated_range, name="saturated")

    def desaturated(self, domain_min: Optional[float] = None) -> SymlogColorScale:
        """Greyscale scale for context particles outside the slab."""
        return SymlogColorScale(self._domain(domain_min), self.desaturated_range, name="desaturated")

    def alpha(self, brushed: npt.ArrayLike) -> npt.NDArray[np.float64]:
        return np.where(np.asarray(brushed, dtype=bool), 1.0, self.unbrushed_opacity)

    def particle_colors(
        self,
        concentration: npt.ArrayLike,
        brushed: npt.ArrayLike,
        domain_min: Optional[float] = 0.0,
    ) -> npt.NDArray[np.float64]:
        """
        (N, 4) RGBA per particle: saturated and opaque inside the slab,
        grey and dimmed outside it.
        """
        c = np.asarray(concentration, dtype=np.float64)
        mask = np.asarray(brushed, dtype=bool)
        if c.size == 0:
            return np.empty((0, 4), dtype=np.float64)

        colors = self.desaturated(domain_min).rgba(c)
        if mask.any():
            colors[mask] = self.saturated(domain_min).rgba(c[mask])
        colors[:, 3] = self.alpha(mask)
        return colors
