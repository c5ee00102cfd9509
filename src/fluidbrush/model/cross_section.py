"""
Cross-Section Model
===================
Computes the 2D glyph layout for the particles inside the brush slab.

Pipeline (pure NumPy, no Qt):
    1. pick the two in-plane accessors for the brushed axis
    2. keep slab members
    3. stable sort by |distance| to the brush center
    4. cap to MAX_GLYPHS (nearest first)
    5. local threshold relative to the capped subset's maximum concentration
    6. adaptive glyph radius, capped so sparse slabs still fit
    7. velocity glyph geometry (triangle + concentration circle)
    8. pixel positions through inset linear scales
    9. linear color over the local concentration range

The local threshold in step 5 differs from the global one
used by the 3D view: the cross-section always shows the strongest signals of
whatever the slab currently contains.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, TYPE_CHECKING

import numpy as np

from fluidbrush import config
from fluidbrush.model.bounds import Bounds
from fluidbrush.model.brushing import brush_distance, concentration_cutoff
from fluidbrush.model.colors import LinearColorScale
from fluidbrush.model.particles import ParticleSet
from fluidbrush.model.state import Axis, InteractionState

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaneProjection:
    """
    Which raw columns become the horizontal/vertical glyph axes, and which
    display-bounds extents they are scaled against.
    """
    position_columns: tuple[int, int]
    velocity_columns: tuple[int, int]
    extent_axes: tuple[str, str]

    def extents(self, bounds: Bounds) -> tuple[tuple[float, float], tuple[float, float]]:
        return bounds.extent(self.extent_axes[0]), bounds.extent(self.extent_axes[1])


PLANE_PROJECTIONS: dict[Axis, PlaneProjection] = {
    # Slicing across x shows the raw (y, z) plane
    Axis.X: PlaneProjection(position_columns=(1, 2), velocity_columns=(1, 2), extent_axes=("z", "y")),
    Axis.Y: PlaneProjection(position_columns=(0, 1), velocity_columns=(0, 1), extent_axes=("x", "z")),
    Axis.Z: PlaneProjection(position_columns=(0, 2), velocity_columns=(0, 2), extent_axes=("x", "y")),
}


class LinearScale:
    """Maps a numeric domain linearly onto a pixel range (d3-style, unclamped)."""

    def __init__(self, domain: tuple[float, float], out_range: tuple[float, float]) -> None:
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(out_range[0]), float(out_range[1]))

    def __call__(self, values: npt.ArrayLike) -> npt.NDArray[np.float64]:
        x = np.asarray(values, dtype=np.float64)
        d0, d1 = self.domain
        r0, r1 = self.range
        if abs(d1 - d0) < config.EPSILON:
            # A flat extent (e.g. 2D data) collapses onto the middle of the range
            return np.full_like(x, (r0 + r1) / 2.0)
        return r0 + (x - d0) / (d1 - d0) * (r1 - r0)


@dataclass(frozen=True)
class Glyph:
    """
    One particle in the cross-section. Geometry is in pixels, relative to
    (x, y); y grows downwards like the screen.
    """
    id: int
    x: float
    y: float
    triangle: tuple[tuple[float, float], tuple[float, float], tuple[float, float]]
    circle_center: tuple[float, float]
    circle_radius: float
    concentration: float
    color: str


@dataclass(frozen=True)
class CrossSectionFrame:
    glyphs: tuple[Glyph, ...]
    axis: Axis
    radius: float
    width: float
    height: float
    brushed_count: int = 0
    local_max: float = 0.0
    count32: int = 0

    def __len__(self) -> int:
        return len(self.glyphs)

    @property
    def ids(self) -> list[int]:
        return [g.id for g in self.glyphs]


def glyph_radius(width: float, height: float, count: int, count32: int) -> float:
    """
    Glyphs shrink as more particles share the view. count32 (particles above
    32 % of the local max) keeps a few strong particles from inflating glyphs
    when most of the slab is weak.
    """
    denominator = max(min(count, count32), 1)
    return max(3.0 * min(width, height) / denominator, config.MIN_GLYPH_RADIUS)


def max_glyph_radius(width: float, height: float, margin: float = config.GLYPH_MARGIN) -> float:
    """
    Upper bound for sparse slabs: the insets of both ends together never take
    more than half of the shorter side, so a handful of glyphs still spread out.
    """
    return max((min(width, height) - 2.0 * margin) / 4.0, config.MIN_GLYPH_RADIUS)


def inset_range(size: float, inset: float) -> tuple[float, float]:
    """(inset, size - inset) with the inset clamped at the middle, so the ends never cross."""
    inset = min(inset, size / 2.0)
    return inset, size - inset


def velocity_glyph(
    vx: float,
    vy: float,
    scale: float,
    concentration: float,
) -> tuple[tuple[tuple[float, float], ...], tuple[float, float], float]:
    """
    Arrow-like triangle pointing along (vx, vy), plus a circle sitting at
    the tip whose radius grows with concentration.

    (vx, vy) is in data orientation (vy up); the returned geometry is in
    screen orientation, where y grows downwards.

    Returns:
        (triangle vertices, circle center, circle radius)
    """
    scale = scale if abs(scale) > config.EPSILON else config.EPSILON
    tx = vx / scale
    ty = -vy / scale
    triangle = ((tx, ty), (-ty / 3.0, tx / 3.0), (ty / 3.0, -tx / 3.0))

    r = concentration * config.CONCENTRATION_MARKER_SCALE
    theta = np.arctan2(ty, tx)
    center = (tx + r * float(np.cos(theta)), ty + r * float(np.sin(theta)))
    return triangle, center, r


def sort_by_proximity(
    particles: ParticleSet,
    bounds: Bounds,
    axis: Axis,
    brushed_coord: float,
) -> ParticleSet:
    """Stable ascending sort by absolute distance to the brush center."""
    distance = np.abs(brush_distance(particles, bounds, axis, brushed_coord))
    return particles.subset(np.argsort(distance, kind="stable"))


def select_slab(
    particles: ParticleSet,
    bounds: Bounds,
    interaction: InteractionState,
    thickness: float = config.SLAB_THICKNESS,
    max_glyphs: int = config.MAX_GLYPHS,
) -> tuple[ParticleSet, int]:
    """
    Steps 2-5: slab members, nearest first, capped, then locally thresholded.

    Returns:
        (selected particles, number of slab members before capping)
    """
    axis = interaction.brushed_axis
    distance = brush_distance(particles, bounds, axis, interaction.brushed_coord)
    members = particles.subset(np.abs(distance) < thickness)
    brushed_count = len(members)

    ordered = sort_by_proximity(members, bounds, axis, interaction.brushed_coord)
    if len(ordered) > max_glyphs:
        ordered = ordered.subset(np.arange(max_glyphs))

    if len(ordered) == 0:
        return ordered, brushed_count

    cutoff = concentration_cutoff(interaction.threshold, ordered.max_concentration())
    return ordered.subset(ordered.concentration >= cutoff), brushed_count


def compute_cross_section(
    particles: Optional[ParticleSet],
    bounds: Optional[Bounds],
    interaction: InteractionState,
    width: float,
    height: float,
    thickness: float = config.SLAB_THICKNESS,
    max_glyphs: int = config.MAX_GLYPHS,
    margin: float = config.GLYPH_MARGIN,
    color_range: tuple[str, str] = config.SATURATED_RANGE,
) -> Optional[CrossSectionFrame]:
    """
    Full glyph layout for one viewport. Returns None while not ready
    (no data, no bounds or an unsized viewport).
    """
    if particles is None or bounds is None or width <= 0 or height <= 0:
        return None

    axis = interaction.brushed_axis
    selected, brushed_count = select_slab(particles, bounds, interaction, thickness, max_glyphs)
    n = len(selected)
    if n == 0:
        return CrossSectionFrame(
            glyphs=(), axis=axis, radius=config.MIN_GLYPH_RADIUS,
            width=width, height=height, brushed_count=brushed_count,
        )

    c = selected.concentration
    local_max = float(np.max(c))
    local_min = float(np.min(c))
    count32 = int(np.count_nonzero(c >= config.DENSITY_FRACTION * local_max))
    radius = min(glyph_radius(width, height, n, count32), max_glyph_radius(width, height, margin))

    v_max = max(float(np.max(selected.speeds())), config.EPSILON)
    scale = config.VELOCITY_SCALE_FACTOR * v_max / radius

    projection = PLANE_PROJECTIONS[axis]
    x_extent, y_extent = projection.extents(bounds)
    x_left, x_right = inset_range(width, margin + radius)
    y_top, y_bottom = inset_range(height, margin + radius)
    x_scale = LinearScale(x_extent, (x_left, x_right))
    y_scale = LinearScale(y_extent, (y_bottom, y_top))

    px, py = projection.position_columns
    xs = x_scale(selected.positions[:, px])
    ys = y_scale(selected.positions[:, py])

    vcx, vcy = projection.velocity_columns
    color_scale = LinearColorScale((local_min, local_max), color_range, name="cross_section")
    colors = color_scale.hex_colors(c)

    glyphs = []
    for i in range(n):
        triangle, center, r = velocity_glyph(
            float(selected.velocities[i, vcx]),
            float(selected.velocities[i, vcy]),
            scale,
            float(c[i]),
        )
        glyphs.append(Glyph(
            id=int(selected.ids[i]),
            x=float(xs[i]),
            y=float(ys[i]),
            triangle=triangle,
            circle_center=center,
            circle_radius=r,
            concentration=float(c[i]),
            color=colors[i],
        ))

    logger.debug(
        f"Cross-section ({axis.value}={interaction.brushed_coord:.3f}): "
        f"{brushed_count} brushed, {n} drawn, radius={radius:.1f}"
    )
    return CrossSectionFrame(
        glyphs=tuple(glyphs),
        axis=axis,
        radius=radius,
        width=width,
        height=height,
        brushed_count=brushed_count,
        local_max=local_max,
        count32=count32,
    )
