"""
Brushing helpers shared by every view.

Display frame (same as the 3D scene):
    display x = raw Points0
    display y = raw Points2 - vertical offset   (vertical axis of the source)
    display z = raw Points1

The brush coordinate is always measured in this display frame, so the slab
the user sees in 3D is exactly the slab the cross-section shows.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from fluidbrush import config
from fluidbrush.model.bounds import Bounds
from fluidbrush.model.particles import ParticleSet
from fluidbrush.model.state import Axis

if TYPE_CHECKING:
    import numpy.typing as npt

# Display axis -> raw input column
RAW_COLUMN: dict[Axis, int] = {Axis.X: 0, Axis.Y: 2, Axis.Z: 1}


def display_positions(particles: ParticleSet, bounds: Bounds) -> npt.NDArray[np.float64]:
    """(N, 3) positions in display order, vertically recentered."""
    raw = particles.positions
    out = np.empty_like(raw)
    out[:, 0] = raw[:, 0]
    out[:, 1] = raw[:, 2] - bounds.vertical_offset
    out[:, 2] = raw[:, 1]
    return out


def coord_along_axis(particles: ParticleSet, bounds: Bounds, axis: Axis | str) -> npt.NDArray[np.float64]:
    """Position of every particle along the brushed display axis."""
    axis = Axis.parse(axis)
    values = particles.positions[:, RAW_COLUMN[axis]]
    if axis is Axis.Y:
        return values - bounds.vertical_offset
    return values


def brush_distance(
    particles: ParticleSet,
    bounds: Bounds,
    axis: Axis | str,
    brushed_coord: float,
) -> npt.NDArray[np.float64]:
    """Signed distance from the brush center: brushed_coord - coordinate."""
    return brushed_coord - coord_along_axis(particles, bounds, axis)


def in_slab(
    particles: ParticleSet,
    bounds: Bounds,
    axis: Axis | str,
    brushed_coord: float,
    thickness: float = config.SLAB_THICKNESS,
) -> npt.NDArray[np.bool_]:
    """Boolean mask of slab membership (strict inequality)."""
    return np.abs(brush_distance(particles, bounds, axis, brushed_coord)) < thickness


def concentration_cutoff(threshold: float, max_concentration: float) -> float:
    """threshold is a percentage of max_concentration."""
    return (threshold / 100.0) * max_concentration


def threshold_mask(particles: ParticleSet, threshold: float) -> npt.NDArray[np.bool_]:
    """
    Particles at or above `threshold`% of the maximum concentration of this set.
    NaN concentrations never pass.
    """
    if len(particles) == 0:
        return np.zeros(0, dtype=bool)
    cutoff = concentration_cutoff(threshold, particles.max_concentration())
    return particles.concentration >= cutoff


def visible_particles(particles: ParticleSet, threshold: float) -> ParticleSet:
    """Global threshold filter used by the 3D view."""
    return particles.subset(threshold_mask(particles, threshold))
