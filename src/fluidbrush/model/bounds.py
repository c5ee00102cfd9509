"""
Dataset Bounds
==============
Axis-aligned extents of the particle cloud in DISPLAY axes, plus the
maximum concentration.

The source data uses its second coordinate as the vertical axis. The display
frame swaps them: display Y <- raw Points2, display Z <- raw Points1.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

import numpy as np

from fluidbrush.model.particles import ParticleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    min_z: float
    max_z: float
    max_c: float

    @property
    def vertical_offset(self) -> float:
        """Shift applied to display Y so the cloud sits around the origin."""
        return (self.max_y - self.min_y) / 2.0

    def extent(self, axis: str) -> tuple[float, float]:
        """(min, max) along a display axis 'x', 'y' or 'z' (an Axis works too)."""
        name = getattr(axis, "value", axis)
        return getattr(self, f"min_{name}"), getattr(self, f"max_{name}")


def compute_bounds(particles: Optional[ParticleSet]) -> Optional[Bounds]:
    """
    Single min/max reduction over the dataset.

    Returns None when no dataset is loaded yet or it is empty; dependents
    treat that as "bounds not available".
    """
    if particles is None or len(particles) == 0:
        return None

    pos = particles.positions
    mins = np.min(pos, axis=0)
    maxs = np.max(pos, axis=0)

    bounds = Bounds(
        min_x=float(mins[0]),
        max_x=float(maxs[0]),
        min_y=float(mins[2]),
        max_y=float(maxs[2]),
        min_z=float(mins[1]),
        max_z=float(maxs[1]),
        max_c=max(float(np.max(particles.concentration)), 0.0),
    )
    logger.debug(f"Computed bounds for {len(particles)} particles: {bounds}")
    return bounds
