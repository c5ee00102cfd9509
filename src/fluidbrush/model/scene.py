"""
Scene Graph
===========
Backend-independent description of the 3D scene, owned by the core.

Why is this file needed?
------------------------
1. Decoupling: The point cloud and the slicing plane are described as frozen
   snapshots (positions, RGBA colors, transforms) instead of mutable fields on
   VTK actors. An adapter in the view layer turns them into draw calls.
2. Render/Rebuild split: The rebuild (event driven, on state diffs) and the
   render loop (fixed rate) only meet at the SceneHandle. The rebuild is the
   single writer; the render loop reads whatever snapshot was committed last.

Classes:
    PointCloudNode: Point positions, per-point RGBA and point size.
    SlicePlaneNode: Square plane marking the brush position.
    Scene: One immutable snapshot of both nodes.
    SceneHandle: Versioned slot holding the latest committed Scene.
    SceneBuilder: Rebuilds only the parts of the Scene a StateChange touches.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
import math
from typing import Optional, TYPE_CHECKING

import numpy as np

from fluidbrush import config
from fluidbrush.model.bounds import Bounds
from fluidbrush.model.brushing import display_positions, in_slab, visible_particles
from fluidbrush.model.colors import ColorMapper
from fluidbrush.model.particles import ParticleSet
from fluidbrush.model.state import Axis, InteractionState, StateChange, ViewState

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# Fields whose change invalidates the point positions
GEOMETRY_TRIGGERS = ("particles", "bounds", "threshold", "viewport")
# Fields whose change only needs new colors and a moved plane
BRUSH_TRIGGERS = ("brushed_axis", "brushed_coord")


@dataclass(frozen=True, eq=False)
class PointCloudNode:
    ids: npt.NDArray[np.int64]
    positions: npt.NDArray[np.float64]
    colors: npt.NDArray[np.float64]
    point_size: float
    # Bumped whenever positions change; equal versions mean only colors differ
    geometry_version: int = 0

    def __len__(self) -> int:
        return len(self.positions)


@dataclass(frozen=True)
class SlicePlaneNode:
    position: tuple[float, float, float]
    # Euler angles in radians, applied X then Y then Z
    rotation: tuple[float, float, float]
    size: float
    color: str = config.PLANE_COLOR
    opacity: float = config.PLANE_OPACITY

    @property
    def normal(self) -> tuple[float, float, float]:
        """The +Z face normal of an unrotated plane, after rotation."""
        rx, ry, rz = self.rotation
        # R = Rz @ Ry @ Rx applied to (0, 0, 1)
        x = math.sin(ry)
        y = -math.sin(rx) * math.cos(ry)
        z = math.cos(rx) * math.cos(ry)
        nx = x * math.cos(rz) - y * math.sin(rz)
        ny = x * math.sin(rz) + y * math.cos(rz)
        return (round(nx, 12) + 0.0, round(ny, 12) + 0.0, round(z, 12) + 0.0)


@dataclass(frozen=True)
class Scene:
    points: Optional[PointCloudNode] = None
    plane: Optional[SlicePlaneNode] = None

    @property
    def is_empty(self) -> bool:
        return self.points is None and self.plane is None


class SceneHandle:
    """
    Latest committed Scene plus a version counter.

    Only one component commits (the point cloud rebuild). Readers compare the
    version they applied last with `version` to know if anything changed.
    """

    def __init__(self) -> None:
        self._scene: Scene = Scene()
        self._version: int = 0

    @property
    def version(self) -> int:
        return self._version

    def commit(self, scene: Scene) -> int:
        self._scene = scene
        self._version += 1
        return self._version

    def snapshot(self) -> tuple[int, Scene]:
        return self._version, self._scene


def point_size(viewport_width: float, count: int) -> float:
    """
    Fewer particles -> bigger points; wider viewport -> bigger points.

    VTK draws points in screen pixels, so the result is clamped to a
    visible, non-overlapping pixel range.
    """
    size = config.RELATIVE_POINT_SIZE * viewport_width / max(count, 1)
    return min(max(size, config.MIN_POINT_SIZE_PX), config.MAX_POINT_SIZE_PX)


def slice_plane_transform(axis: Axis | str, coord: float) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """
    Position and rotation putting the plane face perpendicular to `axis`
    at `coord`; the other two offsets are zero.
    """
    axis = Axis.parse(axis)
    position = [0.0, 0.0, 0.0]
    position["xyz".index(axis.value)] = coord

    if axis is Axis.X:
        rotation = (0.0, math.pi / 2.0, 0.0)
    elif axis is Axis.Y:
        rotation = (-math.pi / 2.0, 0.0, 0.0)
    else:
        rotation = (0.0, 0.0, 0.0)
    return (position[0], position[1], position[2]), rotation


def build_slice_plane(bounds: Bounds, interaction: InteractionState) -> SlicePlaneNode:
    radius = (bounds.max_x - bounds.min_x) / 2.0 + 0.1
    position, rotation = slice_plane_transform(interaction.brushed_axis, interaction.brushed_coord)
    return SlicePlaneNode(position=position, rotation=rotation, size=2.0 * radius + 1.0)


def point_colors(
    visible: ParticleSet,
    bounds: Bounds,
    interaction: InteractionState,
    thickness: float = config.SLAB_THICKNESS,
) -> npt.NDArray[np.float64]:
    """RGBA for each visible particle, saturated inside the slab and dimmed outside it."""
    brushed = in_slab(visible, bounds, interaction.brushed_axis, interaction.brushed_coord, thickness)
    mapper = ColorMapper(bounds, interaction.threshold)
    # The 3D view colors against [0, max_c], not the visible minimum
    return mapper.particle_colors(visible.concentration, brushed, domain_min=0.0)


@dataclass
class SceneBuilder:
    """
    Keeps the filtered particle set between rebuilds so a brush move only
    recomputes colors and the plane transform.
    """
    thickness: float = config.SLAB_THICKNESS
    _visible: Optional[ParticleSet] = field(default=None, repr=False)
    _positions: Optional[npt.NDArray[np.float64]] = field(default=None, repr=False)
    _geometry_version: int = 0

    def build(
        self,
        state: ViewState,
        change: StateChange,
        viewport_width: float,
        previous: Optional[Scene] = None,
    ) -> Optional[Scene]:
        """
        Returns the new Scene, or None when nothing can be drawn yet
        (no dataset / bounds).
        """
        if not state.is_ready:
            self._visible = None
            self._positions = None
            return None

        particles, bounds, interaction = state.particles, state.bounds, state.interaction
        need_geometry = (
            self._visible is None
            or previous is None
            or previous.points is None
            or change.touches(*GEOMETRY_TRIGGERS)
        )

        if need_geometry:
            self._visible = visible_particles(particles, interaction.threshold)
            self._positions = display_positions(self._visible, bounds)
            self._geometry_version += 1
            logger.debug(
                f"Rebuilt point geometry: {len(self._visible)}/{len(particles)} particles "
                f"above {interaction.threshold}%"
            )
        elif not change.touches(*BRUSH_TRIGGERS):
            return previous

        colors = point_colors(self._visible, bounds, interaction, self.thickness)
        points = PointCloudNode(
            ids=self._visible.ids,
            positions=self._positions,
            colors=colors,
            point_size=point_size(viewport_width, len(particles)),
            geometry_version=self._geometry_version,
        )
        if not need_geometry and previous is not None and previous.points is not None:
            points = replace(previous.points, colors=colors)

        return Scene(points=points, plane=build_slice_plane(bounds, interaction))

    def publish(self, handle: SceneHandle, state: ViewState, change: StateChange, viewport_width: float) -> bool:
        """
        Builds against the handle's current scene and commits the result.
        Returns True when a new version was committed.
        """
        _, previous = handle.snapshot()
        scene = self.build(state, change, viewport_width, previous)

        if scene is None:
            if previous.is_empty:
                return False
            handle.commit(Scene())
            return True
        if scene is previous:
            return False
        handle.commit(scene)
        return True
