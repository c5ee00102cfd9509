"""
PyVista Scene Adapter
Translates frozen Scene snapshots (fluidbrush.model.scene) into VTK actors.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
import pyvista as pv

from fluidbrush.model.scene import PointCloudNode, Scene, SlicePlaneNode

logger = logging.getLogger(__name__)

COLOR_ARRAY = "rgba"


def to_rgba_bytes(colors: np.ndarray) -> np.ndarray:
    """Float RGBA in [0, 1] -> uint8 RGBA as VTK expects for direct coloring."""
    return np.clip(np.rint(np.asarray(colors) * 255.0), 0, 255).astype(np.uint8)


class PyVistaSceneAdapter:
    """
    Owns the actors for one plotter. `apply` is cheap when the snapshot
    version did not change, so it can be called every frame.
    """

    def __init__(self, plotter: pv.Plotter) -> None:
        self.plotter = plotter

        self._applied_version: Optional[int] = None

        # Point cloud cache
        self._points_mesh: Optional[pv.PolyData] = None
        self._points_actor: Optional[pv.Actor] = None
        self._geometry_version: Optional[int] = None

        # Plane cache
        self._plane_actor: Optional[pv.Actor] = None
        self._plane_size: Optional[float] = None

    def apply(self, version: int, scene: Scene) -> bool:
        """Returns True when actors were touched."""
        if version == self._applied_version:
            return False

        self._apply_points(scene.points)
        self._apply_plane(scene.plane)
        self._applied_version = version
        return True

    def clear(self) -> None:
        self._remove_points()
        self._remove_plane()
        self._applied_version = None

    # ------------------------------------------------------------------------------
    # Points
    # ------------------------------------------------------------------------------

    def _apply_points(self, node: Optional[PointCloudNode]) -> None:
        if node is None or len(node) == 0:
            self._remove_points()
            return

        same_geometry = (
            self._points_mesh is not None
            and self._geometry_version == node.geometry_version
            and self._points_mesh.n_points == len(node)
        )
        if same_geometry:
            # Only the brush moved: swap colors in place to avoid flicker
            self._points_mesh.point_data[COLOR_ARRAY][:] = to_rgba_bytes(node.colors)
            self._points_mesh.Modified()
            self._points_actor.prop.point_size = node.point_size
            return

        self._remove_points()
        mesh = pv.PolyData(np.ascontiguousarray(node.positions))
        mesh.point_data[COLOR_ARRAY] = to_rgba_bytes(node.colors)

        self._points_actor = self.plotter.add_mesh(
            mesh,
            scalars=COLOR_ARRAY,
            rgba=True,
            style="points",
            point_size=node.point_size,
            render_points_as_spheres=False,
            lighting=False,
            pickable=False,
            show_scalar_bar=False,
            reset_camera=False,
        )
        self._points_mesh = mesh
        self._geometry_version = node.geometry_version
        logger.debug(f"Point cloud actor rebuilt ({len(node)} points, size={node.point_size:.2f}).")

    def _remove_points(self) -> None:
        if self._points_actor is not None:
            self.plotter.remove_actor(self._points_actor, render=False)
        self._points_actor = None
        self._points_mesh = None
        self._geometry_version = None

    # ------------------------------------------------------------------------------
    # Slicing plane
    # ------------------------------------------------------------------------------

    def _apply_plane(self, node: Optional[SlicePlaneNode]) -> None:
        if node is None:
            self._remove_plane()
            return

        if self._plane_actor is None or self._plane_size != node.size:
            self._remove_plane()
            # Built in the XY plane at the origin; the actor transform places it
            plane = pv.Plane(center=(0, 0, 0), direction=(0, 0, 1), i_size=node.size, j_size=node.size)
            self._plane_actor = self.plotter.add_mesh(
                plane,
                color=node.color,
                opacity=node.opacity,
                lighting=False,
                pickable=False,
                show_scalar_bar=False,
                reset_camera=False,
            )
            self._plane_size = node.size

        self._plane_actor.orientation = tuple(math.degrees(a) for a in node.rotation)
        self._plane_actor.position = node.position

    def _remove_plane(self) -> None:
        if self._plane_actor is not None:
            self.plotter.remove_actor(self._plane_actor, render=False)
        self._plane_actor = None
        self._plane_size = None
