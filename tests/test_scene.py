import math

import numpy as np
import pytest

from fluidbrush import config
from fluidbrush.controller.brush import BrushController
from fluidbrush.model.bounds import compute_bounds
from fluidbrush.model.particles import ParticleSet
from fluidbrush.model.scene import (
    Scene,
    SceneBuilder,
    SceneHandle,
    build_slice_plane,
    point_size,
    slice_plane_transform,
)
from fluidbrush.model.state import Axis, InteractionState, StateChange, Store, ViewState


def make_state(threshold: float = 0.0, coord: float = 0.0, axis: Axis = Axis.X) -> ViewState:
    positions = np.array([[0.0, 0, 0], [0.3, 0, 1], [2.0, 1, 2], [-3.0, 1, 4]])
    particles = ParticleSet(np.arange(4), positions, np.zeros((4, 3)), [1.0, 2.0, 5.0, 10.0])
    interaction = InteractionState(brushed_axis=axis, brushed_coord=coord, threshold=threshold)
    return ViewState(particles, compute_bounds(particles), interaction)


def change(*names: str) -> StateChange:
    return StateChange(frozenset(names))


def test_point_size():
    assert point_size(800, 1000) == pytest.approx(16.0)
    assert point_size(1000, 1000) == pytest.approx(20.0)


def test_point_size_stays_in_pixel_range():
    # VTK sizes points in screen pixels
    assert point_size(800, 0) == config.MAX_POINT_SIZE_PX
    assert point_size(800, 4) == config.MAX_POINT_SIZE_PX
    assert point_size(800, 1_000_000) == config.MIN_POINT_SIZE_PX
    assert point_size(800, 100_000) >= 1.0


@pytest.mark.parametrize("axis, normal", [
    (Axis.X, (1.0, 0.0, 0.0)),
    (Axis.Y, (0.0, 1.0, 0.0)),
    (Axis.Z, (0.0, 0.0, 1.0)),
])
def test_plane_faces_brushed_axis(axis, normal):
    state = make_state(axis=axis, coord=1.5)
    plane = build_slice_plane(state.bounds, state.interaction)

    assert plane.normal == pytest.approx(normal)
    assert plane.position["xyz".index(axis.value)] == 1.5
    assert sum(abs(p) for p in plane.position) == 1.5


def test_plane_rotations():
    assert slice_plane_transform("x", 0.0)[1] == (0.0, math.pi / 2.0, 0.0)
    assert slice_plane_transform("y", 0.0)[1] == (-math.pi / 2.0, 0.0, 0.0)
    assert slice_plane_transform("z", 0.0)[1] == (0.0, 0.0, 0.0)


def test_plane_size():
    state = make_state()
    # x spans -3..2
    assert build_slice_plane(state.bounds, state.interaction).size == pytest.approx(2 * (2.5 + 0.1) + 1)


def test_handle_versions():
    handle = SceneHandle()
    assert handle.snapshot() == (0, Scene())
    scene = Scene()
    assert handle.commit(scene) == 1
    assert handle.commit(scene) == 2
    assert handle.snapshot()[1] is scene


def test_not_ready_builds_nothing():
    state = ViewState(None, None, InteractionState())
    assert SceneBuilder().build(state, change("particles"), 800) is None


def test_colors_align_with_filtered_positions(monkeypatch):
    monkeypatch.setattr(config, "MAX_POINT_SIZE_PX", 1e9)
    builder = SceneBuilder()
    scene = builder.build(make_state(threshold=30.0), change("particles", "bounds"), 800)

    points = scene.points
    # 30 % of 10 -> concentrations 5 and 10 survive
    assert list(points.ids) == [2, 3]
    assert points.positions.shape == (2, 3)
    assert points.colors.shape == (2, 4)
    # size uses the full dataset count
    assert points.point_size == pytest.approx(20 * 800 / 4)


def test_brush_move_only_recolors():
    builder = SceneBuilder()
    first = builder.build(make_state(), change("particles", "bounds"), 800)

    moved = builder.build(make_state(coord=2.0), change("brushed_coord"), 800, first)

    assert moved.points.geometry_version == first.points.geometry_version
    assert moved.points.positions is first.points.positions
    assert moved.plane.position == (2.0, 0.0, 0.0)
    # particle 0 left the slab, particle 2 entered it
    assert first.points.colors[0, 3] == 1.0
    assert moved.points.colors[0, 3] == 0.25
    assert moved.points.colors[2, 3] == 1.0


def test_threshold_rebuilds_geometry():
    builder = SceneBuilder()
    first = builder.build(make_state(), change("particles", "bounds"), 800)

    second = builder.build(make_state(threshold=60.0), change("threshold"), 800, first)

    assert second.points.geometry_version > first.points.geometry_version
    assert len(second.points) == 1


def test_unrelated_change_keeps_scene():
    builder = SceneBuilder()
    first = builder.build(make_state(), change("particles"), 800)
    assert builder.build(make_state(), change(), 800, first) is first


def test_display_positions_in_scene():
    builder = SceneBuilder()
    scene = builder.build(make_state(), change("particles"), 800)
    # raw (0.3, 0, 1) -> display (0.3, 1 - 2, 0) with a vertical offset of 2
    np.testing.assert_allclose(scene.points.positions[1], [0.3, -1.0, 0.0])


def make_store() -> Store:
    store = Store()
    state = make_state()
    store.set_dataset(state.particles)
    return store


def test_publish_commits_on_store_changes():
    store = make_store()
    controller = BrushController(store)
    builder, handle = SceneBuilder(), SceneHandle()
    published = []
    store.changed.connect(
        lambda ch: published.append(builder.publish(handle, store.snapshot(), ch, 800))
    )

    assert builder.publish(handle, store.snapshot(), change("particles", "bounds"), 800)
    assert handle.version == 1
    first = handle.snapshot()[1]

    controller.step_up()
    assert published == [True]
    assert handle.version == 2
    moved = handle.snapshot()[1]
    assert moved.plane.position == (0.25, 0.0, 0.0)
    assert moved.points.positions is first.points.positions

    controller.set_threshold(60.0)
    assert handle.version == 3
    assert list(handle.snapshot()[1].points.ids) == [3]


def test_publish_skips_unrelated_changes():
    store = make_store()
    builder, handle = SceneBuilder(), SceneHandle()
    builder.publish(handle, store.snapshot(), change("particles", "bounds"), 800)

    assert not builder.publish(handle, store.snapshot(), change("something_else"), 800)
    assert handle.version == 1


def test_publish_clears_scene_when_dataset_closes():
    store = make_store()
    builder, handle = SceneBuilder(), SceneHandle()
    builder.publish(handle, store.snapshot(), change("particles", "bounds"), 800)

    store.reset()

    assert builder.publish(handle, store.snapshot(), change("particles", "bounds"), 800)
    assert handle.snapshot()[1].is_empty
    # nothing left to clear
    assert not builder.publish(handle, store.snapshot(), change("particles"), 800)
    assert handle.version == 2
