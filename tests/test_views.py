import numpy as np
import pytest

from fluidbrush.controller.brush import BrushController
from fluidbrush.model.particles import ParticleSet
from fluidbrush.model.state import Axis, Store


def make_particles() -> ParticleSet:
    positions = np.zeros((10, 3))
    positions[:, 0] = np.linspace(-2.0, 2.0, 10)
    positions[:, 1] = np.linspace(0.0, 1.0, 10)
    velocities = np.tile([0.0, 1.0, 1.0], (10, 1))
    concentration = np.linspace(1.0, 10.0, 10)
    return ParticleSet(np.arange(10), positions, velocities, concentration)


@pytest.fixture
def store() -> Store:
    store = Store()
    store.set_dataset(make_particles(), source="particles.csv")
    return store


@pytest.fixture
def cross_section(qapp, store):
    from fluidbrush.view.widgets.cross_section import CrossSectionWidget

    widget = CrossSectionWidget(store)
    widget.resize(400, 300)
    widget.show()
    qapp.processEvents()
    yield widget
    widget.shutdown()
    widget.close()


@pytest.fixture
def legend(qapp, store):
    from fluidbrush.view.widgets.color_legend import ColorLegendWidget

    widget = ColorLegendWidget(store)
    widget.resize(200, 400)
    widget.show()
    qapp.processEvents()
    widget.redraw()
    yield widget
    widget.shutdown()
    widget.close()


def test_cross_section_follows_brush_coordinate(cross_section, store):
    controller = BrushController(store)
    cross_section.redraw()
    before = cross_section.frame
    assert before is not None and before.ids

    for _ in range(8):
        controller.step_up()

    after = cross_section.frame
    assert store.interaction.brushed_coord == pytest.approx(2.0)
    assert after is not before
    assert set(after.ids) == {8, 9}
    assert set(cross_section._items) == {8, 9}
    assert "x = 2.00" in cross_section.lbl_status.text()


def test_cross_section_follows_axis_and_dataset(cross_section, store):
    BrushController(store).set_axis("y")
    assert cross_section.frame.axis is Axis.Y

    store.reset()
    assert cross_section.frame is None
    assert cross_section._items == {}


def test_legend_ignores_brush_moves(legend, store):
    controller = BrushController(store)
    before = legend.layout_data
    assert before is not None

    controller.step_up()
    controller.set_axis("z")

    assert legend.layout_data is before


def test_legend_redraws_on_threshold(legend, store):
    before = legend.layout_data

    BrushController(store).set_threshold(50.0)

    assert legend.layout_data is not before
    assert legend.layout_data is not None


def test_window_title_uses_application_name():
    pytest.importorskip("pyvistaqt")
    from fluidbrush import app
    from fluidbrush.view import main_window

    assert main_window.VISIBLE_APP_NAME is app.VISIBLE_APP_NAME
