import pytest

from fluidbrush.model.bounds import Bounds
from fluidbrush.model.legend import compute_legend, legend_increments


BOUNDS = Bounds(min_x=0, max_x=1, min_y=0, max_y=1, min_z=0, max_z=1, max_c=50.0)


def test_increments_cover_visible_range():
    increments = legend_increments(8.0)
    assert len(increments) == 10
    assert increments[0] == pytest.approx(0.08)
    assert increments[1] - increments[0] == pytest.approx(0.092)
    assert increments[-1] < 1.0


def test_full_threshold_gives_single_entry():
    assert legend_increments(100.0) == [1.0]

    legend = compute_legend(BOUNDS, 100.0, 400, 420)
    assert len(legend.entries) == 1
    assert legend.entries[0].value == pytest.approx(50.0)


def test_layout():
    legend = compute_legend(BOUNDS, 8.0, 400, 420)

    assert legend.x == 50
    assert legend.bar_height == pytest.approx(38.0)
    assert legend.bar_width == pytest.approx(100.0)
    assert legend.font_size == 10.0
    assert [e.y for e in legend.entries][:2] == pytest.approx([20.0, 58.0])


def test_tiny_viewport_is_clamped():
    legend = compute_legend(BOUNDS, 8.0, 30, 10)
    assert legend.bar_width == 1.0
    assert legend.bar_height == 1.0


def test_labels_and_first_color():
    legend = compute_legend(BOUNDS, 8.0, 400, 420)

    assert legend.entries[0].label == "4.00"
    # the first swatch sits at the bottom of the saturated range
    assert legend.entries[0].color == "#c6dbef"


def test_not_ready():
    assert compute_legend(None, 8.0, 400, 420) is None
    assert compute_legend(BOUNDS, 8.0, 0, 420) is None
