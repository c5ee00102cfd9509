"""
Brush Controller
================
The only writer of the InteractionState. Maps discrete UI events (axis
button, arrow key, threshold entry) onto valid state transitions.
"""
from __future__ import annotations

import logging
import math
from typing import Any

from fluidbrush import config
from fluidbrush.model.state import Axis, InteractionState, StateChange, Store

logger = logging.getLogger(__name__)


class BrushController:
    def __init__(self, store: Store, step: float = config.BRUSH_STEP) -> None:
        self.store = store
        self.step = step

    @property
    def state(self) -> InteractionState:
        return self.store.interaction

    def set_axis(self, new_axis: Axis | str) -> StateChange:
        """
        Switch the slicing axis. A coordinate on one axis means nothing on
        another, so a real switch always puts the brush back at 0.
        """
        try:
            axis = Axis.parse(new_axis)
        except ValueError as e:
            logger.warning(str(e))
            return StateChange()

        if axis == self.state.brushed_axis:
            return StateChange()
        return self.store.update_interaction(brushed_axis=axis, brushed_coord=0.0)

    def step_brush(self, direction: float) -> StateChange:
        """Move the brush by `direction` steps. Leaving the data range is allowed."""
        new_coord = self.state.brushed_coord + direction * self.step
        return self.store.update_interaction(brushed_coord=new_coord)

    def set_threshold(self, value: Any) -> StateChange:
        """
        Store a new threshold percentage. Values outside [0, 100] are clamped;
        non-numeric and NaN input is rejected and leaves the state unchanged.
        """
        try:
            threshold = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric threshold {value!r}.")
            return StateChange()

        if math.isnan(threshold):
            logger.warning("Ignoring NaN threshold.")
            return StateChange()

        clamped = min(max(threshold, config.THRESHOLD_MIN), config.THRESHOLD_MAX)
        if clamped != threshold:
            logger.debug(f"Threshold {threshold} clamped to {clamped}.")
        return self.store.update_interaction(threshold=clamped)

    # --- Key bindings ---

    def step_up(self) -> StateChange:
        return self.step_brush(+1)

    def step_down(self) -> StateChange:
        return self.step_brush(-1)
