"""
Application State (Data Model)
==============================
This module defines the central state store for the running application.

Why is this file needed?
------------------------
1. State Management: It holds the loaded particles, their bounds and the
   brushing state in one place.
2. Linking: Views register handlers on the store's events and redraw when
   notified, so the 3D view, the cross-section and the legend never drift
   apart.
3. Decoupling: Views read from this object; only the BrushController (and the
   loader, for the dataset) write to it. It does not import Qt, so it can be
   driven from tests or a different frontend.

Classes:
    Axis: The brushable display axes.
    InteractionState: Frozen snapshot of the brush (axis, coordinate, threshold).
    StateChange: Payload of a notification, naming the fields that changed.
    ViewState: Consistent snapshot handed to the views.
    Event: Minimal publish/subscribe hook with a Qt-signal-like API.
    Store: The central container.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import logging
from typing import Any, Callable, Optional

from fluidbrush import config
from fluidbrush.model.bounds import Bounds, compute_bounds
from fluidbrush.model.particles import ParticleSet

logger = logging.getLogger(__name__)


class Axis(str, Enum):
    """Display axes the slab can be moved along."""
    X = "x"
    Y = "y"
    Z = "z"

    @classmethod
    def parse(cls, value: Axis | str) -> Axis:
        if isinstance(value, Axis):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown axis: {value!r} (expected one of x, y, z)") from None


@dataclass(frozen=True)
class InteractionState:
    brushed_axis: Axis = Axis.X
    brushed_coord: float = 0.0
    threshold: float = config.DEFAULT_THRESHOLD


INTERACTION_FIELDS = frozenset({"brushed_axis", "brushed_coord", "threshold"})
DATASET_FIELDS = frozenset({"particles", "bounds"})


@dataclass(frozen=True)
class StateChange:
    """Names of the fields that changed in one notification."""
    fields: frozenset[str] = field(default_factory=frozenset)

    def touches(self, *names: str) -> bool:
        return any(name in self.fields for name in names)


@dataclass(frozen=True)
class ViewState:
    particles: Optional[ParticleSet]
    bounds: Optional[Bounds]
    interaction: InteractionState

    @property
    def is_ready(self) -> bool:
        """Views draw nothing until a dataset and its bounds exist."""
        return self.particles is not None and self.bounds is not None


class Event:
    """
    A tiny observer list with the same shape as a Qt Signal
    (connect / disconnect / emit).

    A failing handler is logged and does not stop the other handlers.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._handlers: list[Callable[..., Any]] = []

    def connect(self, handler: Callable[..., Any]) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def disconnect(self, handler: Callable[..., Any]) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            logger.debug(f"Handler {handler!r} was not connected to '{self.name}'.")

    def emit(self, *args: Any) -> None:
        # Copy so handlers may disconnect themselves while being notified
        for handler in list(self._handlers):
            try:
                handler(*args)
            except Exception:
                logger.exception(f"Handler {handler!r} failed while handling '{self.name}'.")

    def __len__(self) -> int:
        return len(self._handlers)


class Store:
    """
    Central state store. Pass this instance to the controllers and views.

    Events:
        dataset_changed(StateChange): a new dataset was loaded (bounds recomputed).
        interaction_changed(StateChange): brush axis, coordinate or threshold changed.
        changed(StateChange): any of the above; most views only need this one.
    """

    def __init__(self, interaction: Optional[InteractionState] = None) -> None:
        self.dataset_changed = Event("dataset_changed")
        self.interaction_changed = Event("interaction_changed")
        self.changed = Event("changed")

        self._particles: Optional[ParticleSet] = None
        self._bounds: Optional[Bounds] = None
        self._interaction: InteractionState = interaction or InteractionState()
        self._source: Optional[str] = None

    # --- Read access ---

    @property
    def particles(self) -> Optional[ParticleSet]:
        return self._particles

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._bounds

    @property
    def interaction(self) -> InteractionState:
        return self._interaction

    @property
    def source(self) -> Optional[str]:
        """Where the current dataset came from (file path), if known."""
        return self._source

    def snapshot(self) -> ViewState:
        return ViewState(self._particles, self._bounds, self._interaction)

    # --- Writers ---

    def set_dataset(self, particles: Optional[ParticleSet], source: Optional[str] = None) -> None:
        """Replace the dataset; bounds are invalidated and recomputed here, exactly once."""
        self._particles = particles
        self._bounds = compute_bounds(particles)
        self._source = source
        n = len(particles) if particles is not None else 0
        logger.info(f"Dataset set ({n} particles, source={source}).")

        change = StateChange(DATASET_FIELDS)
        self.dataset_changed.emit(change)
        self.changed.emit(change)

    def update_interaction(self, **values: Any) -> StateChange:
        """
        Apply new InteractionState field values. Only fields whose value really
        changes are reported; nothing is emitted when nothing changed.
        """
        unknown = set(values) - INTERACTION_FIELDS
        if unknown:
            raise AttributeError(f"Unknown interaction fields: {sorted(unknown)}")

        diff = {k: v for k, v in values.items() if getattr(self._interaction, k) != v}
        change = StateChange(frozenset(diff))
        if not diff:
            return change

        self._interaction = replace(self._interaction, **diff)
        logger.debug(f"Interaction changed {sorted(diff)} -> {self._interaction}")

        self.interaction_changed.emit(change)
        self.changed.emit(change)
        return change

    def reset(self) -> None:
        """Clear the dataset and restore the default brush."""
        self._interaction = InteractionState()
        self.set_dataset(None)
        change = StateChange(INTERACTION_FIELDS)
        self.interaction_changed.emit(change)
        self.changed.emit(change)
        logger.info("Application state has been reset.")
