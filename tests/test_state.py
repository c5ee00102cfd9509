import numpy as np
import pytest

from fluidbrush.model.particles import ParticleRecord, ParticleSet
from fluidbrush.model.state import Axis, Event, InteractionState, Store


def sample_particles() -> ParticleSet:
    return ParticleSet.from_records([
        ParticleRecord(0, (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), 1.0),
        ParticleRecord(1, (1.0, 2.0, 3.0), (0.0, 1.0, 0.0), 3.0),
    ])


def test_defaults():
    state = InteractionState()
    assert state.brushed_axis is Axis.X
    assert state.brushed_coord == 0.0
    assert state.threshold == 8.0


def test_axis_parse():
    assert Axis.parse(" Y ") is Axis.Y
    assert Axis.parse(Axis.Z) is Axis.Z
    with pytest.raises(ValueError):
        Axis.parse("q")


def test_set_dataset_recomputes_bounds_and_notifies():
    store = Store()
    seen = []
    store.dataset_changed.connect(seen.append)

    store.set_dataset(sample_particles(), source="data.csv")

    assert store.bounds is not None
    assert store.bounds.max_c == 3.0
    assert store.source == "data.csv"
    assert seen[0].touches("particles", "bounds")
    assert store.snapshot().is_ready


def test_update_reports_only_real_changes():
    store = Store()
    seen = []
    store.changed.connect(seen.append)

    change = store.update_interaction(brushed_axis=Axis.X, brushed_coord=1.0)
    assert change.fields == frozenset({"brushed_coord"})
    assert len(seen) == 1

    store.update_interaction(brushed_coord=1.0)
    assert len(seen) == 1


def test_unknown_field_raises():
    with pytest.raises(AttributeError):
        Store().update_interaction(zoom=2.0)


def test_failing_handler_does_not_block_others():
    event = Event("test")
    received = []

    def broken(_):
        raise RuntimeError("boom")

    event.connect(broken)
    event.connect(received.append)
    event.emit("payload")

    assert received == ["payload"]


def test_disconnect():
    event = Event("test")
    received = []
    event.connect(received.append)
    event.connect(received.append)
    assert len(event) == 1

    event.disconnect(received.append)
    event.disconnect(received.append)
    event.emit(1)
    assert received == []


def test_reset_restores_defaults():
    store = Store()
    store.set_dataset(sample_particles())
    store.update_interaction(brushed_axis=Axis.Z, threshold=50.0)

    store.reset()

    assert store.particles is None
    assert store.bounds is None
    assert store.interaction == InteractionState()
    assert not store.snapshot().is_ready


def test_particle_set_is_read_only():
    particles = sample_particles()
    with pytest.raises(ValueError):
        particles.positions[0, 0] = 5.0


def test_particle_set_does_not_freeze_caller_arrays():
    positions = np.zeros((1, 3))
    ParticleSet([0], positions, np.zeros((1, 3)), [1.0])
    positions[0, 0] = 1.0


def test_particle_set_round_trips_records():
    particles = sample_particles()
    records = list(particles)
    assert records[1].position == (1.0, 2.0, 3.0)
    assert records[1].id == 1


def test_inconsistent_arrays_rejected():
    with pytest.raises(ValueError):
        ParticleSet([0, 1], np.zeros((1, 3)), np.zeros((2, 3)), [1.0, 2.0])
