"""
Particle Data
=============
Typed containers for the simulation particles.

Classes:
    ParticleRecord: One immutable particle (id, position, velocity, concentration).
    ParticleSet: The whole dataset as parallel numpy arrays (read-only).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class ParticleRecord:
    id: int
    position: tuple[float, float, float]
    velocity: tuple[float, float, float]
    concentration: float


class ParticleSet:
    """
    Column-oriented, read-only particle dataset.

    Positions and velocities are stored in RAW input order
    (Points0, Points1, Points2). The display permutation lives in
    `fluidbrush.model.brushing`.
    """

    def __init__(
        self,
        ids: npt.ArrayLike,
        positions: npt.ArrayLike,
        velocities: npt.ArrayLike,
        concentration: npt.ArrayLike,
    ) -> None:
        self.ids: npt.NDArray[np.int64] = np.array(ids, dtype=np.int64).reshape(-1)
        self.positions: npt.NDArray[np.float64] = np.array(positions, dtype=np.float64).reshape(-1, 3)
        self.velocities: npt.NDArray[np.float64] = np.array(velocities, dtype=np.float64).reshape(-1, 3)
        self.concentration: npt.NDArray[np.float64] = np.array(concentration, dtype=np.float64).reshape(-1)

        n = len(self.ids)
        if not (len(self.positions) == len(self.velocities) == len(self.concentration) == n):
            raise ValueError(
                f"Inconsistent particle arrays: ids={n}, positions={len(self.positions)}, "
                f"velocities={len(self.velocities)}, concentration={len(self.concentration)}"
            )

        for arr in (self.ids, self.positions, self.velocities, self.concentration):
            arr.setflags(write=False)

    @classmethod
    def empty(cls) -> ParticleSet:
        return cls(np.empty(0), np.empty((0, 3)), np.empty((0, 3)), np.empty(0))

    @classmethod
    def from_records(cls, records: Iterable[ParticleRecord]) -> ParticleSet:
        records = list(records)
        if not records:
            return cls.empty()
        return cls(
            ids=[r.id for r in records],
            positions=[r.position for r in records],
            velocities=[r.velocity for r in records],
            concentration=[r.concentration for r in records],
        )

    def subset(self, index: npt.ArrayLike) -> ParticleSet:
        """Returns a new set selected by a boolean mask or an index array (order kept)."""
        idx = np.asarray(index)
        return ParticleSet(
            self.ids[idx],
            self.positions[idx],
            self.velocities[idx],
            self.concentration[idx],
        )

    def record(self, i: int) -> ParticleRecord:
        return ParticleRecord(
            id=int(self.ids[i]),
            position=tuple(float(v) for v in self.positions[i]),
            velocity=tuple(float(v) for v in self.velocities[i]),
            concentration=float(self.concentration[i]),
        )

    def max_concentration(self) -> float:
        if len(self) == 0:
            return 0.0
        return float(np.max(self.concentration))

    def speeds(self) -> npt.NDArray[np.float64]:
        """Magnitude of the full 3D velocity vector per particle."""
        return np.linalg.norm(self.velocities, axis=1)

    def __len__(self) -> int:
        return len(self.ids)

    def __iter__(self) -> Iterator[ParticleRecord]:
        for i in range(len(self)):
            yield self.record(i)

    def __repr__(self) -> str:
        return f"ParticleSet(n={len(self)})"

