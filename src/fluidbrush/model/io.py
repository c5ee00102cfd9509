"""
Input/Output (CSV)
Reads the particle table exported by the simulation into a ParticleSet.

Expected header (extra columns are ignored):
    Points0, Points1, Points2, velocity0, velocity1, velocity2, concentration
"""
from __future__ import annotations

import csv
import logging
import math
import os
from typing import Iterable, Mapping, Optional

import numpy as np

from fluidbrush.model.particles import ParticleSet

logger = logging.getLogger(__name__)

POSITION_FIELDS = ("Points0", "Points1", "Points2")
VELOCITY_FIELDS = ("velocity0", "velocity1", "velocity2")
CONCENTRATION_FIELD = "concentration"
REQUIRED_FIELDS = POSITION_FIELDS + VELOCITY_FIELDS + (CONCENTRATION_FIELD,)


class DataLoadError(ValueError):
    """The particle file is missing or has no usable header."""


def _parse_float(text: Optional[str]) -> float:
    if text is None:
        raise ValueError("missing value")
    value = float(text.strip().replace(',', '.'))
    if not math.isfinite(value):
        raise ValueError(f"non-finite value {text!r}")
    return value


def parse_rows(rows: Iterable[Mapping[str, str]]) -> tuple[ParticleSet, int]:
    """
    Converts CSV dict rows to a ParticleSet.

    Malformed rows (missing or non-numeric fields, negative concentration)
    are skipped. Particle ids follow the row order of the file, so a skipped
    row leaves a gap instead of renumbering the rest.

    Returns:
        (particles, number of rejected rows)
    """
    ids: list[int] = []
    positions: list[tuple[float, float, float]] = []
    velocities: list[tuple[float, float, float]] = []
    concentration: list[float] = []
    rejected = 0

    for row_index, row in enumerate(rows):
        try:
            p = tuple(_parse_float(row.get(name)) for name in POSITION_FIELDS)
            v = tuple(_parse_float(row.get(name)) for name in VELOCITY_FIELDS)
            c = _parse_float(row.get(CONCENTRATION_FIELD))
            if c < 0:
                raise ValueError(f"negative concentration {c}")
        except (ValueError, AttributeError) as e:
            rejected += 1
            logger.debug(f"Skipping row {row_index}: {e}")
            continue

        ids.append(row_index)
        positions.append(p)
        velocities.append(v)
        concentration.append(c)

    if not ids:
        return ParticleSet.empty(), rejected

    particles = ParticleSet(
        ids=np.array(ids),
        positions=np.array(positions),
        velocities=np.array(velocities),
        concentration=np.array(concentration),
    )
    return particles, rejected


def load_particles(filepath: str) -> ParticleSet:
    """
    Reads a particle CSV file (',' or ';' separated).

    Raises:
        DataLoadError: the file does not exist or lacks a required column.
    """
    logger.info(f"Loading particles from: {filepath}")
    if not os.path.isfile(filepath):
        raise DataLoadError(f"File not found: {filepath}")

    with open(filepath, mode='r', encoding='utf-8-sig', newline='') as f:
        line = f.readline()
        delimiter = ';' if ';' in line else ','
        f.seek(0)
        reader = csv.DictReader(f, delimiter=delimiter)

        header = [name.strip() for name in (reader.fieldnames or [])]
        missing = [name for name in REQUIRED_FIELDS if name not in header]
        if missing:
            raise DataLoadError(f"{os.path.basename(filepath)}: missing column(s) {', '.join(missing)}")
        reader.fieldnames = header

        particles, rejected = parse_rows(reader)

    if rejected:
        logger.warning(f"Rejected {rejected} malformed record(s) in {filepath}.")
    logger.info(f"Loaded {len(particles)} particles.")
    return particles
