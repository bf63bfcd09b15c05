from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from childweight.errors import NumericalAnomaly
from childweight.model import State
from childweight.parameters import DAYS_PER_YEAR


@dataclass
class Population:
    """Independent individuals; entry i of every array belongs to individual i."""

    age: np.ndarray  # years
    sex: np.ndarray  # 0 = male, 1 = female
    ffm: np.ndarray  # kg
    fm: np.ndarray  # kg

    @classmethod
    def from_arrays(cls, age, sex, ffm, fm) -> Population:
        return cls(
            age=np.atleast_1d(np.asarray(age, dtype=float)),
            sex=np.atleast_1d(np.asarray(sex, dtype=float)),
            ffm=np.atleast_1d(np.asarray(ffm, dtype=float)),
            fm=np.atleast_1d(np.asarray(fm, dtype=float)),
        )

    def __len__(self) -> int:
        return int(self.age.size)

    def initial_state(self) -> State:
        return State.from_arrays(self.ffm, self.fm)

    def subset(self, indices) -> Population:
        idx = np.asarray(indices, dtype=int)
        return Population(age=self.age[idx], sex=self.sex[idx], ffm=self.ffm[idx], fm=self.fm[idx])


class TrajectoryPoint(NamedTuple):
    day: float
    ffm_kg: float
    fm_kg: float


def _frozen(a: np.ndarray) -> np.ndarray:
    a = np.array(a, copy=True)
    a.setflags(write=False)
    return a


@dataclass(frozen=True)
class Trajectory:
    """
    One individual's simulated body composition, one row per recorded day.

    Rows stop early when `anomaly` is set: the last row is then the last
    finite state.
    """

    index: int
    day: np.ndarray
    age_years: np.ndarray
    ffm_kg: np.ndarray
    fm_kg: np.ndarray
    clamped: np.ndarray
    anomaly: NumericalAnomaly | None = None

    @classmethod
    def build(
        cls,
        index: int,
        day: np.ndarray,
        age0: float,
        ffm_kg: np.ndarray,
        fm_kg: np.ndarray,
        clamped: np.ndarray,
        anomaly: NumericalAnomaly | None = None,
    ) -> Trajectory:
        day = np.asarray(day, dtype=float)
        return cls(
            index=int(index),
            day=_frozen(day),
            age_years=_frozen(float(age0) + day / DAYS_PER_YEAR),
            ffm_kg=_frozen(ffm_kg),
            fm_kg=_frozen(fm_kg),
            clamped=_frozen(np.asarray(clamped, dtype=bool)),
            anomaly=anomaly,
        )

    def __len__(self) -> int:
        return int(self.day.size)

    @property
    def ok(self) -> bool:
        return self.anomaly is None

    @property
    def body_weight_kg(self) -> np.ndarray:
        return self.ffm_kg + self.fm_kg

    def as_array(self) -> np.ndarray:
        """Shape (rows, 2): columns FFM, FM."""
        return np.column_stack([self.ffm_kg, self.fm_kg])

    def points(self) -> list[TrajectoryPoint]:
        return [
            TrajectoryPoint(float(d), float(f), float(m))
            for d, f, m in zip(self.day, self.ffm_kg, self.fm_kg)
        ]
