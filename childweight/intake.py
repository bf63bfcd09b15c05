"""Energy-intake sources: everything here answers `at(day) -> kcal/day per individual`."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from childweight.errors import InvalidScheduleError
from childweight.model import reference_intake
from childweight.parameters import DAYS_PER_YEAR, ParameterSet


class IntakeSchedule:
    """
    Tabulated intake, one row per individual, one column per day.

    Column j is the intake on day j. Between columns the intake is linearly
    interpolated; past the last column the last value is held.
    """

    def __init__(self, matrix):
        try:
            m = np.asarray(matrix, dtype=float)
        except ValueError as e:
            raise InvalidScheduleError(f'Intake must be a rectangular numeric matrix: {e}') from e
        if m.ndim == 1:
            m = m[None, :]
        if m.ndim != 2:
            raise InvalidScheduleError(f'Intake must be 1-D or 2-D, got shape {m.shape}.')
        if m.shape[0] == 0 or m.shape[1] == 0:
            raise InvalidScheduleError(f'Intake series is empty (shape {m.shape}).')
        self.matrix = m

    @property
    def n_individuals(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def n_days(self) -> int:
        return int(self.matrix.shape[1])

    def at(self, day: float) -> np.ndarray:
        last = self.n_days - 1
        x = min(max(float(day), 0.0), float(last))
        i0 = int(math.floor(x))
        i1 = min(i0 + 1, last)
        w = x - i0
        if w == 0.0:
            return self.matrix[:, i0].copy()
        return (1.0 - w) * self.matrix[:, i0] + w * self.matrix[:, i1]

    def subset(self, indices) -> IntakeSchedule:
        return IntakeSchedule(self.matrix[np.asarray(indices, dtype=int)])


@dataclass
class LogisticIntake:
    """
    Generalized logistic (Richards) intake curve over age t in years:
      EI(t) = A + (K - A) / (C + Q * exp(-B * t))^(1/nu)
    where t = age0 + day / 365.

    Each curve parameter is a scalar or an array with one entry per individual.
    `age0` (years at day 0) is usually left out and filled in from the
    population by `for_population`, which also broadcasts scalar parameters.
    """

    k: np.ndarray
    q: np.ndarray
    b: np.ndarray
    a: np.ndarray
    nu: np.ndarray
    c: np.ndarray
    age0: np.ndarray | None = None

    def __post_init__(self):
        values = [np.atleast_1d(np.asarray(v, dtype=float)) for v in (self.k, self.q, self.b, self.a, self.nu, self.c)]
        if self.age0 is not None:
            values.append(np.atleast_1d(np.asarray(self.age0, dtype=float)))
        try:
            fields = [np.array(f) for f in np.broadcast_arrays(*values)]
        except ValueError as e:
            raise InvalidScheduleError(f'Logistic intake parameters do not match in length: {e}') from e
        self.k, self.q, self.b, self.a, self.nu, self.c = fields[:6]
        if self.age0 is not None:
            self.age0 = fields[6]

    @property
    def n_individuals(self) -> int:
        return int(self.k.size)

    def for_population(self, age0) -> LogisticIntake:
        """Same curve parameters, one entry per individual of the given starting ages."""
        return LogisticIntake(k=self.k, q=self.q, b=self.b, a=self.a, nu=self.nu, c=self.c, age0=age0)

    def at(self, day: float) -> np.ndarray:
        if self.age0 is None:
            raise InvalidScheduleError('Logistic intake has no starting ages; use for_population(age0).')
        t = self.age0 + float(day) / DAYS_PER_YEAR
        return self.a + (self.k - self.a) / (self.c + self.q * np.exp(-self.b * t)) ** (1.0 / self.nu)

    def subset(self, indices) -> LogisticIntake:
        idx = np.asarray(indices, dtype=int)
        return LogisticIntake(
            k=self.k[idx],
            q=self.q[idx],
            b=self.b[idx],
            a=self.a[idx],
            nu=self.nu[idx],
            c=self.c[idx],
            age0=None if self.age0 is None else self.age0[idx],
        )


class ReferenceIntake:
    """Intake of a reference child of the same sex and starting age, tracking age as days pass."""

    def __init__(self, params: ParameterSet):
        self.params = params

    @classmethod
    def for_children(cls, age0, sex) -> ReferenceIntake:
        return cls(ParameterSet.from_age_sex(age0, sex))

    @property
    def n_individuals(self) -> int:
        return self.params.size()

    def at(self, day: float) -> np.ndarray:
        return reference_intake(self.params, self.params.age(day))

    def subset(self, indices) -> ReferenceIntake:
        return ReferenceIntake(self.params.subset(indices))


def as_intake(intake, age0=None) -> IntakeSchedule | LogisticIntake | ReferenceIntake:
    """
    Wrap raw arrays into an IntakeSchedule; pass intake objects through.

    A LogisticIntake without starting ages is bound to `age0` when given.
    """
    if isinstance(intake, LogisticIntake):
        if intake.age0 is None and age0 is not None:
            return intake.for_population(age0)
        return intake
    if isinstance(intake, (IntakeSchedule, ReferenceIntake)):
        return intake
    return IntakeSchedule(intake)
