from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from childweight.errors import InvalidInputError, InvalidScheduleError
from childweight.intake import as_intake
from childweight.integrator import integrate
from childweight.model import EnergyBalanceModel
from childweight.parameters import ParameterSet
from childweight.population import Population, Trajectory
from childweight.validation import validate_days, validate_intake, validate_population


@dataclass
class SimulationOptions:
    validate: bool = True
    workers: int = 1
    chunk_size: int = 256

    def __post_init__(self):
        if int(self.workers) < 1:
            raise ValueError('workers must be >= 1.')
        if int(self.chunk_size) < 1:
            raise ValueError('chunk_size must be >= 1.')


def _chunks(n: int, chunk_size: int) -> list[np.ndarray]:
    if n <= chunk_size:
        return [np.arange(n)]
    return np.array_split(np.arange(n), math.ceil(n / chunk_size))


class SimulationRunner:
    """
    Validate -> build ParameterSet/intake/model once -> RK4 per chunk of
    individuals -> one Trajectory per individual.

    Chunks are independent; with workers > 1 they run on a thread pool.
    """

    def __init__(self, options: SimulationOptions | None = None):
        self.options = options or SimulationOptions()

    def run(self, population: Population, intake, days: float) -> dict[int, Trajectory]:
        validate = self.options.validate
        if validate:
            validate_population(population)
            validate_days(days)

        try:
            intake = as_intake(intake, population.age)
        except InvalidScheduleError as e:
            if not validate:
                raise
            raise InvalidInputError('intake', str(e)) from e
        if validate:
            validate_intake(intake, len(population), days)

        model = EnergyBalanceModel(
            params=ParameterSet.from_age_sex(population.age, population.sex),
            intake=intake,
        )
        state0 = population.initial_state()

        chunks = _chunks(len(population), int(self.options.chunk_size))
        if len(chunks) == 1:
            return self._run_chunk(model, population, state0, chunks[0], days, whole=True)

        def work(idx: np.ndarray) -> dict[int, Trajectory]:
            return self._run_chunk(model, population, state0, idx, days, whole=False)

        out: dict[int, Trajectory] = {}
        workers = int(self.options.workers)
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                for part in pool.map(work, chunks):
                    out.update(part)
        else:
            for idx in chunks:
                out.update(work(idx))
        return dict(sorted(out.items()))

    @staticmethod
    def _run_chunk(
        model: EnergyBalanceModel,
        population: Population,
        state0,
        idx: np.ndarray,
        days: float,
        *,
        whole: bool,
    ) -> dict[int, Trajectory]:
        if not whole:
            model = model.subset(idx)
            state0 = population.subset(idx).initial_state()

        res = integrate(model, state0, days)
        anomalies = {a.index: a for a in res.anomalies}

        out: dict[int, Trajectory] = {}
        for local, global_i in enumerate(idx):
            global_i = int(global_i)
            anomaly = anomalies.get(local)
            if anomaly is not None:
                anomaly = anomaly.reindexed(global_i)
            end = int(res.last_valid[local]) + 1
            out[global_i] = Trajectory.build(
                index=global_i,
                day=res.day[:end],
                age0=float(population.age[global_i]),
                ffm_kg=res.ffm[:end, local],
                fm_kg=res.fm[:end, local],
                clamped=res.clamped[:end, local],
                anomaly=anomaly,
            )
        return out


def run(
    age,
    sex,
    ffm,
    fm,
    intake,
    days: float,
    validate: bool = True,
    *,
    workers: int = 1,
    chunk_size: int = 256,
) -> dict[int, Trajectory]:
    """
    Simulate every individual for `days` days.

    age, sex, ffm, fm: one entry per individual (sex 0 = male, 1 = female)
    intake: (N, C) kcal/day matrix, one column per day (or an intake object)

    Returns {individual index: Trajectory}. With validate=True bad inputs raise
    InvalidInputError before any integration.
    """
    population = Population.from_arrays(age, sex, ffm, fm)
    options = SimulationOptions(validate=validate, workers=workers, chunk_size=chunk_size)
    return SimulationRunner(options).run(population, intake, days)
