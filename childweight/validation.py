"""Input checks run before any integration (all-or-nothing for the batch)."""

from __future__ import annotations

import math

import numpy as np

from childweight.errors import InvalidInputError
from childweight.intake import IntakeSchedule
from childweight.parameters import FEMALE, MALE
from childweight.population import Population


MIN_AGE_YEARS = 0.0
MAX_AGE_YEARS = 18.0


def _first(mask: np.ndarray) -> int | None:
    idx = np.flatnonzero(mask)
    return int(idx[0]) if idx.size else None


def _require(mask_bad: np.ndarray, field: str, message: str) -> None:
    i = _first(mask_bad)
    if i is not None:
        raise InvalidInputError(field, message, index=i)


def validate_population(population: Population) -> None:
    n = population.age.size
    for name in ('sex', 'ffm', 'fm'):
        size = getattr(population, name).size
        if size != n:
            raise InvalidInputError(
                'population', f'{name} has {size} entries but age has {n}.'
            )
    if n == 0:
        raise InvalidInputError('population', 'Population is empty.')

    age = population.age
    _require(~np.isfinite(age), 'age', 'must be finite.')
    _require(age < MIN_AGE_YEARS, 'age', f'must be >= {MIN_AGE_YEARS:g} years.')
    _require(age > MAX_AGE_YEARS, 'age', f'must be <= {MAX_AGE_YEARS:g} years (child model).')

    _require(
        (population.sex != MALE) & (population.sex != FEMALE),
        'sex',
        f'must be {MALE} (male) or {FEMALE} (female).',
    )

    _require(~np.isfinite(population.ffm), 'ffm', 'must be finite.')
    _require(population.ffm <= 0.0, 'ffm', 'fat-free mass must be > 0 kg.')
    _require(~np.isfinite(population.fm), 'fm', 'must be finite.')
    _require(population.fm < 0.0, 'fm', 'fat mass must be >= 0 kg.')


def validate_days(days: float) -> None:
    try:
        d = float(days)
    except (TypeError, ValueError) as e:
        raise InvalidInputError('days', f'must be a number, got {days!r}.') from e
    if not math.isfinite(d):
        raise InvalidInputError('days', 'must be finite.')
    if d < 0.0:
        raise InvalidInputError('days', 'must be >= 0.')


def _sample_days(days: float) -> np.ndarray:
    # Whole and half days: where RK4 evaluates the intake.
    end = max(float(days), 0.0)
    grid = np.arange(0.0, math.floor(end) + 0.5, 0.5)
    return np.append(grid[grid <= end], end)


def validate_intake(intake, n_individuals: int, days: float = 0.0) -> None:
    """
    Tabulated intake is checked entry by entry. Curve intakes (logistic,
    reference) are sampled over the run, as individuals x sampled days.
    """
    if intake.n_individuals != n_individuals:
        raise InvalidInputError(
            'intake',
            f'{intake.n_individuals} intake rows for {n_individuals} individuals.',
        )
    if isinstance(intake, IntakeSchedule):
        m = intake.matrix
    else:
        with np.errstate(invalid='ignore', over='ignore', divide='ignore'):
            m = np.column_stack([intake.at(d) for d in _sample_days(days)])
    bad_rows = ~np.all(np.isfinite(m), axis=1)
    _require(bad_rows, 'intake', 'energy intake must be finite.')
    _require(np.any(m < 0.0, axis=1), 'intake', 'energy intake must be >= 0 kcal/day.')
