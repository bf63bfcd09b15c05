from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from childweight.errors import NumericalAnomaly
from childweight.model import EnergyBalanceModel, State


STEP_DAYS = 1.0
RK4_WEIGHTS = (1.0 / 6.0, 2.0 / 6.0, 2.0 / 6.0, 1.0 / 6.0)


@dataclass
class IntegrationResult:
    day: np.ndarray  # shape (T,)
    ffm: np.ndarray  # shape (T, N)
    fm: np.ndarray  # shape (T, N)
    clamped: np.ndarray  # shape (T, N), compartment hit zero during the step ending on that row
    last_valid: np.ndarray  # shape (N,), last row with a finite state
    anomalies: list[NumericalAnomaly]  # indices local to this integration


def day_grid(days: float) -> np.ndarray:
    """
    Recorded days: 0, 1, ..., floor(days), plus `days` itself when fractional
    (the last step is then a partial step of days - floor(days)).
    Negative days record only the initial state.
    """
    days = float(days)
    if not math.isfinite(days):
        raise ValueError(f'days must be finite, got {days!r}.')
    if days <= 0.0:
        return np.zeros(1, dtype=float)
    whole = math.floor(days)
    grid = np.arange(whole + 1, dtype=float) * STEP_DAYS
    if days > whole:
        grid = np.append(grid, days)
    return grid


def rk4_stages(
    model: EnergyBalanceModel,
    day: float,
    state: State,
    h: float = STEP_DAYS,
) -> tuple[list[tuple[float, State, tuple[np.ndarray, np.ndarray]]], np.ndarray]:
    """
    The four RK4 evaluations for one step:
      k1 = f(t, S)
      k2 = f(t + h/2, S + h/2 k1)
      k3 = f(t + h/2, S + h/2 k2)
      k4 = f(t + h, S + h k3)

    Stage states are clamped at zero before evaluation.
    Returns ([(stage_day, stage_state, (dFFM, dFM)), ...], clamped_mask).
    """
    k1 = model.derivative(day, state)

    s2, c2 = state.advanced(0.5 * h, *k1).clamp_nonnegative()
    k2 = model.derivative(day + 0.5 * h, s2)

    s3, c3 = state.advanced(0.5 * h, *k2).clamp_nonnegative()
    k3 = model.derivative(day + 0.5 * h, s3)

    s4, c4 = state.advanced(h, *k3).clamp_nonnegative()
    k4 = model.derivative(day + h, s4)

    stages = [
        (day, state, k1),
        (day + 0.5 * h, s2, k2),
        (day + 0.5 * h, s3, k3),
        (day + h, s4, k4),
    ]
    return stages, c2 | c3 | c4


def rk4_step(
    model: EnergyBalanceModel,
    day: float,
    state: State,
    h: float = STEP_DAYS,
) -> tuple[State, np.ndarray]:
    """Advance `state` from `day` to `day + h`. Returns (next_state, clamped_mask)."""
    stages, clamped = rk4_stages(model, day, state, h)
    (_, _, k1), (_, _, k2), (_, _, k3), (_, _, k4) = stages

    ffm = state.ffm + (h / 6.0) * (k1[0] + 2.0 * k2[0] + 2.0 * k3[0] + k4[0])
    fm = state.fm + (h / 6.0) * (k1[1] + 2.0 * k2[1] + 2.0 * k3[1] + k4[1])

    nxt, clamped_end = State(ffm=ffm, fm=fm).clamp_nonnegative()
    return nxt, clamped | clamped_end


def integrate(model: EnergyBalanceModel, state0: State, days: float) -> IntegrationResult:
    """
    Fixed-step RK4 over `days`.

    Individuals are integrated together but never mix: an individual whose
    state turns non-finite is frozen at its last finite state, reported in
    `anomalies`, and the others carry on.
    """
    grid = day_grid(days)
    n = state0.size()
    t_count = grid.size

    ffm = np.full((t_count, n), np.nan, dtype=float)
    fm = np.full((t_count, n), np.nan, dtype=float)
    clamped = np.zeros((t_count, n), dtype=bool)
    last_valid = np.zeros(n, dtype=int)

    ffm[0] = state0.ffm
    fm[0] = state0.fm

    alive = state0.finite()
    anomalies = [NumericalAnomaly(int(i), 0.0, 'non-finite initial state') for i in np.flatnonzero(~alive)]

    state = state0.copy()
    for k in range(t_count - 1):
        if not np.any(alive):
            break

        h = float(grid[k + 1] - grid[k])
        with np.errstate(invalid='ignore', over='ignore', divide='ignore'):
            nxt, step_clamped = rk4_step(model, float(grid[k]), state, h)

        ok = nxt.finite()
        for i in np.flatnonzero(alive & ~ok):
            anomalies.append(NumericalAnomaly(int(i), float(grid[k + 1])))
        alive = alive & ok

        state = State(
            ffm=np.where(alive, nxt.ffm, state.ffm),
            fm=np.where(alive, nxt.fm, state.fm),
        )
        ffm[k + 1, alive] = state.ffm[alive]
        fm[k + 1, alive] = state.fm[alive]
        clamped[k + 1] = step_clamped & alive
        last_valid[alive] = k + 1

    return IntegrationResult(
        day=grid,
        ffm=ffm,
        fm=fm,
        clamped=clamped,
        last_valid=last_valid,
        anomalies=anomalies,
    )
