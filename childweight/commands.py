"""Driver commands: config -> CSV inputs -> simulation -> CSV/PNG outputs."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from childweight.intake import IntakeSchedule
from childweight.io import read_intake_csv, read_population_csv
from childweight.model import EnergyBalanceModel, State
from childweight.output import write_summary_csv, write_trajectory_csv
from childweight.parameters import ParameterSet
from childweight.plotting import plot_energy_balance, plot_trajectories
from childweight.population import Population, Trajectory
from childweight.runner import SimulationOptions, SimulationRunner
from childweight.settings import (
    read_config,
    req_bool,
    req_float,
    req_int,
    req_str,
    resolve_path,
)


def energy_series(
    population: Population,
    intake: IntakeSchedule,
    trajectory: Trajectory,
) -> tuple[np.ndarray, np.ndarray]:
    """Intake and expenditure (kcal/day) along one simulated trajectory."""
    i = trajectory.index
    model = EnergyBalanceModel(
        params=ParameterSet.from_age_sex(population.age[[i]], population.sex[[i]]),
        intake=intake.subset([i]),
    )
    ei = np.zeros(len(trajectory), dtype=float)
    ee = np.zeros(len(trajectory), dtype=float)
    for k, day in enumerate(trajectory.day):
        s = State.from_arrays(trajectory.ffm_kg[k], trajectory.fm_kg[k])
        ei[k] = model.intake_at(day)[0]
        ee[k] = model.expenditure(day, s)[0]
    return ei, ee


def run_simulate(config_path: Path | None = None, echo=print) -> list[dict]:
    """Run the configured population and write per-individual CSVs, a summary and plots."""
    config = read_config(config_path)
    base = config_path.parent if config_path is not None else None

    def path_for(keys: list[str]) -> Path:
        p = req_str(config, keys)
        return resolve_path(p, base) if base is not None else resolve_path(p)

    population = read_population_csv(path_for(['inputs', 'population_csv']))
    intake = IntakeSchedule(read_intake_csv(path_for(['inputs', 'intake_csv'])))

    days = req_float(config, ['simulation', 'days'])
    options = SimulationOptions(
        validate=req_bool(config, ['simulation', 'validate']),
        workers=req_int(config, ['simulation', 'workers']),
        chunk_size=req_int(config, ['simulation', 'chunk_size']),
    )

    out_dir = path_for(['output', 'dir'])
    out_dir.mkdir(parents=True, exist_ok=True)

    echo(f'Individuals: {len(population)}, intake columns: {intake.n_days}, days: {days:g}')
    echo(f'Validation: {"enabled" if options.validate else "disabled"}, workers: {options.workers}')

    trajectories = SimulationRunner(options).run(population, intake, days)

    summary: list[dict] = []
    for i, tr in trajectories.items():
        write_trajectory_csv(out_dir / f'individual_{i}.csv', tr)
        status = 'ok' if tr.ok else f'ANOMALY ({tr.anomaly})'
        echo(
            f'  #{i:<4d} FFM {tr.ffm_kg[0]:6.2f} -> {tr.ffm_kg[-1]:6.2f} kg, '
            f'FM {tr.fm_kg[0]:6.2f} -> {tr.fm_kg[-1]:6.2f} kg  {status}'
        )
        if tr.clamped.any():
            echo(f'        compartment clamped at zero on {int(tr.clamped.sum())} day(s)')
        summary.append({'index': i, 'ok': tr.ok, 'rows': len(tr)})

    write_summary_csv(out_dir / 'summary.csv', trajectories)

    if req_bool(config, ['plotting', 'enabled']):
        plot_trajectories(
            trajectories,
            out_dir / 'trajectories.png',
            max_individuals=req_int(config, ['plotting', 'max_individuals']),
        )
        first = trajectories[min(trajectories)]
        if first.ok:
            ei, ee = energy_series(population, intake, first)
            plot_energy_balance(
                first.day,
                ei,
                ee,
                out_dir / f'energy_{first.index}.png',
                title=f'Energy Intake vs Expenditure (#{first.index})',
            )

    n_bad = sum(1 for tr in trajectories.values() if not tr.ok)
    if n_bad:
        echo(f'{n_bad} individual(s) stopped on a numerical anomaly; see summary.csv')
    echo(f'\nResults written to {out_dir}/')
    return summary
