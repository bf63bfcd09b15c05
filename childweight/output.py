"""Output utilities for simulation results."""

from __future__ import annotations

import csv
from pathlib import Path

from childweight.population import Trajectory


SUMMARY_HEADERS = (
    'index',
    'status',
    'days',
    'ffm_start_kg',
    'ffm_end_kg',
    'fm_start_kg',
    'fm_end_kg',
    'clamped_days',
    'message',
)


def write_trajectory_csv(path: Path, trajectory: Trajectory) -> None:
    """Write one individual's trajectory: day, age, FFM, FM, body weight, clamp flag."""
    headers = ['day', 'age_years', 'ffm_kg', 'fm_kg', 'body_weight_kg', 'clamped']
    weight = trajectory.body_weight_kg

    with path.open('w', newline='', encoding='utf-8') as f:
        w = csv.writer(f)
        w.writerow(headers)
        for i in range(len(trajectory)):
            w.writerow(
                [
                    f'{trajectory.day[i]:.6g}',
                    f'{trajectory.age_years[i]:.6f}',
                    f'{trajectory.ffm_kg[i]:.6f}',
                    f'{trajectory.fm_kg[i]:.6f}',
                    f'{weight[i]:.6f}',
                    int(trajectory.clamped[i]),
                ]
            )


def summary_row(trajectory: Trajectory) -> dict:
    return {
        'index': trajectory.index,
        'status': 'ok' if trajectory.ok else 'anomaly',
        'days': float(trajectory.day[-1]),
        'ffm_start_kg': float(trajectory.ffm_kg[0]),
        'ffm_end_kg': float(trajectory.ffm_kg[-1]),
        'fm_start_kg': float(trajectory.fm_kg[0]),
        'fm_end_kg': float(trajectory.fm_kg[-1]),
        'clamped_days': int(trajectory.clamped.sum()),
        'message': '' if trajectory.ok else str(trajectory.anomaly),
    }


def write_summary_csv(path: Path, trajectories: dict[int, Trajectory]) -> None:
    rows = [summary_row(trajectories[i]) for i in sorted(trajectories)]
    headers = list(SUMMARY_HEADERS)

    with path.open('w', newline='', encoding='utf-8') as f:
        w = csv.DictWriter(f, fieldnames=headers)
        w.writeheader()
        for row in rows:
            w.writerow(
                {k: (f'{v:.6f}' if isinstance(v, float) else v) for k, v in row.items()}
            )
