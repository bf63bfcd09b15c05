from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt

from childweight.population import Trajectory


def plot_trajectories(
    trajectories: dict[int, Trajectory],
    out_path: Path,
    max_individuals: int = 10,
) -> None:
    """Plot FFM, FM and body weight vs day for the first `max_individuals` individuals."""
    indices = sorted(trajectories)[:max_individuals]

    fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(12, 10), sharex=True)

    for i in indices:
        tr = trajectories[i]
        ls = '-' if tr.ok else ':'
        ax1.plot(tr.day, tr.ffm_kg, linestyle=ls, linewidth=1.2, label=f'#{i}')
        ax2.plot(tr.day, tr.fm_kg, linestyle=ls, linewidth=1.2, label=f'#{i}')
        ax3.plot(tr.day, tr.body_weight_kg, linestyle=ls, linewidth=1.2, label=f'#{i}')

        clamped_days = tr.day[tr.clamped]
        if clamped_days.size:
            ax3.scatter(clamped_days, tr.body_weight_kg[tr.clamped], s=8, color='tab:red')

    ax1.set_ylabel('FFM (kg)')
    ax1.set_title('Body Composition vs Time')
    ax1.grid(True, alpha=0.3)
    ax1.legend(ncol=5, fontsize=8)

    ax2.set_ylabel('FM (kg)')
    ax2.grid(True, alpha=0.3)

    ax3.set_xlabel('Day')
    ax3.set_ylabel('Body weight (kg)')
    ax3.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(out_path, dpi=160)
    plt.close()


def plot_energy_balance(
    day,
    intake_kcal,
    expenditure_kcal,
    out_path: Path,
    title: str = 'Energy Intake vs Expenditure',
) -> None:
    """Intake and expenditure (kcal/day) for one individual, with the net balance below."""
    fig, (ax1, ax2) = plt.subplots(
        2, 1, figsize=(12, 8), sharex=True, gridspec_kw={'height_ratios': [3, 1]}
    )

    ax1.plot(day, intake_kcal, label='Intake', linewidth=1.5)
    ax1.plot(day, expenditure_kcal, label='Expenditure', linewidth=1.5)
    ax1.set_ylabel('kcal/day')
    ax1.set_title(title)
    ax1.grid(True, alpha=0.3)
    ax1.legend(fontsize=8)

    ax2.plot(day, [ei - ee for ei, ee in zip(intake_kcal, expenditure_kcal)], color='tab:red', linewidth=1.2)
    ax2.axhline(y=0, color='gray', linewidth=0.8, linestyle='--')
    ax2.set_xlabel('Day')
    ax2.set_ylabel('Net (kcal/day)')
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(out_path, dpi=160)
    plt.close()
