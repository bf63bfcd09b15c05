"""Child body-composition dynamics (Hall et al. 2013) integrated with fixed-step RK4."""

from __future__ import annotations

# Errors
from childweight.errors import (
    ChildWeightError,
    InvalidInputError,
    InvalidScheduleError,
    NumericalAnomaly,
)

# Intake sources
from childweight.intake import (
    IntakeSchedule,
    LogisticIntake,
    ReferenceIntake,
)

# Integration
from childweight.integrator import (
    day_grid,
    integrate,
    rk4_step,
)

# Model
from childweight.model import (
    EnergyBalanceModel,
    State,
    reference_intake,
)
from childweight.parameters import (
    FEMALE,
    MALE,
    ParameterSet,
    reference_composition,
)

# Population / results
from childweight.population import (
    Population,
    Trajectory,
    TrajectoryPoint,
)

# Runner
from childweight.runner import (
    SimulationOptions,
    SimulationRunner,
    run,
)
from childweight.validation import MAX_AGE_YEARS


__all__ = [
    # Errors
    'ChildWeightError',
    'InvalidInputError',
    'InvalidScheduleError',
    'NumericalAnomaly',
    # Intake
    'IntakeSchedule',
    'LogisticIntake',
    'ReferenceIntake',
    # Model
    'MALE',
    'FEMALE',
    'ParameterSet',
    'reference_composition',
    'reference_intake',
    'EnergyBalanceModel',
    'State',
    # Integration
    'day_grid',
    'integrate',
    'rk4_step',
    # Runner
    'MAX_AGE_YEARS',
    'Population',
    'Trajectory',
    'TrajectoryPoint',
    'SimulationOptions',
    'SimulationRunner',
    'run',
]
