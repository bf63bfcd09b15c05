from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from childweight.parameters import (
    DAYS_PER_YEAR,
    INTAKE_ADAPTATION,
    RESTING_FFM,
    RESTING_FM,
    RHO_FFM_INTERCEPT,
    RHO_FFM_SLOPE,
    RHO_FM,
    SYNTHESIS_FFM,
    SYNTHESIS_FM,
    ParameterSet,
    partition_fraction,
    rho_ffm,
)


@dataclass
class State:
    ffm: np.ndarray  # shape (N,), kg
    fm: np.ndarray  # shape (N,), kg

    @classmethod
    def from_arrays(cls, ffm, fm) -> State:
        return cls(
            ffm=np.atleast_1d(np.asarray(ffm, dtype=float)).copy(),
            fm=np.atleast_1d(np.asarray(fm, dtype=float)).copy(),
        )

    def size(self) -> int:
        return int(self.ffm.size)

    def copy(self) -> State:
        return State(ffm=self.ffm.copy(), fm=self.fm.copy())

    def finite(self) -> np.ndarray:
        return np.isfinite(self.ffm) & np.isfinite(self.fm)

    def clamp_nonnegative(self) -> tuple[State, np.ndarray]:
        """Return (state with negative compartments set to 0, mask of individuals that were clamped)."""
        neg = (self.ffm < 0.0) | (self.fm < 0.0)
        if not np.any(neg):
            return self, neg
        return State(ffm=np.maximum(self.ffm, 0.0), fm=np.maximum(self.fm, 0.0)), neg

    def advanced(self, h: float, dffm: np.ndarray, dfm: np.ndarray) -> State:
        return State(ffm=self.ffm + h * dffm, fm=self.fm + h * dfm)


def reference_intake(params: ParameterSet, age_years: np.ndarray) -> np.ndarray:
    """
    Intake (kcal/day) that keeps a reference child on its reference growth curve:
      EIref = EB + K + (22.4 + delta) FFMref + (4.5 + delta) FMref
              + 230/rhoFFM (p EB + g) + 180/rhoFM ((1 - p) EB - g)
    with rhoFFM and p evaluated at the reference composition.
    """
    t = np.asarray(age_years, dtype=float)
    eb = params.reference_energy_balance(t)
    g = params.growth(t)
    delta = params.delta(t)
    ffm_ref = params.reference_ffm(t)
    fm_ref = params.reference_fm(t)
    rho = rho_ffm(ffm_ref)
    p = partition_fraction(ffm_ref, fm_ref)
    return (
        eb
        + params.k
        + (RESTING_FFM + delta) * ffm_ref
        + (RESTING_FM + delta) * fm_ref
        + SYNTHESIS_FFM / rho * (p * eb + g)
        + SYNTHESIS_FM / RHO_FM * ((1.0 - p) * eb - g)
    )


@dataclass
class EnergyBalanceModel:
    """
    Right-hand side of the child body-composition ODE (Hall et al. 2013).

    Time is the simulated day d (0 = start); the age used by the age-dependent
    terms is age0 + d / 365. Rates are kg/day.

      dFFM/dt = (p (EI - EE) + g) / rhoFFM
      dFM/dt  = ((1 - p)(EI - EE) - g) / rhoFM

    so rhoFFM dFFM/dt + rhoFM dFM/dt = EI - EE exactly.
    """

    params: ParameterSet
    intake: object  # IntakeSchedule / LogisticIntake / ReferenceIntake, anything with at(day)
    age0: np.ndarray | None = None  # shape (N,), years at day 0; defaults to params.age0

    def __post_init__(self):
        if self.age0 is None:
            self.age0 = self.params.age0
        self.age0 = np.atleast_1d(np.asarray(self.age0, dtype=float))

    def size(self) -> int:
        return int(self.age0.size)

    def age(self, day: float) -> np.ndarray:
        return self.age0 + float(day) / DAYS_PER_YEAR

    def intake_at(self, day: float) -> np.ndarray:
        return np.asarray(self.intake.at(day), dtype=float)

    def _balance_terms(self, day: float, state: State) -> tuple[np.ndarray, ...]:
        t = self.age(day)
        ei = self.intake_at(day)
        delta = self.params.delta(t)
        g = self.params.growth(t)
        rho = rho_ffm(state.ffm)
        p = partition_fraction(state.ffm, state.fm)

        delta_i = ei - reference_intake(self.params, t)

        # Share of each kcal of imbalance spent on tissue synthesis.
        synth = SYNTHESIS_FFM * p / rho + SYNTHESIS_FM * (1.0 - p) / RHO_FM

        # EE contains 230 dFFM/dt + 180 dFM/dt, which themselves depend on EE;
        # solved for EE in closed form.
        ee = (
            self.params.k
            + (RESTING_FFM + delta) * state.ffm
            + (RESTING_FM + delta) * state.fm
            + INTAKE_ADAPTATION * delta_i
            + synth * ei
            + g * (SYNTHESIS_FFM / rho - SYNTHESIS_FM / RHO_FM)
        ) / (1.0 + synth)
        return ei, ee, p, g, rho

    def expenditure(self, day: float, state: State) -> np.ndarray:
        """Total energy expenditure EE (kcal/day)."""
        _, ee, _, _, _ = self._balance_terms(day, state)
        return ee

    def energy_balance(self, day: float, state: State) -> np.ndarray:
        """Net energy EI - EE (kcal/day)."""
        ei, ee, _, _, _ = self._balance_terms(day, state)
        return ei - ee

    def derivative(self, day: float, state: State) -> tuple[np.ndarray, np.ndarray]:
        ei, ee, p, g, rho = self._balance_terms(day, state)
        net = ei - ee
        dffm = (p * net + g) / rho
        dfm = ((1.0 - p) * net - g) / RHO_FM
        return dffm, dfm

    def subset(self, indices) -> EnergyBalanceModel:
        idx = np.asarray(indices, dtype=int)
        return EnergyBalanceModel(
            params=self.params.subset(idx),
            intake=self.intake.subset(idx),
            age0=self.age0[idx],
        )


def stored_energy(state: State) -> np.ndarray:
    """
    Energy content (kcal) of the tissue, up to a constant:
      E = integral of (rhoFFM dFFM + rhoFM dFM) = 4.3/2 FFM^2 + 837 FFM + 9400 FM
    so dE/dt = rhoFFM dFFM/dt + rhoFM dFM/dt = EI - EE.
    """
    return 0.5 * RHO_FFM_SLOPE * state.ffm**2 + RHO_FFM_INTERCEPT * state.ffm + RHO_FM * state.fm
