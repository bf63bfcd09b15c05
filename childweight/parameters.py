from __future__ import annotations

from dataclasses import dataclass

import numpy as np


MALE = 0
FEMALE = 1

DAYS_PER_YEAR = 365.0

# Energy densities / costs (kcal per kg unless noted)
RHO_FM = 9.4 * 1000.0
RHO_FFM_SLOPE = 4.3  # kcal/kg per kg FFM
RHO_FFM_INTERCEPT = 837.0
FORBES_C = 10.4
SYNTHESIS_FFM = 230.0
SYNTHESIS_FM = 180.0
RESTING_FFM = 22.4  # kcal/kg/day
RESTING_FM = 4.5  # kcal/kg/day
INTAKE_ADAPTATION = 0.24

# Physical activity transition (sex independent)
DELTA_MIN = 10.0
DELTA_P = 12.0
DELTA_H = 10.0


# (male, female) pairs, Hall et al. (2013) child model.
_SEX_COEFFS: dict[str, tuple[float, float]] = {
    'k': (800.0, 700.0),
    'delta_max': (19.0, 17.0),
    # Growth term g(t)
    'a': (3.2, 2.3),
    'b': (9.6, 8.4),
    'd': (10.1, 1.1),
    't_a': (4.7, 4.5),
    't_b': (12.5, 11.7),
    't_d': (15.0, 16.2),
    'tau_a': (2.5, 1.0),
    'tau_b': (1.0, 0.9),
    'tau_d': (1.5, 0.7),
    # Reference energy balance EB(t)
    'a_eb': (7.2, 16.5),
    'b_eb': (30.0, 47.0),
    'd_eb': (21.0, 41.0),
    't_a_eb': (5.6, 4.8),
    't_b_eb': (9.8, 9.1),
    't_d_eb': (15.0, 13.5),
    'tau_a_eb': (15.0, 7.2),
    'tau_b_eb': (1.5, 1.0),
    'tau_d_eb': (2.0, 1.5),
    # Reference body composition: ref = beta0 + beta1 * age
    'ffm_beta0': (2.9, 3.8),
    'ffm_beta1': (2.9, 2.3),
    'fm_beta0': (1.2, 0.56),
    'fm_beta1': (0.41, 0.74),
}


def _by_sex(name: str, female: np.ndarray) -> np.ndarray:
    male_v, female_v = _SEX_COEFFS[name]
    return np.where(female, female_v, male_v).astype(float)


@dataclass(frozen=True)
class ParameterSet:
    """
    Age/sex coefficients for a population, one entry per individual.

    Constants are derived once from sex. `age0` is each individual's age at
    day 0; the age-dependent terms (activity, growth, reference energy balance,
    reference composition) are evaluated through the methods below at the
    current simulated age, `age(day)`.
    """

    age0: np.ndarray  # shape (N,), years at day 0
    sex: np.ndarray  # shape (N,), 0 = male, 1 = female
    k: np.ndarray
    delta_max: np.ndarray
    a: np.ndarray
    b: np.ndarray
    d: np.ndarray
    t_a: np.ndarray
    t_b: np.ndarray
    t_d: np.ndarray
    tau_a: np.ndarray
    tau_b: np.ndarray
    tau_d: np.ndarray
    a_eb: np.ndarray
    b_eb: np.ndarray
    d_eb: np.ndarray
    t_a_eb: np.ndarray
    t_b_eb: np.ndarray
    t_d_eb: np.ndarray
    tau_a_eb: np.ndarray
    tau_b_eb: np.ndarray
    tau_d_eb: np.ndarray
    ffm_beta0: np.ndarray
    ffm_beta1: np.ndarray
    fm_beta0: np.ndarray
    fm_beta1: np.ndarray

    @classmethod
    def from_age_sex(cls, age, sex) -> ParameterSet:
        """A scalar sex applies to every age."""
        age = np.atleast_1d(np.asarray(age, dtype=float)).copy()
        sex = np.broadcast_to(np.atleast_1d(np.asarray(sex, dtype=float)), age.shape).copy()
        female = sex == FEMALE
        return cls(age0=age, sex=sex, **{name: _by_sex(name, female) for name in _SEX_COEFFS})

    def size(self) -> int:
        return int(self.sex.size)

    def subset(self, indices) -> ParameterSet:
        idx = np.asarray(indices, dtype=int)
        return ParameterSet.from_age_sex(self.age0[idx], self.sex[idx])

    def age(self, day: float) -> np.ndarray:
        """Age in years on simulated day `day`."""
        return self.age0 + float(day) / DAYS_PER_YEAR

    def delta(self, age_years: np.ndarray) -> np.ndarray:
        """Physical activity coefficient (kcal/kg/day), falls from delta_max to DELTA_MIN around age P."""
        age_years = np.asarray(age_years, dtype=float)
        return DELTA_MIN + (self.delta_max - DELTA_MIN) / (1.0 + (age_years / DELTA_P) ** DELTA_H)

    def growth(self, age_years: np.ndarray) -> np.ndarray:
        """Energy (kcal/day) redirected from fat to fat-free tissue by growth, g(t)."""
        t = np.asarray(age_years, dtype=float)
        return (
            self.a * np.exp(-(t - self.t_a) / self.tau_a)
            + self.b * np.exp(-0.5 * ((t - self.t_b) / self.tau_b) ** 2)
            + self.d * np.exp(-0.5 * ((t - self.t_d) / self.tau_d) ** 2)
        )

    def reference_energy_balance(self, age_years: np.ndarray) -> np.ndarray:
        """Energy balance (kcal/day) of a reference child of this age, EB(t)."""
        t = np.asarray(age_years, dtype=float)
        return (
            self.a_eb * np.exp(-(t - self.t_a_eb) / self.tau_a_eb)
            + self.b_eb * np.exp(-0.5 * ((t - self.t_b_eb) / self.tau_b_eb) ** 2)
            + self.d_eb * np.exp(-0.5 * ((t - self.t_d_eb) / self.tau_d_eb) ** 2)
        )

    def reference_ffm(self, age_years: np.ndarray) -> np.ndarray:
        return self.ffm_beta0 + self.ffm_beta1 * np.asarray(age_years, dtype=float)

    def reference_fm(self, age_years: np.ndarray) -> np.ndarray:
        return self.fm_beta0 + self.fm_beta1 * np.asarray(age_years, dtype=float)


def rho_ffm(ffm_kg: np.ndarray) -> np.ndarray:
    """Energy density of fat-free mass (kcal/kg)."""
    return RHO_FFM_SLOPE * np.asarray(ffm_kg, dtype=float) + RHO_FFM_INTERCEPT


def partition_fraction(ffm_kg: np.ndarray, fm_kg: np.ndarray) -> np.ndarray:
    """
    Forbes partition p: share of net energy imbalance going to fat-free tissue.
      C = 10.4 * rho_FFM / rho_FM
      p = C / (C + FM)
    """
    c = FORBES_C * rho_ffm(ffm_kg) / RHO_FM
    return c / (c + np.asarray(fm_kg, dtype=float))


def reference_composition(age, sex) -> tuple[np.ndarray, np.ndarray]:
    """Reference (FFM, FM) in kg for children of the given age and sex."""
    params = ParameterSet.from_age_sex(age, sex)
    return params.reference_ffm(params.age0), params.reference_fm(params.age0)
