# tests/test_parameters.py
"""Tests for age/sex coefficients and tissue relations."""

import numpy as np
import pytest

from childweight.parameters import (
    DELTA_MIN,
    FEMALE,
    MALE,
    RHO_FFM_INTERCEPT,
    ParameterSet,
    partition_fraction,
    reference_composition,
    rho_ffm,
)


class TestParameterSet:
    """Tests for ParameterSet construction."""

    def test_sex_specific_coefficients(self):
        """Male and female individuals get their own constants."""
        params = ParameterSet.from_age_sex([10.0, 10.0], [MALE, FEMALE])

        np.testing.assert_array_equal(params.k, [800.0, 700.0])
        np.testing.assert_array_equal(params.delta_max, [19.0, 17.0])
        np.testing.assert_array_equal(params.d, [10.1, 1.1])

    def test_scalar_sex_broadcasts_over_ages(self):
        """A single sex code applies to every age."""
        params = ParameterSet.from_age_sex([5.0, 8.0, 12.0], FEMALE)

        assert params.size() == 3
        np.testing.assert_array_equal(params.k, [700.0, 700.0, 700.0])

    def test_deterministic(self):
        """Same inputs give the same coefficients."""
        a = ParameterSet.from_age_sex([7.0], [MALE])
        b = ParameterSet.from_age_sex([7.0], [MALE])

        np.testing.assert_array_equal(a.growth([7.0]), b.growth([7.0]))
        np.testing.assert_array_equal(a.k, b.k)

    def test_subset(self):
        """Subsetting keeps the selected individuals' coefficients."""
        params = ParameterSet.from_age_sex([10.0, 10.0, 10.0], [MALE, FEMALE, MALE])
        sub = params.subset([1])

        assert sub.size() == 1
        np.testing.assert_array_equal(sub.k, [700.0])

    def test_keeps_starting_age(self):
        """Starting ages are stored and advance with the simulated day."""
        params = ParameterSet.from_age_sex([10.0, 6.0, 14.0], [MALE, FEMALE, MALE])

        np.testing.assert_array_equal(params.age0, [10.0, 6.0, 14.0])
        np.testing.assert_allclose(params.age(365.0), [11.0, 7.0, 15.0])
        np.testing.assert_array_equal(params.subset([2, 0]).age0, [14.0, 10.0])

    def test_age_evaluates_terms(self):
        """Age-dependent terms at age(day) match direct evaluation at that age."""
        params = ParameterSet.from_age_sex([9.0], [FEMALE])

        np.testing.assert_allclose(params.growth(params.age(730.0)), params.growth([11.0]))


class TestAgeDependentTerms:
    """Tests for activity, growth and reference terms."""

    def test_delta_young_child_is_delta_max(self):
        params = ParameterSet.from_age_sex([0.0], [MALE])
        np.testing.assert_allclose(params.delta([0.0]), [19.0])

    def test_delta_midpoint_at_transition_age(self):
        params = ParameterSet.from_age_sex([12.0], [MALE])
        np.testing.assert_allclose(params.delta([12.0]), [(19.0 + DELTA_MIN) / 2.0])

    def test_delta_approaches_minimum(self):
        params = ParameterSet.from_age_sex([100.0], [FEMALE])
        np.testing.assert_allclose(params.delta([100.0]), [DELTA_MIN], atol=1e-6)

    def test_growth_positive_over_childhood(self):
        ages = np.linspace(0.0, 18.0, 37)
        params = ParameterSet.from_age_sex(ages, np.zeros_like(ages))

        assert np.all(params.growth(ages) > 0.0)
        assert np.all(params.reference_energy_balance(ages) > 0.0)

    def test_reference_composition(self):
        """Reference FFM/FM follow their linear age curves."""
        ffm, fm = reference_composition([10.0, 10.0], [MALE, FEMALE])

        np.testing.assert_allclose(ffm, [2.9 + 2.9 * 10.0, 3.8 + 2.3 * 10.0])
        np.testing.assert_allclose(fm, [1.2 + 0.41 * 10.0, 0.56 + 0.74 * 10.0])


class TestTissueRelations:
    """Tests for energy density and Forbes partitioning."""

    def test_rho_ffm(self):
        np.testing.assert_allclose(rho_ffm(np.array([0.0, 10.0])), [RHO_FFM_INTERCEPT, 880.0])

    def test_partition_fraction_bounds(self):
        p = partition_fraction(np.array([20.0, 20.0, 20.0]), np.array([0.0, 5.0, 50.0]))

        assert p[0] == pytest.approx(1.0)
        assert np.all(p > 0.0)
        assert np.all(p <= 1.0)
        # More fat -> less of the imbalance goes to lean tissue.
        assert p[0] > p[1] > p[2]
