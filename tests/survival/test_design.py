"""
Tests for SurvivalDesign, PredictiveDesign and the observation horizon.
"""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from bayesurv.core import DataSource
from bayesurv.core.capabilities import CAPABILITY_PARTITIONED
from bayesurv.core.exceptions import DimensionError, ValidationError
from bayesurv.survival import (
    PredictiveDesign,
    SurvivalDesign,
    load_mastectomy,
    observation_horizon,
)


TIME = np.array([5.0, 8.0, 12.0, 3.0, 20.0, 7.0])
EVENT = np.array([1, 0, 1, 1, 0, 1])
X = np.array([[0.0, 1.0], [1.0, 0.5], [0.0, -1.0],
              [1.0, 2.0], [1.0, 0.0], [0.0, 0.3]])


# ═══════════════════════════════════════════════════════════════════════
# Observation horizon
# ═══════════════════════════════════════════════════════════════════════


class TestObservationHorizon:

    def test_max_over_both_groups(self):
        assert observation_horizon([1.0, 5.0], [3.0]) == 5.0
        assert observation_horizon([1.0], [9.0]) == 9.0

    def test_empty_censored_falls_back_to_uncensored(self):
        assert observation_horizon([2.0, 11.0], []) == 11.0

    def test_empty_uncensored_falls_back_to_censored(self):
        assert observation_horizon([], [4.0, 7.0]) == 7.0

    def test_both_empty_rejected(self):
        with pytest.raises(ValidationError, match="zero observations"):
            observation_horizon([], [])


# ═══════════════════════════════════════════════════════════════════════
# SurvivalDesign
# ═══════════════════════════════════════════════════════════════════════


class TestSurvivalDesign:

    def test_partition(self):
        d = SurvivalDesign.for_survival(TIME, EVENT, X)
        assert d.n == 6
        assert d.p == 2
        assert d.n_events == 4
        assert d.n_censored == 2
        assert d.n_events + d.n_censored == d.n
        assert_array_equal(d.uncensored_time, [5.0, 12.0, 3.0, 7.0])
        assert_array_equal(d.censored_time, [8.0, 20.0])
        assert d.uncensored_X.shape == (4, 2)
        assert d.censored_X.shape == (2, 2)
        assert_array_equal(d.censored_X[1], X[4])

    def test_horizon(self):
        d = SurvivalDesign.for_survival(TIME, EVENT, X)
        assert d.horizon == 20.0

    def test_bool_event(self):
        d = SurvivalDesign.for_survival(TIME, EVENT.astype(bool))
        assert d.event.dtype == np.bool_
        assert d.n_events == 4

    def test_intercept_only(self):
        d = SurvivalDesign.for_survival(TIME, EVENT)
        assert d.p == 0
        assert d.X.shape == (6, 0)
        assert d.covariate_names == ()

    def test_1d_covariate_reshaped(self):
        d = SurvivalDesign.for_survival(TIME, EVENT, X[:, 1])
        assert d.X.shape == (6, 1)
        assert d.covariate_names == ("x0",)

    def test_covariate_names(self):
        d = SurvivalDesign.for_survival(
            TIME, EVENT, X, covariate_names=["treated", "age"],
        )
        assert d.covariate_names == ("treated", "age")

    def test_arrays_read_only(self):
        d = SurvivalDesign.for_survival(TIME, EVENT, X)
        with pytest.raises(ValueError):
            d.time[0] = 1.0
        with pytest.raises(ValueError):
            d.uncensored_X[0, 0] = 1.0

    def test_all_censored(self):
        d = SurvivalDesign.for_survival([4.0, 6.0], [0, 0])
        assert d.n_events == 0
        assert d.horizon == 6.0

    def test_all_uncensored(self):
        d = SurvivalDesign.for_survival([4.0, 6.0], [1, 1])
        assert d.n_censored == 0
        assert d.horizon == 6.0

    def test_datasource_protocol(self):
        d = SurvivalDesign.for_survival(TIME, EVENT, X)
        assert d.n_observations == 6
        assert d.metadata['n_events'] == 4
        assert d.supports(CAPABILITY_PARTITIONED)

    def test_from_datasource(self):
        ds = DataSource.from_arrays(t=TIME, dead=EVENT, age=X[:, 1])
        d = SurvivalDesign.from_datasource(
            ds, time="t", event="dead", covariates=["age"],
        )
        assert d.covariate_names == ("age",)
        assert_array_equal(d.X[:, 0], X[:, 1])


class TestSurvivalDesignValidation:

    def test_zero_observations(self):
        with pytest.raises(ValidationError):
            SurvivalDesign.for_survival([], [])

    def test_non_positive_time(self):
        with pytest.raises(ValidationError, match="strictly positive"):
            SurvivalDesign.for_survival([1.0, 0.0], [1, 1])

    def test_non_finite_time(self):
        with pytest.raises(ValidationError):
            SurvivalDesign.for_survival([1.0, np.inf], [1, 1])

    def test_event_not_binary(self):
        with pytest.raises(ValidationError, match="only 0 and 1"):
            SurvivalDesign.for_survival([1.0, 2.0], [1, 2])

    def test_length_mismatch(self):
        with pytest.raises(DimensionError):
            SurvivalDesign.for_survival([1.0, 2.0], [1])

    def test_X_length_mismatch(self):
        with pytest.raises(DimensionError):
            SurvivalDesign.for_survival(TIME, EVENT, X[:4])

    def test_X_3d(self):
        with pytest.raises(DimensionError):
            SurvivalDesign.for_survival(TIME, EVENT, np.zeros((6, 2, 1)))

    def test_X_nan(self):
        bad = X.copy()
        bad[0, 0] = np.nan
        with pytest.raises(ValidationError):
            SurvivalDesign.for_survival(TIME, EVENT, bad)

    def test_wrong_number_of_names(self):
        with pytest.raises(ValidationError, match="covariate_names"):
            SurvivalDesign.for_survival(TIME, EVENT, X, covariate_names=["a"])


# ═══════════════════════════════════════════════════════════════════════
# Mastectomy dataset
# ═══════════════════════════════════════════════════════════════════════


class TestMastectomy:

    def test_counts(self):
        ds = load_mastectomy()
        d = SurvivalDesign.from_datasource(ds, covariates=["metastasized"])
        assert d.n == 44
        assert d.n_events == 26
        assert d.n_censored == 18
        assert d.horizon == 225.0


# ═══════════════════════════════════════════════════════════════════════
# PredictiveDesign
# ═══════════════════════════════════════════════════════════════════════


class TestPredictiveDesign:

    @pytest.fixture
    def design(self):
        return SurvivalDesign.for_survival(TIME, EVENT, X)

    def test_chain_major_flattening(self, design, rng):
        alpha = rng.normal(-3, 0.1, size=(2, 50))
        beta = rng.normal(0, 0.1, size=(2, 50, 2))
        pd_ = PredictiveDesign.for_predictive({'alpha': alpha, 'beta': beta}, design)
        assert pd_.n_draws == 100
        assert_array_equal(pd_.alpha[:50], alpha[0])
        assert_array_equal(pd_.alpha[50:], alpha[1])
        assert_array_equal(pd_.beta[50], beta[1, 0])

    def test_uses_uncensored_rows_and_global_horizon(self, design):
        pd_ = PredictiveDesign.for_predictive(
            {'alpha': np.zeros(3), 'beta': np.zeros((3, 2))}, design,
        )
        assert_array_equal(pd_.observed, design.uncensored_time)
        assert pd_.X.shape == (4, 2)
        # horizon comes from a censored row
        assert pd_.horizon == 20.0

    def test_rates(self, design):
        alpha = np.array([-1.0, -2.0])
        beta = np.array([[0.5, 0.0], [0.0, 1.0]])
        pd_ = PredictiveDesign.for_predictive({'alpha': alpha, 'beta': beta}, design)
        expected = np.exp(alpha[:, None] + beta @ design.uncensored_X.T)
        np.testing.assert_allclose(pd_.rates, expected)
        assert pd_.rates.shape == (2, 4)

    def test_single_covariate_without_trailing_axis(self):
        d = SurvivalDesign.for_survival(TIME, EVENT, X[:, 0])
        pd_ = PredictiveDesign.for_predictive(
            {'alpha': np.zeros((2, 5)), 'beta': np.ones((2, 5))}, d,
        )
        assert pd_.beta.shape == (10, 1)

    def test_intercept_only_without_beta(self):
        d = SurvivalDesign.for_survival(TIME, EVENT)
        pd_ = PredictiveDesign.for_predictive({'alpha': np.zeros(7)}, d)
        assert pd_.beta.shape == (7, 0)

    def test_no_events_rejected(self):
        d = SurvivalDesign.for_survival([4.0, 6.0], [0, 0])
        with pytest.raises(ValidationError, match="uncensored"):
            PredictiveDesign.for_predictive({'alpha': np.zeros(3)}, d)

    def test_missing_alpha(self, design):
        with pytest.raises(ValidationError, match="alpha"):
            PredictiveDesign.for_predictive({'beta': np.zeros((3, 2))}, design)

    def test_missing_beta(self, design):
        with pytest.raises(ValidationError, match="beta"):
            PredictiveDesign.for_predictive({'alpha': np.zeros(3)}, design)

    def test_beta_wrong_width(self, design):
        with pytest.raises(DimensionError):
            PredictiveDesign.for_predictive(
                {'alpha': np.zeros(3), 'beta': np.zeros((3, 5))}, design,
            )

    def test_max_attempts_positive(self, design):
        with pytest.raises(ValidationError, match="max_attempts"):
            PredictiveDesign.for_predictive(
                {'alpha': np.zeros(3), 'beta': np.zeros((3, 2))}, design,
                max_attempts=0,
            )
