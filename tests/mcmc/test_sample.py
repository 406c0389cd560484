"""
Tests for mcmc.sample() and its backends.

Targets are Gaussian, so posterior moments are known exactly.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from bayesurv.core.exceptions import ValidationError, DimensionError
from bayesurv.core.result import Result
from bayesurv.mcmc import MCMCSolution, SamplerDesign, sample
from bayesurv.mcmc._diagnostics import build_params, convergence_warnings
from bayesurv.mcmc.backends import PyMCMetropolisBackend

MU = np.array([1.0, -2.0])
SD = np.array([0.5, 2.0])


def normal_log_density(theta):
    return float(-0.5 * np.sum(((theta - MU) / SD) ** 2))


def normal_grad(theta):
    return -(theta - MU) / SD ** 2


def bimodal_log_density(theta):
    return float(np.logaddexp(
        -0.5 * np.sum((theta - 10.0) ** 2),
        -0.5 * np.sum((theta + 10.0) ** 2),
    ))


# ═══════════════════════════════════════════════════════════════════════
# SamplerDesign
# ═══════════════════════════════════════════════════════════════════════


class TestSamplerDesign:

    def test_single_start_is_one_chain(self):
        d = SamplerDesign.for_sampling(normal_log_density, [0.0, 0.0])
        assert d.n_chains == 1
        assert d.dim == 2
        assert d.names == ("theta[0]", "theta[1]")

    def test_initial_read_only(self):
        d = SamplerDesign.for_sampling(normal_log_density, np.zeros((3, 2)))
        with pytest.raises(ValueError):
            d.initial[0, 0] = 1.0

    def test_non_finite_start(self):
        with pytest.raises(ValidationError, match="chain 1"):
            SamplerDesign.for_sampling(
                lambda t: 0.0 if t[0] < 5 else -np.inf,
                [[0.0], [10.0]],
            )

    def test_names_length(self):
        with pytest.raises(ValidationError, match="names"):
            SamplerDesign.for_sampling(normal_log_density, np.zeros((2, 2)), names=["a"])

    def test_bad_shape(self):
        with pytest.raises(DimensionError):
            SamplerDesign.for_sampling(normal_log_density, np.zeros((2, 2, 2)))

    @pytest.mark.parametrize("kwargs", [
        {'n_draws': 0},
        {'n_warmup': -1},
        {'target_accept': 1.0},
        {'grad_log_density': "not callable"},
    ])
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ValidationError):
            SamplerDesign.for_sampling(normal_log_density, np.zeros((2, 2)), **kwargs)

    def test_not_callable(self):
        with pytest.raises(ValidationError):
            SamplerDesign.for_sampling(None, np.zeros(2))


# ═══════════════════════════════════════════════════════════════════════
# Metropolis
# ═══════════════════════════════════════════════════════════════════════


class TestMetropolis:

    @pytest.fixture(scope="class")
    def fit(self):
        init = np.array([[0.0, 0.0], [2.0, 1.0], [-1.0, -4.0], [1.5, 2.0]])
        return sample(
            normal_log_density, init, draws=4000, warmup=2000, seed=1,
            names=["a", "b"], method="metropolis",
        )

    def test_shapes(self, fit):
        assert isinstance(fit, MCMCSolution)
        assert fit.samples.shape == (4, 4000, 2)
        assert fit.get("b").shape == (4, 4000)
        assert fit.flat("a").shape == (16000,)
        assert fit.flat().shape == (16000, 2)
        assert fit.backend_name == 'pymc_metropolis'

    def test_moments(self, fit):
        flat = fit.flat()
        assert_allclose(flat.mean(axis=0), MU, atol=0.2 * SD.max())
        assert_allclose(flat.std(axis=0), SD, rtol=0.2)

    def test_diagnostics(self, fit):
        assert np.all(fit.rhat < 1.03)
        assert np.all(fit.ess_bulk > 150)
        assert fit.n_divergent == 0
        assert np.all((fit.accept_rate > 0.1) & (fit.accept_rate < 0.75))

    def test_flat_is_chain_major(self, fit):
        assert_allclose(fit.flat("a")[:4000], fit.get("a")[0])

    def test_unknown_name(self, fit):
        with pytest.raises(KeyError, match="Available"):
            fit.get("c")

    def test_summary(self, fit):
        text = fit.summary()
        assert "r_hat" in text
        assert "pymc_metropolis" in text

    def test_reproducible(self):
        kwargs = dict(draws=50, warmup=50, seed=3, method="metropolis")
        a = sample(normal_log_density, np.zeros((2, 2)), **kwargs)
        b = sample(normal_log_density, np.zeros((2, 2)), **kwargs)
        np.testing.assert_array_equal(a.samples, b.samples)

    def test_samples_read_only(self, fit):
        with pytest.raises(ValueError):
            fit.samples[0, 0, 0] = 1.0

    def test_stuck_chains_warn(self):
        init = np.array([[-10.0], [10.0]])
        with pytest.warns(RuntimeWarning, match="R-hat"):
            fit = sample(
                bimodal_log_density, init, draws=500, warmup=200, seed=2,
                method="metropolis",
            )
        assert fit.warnings
        assert not fit.converged

    def test_explicit_backend_object(self):
        fit = sample(
            normal_log_density, np.zeros((2, 2)), draws=50, warmup=50, seed=1,
            method=PyMCMetropolisBackend(tune_interval=25),
        )
        assert fit.info['tune_interval'] == 25
        assert fit.info['method'] == 'metropolis'
        assert fit.info['proposal_scale'].shape == (2,)
        assert fit.n_divergent == 0


# ═══════════════════════════════════════════════════════════════════════
# Dispatch and diagnostics
# ═══════════════════════════════════════════════════════════════════════


class FixedBackend:
    """Backend returning pre-computed draws."""

    def __init__(self, samples):
        self._samples = samples

    @property
    def name(self):
        return 'fixed'

    def solve(self, design):
        params = build_params(self._samples, design.names, np.ones(design.n_chains), 0)
        return Result(params=params, info={}, timing=None, backend_name=self.name)


class TestDispatch:

    def test_unknown_method(self):
        with pytest.raises(ValidationError, match="method"):
            sample(normal_log_density, np.zeros((2, 2)), method="hmc")

    def test_custom_backend(self, rng):
        draws = rng.standard_normal((2, 500, 2))
        fit = sample(normal_log_density, np.zeros((2, 2)), draws=500, method=FixedBackend(draws))
        assert fit.backend_name == 'fixed'
        assert_allclose(fit.samples, draws)
        assert fit.rhat.shape == (2,)

    def test_nuts_requires_gradient(self):
        with pytest.raises(ValidationError, match="grad_log_density"):
            sample(normal_log_density, np.zeros((2, 2)), method="nuts")


class TestConvergenceWarnings:

    def test_all_good(self):
        out = convergence_warnings(
            ("a", "b"), np.array([1.0, 1.005]), np.array([900.0, 1200.0]), 4, 0,
        )
        assert out == []

    def test_high_rhat(self):
        out = convergence_warnings(("a", "b"), np.array([1.0, 1.2]), np.array([900.0, 900.0]), 4, 0)
        assert len(out) == 1
        assert "b (1.200)" in out[0]

    def test_low_ess(self):
        out = convergence_warnings(("a",), np.array([1.0]), np.array([150.0]), 2, 0)
        assert "bulk ESS below 200" in out[0]

    def test_nan_diagnostics_flagged(self):
        out = convergence_warnings(("a",), np.array([np.nan]), np.array([np.nan]), 2, 0)
        assert len(out) == 2

    def test_divergences(self):
        out = convergence_warnings(("a",), np.array([1.0]), np.array([900.0]), 4, 3)
        assert out == ["3 divergent transition(s) after warmup"]


# ═══════════════════════════════════════════════════════════════════════
# NUTS (PyMC)
# ═══════════════════════════════════════════════════════════════════════


class TestNUTS:

    def test_normal_target(self):
        fit = sample(
            normal_log_density, np.zeros((2, 2)), grad_log_density=normal_grad,
            draws=800, warmup=800, seed=3, names=["a", "b"],
        )
        assert fit.backend_name == 'pymc_nuts'
        assert fit.samples.shape == (2, 800, 2)
        flat = fit.flat()
        assert_allclose(flat.mean(axis=0), MU, atol=0.2 * SD.max())
        assert_allclose(flat.std(axis=0), SD, rtol=0.15)
        assert fit.n_divergent == 0
        assert np.all(fit.rhat < 1.02)

    def test_seed_reproducible(self):
        kwargs = dict(grad_log_density=normal_grad, draws=100, warmup=100, seed=11)
        a = sample(normal_log_density, np.zeros((2, 2)), **kwargs)
        b = sample(normal_log_density, np.zeros((2, 2)), **kwargs)
        np.testing.assert_array_equal(a.samples, b.samples)
