"""
Exponential proportional-hazards log-density.

Model:
    rate(x) = exp(alpha + x @ beta)
    T | x ~ Exponential(rate(x)),  independent across subjects

Log-likelihood, split by censoring status:
    uncensored (event seen at t):  log f(t) = eta - exp(eta) * t
    censored (alive at t):         log S(t) = -exp(eta) * t

    L = Σ_unc [eta_i - exp(eta_i) t_i] + Σ_cens [-exp(eta_i) t_i]

The additive split is exact because survival times are modelled as
independent given covariates.

Gradient (g_i = ∂L/∂eta_i):
    uncensored: g_i = 1 - exp(eta_i) t_i
    censored:   g_i = -exp(eta_i) t_i
    ∂L/∂beta = X' g,   ∂L/∂alpha = Σ g_i

Everything here is a pure function of (parameters, data); no sampler
state is touched.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from bayesurv.core.exceptions import DimensionError
from bayesurv.survival._common import ExponentialPrior
from bayesurv.survival.design import SurvivalDesign


def linear_predictor(coefficients, log_baseline_hazard, X) -> NDArray:
    """eta = alpha + X @ beta, shape (n,)."""
    return log_baseline_hazard + X @ coefficients


def hazard_rate(coefficients, log_baseline_hazard, X) -> NDArray:
    """Exponential rate exp(eta) for each row of X."""
    with np.errstate(over='ignore'):
        return np.exp(linear_predictor(coefficients, log_baseline_hazard, X))


def _check_coefficients(coefficients, design: SurvivalDesign) -> NDArray:
    coefficients = np.asarray(coefficients, dtype=np.float64).reshape(-1)
    if coefficients.shape[0] != design.p:
        raise DimensionError(
            f"coefficients must have {design.p} entries to match X, "
            f"got {coefficients.shape[0]}"
        )
    return coefficients


def log_likelihood(
    coefficients,
    log_baseline_hazard: float,
    design: SurvivalDesign,
) -> float:
    """Log-likelihood of the partitioned dataset.

    Sum of exponential log-densities over the uncensored group plus
    exponential log-survivals over the censored group.
    """
    beta = _check_coefficients(coefficients, design)

    eta_u = linear_predictor(beta, log_baseline_hazard, design.uncensored_X)
    eta_c = linear_predictor(beta, log_baseline_hazard, design.censored_X)

    with np.errstate(over='ignore', invalid='ignore'):
        uncensored = np.sum(eta_u - np.exp(eta_u) * design.uncensored_time)
        censored = np.sum(-np.exp(eta_c) * design.censored_time)

    return float(uncensored + censored)


def pointwise_log_likelihood(
    coefficients,
    log_baseline_hazard: float,
    design: SurvivalDesign,
) -> NDArray:
    """Per-observation log-likelihood contribution, in original row order.

    Observed events contribute the log-density, censored rows the
    log-survival. ``pointwise_log_likelihood(...).sum()`` equals
    ``log_likelihood(...)`` up to summation order.
    """
    beta = _check_coefficients(coefficients, design)
    eta = linear_predictor(beta, log_baseline_hazard, design.X)

    with np.errstate(over='ignore', invalid='ignore'):
        cumulative_hazard = np.exp(eta) * design.time
        return np.where(design.event, eta - cumulative_hazard, -cumulative_hazard)


def log_prior(
    coefficients,
    log_baseline_hazard: float,
    prior: ExponentialPrior,
) -> float:
    """Independent Normal log-prior density."""
    beta = np.asarray(coefficients, dtype=np.float64).reshape(-1)
    lp = stats.norm.logpdf(beta, loc=prior.coef_mean, scale=prior.coef_sd).sum()
    lp += stats.norm.logpdf(
        log_baseline_hazard, loc=prior.log_hazard_mean, scale=prior.log_hazard_sd,
    )
    return float(lp)


def log_posterior(
    coefficients,
    log_baseline_hazard: float,
    design: SurvivalDesign,
    prior: ExponentialPrior,
) -> float:
    """Unnormalised log posterior: log_prior + log_likelihood."""
    return (
        log_prior(coefficients, log_baseline_hazard, prior)
        + log_likelihood(coefficients, log_baseline_hazard, design)
    )


class ExponentialPHModel:
    """Flat-vector view of the posterior for an inference engine.

    The parameter vector is theta = [beta[0], ..., beta[p-1], alpha].
    Samplers only see ``log_density`` / ``grad_log_density`` on theta;
    ``to_ensemble`` maps their (chains, draws, dim) output back to named
    arrays.
    """

    def __init__(self, design: SurvivalDesign, prior: ExponentialPrior | None = None):
        self.design = design
        self.prior = prior if prior is not None else ExponentialPrior()

    @property
    def dim(self) -> int:
        return self.design.p + 1

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(f"beta[{j}]" for j in range(self.design.p)) + ("alpha",)

    def unpack(self, theta) -> tuple[NDArray, float]:
        """Split theta into (coefficients, log_baseline_hazard)."""
        theta = np.asarray(theta, dtype=np.float64)
        if theta.shape != (self.dim,):
            raise DimensionError(
                f"theta must have shape ({self.dim},), got {theta.shape}"
            )
        return theta[:-1], float(theta[-1])

    def log_density(self, theta) -> float:
        """log p(theta | data) up to a constant; -inf when it overflows."""
        beta, alpha = self.unpack(theta)
        lp = log_posterior(beta, alpha, self.design, self.prior)
        return lp if np.isfinite(lp) else -np.inf

    def grad_log_density(self, theta) -> NDArray:
        return self.log_density_and_grad(theta)[1]

    def log_density_and_grad(self, theta) -> tuple[float, NDArray]:
        beta, alpha = self.unpack(theta)
        d = self.design
        prior = self.prior

        eta_u = linear_predictor(beta, alpha, d.uncensored_X)
        eta_c = linear_predictor(beta, alpha, d.censored_X)

        with np.errstate(over='ignore', invalid='ignore'):
            h_u = np.exp(eta_u) * d.uncensored_time
            h_c = np.exp(eta_c) * d.censored_time
            lp = float(np.sum(eta_u - h_u) - np.sum(h_c))

        lp += log_prior(beta, alpha, prior)
        if not np.isfinite(lp):
            return -np.inf, np.zeros(self.dim)

        g_u = 1.0 - h_u
        g_c = -h_c

        grad = np.empty(self.dim)
        grad[:-1] = (
            d.uncensored_X.T @ g_u + d.censored_X.T @ g_c
            - (beta - prior.coef_mean) / prior.coef_sd ** 2
        )
        grad[-1] = (
            g_u.sum() + g_c.sum()
            - (alpha - prior.log_hazard_mean) / prior.log_hazard_sd ** 2
        )
        return lp, grad

    def initial_values(self, n_chains: int, rng: np.random.Generator) -> NDArray:
        """Dispersed starting points, shape (n_chains, dim).

        Coefficients start uniform on (-2, 2). The log baseline hazard
        starts at the intercept-only maximum likelihood estimate
        log(n_events / total time), jittered by the same amount; with no
        events the prior mean is used instead.
        """
        d = self.design
        if d.n_events > 0:
            centre = np.log(d.n_events / d.time.sum())
        else:
            centre = self.prior.log_hazard_mean

        init = rng.uniform(-2.0, 2.0, size=(n_chains, self.dim))
        init[:, -1] += centre
        return init

    def to_ensemble(self, samples: NDArray) -> dict[str, NDArray]:
        """(chains, draws, dim) flat samples to {'beta', 'alpha'}."""
        samples = np.asarray(samples, dtype=np.float64)
        if samples.ndim != 3 or samples.shape[2] != self.dim:
            raise DimensionError(
                f"samples must have shape (chains, draws, {self.dim}), "
                f"got {samples.shape}"
            )
        return {
            'beta': np.ascontiguousarray(samples[:, :, :-1]),
            'alpha': np.ascontiguousarray(samples[:, :, -1]),
        }
