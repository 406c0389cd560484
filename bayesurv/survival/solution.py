"""
Solution wrappers for Bayesian survival results.

Each Solution wraps a Result[Params] and exposes user-friendly properties
with summary() methods.
"""

from __future__ import annotations

from typing import Callable

import numpy as np
from numpy.typing import NDArray

from bayesurv.core.exceptions import DimensionError, ValidationError
from bayesurv.core.result import Result
from bayesurv.survival._common import (
    ExponentialPHParams,
    ExponentialPrior,
    PredictiveParams,
)
from bayesurv.survival.design import SurvivalDesign


def _check_prob(prob: float) -> float:
    if not 0.0 < prob < 1.0:
        raise ValidationError(f"prob must be in (0, 1), got {prob}")
    return float(prob)


class ExponentialPHSolution:
    """Posterior fit of the exponential proportional-hazards model.

    Draws are stored by chain then iteration; the flattened accessors
    (``coefficients``, ``log_baseline_hazard``, ...) use chain-major order.
    """

    __slots__ = ('_result', '_design', '_prior')

    def __init__(
        self,
        _result: Result[ExponentialPHParams],
        _design: SurvivalDesign,
        _prior: ExponentialPrior,
    ) -> None:
        self._result = _result
        self._design = _design
        self._prior = _prior

    # -- Inputs --

    @property
    def design(self) -> SurvivalDesign:
        return self._design

    @property
    def prior(self) -> ExponentialPrior:
        return self._prior

    @property
    def covariate_names(self) -> tuple[str, ...]:
        return self._design.covariate_names

    # -- Draws --

    @property
    def draws(self) -> dict[str, NDArray]:
        """Draw ensemble {'beta': (chains, iters, p), 'alpha': (chains, iters)}."""
        params = self._result.params
        return {'beta': params.beta, 'alpha': params.alpha}

    @property
    def n_chains(self) -> int:
        return self._result.params.n_chains

    @property
    def n_draws(self) -> int:
        """Total draws across chains."""
        params = self._result.params
        return params.n_chains * params.n_draws

    @property
    def coefficients(self) -> NDArray:
        """(n_draws, p) coefficient draws."""
        beta = self._result.params.beta
        return beta.reshape(beta.shape[0] * beta.shape[1], beta.shape[2])

    @property
    def log_baseline_hazard(self) -> NDArray:
        """(n_draws,) log baseline hazard draws."""
        return self._result.params.alpha.reshape(-1)

    @property
    def hazard_ratios(self) -> NDArray:
        """exp(coefficients): multiplicative effect of a unit covariate change."""
        return np.exp(self.coefficients)

    # -- Posterior summaries --

    @property
    def posterior_mean(self) -> dict[str, NDArray | float]:
        return {
            'beta': self.coefficients.mean(axis=0),
            'alpha': float(self.log_baseline_hazard.mean()),
        }

    def credible_interval(self, prob: float = 0.95) -> dict[str, NDArray]:
        """Equal-tailed interval: {'beta': (p, 2), 'alpha': (2,)}."""
        prob = _check_prob(prob)
        q = [(1.0 - prob) / 2.0, (1.0 + prob) / 2.0]
        return {
            'beta': np.quantile(self.coefficients, q, axis=0).T,
            'alpha': np.quantile(self.log_baseline_hazard, q),
        }

    @property
    def param_names(self) -> tuple[str, ...]:
        return self._result.params.param_names

    @property
    def rhat(self) -> NDArray:
        """Split R-hat per parameter, ordered as ``param_names``."""
        return self._result.params.rhat

    @property
    def ess_bulk(self) -> NDArray:
        return self._result.params.ess_bulk

    @property
    def ess_tail(self) -> NDArray:
        return self._result.params.ess_tail

    @property
    def n_divergent(self) -> int:
        return self._result.params.n_divergent

    @property
    def info(self) -> dict:
        return self._result.info

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    # -- Derived quantities --

    def _rates(self, x) -> NDArray:
        """(n_draws,) hazard rate for one covariate row (baseline if None)."""
        p = self._design.p
        if x is None:
            x = np.zeros(p)
        x = np.asarray(x, dtype=np.float64).reshape(-1)
        if x.shape[0] != p:
            raise DimensionError(
                f"x must have {p} entries to match the covariates, got {x.shape[0]}"
            )
        return np.exp(self.log_baseline_hazard + self.coefficients @ x)

    def survival_function(self, times, x=None) -> NDArray:
        """Posterior draws of S(t | x) = exp(-rate * t), shape (n_draws, n_times)."""
        times = np.asarray(times, dtype=np.float64).reshape(-1)
        if np.any(times < 0) or not np.all(np.isfinite(times)):
            raise ValidationError("times must be finite and >= 0")
        return np.exp(-np.outer(self._rates(x), times))

    def median_survival(self, x=None) -> NDArray:
        """Posterior draws of the median survival time log(2) / rate."""
        return np.log(2.0) / self._rates(x)

    def summary(self, prob: float = 0.95) -> str:
        """Parameter table with mean, sd, interval, R-hat and ESS."""
        ci = self.credible_interval(prob)
        flat = np.column_stack([self.coefficients, self.log_baseline_hazard])
        mean = flat.mean(axis=0)
        sd = flat.std(axis=0, ddof=1)
        lo = np.append(ci['beta'][:, 0], ci['alpha'][0])
        hi = np.append(ci['beta'][:, 1], ci['alpha'][1])
        labels = list(self.covariate_names) + ["log_baseline_hazard"]

        pct = int(round(prob * 100))
        d = self._design
        lines = [
            "Bayesian exponential proportional-hazards model",
            f"Call: exponential_ph(method={self.info.get('method', '?')!r})",
            "",
            f"  n={d.n}, events={d.n_events}, censored={d.n_censored}, "
            f"horizon={d.horizon:.4g}",
            f"  {self.n_chains} chains, {self.n_draws} draws total "
            f"({self.backend_name})",
            "",
            f"  {'':<20s} {'mean':>10s} {'sd':>10s} {'lower ' + str(pct) + '%':>10s} "
            f"{'upper ' + str(pct) + '%':>10s} {'r_hat':>7s} {'ess_bulk':>9s}",
        ]
        for j, label in enumerate(labels):
            lines.append(
                f"  {label:<20s} {mean[j]:10.4f} {sd[j]:10.4f} {lo[j]:10.4f} "
                f"{hi[j]:10.4f} {self.rhat[j]:7.3f} {self.ess_bulk[j]:9.0f}"
            )

        if d.p > 0:
            hr = self.hazard_ratios
            lines.append("")
            lines.append(f"  {'':<20s} {'exp(coef)':>10s}")
            for j, name in enumerate(self.covariate_names):
                lines.append(f"  {name:<20s} {np.median(hr[:, j]):10.4f}")

        if self.warnings:
            lines.append("")
            lines.extend(f"Warning: {w}" for w in self.warnings)

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ExponentialPHSolution(n={self._design.n}, p={self._design.p}, "
            f"chains={self.n_chains}, draws={self.n_draws})"
        )


class PredictiveSolution:
    """Posterior-predictive survival times for the uncensored observations."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[PredictiveParams]) -> None:
        self._result = _result

    @property
    def samples(self) -> NDArray:
        """(n_draws, n_uncensored) predictive times."""
        return self._result.params.samples

    @property
    def observed(self) -> NDArray:
        return self._result.params.observed

    @property
    def horizon(self) -> float:
        return self._result.params.horizon

    @property
    def truncated(self) -> bool:
        return self._result.params.truncated

    @property
    def n_draws(self) -> int:
        return self.samples.shape[0]

    @property
    def n_attempts(self) -> int:
        """Candidates drawn in total, accepted or not."""
        return self._result.info['n_attempts']

    @property
    def acceptance_rate(self) -> float:
        if self.n_attempts == 0:
            return float('nan')
        return self.samples.size / self.n_attempts

    @property
    def fraction_above_horizon(self) -> float:
        """Share of samples beyond the horizon (0 for the truncated sampler)."""
        return float(np.mean(self.samples > self.horizon))

    @property
    def predictive_mean(self) -> NDArray:
        """Posterior-predictive mean time per individual."""
        return self.samples.mean(axis=0)

    def interval(self, prob: float = 0.9) -> NDArray:
        """(n_uncensored, 2) equal-tailed predictive interval per individual."""
        prob = _check_prob(prob)
        q = [(1.0 - prob) / 2.0, (1.0 + prob) / 2.0]
        return np.quantile(self.samples, q, axis=0).T

    def coverage(self, prob: float = 0.9) -> float:
        """Share of observed times inside their predictive interval."""
        bounds = self.interval(prob)
        inside = (self.observed >= bounds[:, 0]) & (self.observed <= bounds[:, 1])
        return float(inside.mean())

    def ppc_pvalue(self, statistic: Callable[[NDArray], float] = np.mean) -> float:
        """Share of predictive replicates with statistic >= the observed one."""
        observed_stat = statistic(self.observed)
        replicated = np.array([statistic(row) for row in self.samples])
        return float(np.mean(replicated >= observed_stat))

    @property
    def info(self) -> dict:
        return self._result.info

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    def summary(self) -> str:
        kind = "truncated rejection" if self.truncated else "naive (untruncated)"
        lines = [
            f"Posterior predictive survival times ({kind})",
            "",
            f"  draws={self.n_draws}, individuals={self.samples.shape[1]}, "
            f"horizon={self.horizon:.4g}",
            f"  attempts={self.n_attempts}, acceptance rate={self.acceptance_rate:.4f}",
            f"  mean observed time   = {self.observed.mean():.4g}",
            f"  mean predictive time = {self.samples.mean():.4g}",
            f"  fraction above horizon = {self.fraction_above_horizon:.4f}",
            f"  90% interval coverage  = {self.coverage(0.9):.4f}",
            f"  ppc p-value (mean)     = {self.ppc_pvalue():.4f}",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"PredictiveSolution(draws={self.n_draws}, "
            f"individuals={self.samples.shape[1]}, truncated={self.truncated})"
        )
