"""
Prior configuration and parameter payloads for the exponential PH model.

Each payload dataclass is a frozen payload carried inside a Result[P]
envelope.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from bayesurv.core.exceptions import ValidationError


@dataclass(frozen=True)
class ExponentialPrior:
    """Independent Normal priors on the model parameters.

    coefficients[j] ~ Normal(coef_mean, coef_sd)
    log_baseline_hazard ~ Normal(log_hazard_mean, log_hazard_sd)

    The default log_hazard_mean of -4.6 puts the prior baseline mean
    survival time, exp(-log_baseline_hazard), near 100 time units.
    """

    coef_mean: float = 0.0
    coef_sd: float = 2.0
    log_hazard_mean: float = -4.6
    log_hazard_sd: float = 2.0

    def __post_init__(self) -> None:
        for name in ('coef_mean', 'log_hazard_mean'):
            value = getattr(self, name)
            if not np.isfinite(value):
                raise ValidationError(f"{name} must be finite, got {value}")
        for name in ('coef_sd', 'log_hazard_sd'):
            value = getattr(self, name)
            if not (np.isfinite(value) and value > 0):
                raise ValidationError(
                    f"{name} must be finite and > 0, got {value}"
                )

    @classmethod
    def from_time_scale(cls, typical_time: float, sd: float = 2.0) -> ExponentialPrior:
        """Centre the baseline prior on a typical event time.

        The exponential mean is exp(-log_baseline_hazard), so the prior
        mean is set to -log(typical_time).
        """
        if not (np.isfinite(typical_time) and typical_time > 0):
            raise ValidationError(
                f"typical_time must be finite and > 0, got {typical_time}"
            )
        return cls(
            coef_sd=sd,
            log_hazard_mean=-float(np.log(typical_time)),
            log_hazard_sd=sd,
        )


@dataclass(frozen=True)
class ExponentialPHParams:
    """Posterior draw ensemble for the exponential PH model.

    Arrays are indexed by chain, then iteration.
    """

    beta: NDArray                 # (chains, draws, p) coefficients
    alpha: NDArray                # (chains, draws) log baseline hazard
    param_names: tuple[str, ...]  # flat names, beta[0..p-1] then alpha
    rhat: NDArray                 # (p + 1,) split R-hat per parameter
    ess_bulk: NDArray             # (p + 1,)
    ess_tail: NDArray             # (p + 1,)
    n_divergent: int
    accept_rate: NDArray          # (chains,)

    @property
    def n_chains(self) -> int:
        return self.alpha.shape[0]

    @property
    def n_draws(self) -> int:
        """Draws per chain."""
        return self.alpha.shape[1]


@dataclass(frozen=True)
class PredictiveParams:
    """Posterior-predictive survival times for uncensored observations."""

    samples: NDArray[np.floating[Any]]   # (n_draws, n_uncensored)
    observed: NDArray[np.floating[Any]]  # (n_uncensored,) observed times
    horizon: float
    truncated: bool                      # True for the rejection sampler
