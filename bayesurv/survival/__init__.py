"""
Bayesian survival analysis with an exponential proportional-hazards model.

Example:
    >>> from bayesurv.survival import exponential_ph, posterior_predictive
    >>> from bayesurv.survival import load_mastectomy
    >>> ds = load_mastectomy()
    >>> fit = exponential_ph(ds["time"], ds["event"], ds["metastasized"],
    ...                      covariate_names=["metastasized"], seed=1)
    >>> ppc = posterior_predictive(fit, seed=2)
    >>> print(ppc.summary())
"""

from bayesurv.survival._common import ExponentialPrior
from bayesurv.survival._likelihood import (
    ExponentialPHModel,
    log_likelihood,
    log_posterior,
    log_prior,
    pointwise_log_likelihood,
)
from bayesurv.survival._predictive import (
    DEFAULT_MAX_ATTEMPTS,
    acceptance_probability,
    truncated_exponential_mean,
)
from bayesurv.survival.datasets import load_mastectomy
from bayesurv.survival.design import (
    PredictiveDesign,
    SurvivalDesign,
    observation_horizon,
)
from bayesurv.survival.solution import ExponentialPHSolution, PredictiveSolution
from bayesurv.survival.solvers import exponential_ph, posterior_predictive

__all__ = [
    # Solvers
    "exponential_ph",
    "posterior_predictive",
    # Designs and config
    "SurvivalDesign",
    "PredictiveDesign",
    "ExponentialPrior",
    "observation_horizon",
    # Model
    "ExponentialPHModel",
    "log_likelihood",
    "pointwise_log_likelihood",
    "log_prior",
    "log_posterior",
    "acceptance_probability",
    "truncated_exponential_mean",
    "DEFAULT_MAX_ATTEMPTS",
    # Solutions
    "ExponentialPHSolution",
    "PredictiveSolution",
    # Data
    "load_mastectomy",
]
