"""
bayesurv: Bayesian survival models with horizon-aware predictive checks.

Submodules:
    survival: Exponential proportional-hazards model and posterior
        predictive sampling truncated to the study horizon
    mcmc: MCMC sampling (PyMC NUTS or Metropolis) over log densities
    core: Result envelope, exceptions, validation, data loading
"""

__version__ = "0.1.0"

from bayesurv.core import DataSource
from bayesurv import mcmc
from bayesurv import survival

__all__ = [
    "__version__",
    "DataSource",
    "mcmc",
    "survival",
]
