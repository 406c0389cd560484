"""
Generic MCMC sampling over user-supplied log densities.

Example:
    >>> from bayesurv.mcmc import sample
    >>> fit = sample(log_density, initial, grad_log_density=grad, seed=1)
    >>> fit.rhat
    >>> print(fit.summary())
"""

from bayesurv.mcmc.design import SamplerDesign
from bayesurv.mcmc.solution import MCMCSolution
from bayesurv.mcmc.solvers import sample

__all__ = [
    "SamplerDesign",
    "MCMCSolution",
    "sample",
]
