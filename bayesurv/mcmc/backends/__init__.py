"""
MCMC backends. All of them run PyMC on a black-box log density.

Available backends:
    PyMCNUTSBackend: NUTS, needs a gradient
    PyMCMetropolisBackend: gradient-free random-walk Metropolis
"""

from bayesurv.mcmc.backends.metropolis import PyMCMetropolisBackend
from bayesurv.mcmc.backends.nuts import PyMCNUTSBackend

__all__ = [
    "PyMCMetropolisBackend",
    "PyMCNUTSBackend",
]
