"""
PyMC backend for MCMC: gradient-free random-walk Metropolis.

Uses ``pm.Metropolis``, which tunes its proposal scale during warmup.
Metropolis has no divergences, so the divergence count is always zero.
"""

from __future__ import annotations

import numpy as np

from bayesurv.mcmc.backends._pymc import PyMCBackend


class PyMCMetropolisBackend(PyMCBackend):
    """
    PyMC Metropolis backend.

    Args:
        tune_interval: Draws between proposal-scale updates during warmup.
    """

    method = 'metropolis'

    def __init__(self, tune_interval: int = 100):
        super().__init__()
        self._tune_interval = tune_interval

    @property
    def name(self) -> str:
        return 'pymc_metropolis'

    def _step(self, pm):
        return pm.Metropolis(tune_interval=self._tune_interval)

    def _chain_stats(self, stats):
        accept_rate = np.asarray(stats["accepted"].values, dtype=np.float64).mean(axis=1)
        scaling = np.asarray(stats["scaling"].values)[:, -1]
        return accept_rate, 0, {
            'tune_interval': self._tune_interval,
            'proposal_scale': scaling,
        }
