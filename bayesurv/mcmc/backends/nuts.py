"""
PyMC backend for MCMC: NUTS over a black-box log density.

PyMC's NUTS runs with its own step-size and diagonal mass-matrix
adaptation. The caller's gradient is attached to the log-density Op.
"""

from __future__ import annotations

import numpy as np

from bayesurv.core.exceptions import ValidationError
from bayesurv.mcmc.backends._pymc import PyMCBackend
from bayesurv.mcmc.design import SamplerDesign


class PyMCNUTSBackend(PyMCBackend):
    """PyMC NUTS backend. Needs ``design.grad_log_density``."""

    method = 'nuts'

    @property
    def name(self) -> str:
        return 'pymc_nuts'

    def _prepare(self, design: SamplerDesign):
        if design.grad_log_density is None:
            raise ValidationError(
                "NUTS needs grad_log_density; use method='metropolis' for "
                "gradient-free sampling"
            )
        return super()._prepare(design)

    def _step(self, pm):
        # pm.sample assigns NUTS and runs adapt_diag initialisation.
        return None

    def _sample_kwargs(self, design: SamplerDesign) -> dict:
        return {'init': "adapt_diag", 'target_accept': design.target_accept}

    def _chain_stats(self, stats):
        n_divergent = int(np.asarray(stats["diverging"].values).sum())
        accept_rate = np.asarray(stats["acceptance_rate"].values).mean(axis=1)
        step_size = np.asarray(stats["step_size"].values)[:, -1]
        return accept_rate, n_divergent, {'step_size': step_size}
