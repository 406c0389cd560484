"""
Common data structures for MCMC results.

MCMCParams is the parameter payload wrapped by Result[P] and exposed
through MCMCSolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

# Convergence thresholds. Runs outside them still return draws, with a
# warning attached.
RHAT_THRESHOLD = 1.01
MIN_ESS_PER_CHAIN = 100


@dataclass(frozen=True)
class MCMCParams:
    """
    Parameter payload for MCMC results.

    - samples: post-warmup draws indexed (chain, draw, parameter)
    - rhat / ess_bulk / ess_tail: one value per parameter
    - accept_rate: mean acceptance statistic per chain
    - n_divergent: divergent transitions after warmup (0 for Metropolis)
    """
    samples: NDArray[np.floating[Any]]          # shape (chains, draws, dim)
    names: tuple[str, ...]                      # dim entries
    rhat: NDArray[np.floating[Any]]             # shape (dim,)
    ess_bulk: NDArray[np.floating[Any]]         # shape (dim,)
    ess_tail: NDArray[np.floating[Any]]         # shape (dim,)
    accept_rate: NDArray[np.floating[Any]]      # shape (chains,)
    n_divergent: int
