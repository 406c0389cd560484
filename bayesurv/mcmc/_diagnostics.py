"""
Convergence diagnostics for MCMC draws.

Rank-normalised split R-hat and bulk / tail effective sample size, computed
by ArviZ (Vehtari, Gelman, Simpson, Carpenter & Bürkner 2021, "Rank-
normalization, folding, and localization: an improved R-hat for assessing
convergence of MCMC"). Each parameter is passed to ArviZ as a
(chain, draw) array.
"""

from __future__ import annotations

import warnings

import arviz as az
import numpy as np
from numpy.typing import NDArray

from bayesurv.mcmc._common import MIN_ESS_PER_CHAIN, RHAT_THRESHOLD, MCMCParams


def chain_diagnostics(samples: NDArray) -> tuple[NDArray, NDArray, NDArray]:
    """R-hat, bulk ESS and tail ESS for each parameter.

    Args:
        samples: (chains, draws, dim) post-warmup draws.

    Returns:
        (rhat, ess_bulk, ess_tail), each shaped (dim,). Entries are NaN
        when ArviZ cannot compute them (constant chains, too few draws).
    """
    dim = samples.shape[2]
    rhat = np.empty(dim)
    ess_bulk = np.empty(dim)
    ess_tail = np.empty(dim)

    with warnings.catch_warnings():
        # ArviZ warns on too-short chains; those come back as NaN instead.
        warnings.simplefilter('ignore', UserWarning)
        for j in range(dim):
            ary = np.ascontiguousarray(samples[:, :, j])
            rhat[j] = az.rhat(ary, method='rank')
            ess_bulk[j] = az.ess(ary, method='bulk')
            ess_tail[j] = az.ess(ary, method='tail')

    return rhat, ess_bulk, ess_tail


def build_params(
    samples: NDArray,
    names: tuple[str, ...],
    accept_rate: NDArray,
    n_divergent: int,
) -> MCMCParams:
    """Attach diagnostics to raw draws and freeze them into MCMCParams."""
    samples = np.ascontiguousarray(samples, dtype=np.float64)
    rhat, ess_bulk, ess_tail = chain_diagnostics(samples)
    samples.setflags(write=False)
    return MCMCParams(
        samples=samples,
        names=names,
        rhat=rhat,
        ess_bulk=ess_bulk,
        ess_tail=ess_tail,
        accept_rate=np.asarray(accept_rate, dtype=np.float64),
        n_divergent=int(n_divergent),
    )


def convergence_warnings(
    names: tuple[str, ...],
    rhat: NDArray,
    ess_bulk: NDArray,
    n_chains: int,
    n_divergent: int,
) -> list[str]:
    """Human-readable warnings for draws that fail the convergence checks."""
    out: list[str] = []

    high = [f"{n} ({r:.3f})" for n, r in zip(names, rhat) if not r <= RHAT_THRESHOLD]
    if high:
        out.append(
            f"R-hat above {RHAT_THRESHOLD} for: {', '.join(high)}; "
            f"chains have not mixed"
        )

    min_ess = MIN_ESS_PER_CHAIN * n_chains
    low = [f"{n} ({e:.0f})" for n, e in zip(names, ess_bulk) if not e >= min_ess]
    if low:
        out.append(
            f"bulk ESS below {min_ess} for: {', '.join(low)}; "
            f"posterior summaries may be unreliable"
        )

    if n_divergent > 0:
        out.append(
            f"{n_divergent} divergent transition(s) after warmup"
        )

    return out
