"""
Public API for MCMC sampling.

    sample(log_density, initial, ...) → MCMCSolution

Validates inputs, creates a SamplerDesign, dispatches to the selected
backend, attaches convergence warnings and wraps the Result in a Solution.
"""

from __future__ import annotations

import warnings
from typing import Any, Callable, Literal, Sequence

from numpy.typing import NDArray

from bayesurv.core.exceptions import ValidationError
from bayesurv.core.result import Result
from bayesurv.mcmc._common import MCMCParams
from bayesurv.mcmc._diagnostics import convergence_warnings
from bayesurv.mcmc.design import SamplerDesign
from bayesurv.mcmc.solution import MCMCSolution


def get_backend(method: Literal["nuts", "metropolis"] | Any):
    """Resolve a method name, or pass through a Backend-like object."""
    if hasattr(method, 'solve') and hasattr(method, 'name'):
        return method
    if method == "nuts":
        from bayesurv.mcmc.backends.nuts import PyMCNUTSBackend
        return PyMCNUTSBackend()
    if method == "metropolis":
        from bayesurv.mcmc.backends.metropolis import PyMCMetropolisBackend
        return PyMCMetropolisBackend()
    raise ValidationError(
        f"method must be 'nuts', 'metropolis', or a backend object with "
        f"name and solve(), got {method!r}"
    )


def run_sampler(design: SamplerDesign, method="nuts") -> Result[MCMCParams]:
    """Dispatch a validated design and attach convergence warnings.

    Warnings are only recorded on the Result; emitting them is left to
    the public entry point.
    """
    result = get_backend(method).solve(design)
    params = result.params
    problems = convergence_warnings(
        params.names, params.rhat, params.ess_bulk,
        design.n_chains, params.n_divergent,
    )
    return result.with_warnings(problems)


def sample(
    log_density: Callable[[NDArray], float],
    initial,
    *,
    grad_log_density: Callable[[NDArray], NDArray] | None = None,
    draws: int = 1000,
    warmup: int = 1000,
    seed: int | None = None,
    names: Sequence[str] | None = None,
    method: Literal["nuts", "metropolis"] | Any = "nuts",
    target_accept: float = 0.8,
) -> MCMCSolution:
    """
    Draw from an unnormalised log density by MCMC.

    Args:
        log_density: fn(theta) -> float on the flat parameter vector.
        initial: (n_chains, dim) starting points; the number of rows sets
            the number of chains.
        grad_log_density: Gradient of log_density. Required for NUTS.
        draws: Kept draws per chain.
        warmup: Adaptation iterations per chain.
        seed: Random seed.
        names: Parameter names for summaries.
        method: "nuts" (PyMC), "metropolis" (PyMC, gradient-free), or a backend object.
        target_accept: NUTS step-size adaptation target.

    Returns:
        MCMCSolution

    Warns:
        RuntimeWarning: When R-hat, ESS or divergence checks fail. Draws
            are still returned.
    """
    design = SamplerDesign.for_sampling(
        log_density,
        initial,
        grad_log_density=grad_log_density,
        n_draws=draws,
        n_warmup=warmup,
        seed=seed,
        names=names,
        target_accept=target_accept,
    )

    result = run_sampler(design, method)
    for msg in result.warnings:
        warnings.warn(msg, RuntimeWarning, stacklevel=2)

    return MCMCSolution(_result=result, _design=design)
