"""
Public API for Bayesian survival analysis.

    exponential_ph(time, event, X) → ExponentialPHSolution
    posterior_predictive(fit_or_draws) → PredictiveSolution   # GPU optional

Each function validates inputs, creates a design, dispatches to the
appropriate backend, and wraps the Result in a Solution.
"""

from __future__ import annotations

import warnings
from typing import Any, Literal, Mapping, Sequence

import numpy as np

from bayesurv.core.compute.timing import Timer
from bayesurv.core.exceptions import ValidationError
from bayesurv.core.result import Result
from bayesurv.core.validation import check_positive_int
from bayesurv.mcmc.design import SamplerDesign
from bayesurv.mcmc.solvers import run_sampler
from bayesurv.survival._common import ExponentialPHParams, ExponentialPrior
from bayesurv.survival._likelihood import ExponentialPHModel
from bayesurv.survival._predictive import DEFAULT_MAX_ATTEMPTS
from bayesurv.survival.design import PredictiveDesign, SurvivalDesign
from bayesurv.survival.solution import ExponentialPHSolution, PredictiveSolution


def exponential_ph(
    time,
    event,
    X=None,
    *,
    covariate_names: Sequence[str] | None = None,
    prior: ExponentialPrior | None = None,
    chains: int = 4,
    draws: int = 1000,
    warmup: int = 1000,
    seed: int | None = None,
    method: Literal["nuts", "metropolis"] | Any = "nuts",
) -> ExponentialPHSolution:
    """Bayesian exponential proportional-hazards regression.

    rate_i = exp(alpha + x_i @ beta), with Normal priors on beta and alpha.
    Censored rows contribute their survival probability, observed events
    their density.

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like
        Event indicator (1=event, 0=censored).
    X : array-like or None
        Covariate matrix (n, p). No intercept column: alpha plays that role.
    covariate_names : sequence of str or None
        Names for the columns of X.
    prior : ExponentialPrior or None
        Prior settings (default: coefficients N(0, 2), alpha N(-4.6, 2)).
    chains, draws, warmup : int
        Number of chains, kept draws per chain, warmup iterations per chain.
    seed : int or None
        Random seed for initial values and the sampler.
    method : str or backend
        "nuts" (PyMC), "metropolis" (PyMC, gradient-free), or a sampler
        backend object.

    Returns
    -------
    ExponentialPHSolution

    Warns
    -----
    RuntimeWarning
        If the chains fail the R-hat, ESS or divergence checks.
    """
    design = SurvivalDesign.for_survival(
        time, event, X, covariate_names=covariate_names,
    )
    if prior is None:
        prior = ExponentialPrior()
    elif not isinstance(prior, ExponentialPrior):
        raise ValidationError(
            f"prior must be an ExponentialPrior, got {type(prior).__name__}"
        )
    chains = check_positive_int(chains, "chains", minimum=1)

    timer = Timer()
    timer.start()

    model = ExponentialPHModel(design, prior)
    with timer.section('initial_values'):
        initial = model.initial_values(chains, np.random.default_rng(seed))

    sampler_design = SamplerDesign.for_sampling(
        model.log_density,
        initial,
        grad_log_density=model.grad_log_density,
        n_draws=draws,
        n_warmup=warmup,
        seed=seed,
        names=model.param_names,
    )

    with timer.section('sampling'):
        mcmc_result = run_sampler(sampler_design, method)

    mcmc = mcmc_result.params
    ensemble = model.to_ensemble(mcmc.samples)
    for arr in ensemble.values():
        arr.setflags(write=False)

    timer.stop()

    params = ExponentialPHParams(
        beta=ensemble['beta'],
        alpha=ensemble['alpha'],
        param_names=mcmc.names,
        rhat=mcmc.rhat,
        ess_bulk=mcmc.ess_bulk,
        ess_tail=mcmc.ess_tail,
        n_divergent=mcmc.n_divergent,
        accept_rate=mcmc.accept_rate,
    )

    result = Result(
        params=params,
        info={
            **mcmc_result.info,
            'n_observations': design.n,
            'n_events': design.n_events,
            'n_censored': design.n_censored,
        },
        timing=timer.result(),
        backend_name=mcmc_result.backend_name,
        warnings=mcmc_result.warnings,
    )

    for msg in result.warnings:
        warnings.warn(msg, RuntimeWarning, stacklevel=2)

    return ExponentialPHSolution(_result=result, _design=design, _prior=prior)


def _get_predictive_backend(backend):
    if hasattr(backend, 'solve') and hasattr(backend, 'name'):
        return backend
    if backend == "cpu":
        from bayesurv.survival.backends.cpu import CPUPredictiveBackend
        return CPUPredictiveBackend()
    if backend in ("gpu", "auto"):
        from bayesurv.survival.backends.gpu import GPUPredictiveBackend
        return GPUPredictiveBackend(device='auto')
    if isinstance(backend, str) and backend.split(':')[0] in ("cuda", "mps", "torch"):
        from bayesurv.survival.backends.gpu import GPUPredictiveBackend
        device = 'cpu' if backend == "torch" else backend
        return GPUPredictiveBackend(device=device)
    raise ValidationError(
        f"backend must be 'cpu', 'gpu', 'cuda[:n]', 'mps', 'torch' or a "
        f"backend object, got {backend!r}"
    )


def posterior_predictive(
    fit_or_draws: ExponentialPHSolution | Mapping[str, Any],
    design: SurvivalDesign | None = None,
    *,
    truncate: bool = True,
    seed: int | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backend: str | Any = "cpu",
) -> PredictiveSolution:
    """Posterior-predictive survival times for the uncensored observations.

    For every posterior draw d and uncensored individual i, draws
    T ~ Exponential(exp(alpha_d + x_i @ beta_d)). With ``truncate=True``
    (the default) candidates above the study horizon, the largest
    observed time in the data, are rejected and redrawn, so every sample
    lies in (0, horizon]. ``truncate=False`` gives the unconstrained
    draws, which overshoot the horizon.

    Parameters
    ----------
    fit_or_draws : ExponentialPHSolution or mapping
        A fitted model, or a draw ensemble {'beta', 'alpha'}.
    design : SurvivalDesign or None
        The data the draws belong to. Required for a raw ensemble;
        defaults to the fit's design.
    truncate : bool
        Reject draws beyond the horizon.
    seed : int or None
        Random seed.
    max_attempts : int
        Retry ceiling per (draw, individual) cell.
    backend : str or backend
        "cpu" (numpy), "gpu" (CUDA or MPS via torch), an explicit torch
        device such as "cuda:1", "torch" for torch on CPU, or a backend
        object. Every backend reads ``truncate`` from the design it is
        given.

    Returns
    -------
    PredictiveSolution

    Raises
    ------
    ValidationError
        If there are no uncensored observations or the inputs are invalid.
    RejectionSamplingError
        If rates are degenerate or a cell exhausts ``max_attempts``.
    """
    if isinstance(fit_or_draws, ExponentialPHSolution):
        draws = fit_or_draws.draws
        if design is None:
            design = fit_or_draws.design
    elif isinstance(fit_or_draws, Mapping):
        draws = fit_or_draws
        if design is None:
            raise ValidationError(
                "design is required when passing a raw draw ensemble"
            )
    else:
        raise ValidationError(
            f"fit_or_draws must be an ExponentialPHSolution or a mapping of "
            f"draws, got {type(fit_or_draws).__name__}"
        )

    if not isinstance(design, SurvivalDesign):
        raise ValidationError(
            f"design must be a SurvivalDesign, got {type(design).__name__}"
        )

    max_attempts = check_positive_int(max_attempts, "max_attempts", minimum=1)
    pred_design = PredictiveDesign.for_predictive(
        draws, design, truncate=truncate, seed=seed, max_attempts=max_attempts,
    )

    result = _get_predictive_backend(backend).solve(pred_design)
    return PredictiveSolution(_result=result)
