"""
Posterior-predictive survival times under a finite observation horizon.

A subject whose true survival time exceeded the study horizon would have
been recorded as censored, so observed event times are draws from the
exponential truncated to (0, horizon]. Unconstrained draws overshoot the
observed data; the rejection sampler below draws from the truncated
distribution exactly.

Algorithm (one cell = one subject x one posterior draw):
    repeat:
        candidate ~ Exponential(rate)
        if candidate <= horizon: accept
    until accepted or max_attempts reached

Acceptance probability per attempt:
    P(T <= h) = 1 - exp(-rate * h)

Truncated mean:
    E[T | T <= h] = 1/rate - h * exp(-rate h) / (1 - exp(-rate h))

References:
    Robert, C. P. & Casella, G. (2004). Monte Carlo Statistical Methods,
        2nd ed., Section 2.3 (accept-reject).
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from bayesurv.core.exceptions import RejectionSamplingError, ValidationError

DEFAULT_MAX_ATTEMPTS = 10_000


def acceptance_probability(rate, horizon: float):
    """P(T <= horizon) for T ~ Exponential(rate)."""
    return -np.expm1(-np.asarray(rate, dtype=np.float64) * horizon)


def truncated_exponential_mean(rate, horizon: float):
    """Mean of Exponential(rate) truncated to (0, horizon]."""
    rate = np.asarray(rate, dtype=np.float64)
    rh = rate * horizon
    return 1.0 / rate - horizon * np.exp(-rh) / (-np.expm1(-rh))


def check_horizon(horizon: float) -> float:
    horizon = float(horizon)
    if not (np.isfinite(horizon) and horizon > 0):
        raise ValidationError(
            f"horizon must be finite and > 0, got {horizon}"
        )
    return horizon


def check_rates(rates: NDArray, horizon: float | None = None) -> None:
    """Reject rates for which sampling is degenerate.

    Zero, negative or non-finite rates have no exponential distribution.
    A rate so large that 1/rate underflows would only ever produce 0.0,
    and a rate so small that the acceptance probability underflows would
    never be accepted.
    """
    rates = np.asarray(rates)
    bad = ~(np.isfinite(rates) & (rates > 0))
    if np.any(bad):
        raise RejectionSamplingError(
            f"hazard rates must be finite and > 0; {int(bad.sum())} "
            f"degenerate rate(s), e.g. {rates[bad].flat[0]!r}",
            n_pending=int(bad.sum()),
        )

    with np.errstate(divide='ignore', over='ignore'):
        scales = 1.0 / rates
    if np.any(scales == 0):
        raise RejectionSamplingError(
            f"hazard rate too large to sample (max {rates.max():.3g}); "
            f"1/rate underflows to zero",
            n_pending=int(np.sum(scales == 0)),
        )

    if horizon is not None:
        p_accept = acceptance_probability(rates, horizon)
        if np.any(p_accept <= 0):
            raise RejectionSamplingError(
                f"acceptance probability underflows to zero for "
                f"{int(np.sum(p_accept <= 0))} cell(s) "
                f"(min rate {rates.min():.3g}, horizon {horizon:.6g})",
                n_pending=int(np.sum(p_accept <= 0)),
                min_acceptance=0.0,
            )


def sample_truncated_exponential(
    rate: float,
    horizon: float,
    rng: np.random.Generator,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> float:
    """Single draw from Exponential(rate) truncated to (0, horizon]."""
    horizon = check_horizon(horizon)
    check_rates(np.array([rate], dtype=np.float64), horizon)

    scale = 1.0 / rate
    for _ in range(max_attempts):
        candidate = rng.exponential(scale)
        if candidate <= horizon:
            return float(candidate)

    raise RejectionSamplingError(
        f"no draw accepted after {max_attempts} attempts "
        f"(rate={rate:.6g}, horizon={horizon:.6g}, acceptance "
        f"probability {float(acceptance_probability(rate, horizon)):.3g})",
        attempts=max_attempts,
        max_attempts=max_attempts,
        n_pending=1,
        min_acceptance=float(acceptance_probability(rate, horizon)),
    )


def rejection_sample(
    rates: NDArray,
    horizon: float,
    rng: np.random.Generator,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> tuple[NDArray, int]:
    """Vectorised truncated-exponential draws, one per element of ``rates``.

    Each round draws one candidate for every cell still pending, so the
    number of rounds equals the largest attempt count of any cell.

    Returns:
        (samples, n_attempts): samples with the shape of ``rates`` and the
        total number of candidates drawn.
    """
    horizon = check_horizon(horizon)
    rates = np.asarray(rates, dtype=np.float64)
    check_rates(rates, horizon)

    scales = (1.0 / rates).ravel()
    out = np.empty(scales.shape[0], dtype=np.float64)
    pending = np.arange(scales.shape[0])
    n_attempts = 0

    rounds = 0
    while pending.size > 0:
        if rounds == max_attempts:
            p_min = float(acceptance_probability(1.0 / scales[pending], horizon).min())
            raise RejectionSamplingError(
                f"{pending.size} cell(s) had no accepted draw after "
                f"{max_attempts} attempts (smallest acceptance "
                f"probability {p_min:.3g})",
                attempts=rounds,
                max_attempts=max_attempts,
                n_pending=int(pending.size),
                min_acceptance=p_min,
            )
        rounds += 1

        candidates = rng.exponential(scales[pending])
        n_attempts += pending.size
        accepted = candidates <= horizon
        out[pending[accepted]] = candidates[accepted]
        pending = pending[~accepted]

    return out.reshape(rates.shape), n_attempts


def naive_sample(rates: NDArray, rng: np.random.Generator) -> NDArray:
    """Unconstrained Exponential(rate) draws.

    Ignores the observation horizon, so predictive times are biased
    upward relative to the observed event times. Kept for comparison.
    """
    rates = np.asarray(rates, dtype=np.float64)
    check_rates(rates)
    return rng.exponential(1.0 / rates)
