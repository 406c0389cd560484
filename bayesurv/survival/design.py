"""
Design classes for survival modelling.

SurvivalDesign wraps time, event indicator and covariates, and splits the
observations into an uncensored group (event observed) and a censored
group. PredictiveDesign pairs a flattened posterior draw ensemble with the
uncensored rows for predictive sampling. Both validate inputs at
construction time; all downstream code trusts clean data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from bayesurv.core.capabilities import (
    CAPABILITY_MATERIALIZED,
    CAPABILITY_PARTITIONED,
    CAPABILITY_REPEATABLE,
)
from bayesurv.core.exceptions import DimensionError, ValidationError
from bayesurv.core.validation import (
    check_array,
    check_binary,
    check_consistent_length,
    check_finite,
    check_min_samples,
    check_positive,
)

if TYPE_CHECKING:
    from bayesurv.core.datasource import DataSource


def observation_horizon(uncensored_time, censored_time) -> float:
    """Largest elapsed time across both groups: the study's horizon.

    An empty group is ignored; if both are empty there is no horizon.
    """
    uncensored_time = np.asarray(uncensored_time, dtype=np.float64).ravel()
    censored_time = np.asarray(censored_time, dtype=np.float64).ravel()

    if uncensored_time.size == 0 and censored_time.size == 0:
        raise ValidationError(
            "cannot compute an observation horizon from zero observations"
        )

    return float(np.max(np.concatenate([uncensored_time, censored_time])))


@dataclass(frozen=True)
class SurvivalDesign:
    """Immutable, partitioned survival data container.

    Parameters
    ----------
    time : NDArray
        (n,) elapsed time to event or censoring. Strictly positive.
    event : NDArray
        (n,) boolean, True when the event was observed.
    X : NDArray
        (n, p) covariate matrix. p may be 0 (intercept-only model).
    covariate_names : tuple of str
        One name per column of X.
    """

    time: NDArray
    event: NDArray
    X: NDArray
    covariate_names: tuple[str, ...]
    uncensored_time: NDArray = field(init=False, repr=False)
    uncensored_X: NDArray = field(init=False, repr=False)
    censored_time: NDArray = field(init=False, repr=False)
    censored_X: NDArray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Partitions are computed once; the design is frozen afterwards.
        unc = self.event
        cen = ~self.event
        for name, value in (
            ('uncensored_time', self.time[unc]),
            ('uncensored_X', self.X[unc]),
            ('censored_time', self.time[cen]),
            ('censored_X', self.X[cen]),
        ):
            value.setflags(write=False)
            object.__setattr__(self, name, value)

    @classmethod
    def for_survival(
        cls,
        time,
        event,
        X=None,
        *,
        covariate_names: Sequence[str] | None = None,
    ) -> SurvivalDesign:
        """Create and validate survival data.

        Parameters
        ----------
        time : array-like
            Time to event or censoring.
        event : array-like
            Event indicator (1/True = event observed, 0/False = censored).
        X : array-like or None
            Covariate matrix (n, p) or a single covariate (n,). None gives
            an intercept-only model.
        covariate_names : sequence of str or None
            Column names for X. Defaults to x0, x1, ...

        Returns
        -------
        SurvivalDesign

        Raises
        ------
        ValidationError
            If inputs are invalid.
        DimensionError
            If array shapes are inconsistent.
        """
        time = check_array(time, "time").astype(np.float64).ravel()
        event_arr = check_array(event, "event").ravel()

        check_min_samples(time, 1, "time")
        check_consistent_length(time, event_arr, names=("time", "event"))
        check_finite(time, "time")
        check_positive(time, "time")
        check_binary(event_arr, "event")

        n = len(time)

        if X is None:
            X_arr = np.empty((n, 0), dtype=np.float64)
        else:
            X_arr = check_array(X, "X").astype(np.float64)
            if X_arr.ndim == 1:
                X_arr = X_arr.reshape(-1, 1)
            if X_arr.ndim != 2:
                raise DimensionError(
                    f"X must be 1D or 2D, got {X_arr.ndim}D"
                )
            check_consistent_length(time, X_arr, names=("time", "X"))
            check_finite(X_arr, "X")

        p = X_arr.shape[1]
        if covariate_names is None:
            names = tuple(f"x{j}" for j in range(p))
        else:
            names = tuple(str(c) for c in covariate_names)
            if len(names) != p:
                raise ValidationError(
                    f"covariate_names must have {p} entries to match X, "
                    f"got {len(names)}"
                )

        time = time.copy()
        event_bool = event_arr == 1.0
        X_arr = np.ascontiguousarray(X_arr)
        for arr in (time, event_bool, X_arr):
            arr.setflags(write=False)

        return cls(
            time=time,
            event=event_bool,
            X=X_arr,
            covariate_names=names,
        )

    @classmethod
    def from_datasource(
        cls,
        ds: 'DataSource',
        *,
        time: str = "time",
        event: str = "event",
        covariates: Sequence[str] = (),
    ) -> SurvivalDesign:
        """Build a design from named DataSource columns.

        Example
        -------
        >>> ds = DataSource.from_file("mastectomy.csv")
        >>> design = SurvivalDesign.from_datasource(
        ...     ds, covariates=["metastasized"])
        """
        covariates = list(covariates)
        X = np.column_stack([ds[c] for c in covariates]) if covariates else None
        return cls.for_survival(
            ds[time], ds[event], X, covariate_names=covariates or None,
        )

    # -- Sizes --

    @property
    def n(self) -> int:
        """Number of observations."""
        return len(self.time)

    @property
    def p(self) -> int:
        """Number of covariates (0 for intercept-only)."""
        return self.X.shape[1]

    @property
    def n_events(self) -> int:
        """Number of uncensored observations."""
        return len(self.uncensored_time)

    @property
    def n_censored(self) -> int:
        """Number of censored observations."""
        return len(self.censored_time)

    @property
    def horizon(self) -> float:
        """Maximum elapsed time over both groups."""
        return observation_horizon(self.uncensored_time, self.censored_time)

    # -- DataSource protocol --

    @property
    def n_observations(self) -> int:
        return self.n

    @property
    def metadata(self) -> dict[str, Any]:
        return {
            'n': self.n,
            'p': self.p,
            'n_events': self.n_events,
            'n_censored': self.n_censored,
            'horizon': self.horizon,
            'covariate_names': self.covariate_names,
        }

    def supports(self, capability: str) -> bool:
        return capability in (
            CAPABILITY_MATERIALIZED,
            CAPABILITY_REPEATABLE,
            CAPABILITY_PARTITIONED,
        )


@dataclass(frozen=True)
class PredictiveDesign:
    """
    Frozen inputs for posterior-predictive sampling.

    Attributes:
        beta: (n_draws, p) coefficient draws, chain-major order.
        alpha: (n_draws,) log baseline hazard draws.
        X: (m, p) covariates of the uncensored observations.
        observed: (m,) observed event times of those observations.
        horizon: Study horizon over the full dataset.
        truncate: True for the rejection sampler, False for naive draws.
        seed: Random seed.
        max_attempts: Retry ceiling per (observation, draw) cell.
    """
    beta: NDArray
    alpha: NDArray
    X: NDArray
    observed: NDArray
    horizon: float
    truncate: bool
    seed: int | None
    max_attempts: int

    @classmethod
    def for_predictive(
        cls,
        draws: Mapping[str, Any],
        design: SurvivalDesign,
        *,
        truncate: bool = True,
        seed: int | None = None,
        max_attempts: int = 10_000,
    ) -> PredictiveDesign:
        """
        Flatten a posterior draw ensemble and pair it with the data.

        Args:
            draws: Mapping with 'alpha' shaped (chains, iters) or (n_draws,)
                and 'beta' shaped (chains, iters, p) or (n_draws, p).
                'beta' may be omitted when the design has no covariates.
            design: The dataset the draws were fitted to.
            truncate: Use the horizon-respecting rejection sampler.
            seed: Random seed.
            max_attempts: Retry ceiling per cell.

        Raises:
            ValidationError: If there are no uncensored observations or
                the ensemble is malformed.
            DimensionError: If beta does not match the design's covariates.
        """
        if design.n_events == 0:
            raise ValidationError(
                "posterior predictive sampling needs at least one "
                "uncensored observation"
            )

        if 'alpha' not in draws:
            raise ValidationError(
                f"draws must contain 'alpha'; got keys {sorted(draws)}"
            )

        alpha = check_array(draws['alpha'], "alpha").astype(np.float64)
        if alpha.ndim not in (1, 2):
            raise DimensionError(
                f"alpha must be (chains, iters) or (n_draws,), got shape {alpha.shape}"
            )
        draw_shape = alpha.shape
        alpha = alpha.reshape(-1)
        check_min_samples(alpha, 1, "alpha")
        n_draws = alpha.shape[0]

        p = design.p
        if 'beta' in draws:
            beta = check_array(draws['beta'], "beta").astype(np.float64)
            if beta.shape == draw_shape:
                # one coefficient per draw, trailing axis dropped
                beta = beta.reshape(-1, 1)
            elif beta.shape[:-1] == draw_shape:
                beta = beta.reshape(n_draws, beta.shape[-1])
        elif p == 0:
            beta = np.empty((n_draws, 0), dtype=np.float64)
        else:
            raise ValidationError(
                f"draws must contain 'beta' for a design with {p} covariate(s)"
            )

        if beta.ndim != 2 or beta.shape != (n_draws, p):
            raise DimensionError(
                f"beta must flatten to ({n_draws}, {p}) to match alpha and X, "
                f"got shape {beta.shape}"
            )

        check_finite(alpha, "alpha")
        check_finite(beta, "beta")

        if max_attempts < 1:
            raise ValidationError(f"max_attempts must be >= 1, got {max_attempts}")

        return cls(
            beta=beta,
            alpha=alpha,
            X=design.uncensored_X,
            observed=design.uncensored_time,
            horizon=design.horizon,
            truncate=bool(truncate),
            seed=seed,
            max_attempts=int(max_attempts),
        )

    @property
    def n_draws(self) -> int:
        return self.alpha.shape[0]

    @property
    def rates(self) -> NDArray:
        """(n_draws, m) hazard rates exp(alpha_d + x_i @ beta_d)."""
        eta = self.alpha[:, None] + self.beta @ self.X.T
        with np.errstate(over='ignore'):
            return np.exp(eta)
