"""
Design class for MCMC sampling.

SamplerDesign encapsulates everything a sampler backend needs: the target
log density (and optionally its gradient), starting points and run
settings. Immutable, validated at construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np
from numpy.typing import NDArray

from bayesurv.core.exceptions import DimensionError, ValidationError
from bayesurv.core.validation import check_array, check_finite, check_positive_int


@dataclass(frozen=True)
class SamplerDesign:
    """
    Frozen design for MCMC sampling.

    Attributes:
        log_density: fn(theta) -> float, unnormalised log target density.
            Returns -inf outside the support.
        grad_log_density: fn(theta) -> (dim,) gradient, or None for
            gradient-free samplers.
        initial: (n_chains, dim) starting points, one row per chain.
        n_draws: Post-warmup draws kept per chain.
        n_warmup: Adaptation iterations per chain (discarded).
        seed: Random seed for reproducibility.
        names: Flat parameter names, one per dimension.
        target_accept: Target acceptance statistic for step-size adaptation.
    """
    log_density: Callable[[NDArray], float]
    grad_log_density: Callable[[NDArray], NDArray] | None
    initial: NDArray
    n_draws: int
    n_warmup: int
    seed: int | None
    names: tuple[str, ...]
    target_accept: float

    @classmethod
    def for_sampling(
        cls,
        log_density: Callable[[NDArray], float],
        initial,
        *,
        grad_log_density: Callable[[NDArray], NDArray] | None = None,
        n_draws: int = 1000,
        n_warmup: int = 1000,
        seed: int | None = None,
        names: Sequence[str] | None = None,
        target_accept: float = 0.8,
    ) -> SamplerDesign:
        """
        Create a sampler design with validation.

        Args:
            log_density: Target log density on the flat parameter vector.
            initial: (n_chains, dim) or (dim,) starting point(s).
            grad_log_density: Gradient of log_density, required by NUTS.
            n_draws: Kept draws per chain (>= 1).
            n_warmup: Warmup iterations per chain (>= 0).
            seed: Random seed.
            names: Parameter names; defaults to theta[0], theta[1], ...
            target_accept: In (0, 1).

        Raises:
            ValidationError: If settings are invalid or the density is not
                finite at a starting point.
        """
        if not callable(log_density):
            raise ValidationError("log_density must be callable")
        if grad_log_density is not None and not callable(grad_log_density):
            raise ValidationError("grad_log_density must be callable or None")

        init = check_array(initial, "initial").astype(np.float64)
        if init.ndim == 1:
            init = init.reshape(1, -1)
        if init.ndim != 2 or init.shape[1] == 0:
            raise DimensionError(
                f"initial must be (n_chains, dim) with dim >= 1, got shape {init.shape}"
            )
        check_finite(init, "initial")

        n_draws = check_positive_int(n_draws, "n_draws", minimum=1)
        n_warmup = check_positive_int(n_warmup, "n_warmup", minimum=0)

        if not 0.0 < target_accept < 1.0:
            raise ValidationError(
                f"target_accept must be in (0, 1), got {target_accept}"
            )

        dim = init.shape[1]
        if names is None:
            names = tuple(f"theta[{j}]" for j in range(dim))
        else:
            names = tuple(str(n) for n in names)
            if len(names) != dim:
                raise ValidationError(
                    f"names must have {dim} entries to match initial, got {len(names)}"
                )

        for c, row in enumerate(init):
            lp = log_density(row)
            if not np.isfinite(lp):
                raise ValidationError(
                    f"log_density is not finite at the starting point of "
                    f"chain {c}: {lp}"
                )

        init.setflags(write=False)
        return cls(
            log_density=log_density,
            grad_log_density=grad_log_density,
            initial=init,
            n_draws=n_draws,
            n_warmup=n_warmup,
            seed=seed,
            names=names,
            target_accept=float(target_accept),
        )

    @property
    def n_chains(self) -> int:
        return self.initial.shape[0]

    @property
    def dim(self) -> int:
        return self.initial.shape[1]
